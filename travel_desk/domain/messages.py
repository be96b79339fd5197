"""User-facing messages (pt-BR) and status labels."""

from __future__ import annotations

SESSION_EXPIRED = "Sessão expirada. Faça login novamente."
FORBIDDEN = "Você não tem permissão para realizar esta ação."
COMMUNICATION_ERROR = "Erro ao se comunicar com o servidor"
MISSING_TOKEN = "Token ausente"
USER_VALIDATION_FAILED = "Não foi possível validar o usuário."
SESSION_VALIDATION_FAILED = "Não foi possível validar a sessão. Tente novamente."
INVALID_LOGIN_RESPONSE = "Resposta de login inválida."
STALE_SESSION = "A sessão foi encerrada durante a requisição."

LIST_FAILED = "Não foi possível carregar os pedidos de viagem."
CREATE_FAILED = "Não foi possível criar o pedido."
UPDATE_FAILED = "Não foi possível atualizar o status."

STATUS_LABELS = {
    "requested": "Solicitado",
    "approved": "Aprovado",
    "cancelled": "Cancelado",
}


def get_status_label(status: str) -> str:
    key = getattr(status, "value", status)
    return STATUS_LABELS.get(key, key)

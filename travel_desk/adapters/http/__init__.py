"""HTTP adapters - The shared API client and its error interceptors."""

from .api_client import ApiClient, normalize_error
from .interceptors import SessionExpiryInterceptor

__all__ = ["ApiClient", "SessionExpiryInterceptor", "normalize_error"]

"""Application bootstrap.

Builds the container, connects the HTTP interceptors and the navigation
guard to the session store, then restores the session from the token
cookie. A failed restore is logged; the application still starts.
"""

from __future__ import annotations

import logging
from typing import Optional

import requests

from .adapters.http import ApiClient
from .config import AppConfig, get_config
from .container import Container
from .observability import configure_logging
from .ports.routing import RouterPort
from .services import AuthGuard, SessionStore

logger = logging.getLogger(__name__)


def create_app(
    config: Optional[AppConfig] = None,
    http_session: Optional[requests.Session] = None,
) -> Container:
    """Create and start the application.

    Args:
        config: Optional configuration override.
        http_session: Optional requests session (e.g. a test double).

    Returns:
        The wired container; resolve stores from it.
    """
    config = config or get_config()
    configure_logging(config.observability)

    container = Container.create_default(config, http_session=http_session)

    api: ApiClient = container.resolve(ApiClient)
    session: SessionStore = container.resolve(SessionStore)
    router: RouterPort = container.resolve(RouterPort)

    api.setup_interceptors(session, router)
    router.before_each(AuthGuard(session))

    try:
        session.hydrate()
    except Exception:
        logger.exception("Session restore failed")

    logger.info(
        "Application started",
        extra={"api": config.api.base_url, "authenticated": session.is_authenticated},
    )
    return container

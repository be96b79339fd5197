"""Dependency injection container.

This module provides a simple DI container without external frameworks.
The container owns every stateful object of the client (HTTP client,
cache mirror, stores, router), so nothing lives in module-level globals
and every test can build an isolated application.

Design principles:
1. No magic - explicit registration and resolution
2. Testable - easy to swap implementations
3. Lazy loading - adapters instantiated on first use
4. Thread-safe - resolution is guarded by a lock
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlparse

import requests

from .config import AppConfig, get_config


@dataclass
class Container:
    """Dependency injection container.

    Usage:
        # Production
        container = Container.create_default()
        store = container.resolve(TravelRequestStore)

        # Testing
        container = Container()
        container.register(KeyValueStoragePort, lambda: MemoryStorage())
        storage = container.resolve(KeyValueStoragePort)

    Attributes:
        config: Application configuration
    """

    config: AppConfig = field(default_factory=get_config)

    _factories: Dict[type[Any], Callable[[], Any]] = field(
        default_factory=dict, repr=False
    )
    _singletons: Dict[type[Any], Any] = field(default_factory=dict, repr=False)
    _singleton_types: set[type[Any]] = field(default_factory=set, repr=False)
    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)

    def register(
        self,
        port_type: type[Any],
        factory: Callable[[], Any],
        singleton: bool = True,
    ) -> None:
        """Register a factory for a port type.

        Args:
            port_type: The type (usually a Protocol) to register.
            factory: A callable that creates instances of the type.
            singleton: If True, only one instance is created.
        """
        with self._lock:
            self._factories[port_type] = factory
            self._singletons.pop(port_type, None)
            if singleton:
                self._singleton_types.add(port_type)
            else:
                self._singleton_types.discard(port_type)

    def resolve(self, port_type: type[Any]) -> Any:
        """Resolve an instance of a port type.

        Raises:
            KeyError: If the type is not registered.
        """
        with self._lock:
            if port_type not in self._factories:
                raise KeyError(f"Type not registered: {port_type}")

            if port_type in self._singleton_types:
                if port_type not in self._singletons:
                    self._singletons[port_type] = self._factories[port_type]()
                return self._singletons[port_type]

            return self._factories[port_type]()

    def is_registered(self, port_type: type[Any]) -> bool:
        return port_type in self._factories

    def clear_singletons(self) -> None:
        """Clear all cached singletons."""
        with self._lock:
            self._singletons.clear()

    def clear_all(self) -> None:
        """Clear all registrations and singletons."""
        with self._lock:
            self._factories.clear()
            self._singletons.clear()
            self._singleton_types.clear()

    @classmethod
    def create_default(
        cls,
        config: Optional[AppConfig] = None,
        http_session: Optional[requests.Session] = None,
    ) -> Container:
        """Create a container with default production bindings.

        Args:
            config: Optional configuration override.
            http_session: Optional requests session (e.g. a test double).

        Returns:
            A configured Container instance.
        """
        from .adapters.cache import TimestampedCache
        from .adapters.cookies import CookieJarTokenStore
        from .adapters.http import ApiClient
        from .adapters.routing import MemoryRouter
        from .adapters.storage import FileStorage, MemoryStorage
        from .ports.cache import CachePort
        from .ports.routing import RouterPort
        from .ports.storage import KeyValueStoragePort, TokenCookiePort
        from .services import DestinationStore, SessionStore, TravelRequestStore

        config = config or get_config()
        container = cls(config=config)

        # HTTP
        def create_api_client() -> ApiClient:
            if http_session is not None:
                return ApiClient(config=config.api, session=http_session)
            return ApiClient(config=config.api)

        container.register(ApiClient, create_api_client)

        # Storage
        def create_storage() -> KeyValueStoragePort:
            if config.cache.storage_dir is not None:
                return FileStorage(config.cache.storage_dir)
            return MemoryStorage()

        container.register(KeyValueStoragePort, create_storage)

        container.register(
            TokenCookiePort,
            lambda: CookieJarTokenStore(
                domain=urlparse(config.api.base_url).hostname or "localhost",
                path=config.session.cookie_path,
                same_site=config.session.same_site,
                cookie_file=config.session.cookie_file,
            ),
        )

        container.register(
            CachePort,
            lambda: TimestampedCache(
                storage=container.resolve(KeyValueStoragePort),
                storage_key=config.cache.storage_key,
                ttl_seconds=config.cache.ttl_seconds,
                max_size=config.cache.max_entries,
                name="destinations",
            ),
        )

        # Navigation
        container.register(RouterPort, lambda: MemoryRouter())

        # Stores
        container.register(
            SessionStore,
            lambda: SessionStore(
                api=container.resolve(ApiClient),
                cookies=container.resolve(TokenCookiePort),
                config=config.session,
            ),
        )
        container.register(
            DestinationStore,
            lambda: DestinationStore(
                api=container.resolve(ApiClient),
                cache=container.resolve(CachePort),
                limit=config.cache.search_limit,
            ),
        )
        container.register(
            TravelRequestStore,
            lambda: TravelRequestStore(api=container.resolve(ApiClient)),
        )

        return container

"""Cookie adapters - Implementations of the TokenCookiePort."""

from .cookie_jar_store import CookieJarTokenStore

__all__ = ["CookieJarTokenStore"]

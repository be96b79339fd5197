"""Token cookie store backed by a standard cookie jar.

The session token is mirrored into a `jwt` cookie (path=/, SameSite=Lax)
with a bounded max-age. Without a cookie file the jar lives in memory (a
requests cookie jar); with one, an LWP cookie file keeps the token across
runs so the session can be hydrated at the next start.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from http.cookiejar import CookieJar, LoadError, LWPCookieJar
from pathlib import Path
from typing import Callable, Optional
from urllib.parse import quote, unquote

from requests.cookies import RequestsCookieJar, create_cookie


@dataclass
class CookieJarTokenStore:
    """TokenCookiePort implementation on top of http.cookiejar.

    Attributes:
        domain: Cookie domain (the API host)
        path: Cookie path
        same_site: SameSite attribute stored with the cookie
        cookie_file: Optional LWP cookie file for persistence
        clock: Time source in seconds, injectable for tests
    """

    domain: str = "localhost"
    path: str = "/"
    same_site: str = "Lax"
    cookie_file: Optional[Path] = None
    clock: Callable[[], float] = time.time

    jar: CookieJar = field(init=False, repr=False)
    _logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self._logger = logging.getLogger(__name__)

        if self.cookie_file is None:
            self.jar = RequestsCookieJar()
            return

        self.cookie_file = Path(self.cookie_file)
        self.jar = LWPCookieJar(str(self.cookie_file))
        if self.cookie_file.exists():
            try:
                self.jar.load(ignore_discard=True)
            except (OSError, LoadError) as e:
                self._logger.warning(
                    "Cookie file could not be loaded",
                    extra={"path": str(self.cookie_file), "error": str(e)},
                )

    def _save(self) -> None:
        if not isinstance(self.jar, LWPCookieJar):
            return
        try:
            self.cookie_file.parent.mkdir(parents=True, exist_ok=True)  # type: ignore[union-attr]
            self.jar.save(ignore_discard=True)
        except OSError as e:
            self._logger.warning(
                "Cookie file could not be written",
                extra={"path": str(self.cookie_file), "error": str(e)},
            )

    def get(self, name: str) -> Optional[str]:
        now = int(self.clock())
        for cookie in self.jar:
            if cookie.name != name or cookie.domain != self.domain or cookie.path != self.path:
                continue
            if cookie.is_expired(now):
                return None
            return unquote(cookie.value or "")
        return None

    def set(self, name: str, value: str, max_age_seconds: float) -> None:
        max_age = max(max_age_seconds, 0)
        if max_age == 0:
            self.remove(name)
            return

        cookie = create_cookie(
            name,
            quote(value, safe=""),
            domain=self.domain,
            path=self.path,
            expires=int(self.clock() + max_age),
            discard=False,
            rest={"SameSite": self.same_site},
        )
        self.jar.set_cookie(cookie)
        self._save()
        self._logger.debug(
            "Cookie set",
            extra={"cookie": name, "max_age": max_age},
        )

    def remove(self, name: str) -> None:
        try:
            self.jar.clear(self.domain, self.path, name)
        except KeyError:
            return
        self._save()
        self._logger.debug("Cookie removed", extra={"cookie": name})

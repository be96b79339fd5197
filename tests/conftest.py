"""Shared fixtures: a replaying HTTP session, fake cookies and a fake clock."""

from __future__ import annotations

import json
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Optional, Tuple, Union

import pytest
import requests

from travel_desk.adapters.http import ApiClient
from travel_desk.adapters.routing import MemoryRouter
from travel_desk.config import ApiConfig, AppConfig, CacheConfig, SessionConfig
from travel_desk.services import SessionStore

BASE_URL = "http://api.test/api"


def make_response(status: int = 200, body: Any = None, url: str = BASE_URL) -> requests.Response:
    """Build a real requests.Response carrying a JSON body."""
    response = requests.Response()
    response.status_code = status
    response.url = url
    if body is None:
        response._content = b""
    else:
        response._content = json.dumps(body).encode("utf-8")
        response.headers["Content-Type"] = "application/json"
    return response


@dataclass
class RecordedCall:
    method: str
    url: str
    params: Optional[Dict[str, Any]]
    json: Any
    headers: Dict[str, str]


class FakeHttpSession(requests.Session):
    """requests.Session that replays queued responses instead of using the network."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: List[RecordedCall] = []
        self._queue: Deque[Union[requests.Response, Exception]] = deque()

    def reply(self, status: int = 200, body: Any = None) -> "FakeHttpSession":
        self._queue.append(make_response(status, body))
        return self

    def fail(self, exc: Exception) -> "FakeHttpSession":
        self._queue.append(exc)
        return self

    def request(self, method, url, params=None, json=None, timeout=None, **kwargs):  # type: ignore[override]
        self.calls.append(
            RecordedCall(
                method=method,
                url=url,
                params=dict(params) if params else None,
                json=json,
                headers=dict(self.headers),
            )
        )
        if not self._queue:
            raise AssertionError(f"Unexpected request: {method} {url}")
        item = self._queue.popleft()
        if isinstance(item, Exception):
            raise item
        item.url = url
        return item


@dataclass
class FakeCookies:
    """TokenCookiePort double recording the max-age of every write."""

    values: Dict[str, Tuple[str, float]] = field(default_factory=dict)
    writes: List[Tuple[str, str, float]] = field(default_factory=list)

    def get(self, name: str) -> Optional[str]:
        entry = self.values.get(name)
        return entry[0] if entry else None

    def set(self, name: str, value: str, max_age_seconds: float) -> None:
        self.writes.append((name, value, max_age_seconds))
        if max_age_seconds <= 0:
            self.values.pop(name, None)
        else:
            self.values[name] = (value, max_age_seconds)

    def remove(self, name: str) -> None:
        self.values.pop(name, None)

    def max_age(self, name: str) -> Optional[float]:
        entry = self.values.get(name)
        return entry[1] if entry else None


class FakeClock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def config() -> AppConfig:
    return AppConfig(
        api=ApiConfig(base_url=BASE_URL),
        session=SessionConfig(),
        cache=CacheConfig(),
    )


@pytest.fixture
def http() -> FakeHttpSession:
    return FakeHttpSession()


@pytest.fixture
def api(http: FakeHttpSession, config: AppConfig) -> ApiClient:
    return ApiClient(config=config.api, session=http)


@pytest.fixture
def cookies() -> FakeCookies:
    return FakeCookies()


@pytest.fixture
def router() -> MemoryRouter:
    return MemoryRouter()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def session_store(api: ApiClient, cookies: FakeCookies, config: AppConfig) -> SessionStore:
    return SessionStore(api=api, cookies=cookies, config=config.session)


@pytest.fixture
def user_payload() -> Dict[str, Any]:
    return dict(USER_PAYLOAD)


USER_PAYLOAD = {
    "id": 7,
    "name": "Ana Souza",
    "email": "ana@example.com",
    "role": "manager",
    "roles": ["manager"],
}

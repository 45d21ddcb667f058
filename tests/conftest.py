"""
Shared fixtures: an in-process fake of the auth API built on
``httpx.MockTransport``.
"""

import json
from typing import Callable, Dict, List, Optional

import httpx
import pytest

from config.settings import Settings
from storage import InMemoryCredentialStore

BASE_URL = "https://auth.test/api"


class FakeAuthServer:
    """Routes requests by path and records every request it sees."""

    def __init__(self):
        self._routes: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: List[httpx.Request] = []

    def respond(self, path: str, status: int = 200, body: Optional[dict] = None) -> None:
        self._routes[path] = lambda request: httpx.Response(status, json=body)

    def respond_with(self, path: str, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self._routes[path] = handler

    def refuse(self, path: str) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        self._routes[path] = _raise

    def calls(self, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if _route_of(r) == path]

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self._routes.get(_route_of(request))
        if handler is None:
            return httpx.Response(404, json={"message": "Not found"})
        return handler(request)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)


def _route_of(request: httpx.Request) -> str:
    return request.url.path.removeprefix("/api")


def body_of(request: httpx.Request) -> dict:
    return json.loads(request.content)


@pytest.fixture
def settings() -> Settings:
    return Settings(api_base_url=BASE_URL, credential_encryption_key="")


@pytest.fixture
def store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture
def server() -> FakeAuthServer:
    return FakeAuthServer()

"""Pytest fixtures for the fire.com client tests."""

import json
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest

from fire_open_payments.integrations.clients.real_http.fire import FireAPI


class FakeFireServer:
    """
    Stand-in for fire.com behind httpx.MockTransport.

    Responses queued for a route are served in order; the last one repeats.
    """

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self._routes: Dict[Tuple[str, str], List[Tuple[int, Optional[Any]]]] = {}
        self.raise_on: Dict[Tuple[str, str], Exception] = {}
        self._responders: Dict[Tuple[str, str], Callable[[httpx.Request], httpx.Response]] = {}

    def add(self, method: str, path: str, status: int = 200, json: Optional[Any] = None) -> "FakeFireServer":
        self._routes.setdefault((method, path), []).append((status, json))
        return self

    def respond_with(self, method: str, path: str, responder: Callable[[httpx.Request], httpx.Response]) -> None:
        self._responders[(method, path)] = responder

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        if key in self.raise_on:
            raise self.raise_on[key]
        if key in self._responders:
            return self._responders[key](request)
        responses = self._routes.get(key)
        if not responses:
            return httpx.Response(404, json={"errors": [{"code": 404, "message": "no route"}]})
        status, body = responses.pop(0) if len(responses) > 1 else responses[0]
        return httpx.Response(status, json=body)

    def calls(self, method: str, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    @staticmethod
    def body(request: httpx.Request) -> Dict[str, Any]:
        return json.loads(request.content)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def fire_config() -> Dict[str, str]:
    return {
        "client_id": "test_client_id",
        "client_key": "test_client_key",
        "refresh_token": "test_refresh_token",
        "mode": "sandbox",
    }


@pytest.fixture
def server() -> FakeFireServer:
    return FakeFireServer()


@pytest.fixture
def fire(fire_config, server) -> FireAPI:
    return FireAPI(fire_config, http_client=server.client())

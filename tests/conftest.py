"""Pytest hooks and fixtures."""

import json
from typing import Any

import httpx
import pytest

from simplerpc.client import AsyncClient, Client
from simplerpc.transport import HttpTransportBuilder

RPC_URL = "http://127.0.0.1:18443"


class StubNode:
    """Scripted bitcoind stand-in served through httpx.MockTransport."""

    def __init__(self) -> None:
        self.replies: dict[str, dict[str, Any]] = {}
        self.requests: list[dict[str, Any]] = []
        self.headers: list[httpx.Headers] = []

    def reply(self, method: str, result: Any = None, *, error: dict[str, Any] | None = None) -> None:
        self.replies[method] = {"result": result, "error": error}

    def params(self, method: str) -> list[Any]:
        return [r["params"] for r in self.requests if r["method"] == method][-1]

    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        self.requests.append(body)
        self.headers.append(request.headers)
        reply = self.replies.get(body["method"])
        if reply is None:
            error = {"code": -32601, "message": "Method not found"}
            return httpx.Response(404, json={"result": None, "error": error, "id": body["id"]})
        status = 500 if reply["error"] else 200
        return httpx.Response(status, json={**reply, "id": body["id"]})

    def builder(self) -> HttpTransportBuilder:
        return HttpTransportBuilder().url(RPC_URL).basic_auth("alice", "secret")

    def client(self, version: str = "v29") -> Client:
        http = httpx.Client(transport=httpx.MockTransport(self.handler))
        return Client(self.builder().http_client(http).build(), version=version)

    def async_client(self, version: str = "v29") -> AsyncClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        return AsyncClient(self.builder().http_client(http).build_async(), version=version)


@pytest.fixture
def node() -> StubNode:
    return StubNode()


@pytest.fixture
def cookie_file(tmp_path):
    path = tmp_path / ".cookie"
    path.write_text("__cookie__:0123abcd\n", encoding="utf-8")
    return path

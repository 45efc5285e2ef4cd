"""Tests for the client core: construction, marshalling and error mapping."""

from typing import Any

import httpx
import pytest

from simplerpc.auth import CookieFile, UserPass, read_cookie_file
from simplerpc.client import Client
from simplerpc.config.schema import RpcConfig
from simplerpc.jsonrpc import JsonRpcRequest, JsonRpcResponse
from simplerpc.transport import HttpTransport, HttpTransportBuilder, Transport
from simplerpc.types.versions import ProtocolVersion
from simplerpc.utils.exceptions import (
    ConfigError,
    CookieFileReadError,
    IntConversionError,
    InvalidUrlError,
    JsonError,
    JsonRpcError,
    TransportError,
    UnsupportedVersionError,
)

RPC_URL = "http://127.0.0.1:18443"


class FakeTransport:
    """Answers from a method -> result table and records what was sent."""

    def __init__(self, results: dict[str, Any]):
        self.results = results
        self.sent: list[JsonRpcRequest] = []
        self.closed = False

    def build_request(self, method: str, params: list[Any]) -> JsonRpcRequest:
        return JsonRpcRequest(method=method, params=params, id=len(self.sent) + 1)

    def send_request(self, request: JsonRpcRequest) -> JsonRpcResponse:
        self.sent.append(request)
        value = self.results[request.method]
        if isinstance(value, JsonRpcResponse):
            return value
        return JsonRpcResponse(result=value, id=request.id)

    def close(self) -> None:
        self.closed = True


def test_fake_transport_is_a_transport() -> None:
    assert isinstance(FakeTransport({}), Transport)


def test_cookie_auth_against_stub_server(node, cookie_file) -> None:
    node.reply("getblockcount", 42)
    user, password = read_cookie_file(cookie_file)
    http = httpx.Client(transport=httpx.MockTransport(node.handler))
    transport = HttpTransportBuilder().url(RPC_URL).basic_auth(user, password).http_client(http).build()
    with Client.with_transport(transport) as client:
        assert client.get_block_count() == 42
    assert node.headers[0]["authorization"].startswith("Basic ")


def test_negative_block_count_is_out_of_range() -> None:
    client = Client(FakeTransport({"getblockcount": -5}))
    with pytest.raises(IntConversionError) as exc_info:
        client.get_block_count()
    assert exc_info.value.value == -5


def test_block_count_above_u32_is_out_of_range() -> None:
    client = Client(FakeTransport({"getblockcount": 2**32}))
    with pytest.raises(IntConversionError):
        client.get_block_count()


def test_block_count_above_i32_is_out_of_range() -> None:
    client = Client(FakeTransport({"getblockcount": 3_000_000_000}))
    with pytest.raises(IntConversionError) as exc_info:
        client.get_block_count()
    assert exc_info.value.details["maximum"] == 2**31 - 1


def test_block_count_at_i32_max() -> None:
    client = Client(FakeTransport({"getblockcount": 2**31 - 1}))
    assert client.get_block_count() == 2**31 - 1


def test_result_shape_mismatch_is_json_error() -> None:
    client = Client(FakeTransport({"getblockcount": "42"}))
    with pytest.raises(JsonError):
        client.get_block_count()


def test_unserializable_param_is_json_error() -> None:
    transport = FakeTransport({"echo": None})
    client = Client(transport)
    with pytest.raises(JsonError):
        client.call("echo", [object()])
    with pytest.raises(JsonError):
        client.call("echo", [float("nan")])
    assert transport.sent == []


def test_call_returns_raw_result_by_default() -> None:
    client = Client(FakeTransport({"getmempoolinfo": {"loaded": True, "size": 3}}))
    assert client.call("getmempoolinfo") == {"loaded": True, "size": 3}


def test_call_with_result_type() -> None:
    client = Client(FakeTransport({"getconnectioncount": 8}))
    assert client.call("getconnectioncount", [], int) == 8


def test_server_error_object_raises_json_rpc_error() -> None:
    error = JsonRpcResponse(error={"code": -8, "message": "Block height out of range"}, id=1)
    client = Client(FakeTransport({"getblockhash": error}))
    with pytest.raises(JsonRpcError) as exc_info:
        client.get_block_hash(10**6)
    assert exc_info.value.rpc_code == -8
    assert exc_info.value.method == "getblockhash"


def test_stub_server_unknown_method(node) -> None:
    with node.client() as client:
        with pytest.raises(JsonRpcError) as exc_info:
            client.call("nosuchmethod")
    assert exc_info.value.rpc_code == -32601


class TestConstruction:
    def test_new_with_invalid_url(self) -> None:
        with pytest.raises(InvalidUrlError):
            Client.new("ftp://127.0.0.1", UserPass("alice", "secret"))

    def test_new_with_missing_cookie_file(self, tmp_path) -> None:
        with pytest.raises(CookieFileReadError):
            Client.new(RPC_URL, CookieFile(tmp_path / "missing"))

    def test_new_user_pass_builds_http_transport(self) -> None:
        client = Client.new_user_pass(RPC_URL, "alice", "secret", timeout=5)
        assert isinstance(client.transport, HttpTransport)
        assert client.transport.timeout == 5.0
        assert client.version is ProtocolVersion.V29
        client.close()

    def test_new_cookie_auth_and_version(self) -> None:
        client = Client.new_cookie_auth(RPC_URL, "__cookie__:abc", version="v28")
        assert client.version is ProtocolVersion.V28
        assert "v28" in repr(client)
        client.close()

    def test_unknown_version_string(self) -> None:
        with pytest.raises(UnsupportedVersionError):
            Client(FakeTransport({}), version="v27")

    def test_with_protocol_version_shares_transport(self) -> None:
        transport = FakeTransport({})
        client = Client(transport, version="v29")
        other = client.with_protocol_version(ProtocolVersion.V28)
        assert other.transport is transport
        assert other.version is ProtocolVersion.V28
        assert client.version is ProtocolVersion.V29

    def test_context_manager_closes_transport(self) -> None:
        transport = FakeTransport({})
        with Client(transport):
            pass
        assert transport.closed


class TestFromConfig:
    def test_fixed_version(self) -> None:
        config = RpcConfig(url=RPC_URL, protocol_version="v28", auth={"user": "alice", "password": "secret"})
        client = Client.from_config(config)
        assert client.version is ProtocolVersion.V28
        assert str(client.transport.url).startswith(RPC_URL)
        client.close()

    def test_missing_credentials(self) -> None:
        with pytest.raises(ConfigError):
            Client.from_config(RpcConfig(url=RPC_URL))

    def test_auto_detects_version(self, monkeypatch, cookie_file) -> None:
        monkeypatch.setattr(Client, "detect_protocol_version", lambda self: ProtocolVersion.V28)
        config = RpcConfig(url=RPC_URL, protocol_version="auto", auth={"cookie_file": str(cookie_file)})
        client = Client.from_config(config)
        assert client.version is ProtocolVersion.V28
        client.close()

    def test_auto_detection_failure_closes_client(self, monkeypatch) -> None:
        closed = []

        def fail(self):
            raise TransportError("rpc network error", code="RPC_NETWORK_ERROR")

        monkeypatch.setattr(Client, "detect_protocol_version", fail)
        monkeypatch.setattr(Client, "close", lambda self: closed.append(True))
        config = RpcConfig(url=RPC_URL, protocol_version="auto", auth={"user": "alice"})
        with pytest.raises(TransportError):
            Client.from_config(config)
        assert closed == [True]

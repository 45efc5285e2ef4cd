"""HTTP transports for the JSON-RPC endpoint."""

from __future__ import annotations

import base64
import itertools
import threading
import time
from typing import Any, Protocol, runtime_checkable

import httpx
from loguru import logger

from simplerpc.jsonrpc import JsonRpcRequest, JsonRpcResponse
from simplerpc.utils.exceptions import ConfigError, InvalidUrlError, TransportError

DEFAULT_TIMEOUT = 60.0


@runtime_checkable
class Transport(Protocol):
    """Blocking transport: build a request, send it, get the parsed envelope back."""

    def build_request(self, method: str, params: list[Any]) -> JsonRpcRequest:
        ...

    def send_request(self, request: JsonRpcRequest) -> JsonRpcResponse:
        ...


@runtime_checkable
class AsyncTransport(Protocol):
    """Same contract as Transport with ``send_request`` as a suspension point."""

    def build_request(self, method: str, params: list[Any]) -> JsonRpcRequest:
        ...

    async def send_request(self, request: JsonRpcRequest) -> JsonRpcResponse:
        ...


def validate_url(url: str) -> httpx.URL:
    """Parse an endpoint URL; only absolute http(s) URLs are accepted."""
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise InvalidUrlError(str(url), str(exc)) from exc
    if parsed.scheme not in ("http", "https"):
        raise InvalidUrlError(url, f"unsupported scheme {parsed.scheme!r}")
    if not parsed.host:
        raise InvalidUrlError(url, "missing host")
    return parsed


def basic_authorization(credential: str) -> str:
    return "Basic " + base64.b64encode(credential.encode("utf-8")).decode("ascii")


class _HttpTransportBase:
    def __init__(self, url: str, *, timeout: float = DEFAULT_TIMEOUT, authorization: str | None = None):
        self.url = validate_url(url)
        self.timeout = timeout
        self._authorization = authorization
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def build_request(self, method: str, params: list[Any]) -> JsonRpcRequest:
        with self._lock:
            request_id = next(self._ids)
        return JsonRpcRequest(method=method, params=list(params), id=request_id)

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._authorization:
            headers["Authorization"] = self._authorization
        return headers

    def _request_error(self, request: JsonRpcRequest, exc: httpx.RequestError) -> TransportError:
        if isinstance(exc, httpx.TimeoutException):
            return TransportError(
                f"rpc timeout after {self.timeout}s: {request.method}",
                code="RPC_TIMEOUT",
                method=request.method,
            )
        return TransportError(
            f"rpc network error: {request.method}: {exc}",
            code="RPC_NETWORK_ERROR",
            method=request.method,
        )

    def _parse_response(self, request: JsonRpcRequest, resp: httpx.Response, started: float) -> JsonRpcResponse:
        status_code = resp.status_code
        logger.debug(
            f"RPC response {request.method} id={request.id} status={status_code} "
            f"in {(time.monotonic() - started) * 1000:.1f}ms"
        )
        try:
            body: Any = resp.json()
        except ValueError as exc:
            if status_code >= 400:
                raise TransportError(
                    f"rpc http error {status_code}: {self._error_text(resp)}",
                    code="RPC_HTTP_ERROR",
                    method=request.method,
                    status_code=status_code,
                ) from exc
            raise TransportError(
                f"rpc bad response: non-json body for {request.method}",
                code="RPC_BAD_RESPONSE",
                method=request.method,
                status_code=status_code,
            ) from exc

        # bitcoind reports RPC errors with HTTP 404/500 and a JSON-RPC error body.
        if status_code >= 400 and not (isinstance(body, dict) and body.get("error")):
            raise TransportError(
                f"rpc http error {status_code}: {self._error_text(resp)}",
                code="RPC_HTTP_ERROR",
                method=request.method,
                status_code=status_code,
            )

        response = JsonRpcResponse.from_payload(body, method=request.method, status_code=status_code)
        if response.id is not None and response.id != request.id:
            raise TransportError(
                f"rpc id mismatch for {request.method}: sent {request.id}, got {response.id}",
                code="RPC_ID_MISMATCH",
                method=request.method,
                status_code=status_code,
            )
        return response

    @staticmethod
    def _error_text(resp: httpx.Response) -> str:
        text = (resp.text or "").strip()
        return text[:200] if text else (resp.reason_phrase or "request failed")


class HttpTransport(_HttpTransportBase):
    """Blocking JSON-RPC over HTTP POST, backed by ``httpx.Client``."""

    def __init__(
        self,
        url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        authorization: str | None = None,
        client: httpx.Client | None = None,
    ):
        super().__init__(url, timeout=timeout, authorization=authorization)
        self._client = client or httpx.Client()
        self._owns_client = client is None

    def send_request(self, request: JsonRpcRequest) -> JsonRpcResponse:
        started = time.monotonic()
        logger.debug(f"RPC request {request.method} id={request.id}")
        try:
            resp = self._client.post(
                self.url,
                json=request.to_dict(),
                headers=self._headers(),
                timeout=self.timeout,
            )
        except httpx.RequestError as exc:
            raise self._request_error(request, exc) from exc
        return self._parse_response(request, resp, started)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HttpTransport":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class AsyncHttpTransport(_HttpTransportBase):
    """Non-blocking JSON-RPC over HTTP POST, backed by ``httpx.AsyncClient``."""

    def __init__(
        self,
        url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        authorization: str | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        super().__init__(url, timeout=timeout, authorization=authorization)
        self._client = client or httpx.AsyncClient()
        self._owns_client = client is None

    async def send_request(self, request: JsonRpcRequest) -> JsonRpcResponse:
        started = time.monotonic()
        logger.debug(f"RPC request {request.method} id={request.id}")
        try:
            resp = await self._client.post(
                self.url,
                json=request.to_dict(),
                headers=self._headers(),
                timeout=self.timeout,
            )
        except httpx.RequestError as exc:
            raise self._request_error(request, exc) from exc
        return self._parse_response(request, resp, started)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "AsyncHttpTransport":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


class HttpTransportBuilder:
    """
    Chained construction of an HTTP transport.

    Example:
        transport = (
            HttpTransportBuilder()
            .url("http://127.0.0.1:38332")
            .timeout(30)
            .cookie_auth(cookie)
            .build()
        )
    """

    def __init__(self) -> None:
        self._url: str | None = None
        self._timeout = DEFAULT_TIMEOUT
        self._authorization: str | None = None
        self._client: httpx.Client | httpx.AsyncClient | None = None

    def url(self, url: str) -> "HttpTransportBuilder":
        validate_url(url)
        self._url = url
        return self

    def timeout(self, seconds: float) -> "HttpTransportBuilder":
        if seconds <= 0:
            raise ConfigError(f"timeout must be positive, got {seconds}")
        self._timeout = float(seconds)
        return self

    def basic_auth(self, user: str, password: str | None = None) -> "HttpTransportBuilder":
        self._authorization = basic_authorization(f"{user}:{password or ''}")
        return self

    def cookie_auth(self, cookie: str) -> "HttpTransportBuilder":
        """Authenticate with the raw ``user:password`` cookie string."""
        self._authorization = basic_authorization(cookie.strip())
        return self

    def http_client(self, client: httpx.Client | httpx.AsyncClient) -> "HttpTransportBuilder":
        """Use a caller-owned httpx client (proxies, custom TLS); it is not closed by the transport."""
        self._client = client
        return self

    def _require_url(self) -> str:
        if self._url is None:
            raise ConfigError("RPC URL is not set")
        return self._url

    def build(self) -> HttpTransport:
        if self._client is not None and not isinstance(self._client, httpx.Client):
            raise ConfigError("build() needs an httpx.Client; use build_async() for httpx.AsyncClient")
        return HttpTransport(
            self._require_url(),
            timeout=self._timeout,
            authorization=self._authorization,
            client=self._client,
        )

    def build_async(self) -> AsyncHttpTransport:
        if self._client is not None and not isinstance(self._client, httpx.AsyncClient):
            raise ConfigError("build_async() needs an httpx.AsyncClient")
        return AsyncHttpTransport(
            self._require_url(),
            timeout=self._timeout,
            authorization=self._authorization,
            client=self._client,
        )

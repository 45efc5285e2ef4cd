"""
RPC client core.

A client owns exactly one transport and one protocol version and keeps no
other state: every call is an independent round trip, nothing is retried,
and a shared instance is safe to use from several threads or tasks as long
as its transport is.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Sequence

from loguru import logger

from simplerpc.auth import Auth, resolve_auth
from simplerpc.jsonrpc import decode_result, encode_params
from simplerpc.methods import RpcMethods
from simplerpc.transport import (
    DEFAULT_TIMEOUT,
    AsyncTransport,
    HttpTransportBuilder,
    Transport,
)
from simplerpc.types.versions import DEFAULT_PROTOCOL_VERSION, ProtocolVersion

if TYPE_CHECKING:
    from simplerpc.config.schema import RpcConfig


class _ClientBase(RpcMethods):
    def __init__(self, transport: Any, *, version: ProtocolVersion | str = DEFAULT_PROTOCOL_VERSION):
        self._transport = transport
        self.version = ProtocolVersion.parse(version)

    @property
    def transport(self) -> Any:
        return self._transport

    @classmethod
    def _from_builder(cls, builder: HttpTransportBuilder, version: ProtocolVersion | str) -> Any:
        raise NotImplementedError

    @classmethod
    def new(
        cls,
        url: str,
        auth: Auth,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        version: ProtocolVersion | str = DEFAULT_PROTOCOL_VERSION,
    ):
        """Create an HTTP client; credentials are resolved once, here."""
        user, password = resolve_auth(auth)
        builder = HttpTransportBuilder().url(url).timeout(timeout).basic_auth(user, password)
        return cls._from_builder(builder, version)

    @classmethod
    def new_user_pass(
        cls,
        url: str,
        user: str,
        password: str | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        version: ProtocolVersion | str = DEFAULT_PROTOCOL_VERSION,
    ):
        builder = HttpTransportBuilder().url(url).timeout(timeout).basic_auth(user, password)
        return cls._from_builder(builder, version)

    @classmethod
    def new_cookie_auth(
        cls,
        url: str,
        cookie: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        version: ProtocolVersion | str = DEFAULT_PROTOCOL_VERSION,
    ):
        """Create an HTTP client from the contents of a cookie file."""
        builder = HttpTransportBuilder().url(url).timeout(timeout).cookie_auth(cookie)
        return cls._from_builder(builder, version)

    @classmethod
    def with_transport(cls, transport: Any, *, version: ProtocolVersion | str = DEFAULT_PROTOCOL_VERSION):
        """Wrap a caller-supplied transport (tests, proxies, custom timeouts)."""
        return cls(transport, version=version)

    def with_protocol_version(self, version: ProtocolVersion | str):
        """A new client sharing this transport but decoding another version's shapes."""
        return type(self)(self._transport, version=version)

    @staticmethod
    def _config_builder(config: "RpcConfig") -> HttpTransportBuilder:
        user, password = resolve_auth(config.to_auth())
        return HttpTransportBuilder().url(config.url).timeout(config.timeout).basic_auth(user, password)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(transport={type(self._transport).__name__}, version={self.version.value})"


class Client(_ClientBase):
    """Blocking JSON-RPC client."""

    def __init__(self, transport: Transport, *, version: ProtocolVersion | str = DEFAULT_PROTOCOL_VERSION):
        super().__init__(transport, version=version)

    @classmethod
    def _from_builder(cls, builder: HttpTransportBuilder, version: ProtocolVersion | str) -> "Client":
        return cls(builder.build(), version=version)

    @classmethod
    def from_config(cls, config: "RpcConfig") -> "Client":
        """
        Build a client from settings.

        ``protocol_version="auto"`` asks the server once, at construction.
        """
        if config.protocol_version != "auto":
            return cls(cls._config_builder(config).build(), version=config.protocol_version)
        client = cls(cls._config_builder(config).build())
        try:
            version = client.detect_protocol_version()
        except Exception:
            client.close()
            raise
        logger.debug(f"Detected server protocol version {version.value}")
        return client.with_protocol_version(version)

    def call(self, method: str, args: Sequence[Any] = (), result_type: Any = Any) -> Any:
        """
        Call RPC ``method`` with positional ``args`` and decode the result.

        Args:
            method: RPC method name, e.g. ``getblockcount``.
            args: Positional params; domain values are encoded for the wire.
            result_type: Type the JSON ``result`` must validate as.

        Raises:
            JsonError: params cannot be encoded or the result has the wrong shape.
            JsonRpcError: the server returned a JSON-RPC error object.
            TransportError: network failure, timeout or malformed envelope.
        """
        params = encode_params(args, method=method)
        request = self._transport.build_request(method, params)
        response = self._transport.send_request(request)
        return decode_result(response.result_value(method=method), result_type, method=method)

    def _invoke(
        self,
        method: str,
        args: Sequence[Any],
        raw_type: Any,
        convert: Callable[[Any], Any] | None = None,
    ) -> Any:
        raw = self.call(method, args, raw_type)
        return convert(raw) if convert is not None else raw

    def close(self) -> None:
        close = getattr(self._transport, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "Client":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class AsyncClient(_ClientBase):
    """JSON-RPC client whose calls are awaitable; same errors and guarantees as Client."""

    def __init__(self, transport: AsyncTransport, *, version: ProtocolVersion | str = DEFAULT_PROTOCOL_VERSION):
        super().__init__(transport, version=version)

    @classmethod
    def _from_builder(cls, builder: HttpTransportBuilder, version: ProtocolVersion | str) -> "AsyncClient":
        return cls(builder.build_async(), version=version)

    @classmethod
    async def from_config(cls, config: "RpcConfig") -> "AsyncClient":
        if config.protocol_version != "auto":
            return cls(cls._config_builder(config).build_async(), version=config.protocol_version)
        client = cls(cls._config_builder(config).build_async())
        try:
            version = await client.detect_protocol_version()
        except Exception:
            await client.aclose()
            raise
        logger.debug(f"Detected server protocol version {version.value}")
        return client.with_protocol_version(version)

    async def call(self, method: str, args: Sequence[Any] = (), result_type: Any = Any) -> Any:
        """Awaitable form of ``Client.call``."""
        params = encode_params(args, method=method)
        request = self._transport.build_request(method, params)
        response = await self._transport.send_request(request)
        return decode_result(response.result_value(method=method), result_type, method=method)

    async def _invoke(
        self,
        method: str,
        args: Sequence[Any],
        raw_type: Any,
        convert: Callable[[Any], Any] | None = None,
    ) -> Any:
        raw = await self.call(method, args, raw_type)
        return convert(raw) if convert is not None else raw

    async def aclose(self) -> None:
        aclose = getattr(self._transport, "aclose", None)
        if callable(aclose):
            await aclose()

    async def __aenter__(self) -> "AsyncClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

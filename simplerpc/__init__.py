"""
simplerpc - typed JSON-RPC client for Bitcoin Core.
"""

__version__ = "0.1.0"

from simplerpc.auth import Auth, CookieFile, UserPass, read_cookie_file
from simplerpc.client import AsyncClient, Client
from simplerpc.transport import (
    DEFAULT_TIMEOUT,
    AsyncHttpTransport,
    AsyncTransport,
    HttpTransport,
    HttpTransportBuilder,
    Transport,
)
from simplerpc.types.versions import ProtocolVersion
from simplerpc.utils.exceptions import (
    ConfigError,
    ConversionError,
    CookieFileReadError,
    HexError,
    IntConversionError,
    InvalidCookieFileError,
    InvalidUrlError,
    JsonError,
    JsonRpcError,
    RpcClientError,
    TransportError,
    UnsupportedVersionError,
)

__all__ = [
    "__version__",
    "Client",
    "AsyncClient",
    "Auth",
    "UserPass",
    "CookieFile",
    "read_cookie_file",
    "DEFAULT_TIMEOUT",
    "Transport",
    "AsyncTransport",
    "HttpTransport",
    "AsyncHttpTransport",
    "HttpTransportBuilder",
    "ProtocolVersion",
    "RpcClientError",
    "TransportError",
    "JsonRpcError",
    "JsonError",
    "ConversionError",
    "HexError",
    "IntConversionError",
    "ConfigError",
    "InvalidCookieFileError",
    "InvalidUrlError",
    "UnsupportedVersionError",
    "CookieFileReadError",
]

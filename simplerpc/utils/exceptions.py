"""
Exception hierarchy for simplerpc.

Provides:
- Error classes with stable codes, one per failure domain
- Error categorization (transport, protocol, json, conversion, config, io)
- Safe error message formatting (credentials never leak into output)
"""

from __future__ import annotations

import json
import re
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Failure domains an RPC call can end in."""
    TRANSPORT = "transport"
    PROTOCOL = "protocol"
    JSON = "json"
    CONVERSION = "conversion"
    INTEGER_RANGE = "integer_range"
    CONFIG = "config"
    IO = "io"


class RpcClientError(Exception):
    """Base exception for all simplerpc errors."""

    def __init__(
        self,
        message: str,
        code: str = "RPC_CLIENT_ERROR",
        category: ErrorCategory = ErrorCategory.TRANSPORT,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.code,
            "message": self.message,
            "category": self.category.value,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"


class TransportError(RpcClientError):
    """Network failure, timeout, HTTP error or malformed JSON-RPC envelope."""

    def __init__(
        self,
        message: str,
        *,
        code: str = "RPC_TRANSPORT_ERROR",
        method: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(
            message,
            code=code,
            category=ErrorCategory.TRANSPORT,
            details={"method": method, "status_code": status_code},
        )
        self.method = method
        self.status_code = status_code


class JsonRpcError(TransportError):
    """The server answered with a JSON-RPC error object."""

    def __init__(self, rpc_code: int, rpc_message: str, *, method: str | None = None, status_code: int | None = None):
        super().__init__(
            f"msg: {rpc_message!r} code: {rpc_code}",
            code="RPC_SERVER_ERROR",
            method=method,
            status_code=status_code,
        )
        self.category = ErrorCategory.PROTOCOL
        self.rpc_code = rpc_code
        self.rpc_message = rpc_message
        self.details.update({"rpc_code": rpc_code, "rpc_message": rpc_message})


class JsonError(RpcClientError):
    """JSON (de)serialization failed or did not match the declared raw type."""

    def __init__(self, message: str, *, method: str | None = None):
        details = {"method": method} if method else {}
        super().__init__(message, code="JSON_ERROR", category=ErrorCategory.JSON, details=details)


class ConversionError(RpcClientError):
    """A raw response was rejected while converting it into a domain value."""

    def __init__(
        self,
        message: str,
        *,
        model: str | None = None,
        field: str | None = None,
        code: str = "CONVERSION_ERROR",
    ):
        details = {k: v for k, v in (("model", model), ("field", field)) if v}
        super().__init__(message, code=code, category=ErrorCategory.CONVERSION, details=details)
        self.model = model
        self.field = field


class HexError(ConversionError):
    """Malformed hex in an identifier or encoded payload."""

    def __init__(self, message: str, *, model: str | None = None, field: str | None = None):
        super().__init__(message, model=model, field=field, code="HEX_ERROR")


class IntConversionError(RpcClientError):
    """A server-provided integer is outside the domain type's range."""

    def __init__(self, value: int, *, minimum: int, maximum: int, field: str | None = None):
        name = field or "value"
        super().__init__(
            f"{name} out of range: {value} not in [{minimum}, {maximum}]",
            code="INT_CONVERSION_ERROR",
            category=ErrorCategory.INTEGER_RANGE,
            details={"field": field, "value": value, "minimum": minimum, "maximum": maximum},
        )
        self.value = value


class ConfigError(RpcClientError):
    """Client configuration is unusable."""

    def __init__(self, message: str, *, code: str = "CONFIG_ERROR", details: dict[str, Any] | None = None):
        super().__init__(message, code=code, category=ErrorCategory.CONFIG, details=details)


class InvalidCookieFileError(ConfigError):
    """Cookie file is empty or its first line has no ':' separator."""

    def __init__(self, path: str):
        super().__init__(
            f"Invalid cookie file: {path} (expected a single 'user:password' line)",
            code="INVALID_COOKIE_FILE",
            details={"path": path},
        )
        self.path = path


class InvalidUrlError(ConfigError):
    """Endpoint URL is not a usable http(s) URL."""

    def __init__(self, url: str, reason: str):
        super().__init__(
            f"Invalid RPC URL {sanitize_error_message(url)!r}: {reason}",
            code="INVALID_URL",
            details={"reason": reason},
        )


class UnsupportedVersionError(ConfigError):
    """Server reports a protocol version this client has no raw shapes for."""

    def __init__(self, version: Any):
        super().__init__(
            f"Unsupported server protocol version: {version}",
            code="UNSUPPORTED_VERSION",
            details={"version": version},
        )


class CookieFileReadError(RpcClientError):
    """Cookie file could not be opened or read."""

    def __init__(self, path: str, reason: str):
        super().__init__(
            f"Cannot read cookie file {path}: {reason}",
            code="COOKIE_FILE_IO",
            category=ErrorCategory.IO,
            details={"path": path},
        )
        self.path = path


_SENSITIVE_PATTERNS = [
    re.compile(r"(password|rpcpassword|cookie|auth)[=:]\s*['\"]?([^\s'\"]+)['\"]?", re.IGNORECASE),
    re.compile(r"basic\s+[a-zA-Z0-9+/]+=*", re.IGNORECASE),
    re.compile(r"(?<=://)[^/@\s]+:[^/@\s]+(?=@)"),
]


def sanitize_error_message(message: str, replacement: str = "[REDACTED]") -> str:
    """Remove credentials (URL userinfo, basic auth headers, passwords) from messages."""
    sanitized = message
    for pattern in _SENSITIVE_PATTERNS:
        sanitized = pattern.sub(replacement, sanitized)
    return sanitized


def classify_exception(exc: BaseException) -> tuple[str, ErrorCategory]:
    """
    Classify an exception and return (error_code, category).

    simplerpc errors carry their own code; anything else is mapped by type.
    """
    if isinstance(exc, RpcClientError):
        return exc.code, exc.category

    if isinstance(exc, FileNotFoundError):
        return "FILE_NOT_FOUND", ErrorCategory.IO

    if isinstance(exc, OSError):
        return "OS_ERROR", ErrorCategory.IO

    if isinstance(exc, json.JSONDecodeError):
        return "JSON_ERROR", ErrorCategory.JSON

    if isinstance(exc, (TypeError, ValueError)):
        return "CONVERSION_ERROR", ErrorCategory.CONVERSION

    return "RPC_CLIENT_ERROR", ErrorCategory.TRANSPORT


def format_error(exc: BaseException, include_details: bool = False) -> str:
    """Format an exception for display, redacting credentials."""
    code, category = classify_exception(exc)
    message = exc.message if isinstance(exc, RpcClientError) else str(exc)
    message = sanitize_error_message(message)
    if include_details:
        return f"Error [{code}] ({category.value}): {message}"
    return f"Error: {message}"

"""Utility functions for simplerpc."""

from simplerpc.utils.helpers import to_jsonable
from simplerpc.utils.exceptions import (
    RpcClientError,
    TransportError,
    JsonRpcError,
    JsonError,
    ConversionError,
    HexError,
    IntConversionError,
    ConfigError,
    InvalidCookieFileError,
    InvalidUrlError,
    UnsupportedVersionError,
    CookieFileReadError,
    ErrorCategory,
    classify_exception,
    sanitize_error_message,
    format_error,
)

__all__ = [
    "to_jsonable",
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
    "ErrorCategory",
    "classify_exception",
    "sanitize_error_message",
    "format_error",
]

"""JSON-RPC request/response envelopes and result marshalling."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Sequence

from pydantic import TypeAdapter, ValidationError

from simplerpc.utils.exceptions import JsonError, JsonRpcError, TransportError
from simplerpc.utils.helpers import to_jsonable


@dataclass(frozen=True)
class JsonRpcRequest:
    method: str
    params: list[Any] = field(default_factory=list)
    id: int | str | None = None
    jsonrpc: str = "2.0"

    def to_dict(self) -> dict[str, Any]:
        return {"jsonrpc": self.jsonrpc, "id": self.id, "method": self.method, "params": self.params}


@dataclass(frozen=True)
class JsonRpcResponse:
    result: Any = None
    error: dict[str, Any] | None = None
    id: int | str | None = None

    @classmethod
    def from_payload(cls, payload: Any, *, method: str | None = None, status_code: int | None = None) -> "JsonRpcResponse":
        if not isinstance(payload, dict):
            raise TransportError(
                f"malformed JSON-RPC response for {method}: expected an object",
                code="RPC_BAD_RESPONSE",
                method=method,
                status_code=status_code,
            )
        error = payload.get("error")
        if error is None and "result" not in payload:
            raise TransportError(
                f"missing JSON-RPC result for {method}",
                code="RPC_BAD_RESPONSE",
                method=method,
                status_code=status_code,
            )
        if error is not None and not isinstance(error, dict):
            error = {"code": -1, "message": str(error)}
        return cls(result=payload.get("result"), error=error, id=payload.get("id"))

    def result_value(self, *, method: str | None = None) -> Any:
        """Return ``result``, or raise the server's error object as JsonRpcError."""
        if self.error is not None:
            code = self.error.get("code", -1)
            raise JsonRpcError(
                code if isinstance(code, int) else -1,
                str(self.error.get("message") or "error message not specified"),
                method=method,
            )
        return self.result


def encode_params(args: Sequence[Any], *, method: str | None = None) -> list[Any]:
    """Serialize positional arguments to a JSON array value."""
    try:
        params = to_jsonable(list(args))
        # Round-trip through the encoder so NaN and friends fail here, not on the wire.
        json.dumps(params, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise JsonError(f"cannot serialize params for {method}: {exc}", method=method) from exc
    return params


@lru_cache(maxsize=None)
def _adapter(result_type: Any) -> TypeAdapter:
    return TypeAdapter(result_type)


def decode_result(value: Any, result_type: Any, *, method: str | None = None) -> Any:
    """Validate a JSON result against the declared raw type."""
    if result_type is Any:
        return value
    try:
        return _adapter(result_type).validate_python(value, strict=True)
    except ValidationError as exc:
        raise JsonError(
            f"result of {method} does not match {getattr(result_type, '__name__', result_type)}: {exc}",
            method=method,
        ) from exc

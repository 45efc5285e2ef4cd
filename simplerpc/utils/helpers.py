"""Helpers shared by the request encoder and the CLI renderer."""

from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any

from pydantic import BaseModel


def to_jsonable(value: Any) -> Any:
    """
    Convert domain values into plain JSON-compatible structures.

    Objects exposing ``__json__()`` (hashes, amounts) provide their own wire
    form; pydantic models drop unset optionals; bytes become hex.
    """
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    to_json = getattr(value, "__json__", None)
    if callable(to_json):
        return to_json()
    if isinstance(value, BaseModel):
        return to_jsonable(value.model_dump(exclude_none=True, by_alias=True))
    if isinstance(value, Enum):
        return to_jsonable(value.value)
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, dict):
        return {str(to_jsonable(k)): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(item) for item in value]
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")

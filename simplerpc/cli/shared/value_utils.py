"""Parsing and rendering of values on the command line."""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console

from simplerpc.types.encoding import consensus_to_json
from simplerpc.utils.helpers import to_jsonable


def parse_value(raw: str) -> Any:
    """Parse CLI input value as JSON if possible; fallback to string."""
    text = raw.strip()
    if text == "":
        return ""
    try:
        return json.loads(text)
    except ValueError:
        lowered = text.lower()
        if lowered in {"true", "false"}:
            return lowered == "true"
        return text


def print_json(console: Console, value: Any) -> None:
    """Render a result (domain types included) as indented JSON."""
    console.print_json(data=to_jsonable(consensus_to_json(value)))

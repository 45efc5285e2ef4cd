"""Credential sources for the RPC endpoint."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Union

from simplerpc.utils.exceptions import CookieFileReadError, InvalidCookieFileError


@dataclass(frozen=True)
class UserPass:
    """Inline ``rpcuser`` / ``rpcpassword`` credentials."""
    user: str
    password: str | None = None

    def __repr__(self) -> str:
        return f"UserPass(user={self.user!r}, password=***)"


@dataclass(frozen=True)
class CookieFile:
    """Path to the node's ``.cookie`` file (regenerated on every node restart)."""
    path: Path

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", Path(self.path).expanduser())


Auth = Union[UserPass, CookieFile]


def read_cookie_file(path: str | Path) -> tuple[str, str]:
    """
    Read ``user:password`` from the first line of a cookie file.

    Raises:
        CookieFileReadError: the file cannot be opened or read.
        InvalidCookieFileError: the file is empty or the line has no ':'.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            line = f.readline()
    except (OSError, UnicodeDecodeError) as exc:
        raise CookieFileReadError(str(path), str(exc)) from exc
    line = line.rstrip("\r\n")
    user, sep, password = line.partition(":")
    if not sep:
        raise InvalidCookieFileError(str(path))
    return user, password


def resolve_auth(auth: Auth) -> tuple[str, str | None]:
    """Turn a credential source into a ``(user, password)`` pair."""
    if isinstance(auth, UserPass):
        return auth.user, auth.password
    if isinstance(auth, CookieFile):
        return read_cookie_file(auth.path)
    raise TypeError(f"unsupported auth source: {type(auth).__name__}")

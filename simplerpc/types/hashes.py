"""Fixed-size 32-byte identifiers (block hashes, txids, filter headers)."""

from __future__ import annotations

import re
from dataclasses import dataclass

from bitcoin.core import b2lx, lx

from simplerpc.utils.exceptions import HexError

_HEX64 = re.compile(r"[0-9a-fA-F]{64}")


@dataclass(frozen=True)
class Hash256:
    """
    A 32-byte hash stored in internal byte order.

    RPC results carry hashes as hex in display order, which is the internal
    byte order reversed (python-bitcoinlib's ``lx`` / ``b2lx``).
    """

    raw: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.raw, bytes) or len(self.raw) != 32:
            raise HexError(f"{type(self).__name__} must be exactly 32 bytes")

    @classmethod
    def from_hex(cls, value: str) -> "Hash256":
        if not isinstance(value, str) or not _HEX64.fullmatch(value):
            raise HexError(f"invalid {cls.__name__} hex: {value!r}", model=cls.__name__)
        return cls(lx(value))

    def to_hex(self) -> str:
        return b2lx(self.raw)

    def __json__(self) -> str:
        return self.to_hex()

    def __str__(self) -> str:
        return self.to_hex()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_hex()!r})"


class BlockHash(Hash256):
    """Hash of a block header."""


class Txid(Hash256):
    """Transaction id (hash of the non-witness serialization)."""


class Wtxid(Hash256):
    """Witness transaction id."""


class TxMerkleNode(Hash256):
    """Merkle root committed in a block header."""


class FilterHeader(Hash256):
    """BIP158 filter header."""

"""Server protocol versions and the raw shapes each one answers with."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from simplerpc.types import v28, v29
from simplerpc.utils.exceptions import UnsupportedVersionError


class ProtocolVersion(str, Enum):
    V28 = "v28"
    V29 = "v29"

    @classmethod
    def parse(cls, value: "str | ProtocolVersion") -> "ProtocolVersion":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as exc:
            raise UnsupportedVersionError(value) from exc

    @classmethod
    def from_server_version(cls, version: int) -> "ProtocolVersion":
        """Map ``getnetworkinfo.version`` (e.g. 290100) to a shape set."""
        if version >= 290000:
            return cls.V29
        if version >= 280000:
            return cls.V28
        raise UnsupportedVersionError(version)

    @property
    def shapes(self) -> "RawShapes":
        return RAW_SHAPES[self]


DEFAULT_PROTOCOL_VERSION = ProtocolVersion.V29


@dataclass(frozen=True)
class RawShapes:
    """Decoders for the version-sensitive methods."""
    block_header_verbose: type[v28.GetBlockHeaderVerbose]
    block_verbose_one: type[v28.GetBlockVerboseOne]
    blockchain_info: type[v28.GetBlockchainInfo]


RAW_SHAPES: dict[ProtocolVersion, RawShapes] = {
    ProtocolVersion.V28: RawShapes(
        block_header_verbose=v28.GetBlockHeaderVerbose,
        block_verbose_one=v28.GetBlockVerboseOne,
        blockchain_info=v28.GetBlockchainInfo,
    ),
    ProtocolVersion.V29: RawShapes(
        block_header_verbose=v29.GetBlockHeaderVerbose,
        block_verbose_one=v29.GetBlockVerboseOne,
        blockchain_info=v29.GetBlockchainInfo,
    ),
}

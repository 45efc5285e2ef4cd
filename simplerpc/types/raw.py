"""Raw response shapes shared by every supported server version."""

from __future__ import annotations

from typing import Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from simplerpc.types.amount import Amount
from simplerpc.types.encoding import decode_hex
from simplerpc.types.hashes import FilterHeader, Hash256, Txid, Wtxid
from simplerpc.types.model import BlockFilter, DescriptorInfo, MempoolEntry, MempoolEntryFees
from simplerpc.utils.exceptions import ConversionError, HexError, IntConversionError

U32_MAX = 2**32 - 1
I32_MIN, I32_MAX = -(2**31), 2**31 - 1

H = TypeVar("H", bound=Hash256)


def from_i32(value: int, field: str | None = None) -> int:
    """Server integer the node declares as signed 32-bit."""
    if isinstance(value, bool) or not isinstance(value, int) or not I32_MIN <= value <= I32_MAX:
        raise IntConversionError(value, minimum=I32_MIN, maximum=I32_MAX, field=field)
    return value


def to_u32(value: int, field: str | None = None) -> int:
    """Range-checked conversion of a server integer into an unsigned 32-bit count."""
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= U32_MAX:
        raise IntConversionError(value, minimum=0, maximum=U32_MAX, field=field)
    return value


def parse_hash(cls: type[H], value: str, *, model: str, field: str) -> H:
    try:
        return cls.from_hex(value)
    except HexError as exc:
        raise HexError(exc.message, model=model, field=field) from exc


def parse_optional_hash(cls: type[H], value: Optional[str], *, model: str, field: str) -> Optional[H]:
    if value is None:
        return None
    return parse_hash(cls, value, model=model, field=field)


def parse_hex_int(value: str, *, model: str, field: str) -> int:
    """Big-endian hex number, as used for ``chainwork`` and ``target``."""
    try:
        return int(value, 16)
    except (TypeError, ValueError) as exc:
        raise HexError(f"invalid hex number: {value!r}", model=model, field=field) from exc


def parse_compact(value: str, *, model: str, field: str = "bits") -> int:
    """Compact target (``bits``), sent as 8 hex digits."""
    if not isinstance(value, str) or len(value) != 8:
        raise ConversionError(f"invalid compact target: {value!r}", model=model, field=field)
    return parse_hex_int(value, model=model, field=field)


class RawModel(BaseModel):
    # Servers add fields across releases; unknown keys are ignored.
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class GetBlockFilter(RawModel):
    """Response to ``getblockfilter``."""

    filter: str
    header: str

    def into_model(self) -> BlockFilter:
        data = decode_hex(self.filter, model="GetBlockFilter", field="filter")
        if not data:
            raise ConversionError("empty block filter", model="GetBlockFilter", field="filter")
        header = parse_hash(FilterHeader, self.header, model="GetBlockFilter", field="header")
        return BlockFilter(filter=data, header=header)


class MempoolEntryFeesRaw(RawModel):
    base: float
    modified: float
    ancestor: float
    descendant: float

    def into_model(self) -> MempoolEntryFees:
        return MempoolEntryFees(
            base=Amount.from_btc(self.base),
            modified=Amount.from_btc(self.modified),
            ancestor=Amount.from_btc(self.ancestor),
            descendant=Amount.from_btc(self.descendant),
        )


class MempoolEntryRaw(RawModel):
    """One value of ``getrawmempool true``."""

    vsize: int
    weight: int
    time: int
    height: int
    descendant_count: int = Field(alias="descendantcount")
    descendant_size: int = Field(alias="descendantsize")
    ancestor_count: int = Field(alias="ancestorcount")
    ancestor_size: int = Field(alias="ancestorsize")
    wtxid: str
    fees: MempoolEntryFeesRaw
    depends: list[str] = Field(default_factory=list)
    spent_by: list[str] = Field(default_factory=list, alias="spentby")
    bip125_replaceable: Optional[bool] = Field(default=None, alias="bip125-replaceable")
    unbroadcast: Optional[bool] = None

    def into_model(self) -> MempoolEntry:
        model = "MempoolEntry"
        return MempoolEntry(
            vsize=self.vsize,
            weight=self.weight,
            time=self.time,
            height=to_u32(self.height, "height"),
            descendant_count=self.descendant_count,
            descendant_size=self.descendant_size,
            ancestor_count=self.ancestor_count,
            ancestor_size=self.ancestor_size,
            wtxid=parse_hash(Wtxid, self.wtxid, model=model, field="wtxid"),
            fees=self.fees.into_model(),
            depends=[parse_hash(Txid, t, model=model, field="depends") for t in self.depends],
            spent_by=[parse_hash(Txid, t, model=model, field="spentby") for t in self.spent_by],
            bip125_replaceable=self.bip125_replaceable,
            unbroadcast=self.unbroadcast,
        )


def mempool_into_model(raw: dict[str, MempoolEntryRaw]) -> dict[Txid, MempoolEntry]:
    return {
        parse_hash(Txid, txid, model="GetRawMempoolVerbose", field="txid"): entry.into_model()
        for txid, entry in raw.items()
    }


class GetDescriptorInfo(RawModel):
    """Response to ``getdescriptorinfo``."""

    descriptor: str
    checksum: str
    is_range: bool = Field(alias="isrange")
    is_solvable: bool = Field(alias="issolvable")
    has_private_keys: bool = Field(alias="hasprivatekeys")

    def into_model(self) -> DescriptorInfo:
        return DescriptorInfo(
            descriptor=self.descriptor,
            checksum=self.checksum,
            is_range=self.is_range,
            is_solvable=self.is_solvable,
            has_private_keys=self.has_private_keys,
        )


class GetNetworkInfo(RawModel):
    """The part of ``getnetworkinfo`` used for version detection."""

    version: int
    subversion: str = ""
    protocol_version: int = Field(default=0, alias="protocolversion")

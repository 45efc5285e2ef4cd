"""Satoshi-denominated amounts and their BTC wire form."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation

from simplerpc.utils.exceptions import ConversionError

COIN = 100_000_000
MAX_MONEY = 21_000_000 * COIN


@dataclass(frozen=True, order=True)
class Amount:
    """An amount in satoshis.

    The RPC interface speaks BTC as JSON numbers; conversion to and from
    floats happens only at the call boundary, so rounding there is expected.
    """

    sat: int

    def __post_init__(self) -> None:
        if isinstance(self.sat, bool) or not isinstance(self.sat, int):
            raise ConversionError(f"amount must be an integer number of satoshis, got {self.sat!r}", model="Amount")
        if not -MAX_MONEY <= self.sat <= MAX_MONEY:
            raise ConversionError(f"amount out of range: {self.sat} sat", model="Amount")

    @classmethod
    def from_sat(cls, sat: int) -> "Amount":
        return cls(sat)

    @classmethod
    def from_btc(cls, btc: float | str | Decimal) -> "Amount":
        try:
            value = Decimal(str(btc)) * COIN
        except InvalidOperation as exc:
            raise ConversionError(f"invalid BTC amount: {btc!r}", model="Amount") from exc
        if not value.is_finite():
            raise ConversionError(f"invalid BTC amount: {btc!r}", model="Amount")
        return cls(int(value.quantize(Decimal(1), rounding=ROUND_HALF_EVEN)))

    def to_btc(self) -> float:
        return self.sat / COIN

    def __json__(self) -> float:
        return self.to_btc()

    def __str__(self) -> str:
        return f"{Decimal(self.sat) / COIN:.8f} BTC"

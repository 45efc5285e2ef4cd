"""Raw response shapes of Bitcoin Core 29.x.

29.0 added ``target`` to ``getblockheader``, ``getblock`` and
``getblockchaininfo``, and ``bits`` to ``getblockchaininfo``; everything
else is unchanged from 28.x.
"""

from __future__ import annotations

from typing import Optional

from simplerpc.types import v28
from simplerpc.types.raw import parse_compact, parse_hex_int


class GetBlockHeaderVerbose(v28.GetBlockHeaderVerbose):
    target: str

    def _target(self) -> Optional[int]:
        return parse_hex_int(self.target, model=type(self).__name__, field="target")


class GetBlockVerboseOne(v28.GetBlockVerboseOne):
    target: str

    def _target(self) -> Optional[int]:
        return parse_hex_int(self.target, model=type(self).__name__, field="target")


class GetBlockchainInfo(v28.GetBlockchainInfo):
    bits: str
    target: str

    def _bits(self) -> Optional[int]:
        return parse_compact(self.bits, model=type(self).__name__)

    def _target(self) -> Optional[int]:
        return parse_hex_int(self.target, model=type(self).__name__, field="target")

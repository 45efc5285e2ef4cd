"""Tests for domain types: hashes, amounts and consensus decoding."""

import hashlib
import struct

import pytest

from simplerpc.types.amount import COIN, MAX_MONEY, Amount
from simplerpc.types.encoding import (
    block_hash,
    check_merkle_root,
    consensus_to_json,
    decode_block,
    decode_block_header,
    decode_transaction,
    txid,
    wtxid,
)
from simplerpc.types.hashes import BlockHash, Hash256, Txid
from simplerpc.types.versions import ProtocolVersion, RAW_SHAPES
from simplerpc.types import v28, v29
from simplerpc.utils.exceptions import ConversionError, HexError, UnsupportedVersionError
from simplerpc.utils.helpers import to_jsonable


def sha256d(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()


def legacy_tx(version: int = 1, prev: bytes = b"\x11" * 32, vout: int = 0) -> bytes:
    return (
        struct.pack("<i", version)
        + b"\x01" + prev + struct.pack("<I", vout) + b"\x01\x51" + b"\xff\xff\xff\xff"
        + b"\x01" + struct.pack("<q", 5000) + b"\x01\x6a"
        + struct.pack("<I", 0)
    )


def segwit_tx() -> tuple[bytes, bytes]:
    """Full serialization and its non-witness form."""
    body_in = b"\x01" + b"\x22" * 32 + struct.pack("<I", 1) + b"\x00" + b"\xfd\xff\xff\xff"
    body_out = b"\x01" + struct.pack("<q", 12_345) + b"\x02\x00\x14"
    witness = b"\x02" + b"\x02\xab\xcd" + b"\x01\x01"
    lock_time = struct.pack("<I", 101)
    version = struct.pack("<i", 2)
    full = version + b"\x00\x01" + body_in + body_out + witness + lock_time
    stripped = version + body_in + body_out + lock_time
    return full, stripped


class TestHash256:
    HEX = "000000000019d6689c085ae165831e934ff763ae46a2a6c172b3f1b60a8ce26f"

    def test_hex_round_trip_is_display_order(self) -> None:
        block_hash = BlockHash.from_hex(self.HEX)
        assert block_hash.raw == bytes.fromhex(self.HEX)[::-1]
        assert block_hash.to_hex() == self.HEX
        assert str(block_hash) == self.HEX
        assert to_jsonable(block_hash) == self.HEX

    def test_upper_case_hex_is_normalised(self) -> None:
        assert BlockHash.from_hex(self.HEX.upper()).to_hex() == self.HEX

    @pytest.mark.parametrize("value", ["", "zz" * 32, "00" * 31, "00" * 33, None])
    def test_invalid_hex(self, value) -> None:
        with pytest.raises(HexError):
            BlockHash.from_hex(value)

    def test_raw_length_is_checked(self) -> None:
        with pytest.raises(HexError):
            Hash256(b"\x00" * 31)

    def test_types_are_distinct(self) -> None:
        assert BlockHash.from_hex(self.HEX) != Txid.from_hex(self.HEX)
        assert {BlockHash.from_hex(self.HEX): 1}[BlockHash.from_hex(self.HEX)] == 1


class TestAmount:
    def test_btc_conversions(self) -> None:
        assert Amount.from_btc(0.001).sat == 100_000
        assert Amount.from_btc("21000000") == Amount(MAX_MONEY)
        assert Amount.from_sat(COIN).to_btc() == 1.0
        assert Amount.from_btc(0.1 + 0.2).sat == 30_000_000

    def test_display(self) -> None:
        assert str(Amount(150_000_000)) == "1.50000000 BTC"
        assert to_jsonable(Amount(100_000)) == 0.001

    def test_ordering(self) -> None:
        assert Amount(1) < Amount(2)
        assert Amount(-1) < Amount(0)

    @pytest.mark.parametrize("sat", [MAX_MONEY + 1, -MAX_MONEY - 1, 1.5, True])
    def test_rejects_invalid_satoshis(self, sat) -> None:
        with pytest.raises(ConversionError):
            Amount(sat)

    @pytest.mark.parametrize("btc", [float("nan"), float("inf"), "abc"])
    def test_rejects_invalid_btc(self, btc) -> None:
        with pytest.raises(ConversionError):
            Amount.from_btc(btc)


class TestTransaction:
    def test_legacy_decode(self) -> None:
        raw = legacy_tx()
        tx = decode_transaction(raw.hex())
        assert tx.nVersion == 1
        assert not tx.has_witness()
        assert not tx.is_coinbase()
        assert tx.vin[0].prevout.hash == b"\x11" * 32
        assert tx.vin[0].scriptSig == b"\x51"
        assert tx.vout[0].nValue == 5000
        assert tx.serialize() == raw
        assert txid(tx).raw == sha256d(raw)
        assert wtxid(tx).raw == sha256d(raw)

    def test_segwit_decode(self) -> None:
        full, stripped = segwit_tx()
        tx = decode_transaction(full.hex())
        assert tx.has_witness()
        assert list(tx.wit.vtxinwit[0].scriptWitness.stack) == [b"\xab\xcd", b"\x01"]
        assert tx.nLockTime == 101
        assert tx.serialize() == full
        assert txid(tx).to_hex() == sha256d(stripped)[::-1].hex()
        assert wtxid(tx).raw == sha256d(full)

    def test_coinbase(self) -> None:
        tx = decode_transaction(legacy_tx(prev=bytes(32), vout=0xFFFFFFFF).hex())
        assert tx.is_coinbase()

    def test_trailing_bytes(self) -> None:
        with pytest.raises(ConversionError):
            decode_transaction(legacy_tx().hex() + "00")

    def test_truncated(self) -> None:
        with pytest.raises(ConversionError):
            decode_transaction(legacy_tx().hex()[:-2])

    def test_bad_hex(self) -> None:
        with pytest.raises(HexError):
            decode_transaction("0g")

    def test_json_form(self) -> None:
        full, stripped = segwit_tx()
        rendered = consensus_to_json(decode_transaction(full.hex()))
        assert rendered["txid"] == sha256d(stripped)[::-1].hex()
        assert rendered["version"] == 2
        assert rendered["locktime"] == 101
        assert rendered["vin"][0]["txid"] == "22" * 32
        assert rendered["vin"][0]["vout"] == 1
        assert rendered["vin"][0]["witness"] == ["abcd", "01"]
        assert rendered["vout"] == [{"value": 0.00012345, "scriptPubKey": "0014"}]


class TestBlock:
    def header_bytes(self, merkle_root: bytes) -> bytes:
        return (
            struct.pack("<i", 0x20000000)
            + bytes(32)
            + merkle_root
            + struct.pack("<III", 1_713_571_767, 0x207FFFFF, 42)
        )

    def test_header_decode(self) -> None:
        raw = self.header_bytes(b"\x33" * 32)
        header = decode_block_header(raw.hex())
        assert header.nVersion == 0x20000000
        assert header.nBits == 0x207FFFFF
        assert header.nNonce == 42
        assert header.serialize() == raw
        assert block_hash(header).raw == sha256d(raw)

    def test_header_wrong_length(self) -> None:
        with pytest.raises(ConversionError):
            decode_block_header("00" * 79)
        with pytest.raises(ConversionError):
            decode_block_header("00" * 81)

    def test_header_json_form(self) -> None:
        raw = self.header_bytes(b"\x33" * 32)
        rendered = consensus_to_json(decode_block_header(raw.hex()))
        assert rendered["hash"] == sha256d(raw)[::-1].hex()
        assert rendered["previousblockhash"] == "00" * 32
        assert rendered["bits"] == "207fffff"
        assert rendered["time"] == 1_713_571_767

    def test_block_decode_and_merkle_root(self) -> None:
        coinbase = legacy_tx(prev=bytes(32), vout=0xFFFFFFFF)
        spend, _ = segwit_tx()
        txids = [sha256d(coinbase), sha256d(segwit_tx()[1])]
        root = sha256d(txids[0] + txids[1])
        raw = self.header_bytes(root) + b"\x02" + coinbase + spend
        block = decode_block(raw.hex())
        assert len(block.vtx) == 2
        assert block.vtx[0].is_coinbase()
        assert check_merkle_root(block)
        assert block_hash(block) == BlockHash(sha256d(self.header_bytes(root)))
        assert len(consensus_to_json(block)["tx"]) == 2

    def test_merkle_root_mismatch(self) -> None:
        coinbase = legacy_tx(prev=bytes(32), vout=0xFFFFFFFF)
        raw = self.header_bytes(b"\x00" * 32) + b"\x01" + coinbase
        assert not check_merkle_root(decode_block(raw.hex()))

    def test_block_trailing_bytes(self) -> None:
        coinbase = legacy_tx(prev=bytes(32), vout=0xFFFFFFFF)
        raw = self.header_bytes(b"\x00" * 32) + b"\x01" + coinbase + b"\x00"
        with pytest.raises(ConversionError):
            decode_block(raw.hex())


class TestProtocolVersion:
    def test_parse(self) -> None:
        assert ProtocolVersion.parse("V28") is ProtocolVersion.V28
        assert ProtocolVersion.parse(ProtocolVersion.V29) is ProtocolVersion.V29
        with pytest.raises(UnsupportedVersionError):
            ProtocolVersion.parse("auto")

    def test_shapes(self) -> None:
        assert ProtocolVersion.V28.shapes is RAW_SHAPES[ProtocolVersion.V28]
        assert ProtocolVersion.V28.shapes.blockchain_info is v28.GetBlockchainInfo
        assert ProtocolVersion.V29.shapes.block_header_verbose is v29.GetBlockHeaderVerbose

"""
Consensus decoding of headers, transactions and blocks.

The hex returned by ``getblockheader``, ``getblock`` (verbosity 0) and
``getrawtransaction`` is deserialized with python-bitcoinlib into
``CBlockHeader``, ``CBlock`` and ``CTransaction``. The helpers below wrap
their hashes in the typed identifiers and render them as JSON.
"""

from __future__ import annotations

from functools import singledispatch
from typing import Any, TypeVar

from bitcoin.core import CBlock, CBlockHeader, CTransaction, b2lx, b2x, x
from bitcoin.core.serialize import ImmutableSerializable, SerializationError

from simplerpc.types.amount import Amount
from simplerpc.types.hashes import BlockHash, Txid, Wtxid
from simplerpc.utils.exceptions import ConversionError, HexError

S = TypeVar("S", bound=ImmutableSerializable)


def decode_hex(value: str, *, model: str, field: str | None = None) -> bytes:
    """Decode a hex payload, raising HexError instead of ValueError."""
    if not isinstance(value, str):
        raise HexError(f"expected hex string, got {type(value).__name__}", model=model, field=field)
    try:
        return x(value)
    except ValueError as exc:
        raise HexError(f"invalid hex: {exc}", model=model, field=field) from exc


def _deserialize(cls: type[S], value: str, model: str) -> S:
    data = decode_hex(value, model=model)
    try:
        return cls.deserialize(data)
    except SerializationError as exc:
        raise ConversionError(str(exc), model=model) from exc


def decode_transaction(value: str) -> CTransaction:
    """Legacy or segwit transaction; all bytes must be consumed."""
    return _deserialize(CTransaction, value, "Transaction")


def decode_block_header(value: str) -> CBlockHeader:
    return _deserialize(CBlockHeader, value, "BlockHeader")


def decode_block(value: str) -> CBlock:
    return _deserialize(CBlock, value, "Block")


def txid(tx: CTransaction) -> Txid:
    """Hash of the serialization without witness data."""
    return Txid(tx.GetTxid())


def wtxid(tx: CTransaction) -> Wtxid:
    return Wtxid(tx.GetHash())


def block_hash(header: CBlockHeader) -> BlockHash:
    if isinstance(header, CBlock):
        header = header.get_header()
    return BlockHash(header.GetHash())


def check_merkle_root(block: CBlock) -> bool:
    """True when the header commits to the block's transactions."""
    if not block.vtx:
        return False
    return block.calc_merkle_root() == block.hashMerkleRoot


@singledispatch
def consensus_to_json(value: Any) -> Any:
    """JSON form of a decoded consensus object; other values pass through."""
    return value


@consensus_to_json.register
def _(tx: CTransaction) -> dict[str, Any]:
    witnesses = tx.wit.vtxinwit
    vin = []
    for i, txin in enumerate(tx.vin):
        entry = {
            "txid": b2lx(txin.prevout.hash),
            "vout": txin.prevout.n,
            "scriptSig": b2x(txin.scriptSig),
            "sequence": txin.nSequence,
        }
        if i < len(witnesses) and witnesses[i].scriptWitness.stack:
            entry["witness"] = [b2x(item) for item in witnesses[i].scriptWitness.stack]
        vin.append(entry)
    return {
        "txid": txid(tx).to_hex(),
        "wtxid": wtxid(tx).to_hex(),
        "version": tx.nVersion,
        "locktime": tx.nLockTime,
        "vin": vin,
        "vout": [
            {"value": Amount(txout.nValue).to_btc(), "scriptPubKey": b2x(txout.scriptPubKey)}
            for txout in tx.vout
        ],
    }


@consensus_to_json.register
def _(header: CBlockHeader) -> dict[str, Any]:
    return {
        "hash": block_hash(header).to_hex(),
        "version": header.nVersion,
        "previousblockhash": b2lx(header.hashPrevBlock),
        "merkleroot": b2lx(header.hashMerkleRoot),
        "time": header.nTime,
        "bits": f"{header.nBits:08x}",
        "nonce": header.nNonce,
    }


@consensus_to_json.register
def _(block: CBlock) -> dict[str, Any]:
    return {
        **consensus_to_json(block.get_header()),
        "tx": [consensus_to_json(tx) for tx in block.vtx],
    }

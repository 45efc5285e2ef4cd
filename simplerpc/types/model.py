"""
Version-agnostic results returned by the client.

Raw server shapes live in ``raw``, ``v28`` and ``v29``; each converts into
one of the types below through ``into_model()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from simplerpc.types.amount import Amount
from simplerpc.types.hashes import BlockHash, FilterHeader, TxMerkleNode, Txid, Wtxid


@dataclass(frozen=True)
class BlockHeaderVerbose:
    """Result of ``getblockheader <hash> true``."""
    hash: BlockHash
    confirmations: int
    height: int
    version: int
    merkle_root: TxMerkleNode
    time: int
    median_time: int
    nonce: int
    bits: int
    difficulty: float
    chain_work: int
    n_tx: int
    previous_block_hash: Optional[BlockHash] = None
    next_block_hash: Optional[BlockHash] = None
    # Only reported by v29+ servers.
    target: Optional[int] = None


@dataclass(frozen=True)
class BlockVerboseOne:
    """Result of ``getblock <hash> 1``."""
    hash: BlockHash
    confirmations: int
    size: int
    stripped_size: Optional[int]
    weight: int
    height: int
    version: int
    merkle_root: TxMerkleNode
    tx: list[Txid]
    time: int
    median_time: Optional[int]
    nonce: int
    bits: int
    difficulty: float
    chain_work: int
    n_tx: int
    previous_block_hash: Optional[BlockHash] = None
    next_block_hash: Optional[BlockHash] = None
    target: Optional[int] = None


@dataclass(frozen=True)
class BlockFilter:
    """BIP158 block filter and its header."""
    filter: bytes
    header: FilterHeader


@dataclass(frozen=True)
class BlockchainInfo:
    chain: str
    blocks: int
    headers: int
    best_block_hash: BlockHash
    difficulty: float
    time: int
    median_time: int
    verification_progress: float
    initial_block_download: bool
    chain_work: int
    size_on_disk: int
    pruned: bool
    prune_height: Optional[int] = None
    automatic_pruning: Optional[bool] = None
    prune_target_size: Optional[int] = None
    warnings: list[str] = field(default_factory=list)
    bits: Optional[int] = None
    target: Optional[int] = None


@dataclass(frozen=True)
class MempoolEntryFees:
    base: Amount
    modified: Amount
    ancestor: Amount
    descendant: Amount


@dataclass(frozen=True)
class MempoolEntry:
    vsize: int
    weight: int
    time: int
    height: int
    descendant_count: int
    descendant_size: int
    ancestor_count: int
    ancestor_size: int
    wtxid: Wtxid
    fees: MempoolEntryFees
    depends: list[Txid]
    spent_by: list[Txid]
    bip125_replaceable: Optional[bool] = None
    unbroadcast: Optional[bool] = None


@dataclass(frozen=True)
class DescriptorInfo:
    descriptor: str
    checksum: str
    is_range: bool
    is_solvable: bool
    has_private_keys: bool


class ImportDescriptorsRequest(BaseModel):
    """One entry of the ``importdescriptors`` request array."""

    model_config = ConfigDict(extra="forbid")

    desc: str
    active: Optional[bool] = None
    # Range of a ranged descriptor, as [begin, end].
    range: Optional[tuple[int, int]] = None
    next_index: Optional[int] = None
    # UNIX epoch time to start rescanning from, or "now".
    timestamp: int | Literal["now"]
    internal: Optional[bool] = None
    # Only allowed with internal=False; not for ranged descriptors.
    label: Optional[str] = None


class ImportDescriptorsError(BaseModel):
    code: int
    message: str


class ImportDescriptorsResponse(BaseModel):
    """Result entry of ``importdescriptors``."""

    success: bool
    warnings: Optional[list[str]] = None
    error: Optional[ImportDescriptorsError] = None

"""Raw response shapes of Bitcoin Core 28.x."""

from __future__ import annotations

from typing import Optional, Union

from pydantic import Field

from simplerpc.types.hashes import BlockHash, TxMerkleNode, Txid
from simplerpc.types.model import BlockchainInfo, BlockHeaderVerbose, BlockVerboseOne
from simplerpc.types.raw import (
    RawModel,
    parse_compact,
    parse_hash,
    parse_hex_int,
    parse_optional_hash,
    to_u32,
)


class GetBlockHeaderVerbose(RawModel):
    """Response to ``getblockheader <hash> true``."""

    hash: str
    confirmations: int
    height: int
    version: int
    version_hex: Optional[str] = Field(default=None, alias="versionHex")
    merkle_root: str = Field(alias="merkleroot")
    time: int
    median_time: int = Field(alias="mediantime")
    nonce: int
    bits: str
    difficulty: float
    chain_work: str = Field(alias="chainwork")
    n_tx: int = Field(alias="nTx")
    previous_block_hash: Optional[str] = Field(default=None, alias="previousblockhash")
    next_block_hash: Optional[str] = Field(default=None, alias="nextblockhash")

    def _target(self) -> Optional[int]:
        return None

    def into_model(self) -> BlockHeaderVerbose:
        model = type(self).__name__
        return BlockHeaderVerbose(
            hash=parse_hash(BlockHash, self.hash, model=model, field="hash"),
            confirmations=self.confirmations,
            height=to_u32(self.height, "height"),
            version=self.version,
            merkle_root=parse_hash(TxMerkleNode, self.merkle_root, model=model, field="merkleroot"),
            time=to_u32(self.time, "time"),
            median_time=to_u32(self.median_time, "mediantime"),
            nonce=to_u32(self.nonce, "nonce"),
            bits=parse_compact(self.bits, model=model),
            difficulty=self.difficulty,
            chain_work=parse_hex_int(self.chain_work, model=model, field="chainwork"),
            n_tx=to_u32(self.n_tx, "nTx"),
            previous_block_hash=parse_optional_hash(
                BlockHash, self.previous_block_hash, model=model, field="previousblockhash"
            ),
            next_block_hash=parse_optional_hash(BlockHash, self.next_block_hash, model=model, field="nextblockhash"),
            target=self._target(),
        )


class GetBlockVerboseOne(RawModel):
    """Response to ``getblock <hash> 1``."""

    hash: str
    confirmations: int
    size: int
    stripped_size: Optional[int] = Field(default=None, alias="strippedsize")
    weight: int
    height: int
    version: int
    version_hex: Optional[str] = Field(default=None, alias="versionHex")
    merkle_root: str = Field(alias="merkleroot")
    tx: list[str]
    time: int
    median_time: Optional[int] = Field(default=None, alias="mediantime")
    nonce: int
    bits: str
    difficulty: float
    chain_work: str = Field(alias="chainwork")
    n_tx: int = Field(alias="nTx")
    previous_block_hash: Optional[str] = Field(default=None, alias="previousblockhash")
    next_block_hash: Optional[str] = Field(default=None, alias="nextblockhash")

    def _target(self) -> Optional[int]:
        return None

    def into_model(self) -> BlockVerboseOne:
        model = type(self).__name__
        return BlockVerboseOne(
            hash=parse_hash(BlockHash, self.hash, model=model, field="hash"),
            confirmations=self.confirmations,
            size=self.size,
            stripped_size=self.stripped_size,
            weight=self.weight,
            height=to_u32(self.height, "height"),
            version=self.version,
            merkle_root=parse_hash(TxMerkleNode, self.merkle_root, model=model, field="merkleroot"),
            tx=[parse_hash(Txid, txid, model=model, field="tx") for txid in self.tx],
            time=to_u32(self.time, "time"),
            median_time=self.median_time,
            nonce=to_u32(self.nonce, "nonce"),
            bits=parse_compact(self.bits, model=model),
            difficulty=self.difficulty,
            chain_work=parse_hex_int(self.chain_work, model=model, field="chainwork"),
            n_tx=to_u32(self.n_tx, "nTx"),
            previous_block_hash=parse_optional_hash(
                BlockHash, self.previous_block_hash, model=model, field="previousblockhash"
            ),
            next_block_hash=parse_optional_hash(BlockHash, self.next_block_hash, model=model, field="nextblockhash"),
            target=self._target(),
        )


class GetBlockchainInfo(RawModel):
    """Response to ``getblockchaininfo``."""

    chain: str
    blocks: int
    headers: int
    best_block_hash: str = Field(alias="bestblockhash")
    difficulty: float
    time: int
    median_time: int = Field(alias="mediantime")
    verification_progress: float = Field(alias="verificationprogress")
    initial_block_download: bool = Field(alias="initialblockdownload")
    chain_work: str = Field(alias="chainwork")
    size_on_disk: int
    pruned: bool
    prune_height: Optional[int] = Field(default=None, alias="pruneheight")
    automatic_pruning: Optional[bool] = None
    prune_target_size: Optional[int] = None
    # Older servers send a single string.
    warnings: Union[list[str], str] = Field(default_factory=list)

    def _bits(self) -> Optional[int]:
        return None

    def _target(self) -> Optional[int]:
        return None

    def into_model(self) -> BlockchainInfo:
        model = type(self).__name__
        warnings = [self.warnings] if isinstance(self.warnings, str) else list(self.warnings)
        return BlockchainInfo(
            chain=self.chain,
            blocks=to_u32(self.blocks, "blocks"),
            headers=to_u32(self.headers, "headers"),
            best_block_hash=parse_hash(BlockHash, self.best_block_hash, model=model, field="bestblockhash"),
            difficulty=self.difficulty,
            time=self.time,
            median_time=self.median_time,
            verification_progress=self.verification_progress,
            initial_block_download=self.initial_block_download,
            chain_work=parse_hex_int(self.chain_work, model=model, field="chainwork"),
            size_on_disk=self.size_on_disk,
            pruned=self.pruned,
            prune_height=None if self.prune_height is None else to_u32(self.prune_height, "pruneheight"),
            automatic_pruning=self.automatic_pruning,
            prune_target_size=self.prune_target_size,
            warnings=[w for w in warnings if w],
            bits=self._bits(),
            target=self._target(),
        )

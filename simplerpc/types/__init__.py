"""Domain types: identifiers, amounts, consensus objects and RPC result models."""

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
from simplerpc.types.hashes import BlockHash, FilterHeader, Hash256, TxMerkleNode, Txid, Wtxid
from simplerpc.types.model import (
    BlockchainInfo,
    BlockFilter,
    BlockHeaderVerbose,
    BlockVerboseOne,
    DescriptorInfo,
    ImportDescriptorsError,
    ImportDescriptorsRequest,
    ImportDescriptorsResponse,
    MempoolEntry,
    MempoolEntryFees,
)
from simplerpc.types.versions import DEFAULT_PROTOCOL_VERSION, ProtocolVersion, RawShapes

__all__ = [
    "COIN",
    "MAX_MONEY",
    "Amount",
    "block_hash",
    "check_merkle_root",
    "consensus_to_json",
    "decode_block",
    "decode_block_header",
    "decode_transaction",
    "txid",
    "wtxid",
    "BlockHash",
    "FilterHeader",
    "Hash256",
    "TxMerkleNode",
    "Txid",
    "Wtxid",
    "BlockchainInfo",
    "BlockFilter",
    "BlockHeaderVerbose",
    "BlockVerboseOne",
    "DescriptorInfo",
    "ImportDescriptorsError",
    "ImportDescriptorsRequest",
    "ImportDescriptorsResponse",
    "MempoolEntry",
    "MempoolEntryFees",
    "DEFAULT_PROTOCOL_VERSION",
    "ProtocolVersion",
    "RawShapes",
]

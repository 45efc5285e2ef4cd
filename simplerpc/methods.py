"""
`bitcoind` RPC methods.

Each method fixes the RPC name, the positional params, the raw result type
and the conversion into a domain value, then hands off to ``_invoke``.
``Client`` runs that synchronously; on ``AsyncClient`` every method returns
an awaitable with the same result.
"""

from __future__ import annotations

from operator import methodcaller
from typing import Any, Callable, Sequence

from simplerpc.types.amount import Amount
from simplerpc.types.encoding import decode_block, decode_block_header, decode_transaction
from simplerpc.types.hashes import BlockHash, Txid
from simplerpc.types.model import ImportDescriptorsRequest, ImportDescriptorsResponse
from simplerpc.types.raw import (
    GetBlockFilter,
    GetDescriptorInfo,
    GetNetworkInfo,
    MempoolEntryRaw,
    mempool_into_model,
    from_i32,
    parse_hash,
    to_u32,
)
from simplerpc.types.versions import ProtocolVersion, RawShapes

_into_model = methodcaller("into_model")


def _txids(raw: list[str]) -> list[Txid]:
    return [parse_hash(Txid, txid, model="GetRawMempool", field="txid") for txid in raw]


def _block_count(raw: int) -> int:
    return to_u32(from_i32(raw, field="blocks"), field="blocks")


def _network_version(raw: GetNetworkInfo) -> int:
    return raw.version


def _protocol_version(raw: GetNetworkInfo) -> ProtocolVersion:
    return ProtocolVersion.from_server_version(raw.version)


class RpcMethods:
    version: ProtocolVersion

    def _invoke(
        self,
        method: str,
        args: Sequence[Any],
        raw_type: Any,
        convert: Callable[[Any], Any] | None = None,
    ) -> Any:
        raise NotImplementedError

    @property
    def shapes(self) -> RawShapes:
        """Raw decoders for this client's protocol version."""
        return self.version.shapes

    # == Blockchain ==

    def get_block_count(self):
        """Height of the most-work fully-validated chain."""
        return self._invoke("getblockcount", [], int, _block_count)

    def get_best_block_hash(self):
        """Hash of the best (tip) block."""
        return self._invoke("getbestblockhash", [], str, BlockHash.from_hex)

    def get_block_hash(self, height: int):
        """Hash of the block at ``height`` in the best chain."""
        return self._invoke("getblockhash", [height], str, BlockHash.from_hex)

    def get_block_header(self, block_hash: BlockHash):
        """Consensus-decoded 80-byte header."""
        return self._invoke("getblockheader", [block_hash, False], str, decode_block_header)

    def get_block_header_verbose(self, block_hash: BlockHash):
        return self._invoke("getblockheader", [block_hash], self.shapes.block_header_verbose, _into_model)

    def get_block_filter(self, block_hash: BlockHash, filter_type: str = "basic"):
        """BIP158 filter of a block; requires ``-blockfilterindex``."""
        return self._invoke("getblockfilter", [block_hash, filter_type], GetBlockFilter, _into_model)

    def get_block(self, block_hash: BlockHash):
        """Full block, consensus-decoded from verbosity 0."""
        return self._invoke("getblock", [block_hash, 0], str, decode_block)

    def get_block_verbose(self, block_hash: BlockHash):
        """Block summary with txids (verbosity 1)."""
        return self._invoke("getblock", [block_hash, 1], self.shapes.block_verbose_one, _into_model)

    def get_blockchain_info(self):
        return self._invoke("getblockchaininfo", [], self.shapes.blockchain_info, _into_model)

    def get_raw_mempool(self):
        """Txids currently in the mempool."""
        return self._invoke("getrawmempool", [], list[str], _txids)

    def get_raw_mempool_verbose(self):
        """Mempool entries keyed by txid."""
        return self._invoke("getrawmempool", [True], dict[str, MempoolEntryRaw], mempool_into_model)

    def get_raw_transaction(self, txid: Txid, block_hash: BlockHash | None = None):
        """
        Consensus-decoded transaction.

        Without ``-txindex`` only mempool transactions are found unless
        ``block_hash`` names the containing block.
        """
        args: list[Any] = [txid] if block_hash is None else [txid, 0, block_hash]
        return self._invoke("getrawtransaction", args, str, decode_transaction)

    # == Wallet ==

    def send_to_address(self, address: str, amount: Amount):
        """
        Send ``amount`` to ``address`` from the loaded wallet.

        Not idempotent: a repeated call sends again.
        """
        if not isinstance(amount, Amount):
            raise TypeError(f"amount must be an Amount, got {type(amount).__name__}")
        return self._invoke("sendtoaddress", [address, amount.to_btc()], str, Txid.from_hex)

    def import_descriptors(self, requests: Sequence[ImportDescriptorsRequest]):
        return self._invoke("importdescriptors", [list(requests)], list[ImportDescriptorsResponse])

    def get_descriptor_info(self, descriptor: str):
        return self._invoke("getdescriptorinfo", [descriptor], GetDescriptorInfo, _into_model)

    # == Network ==

    def get_server_version(self):
        """Numeric server version, e.g. ``290000`` for 29.0."""
        return self._invoke("getnetworkinfo", [], GetNetworkInfo, _network_version)

    def detect_protocol_version(self):
        """Protocol version whose raw shapes match the connected server."""
        return self._invoke("getnetworkinfo", [], GetNetworkInfo, _protocol_version)

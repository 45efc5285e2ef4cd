"""CLI commands for simplerpc.

Top-level commands mirror the bitcoind RPC names (getblockcount, getblock, ...)
and print their typed results as JSON; the config group manages the settings file.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from simplerpc import __version__
from simplerpc.cli.command_groups.config_commands import register_config_commands
from simplerpc.cli.shared.logging_utils import configure_cli_logging
from simplerpc.cli.shared.value_utils import parse_value, print_json
from simplerpc.client import Client
from simplerpc.config.loader import load_config
from simplerpc.config.schema import RpcConfig
from simplerpc.types.hashes import BlockHash, Txid
from simplerpc.utils.exceptions import ConfigError, RpcClientError, sanitize_error_message

app = typer.Typer(
    name="simplerpc",
    help="simplerpc - typed JSON-RPC client for Bitcoin Core",
    no_args_is_help=True,
)

console = Console()


@dataclass
class CliState:
    config_path: Optional[Path] = None
    overrides: Optional[dict[str, Any]] = None


def version_callback(value: bool):
    if value:
        console.print(f"simplerpc v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    url: Optional[str] = typer.Option(None, "--url", help="RPC endpoint, e.g. http://127.0.0.1:8332"),
    cookie: Optional[Path] = typer.Option(None, "--cookie", help="Path to the node's .cookie file"),
    user: Optional[str] = typer.Option(None, "--user", help="rpcuser"),
    password: Optional[str] = typer.Option(None, "--password", help="rpcpassword"),
    config: Optional[Path] = typer.Option(None, "--config", help="Config file (default ~/.simplerpc/config.json)"),
    protocol_version: Optional[str] = typer.Option(
        None, "--protocol-version", help="Server result shapes: v28, v29 or auto"
    ),
    timeout: Optional[float] = typer.Option(None, "--timeout", help="Request timeout in seconds"),
    verbose: bool = typer.Option(False, "--verbose", help="Log requests and responses to stderr"),
    log_file: Optional[Path] = typer.Option(None, "--log-file", help="Also write logs to this rotating file"),
    version: bool = typer.Option(
        None, "--version", "-V", callback=version_callback, is_eager=True
    ),
):
    """simplerpc - typed JSON-RPC client for Bitcoin Core."""
    configure_cli_logging(verbose=verbose, log_file=log_file)

    overrides: dict[str, Any] = {}
    if url is not None:
        overrides["url"] = url
    if timeout is not None:
        overrides["timeout"] = timeout
    if protocol_version is not None:
        overrides["protocol_version"] = protocol_version.lower()
    auth: dict[str, Any] = {}
    if cookie is not None:
        auth["cookie_file"] = str(cookie)
    if user is not None:
        auth.update(user=user, password=password, cookie_file=auth.get("cookie_file", ""))
    elif password is not None:
        auth["password"] = password
    if auth:
        overrides["auth"] = auth
    ctx.obj = CliState(config_path=config, overrides=overrides)


def resolve_config(state: CliState) -> RpcConfig:
    """Settings file and environment, with command-line options on top."""
    cfg = load_config(state.config_path)
    if not state.overrides:
        return cfg
    # Assignment validates each field without re-reading the environment.
    cfg = cfg.model_copy(deep=True)
    try:
        for key, value in state.overrides.items():
            if key == "auth":
                value = {**cfg.auth.model_dump(), **value}
            setattr(cfg, key, value)
    except ValidationError as e:
        raise ConfigError(f"Invalid command-line options: {e}") from e
    return cfg


def create_client(config: RpcConfig) -> Client:
    return Client.from_config(config)


def _run(ctx: typer.Context, call: Callable[[Client], Any]) -> None:
    state: CliState = ctx.obj or CliState()
    try:
        with create_client(resolve_config(state)) as client:
            result = call(client)
    except RpcClientError as e:
        console.print(f"[red]{escape(sanitize_error_message(str(e)))}[/red]")
        raise typer.Exit(1)
    print_json(console, result)


# ============================================================================
# Blockchain
# ============================================================================


@app.command("getblockcount")
def getblockcount(ctx: typer.Context):
    """Height of the best chain."""
    _run(ctx, lambda client: client.get_block_count())


@app.command("getbestblockhash")
def getbestblockhash(ctx: typer.Context):
    """Hash of the chain tip."""
    _run(ctx, lambda client: client.get_best_block_hash())


@app.command("getblockhash")
def getblockhash(
    ctx: typer.Context,
    height: int = typer.Argument(..., min=0, help="Block height"),
):
    """Hash of the block at HEIGHT."""
    _run(ctx, lambda client: client.get_block_hash(height))


@app.command("getblockheader")
def getblockheader(
    ctx: typer.Context,
    block_hash: str = typer.Argument(..., metavar="HASH", help="Block hash (hex)"),
    raw: bool = typer.Option(False, "--raw", help="Decode the serialized 80-byte header instead"),
):
    """Header of block HASH."""
    def invoke(client: Client) -> Any:
        parsed = BlockHash.from_hex(block_hash)
        return client.get_block_header(parsed) if raw else client.get_block_header_verbose(parsed)

    _run(ctx, invoke)


@app.command("getblock")
def getblock(
    ctx: typer.Context,
    block_hash: str = typer.Argument(..., metavar="HASH", help="Block hash (hex)"),
    raw: bool = typer.Option(False, "--raw", help="Decode the full serialized block instead"),
):
    """Block HASH with its txids."""
    def invoke(client: Client) -> Any:
        parsed = BlockHash.from_hex(block_hash)
        return client.get_block(parsed) if raw else client.get_block_verbose(parsed)

    _run(ctx, invoke)


@app.command("getblockchaininfo")
def getblockchaininfo(ctx: typer.Context):
    """Chain state summary."""
    _run(ctx, lambda client: client.get_blockchain_info())


@app.command("getrawmempool")
def getrawmempool(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", help="Full entries keyed by txid"),
):
    """Transactions in the mempool."""
    _run(ctx, lambda client: client.get_raw_mempool_verbose() if verbose else client.get_raw_mempool())


@app.command("getrawtransaction")
def getrawtransaction(
    ctx: typer.Context,
    txid: str = typer.Argument(..., help="Transaction id (hex)"),
    block_hash: Optional[str] = typer.Option(None, "--block-hash", help="Block containing the transaction"),
):
    """Decoded transaction TXID."""
    def invoke(client: Client) -> Any:
        block = BlockHash.from_hex(block_hash) if block_hash else None
        return client.get_raw_transaction(Txid.from_hex(txid), block)

    _run(ctx, invoke)


# ============================================================================
# Wallet / utility
# ============================================================================


@app.command("getdescriptorinfo")
def getdescriptorinfo(
    ctx: typer.Context,
    descriptor: str = typer.Argument(..., metavar="DESC", help="Output descriptor"),
):
    """Analyse an output descriptor."""
    _run(ctx, lambda client: client.get_descriptor_info(descriptor))


@app.command("call")
def call(
    ctx: typer.Context,
    method: str = typer.Argument(..., help="RPC method name"),
    params: Optional[list[str]] = typer.Argument(None, help="Positional params (JSON, or plain strings)"),
):
    """Call any RPC METHOD and print the raw result."""
    args = [parse_value(p) for p in params or []]
    _run(ctx, lambda client: client.call(method, args))


register_config_commands(app, console)


if __name__ == "__main__":
    app()

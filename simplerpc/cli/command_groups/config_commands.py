"""Config command group."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from simplerpc.config.loader import get_config_path, load_config, save_config
from simplerpc.config.schema import RpcAuthConfig, RpcConfig
from simplerpc.utils.exceptions import ConfigError


def register_config_commands(app: typer.Typer, console: Console) -> None:
    """Register the config command group (show/init)."""
    config_app = typer.Typer(help="Settings file helpers")
    app.add_typer(config_app, name="config")

    @config_app.command("show")
    def config_show(
        config: Optional[Path] = typer.Option(None, "--config", help="Config file"),
    ) -> None:
        """Show effective settings (file + environment), password masked."""
        path = config or get_config_path()
        try:
            cfg = load_config(path)
        except ConfigError as e:
            console.print(f"[red]{e.message}[/red]")
            raise typer.Exit(1)
        table = Table(title=f"simplerpc config ({path})")
        table.add_column("Key", style="cyan")
        table.add_column("Value")
        table.add_row("url", cfg.url)
        table.add_row("timeout", str(cfg.timeout))
        table.add_row("protocolVersion", cfg.protocol_version)
        table.add_row("auth.cookieFile", cfg.auth.cookie_file or "-")
        table.add_row("auth.user", cfg.auth.user or "-")
        table.add_row("auth.password", "***" if cfg.auth.password else "-")
        console.print(table)

    @config_app.command("init")
    def config_init(
        config: Optional[Path] = typer.Option(None, "--config", help="Config file to write"),
        url: str = typer.Option("http://127.0.0.1:8332", "--url", help="RPC endpoint"),
        cookie: Optional[Path] = typer.Option(None, "--cookie", help="Path to the node's .cookie file"),
        force: bool = typer.Option(False, "--force", help="Overwrite an existing file"),
    ) -> None:
        """Write a settings file."""
        path = config or get_config_path()
        if path.exists() and not force:
            console.print(f"[yellow]Config already exists:[/yellow] {path} (use --force)")
            raise typer.Exit(1)
        cfg = RpcConfig.model_validate(
            {"url": url, "auth": RpcAuthConfig(cookie_file=str(cookie) if cookie else "").model_dump()}
        )
        save_config(cfg, path)
        console.print(f"[green]✓[/green] Wrote {path}")

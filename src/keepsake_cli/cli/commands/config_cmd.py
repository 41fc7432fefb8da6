"""Configuration commands."""

from __future__ import annotations

from urllib.parse import urlparse

import typer

from keepsake_cli.cli.helpers import console, load_settings, print_json, run_or_exit
from keepsake_cli.config import ConfigurationError, KeepsakeConfig

app = typer.Typer(help="Inspect and change keepsake settings")


@app.command("show")
def show_command(as_json: bool = typer.Option(False, "--json", help="Render settings as JSON")) -> None:
    """Show the settings this invocation would use. The secret key is never printed."""

    def _run() -> None:
        settings = load_settings()
        payload = {
            "rpc_url": settings.rpc_url,
            "module_name": settings.module_name,
            "ledger_path": str(settings.ledger_path),
            "ingredients_path": str(settings.ingredients_path),
            "build_dir": str(settings.build_dir),
            "gas_budget": settings.gas_budget,
            "consistency_wait": settings.consistency_wait,
            "key_configured": bool(settings.secret_key),
        }
        if as_json:
            print_json(payload)
            return

        for key, value in payload.items():
            console.print(f"- {key}: {value}")

    run_or_exit(_run)


@app.command("set-rpc")
def set_rpc_command(url: str = typer.Argument(..., help="JSON-RPC endpoint of a Sui full node")) -> None:
    """Store the RPC endpoint in ~/.keepsake/config.toml."""

    def _run() -> None:
        parsed = urlparse(url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigurationError(f"Invalid RPC URL '{url}'")
        KeepsakeConfig().set_rpc_url(url)
        console.print(f"✅ RPC URL set to: {url}")

    run_or_exit(_run)

"""Shared plumbing for keepsake commands."""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, TypeVar

import httpx
import typer
from rich.console import Console
from rich.logging import RichHandler

from keepsake_cli.config import Settings
from keepsake_cli.context import ChainContext, build_context

console = Console()

T = TypeVar("T")


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )
    # Request logging from httpx is noisy and repeats the rpc debug lines.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def load_settings() -> Settings:
    return Settings.from_env()


def chain_context() -> ChainContext:
    """Context for the current invocation; use as a context manager."""
    return build_context(load_settings())


def print_json(payload: Any) -> None:
    typer.echo(json.dumps(payload, indent=2, sort_keys=True, default=str))


def run_or_exit(fn: Callable[[], T]) -> T:
    """Run a command body, turning expected failures into exit status 1."""
    try:
        return fn()
    except typer.Exit:
        raise
    except (RuntimeError, ValueError, httpx.HTTPError) as exc:
        logging.getLogger("keepsake_cli").debug("Command failed", exc_info=True)
        typer.secho(str(exc), fg=typer.colors.RED, err=True)
        raise typer.Exit(1) from exc

"""Run an action by name with positional arguments."""

from __future__ import annotations

from typing import Any, List, Optional

import typer
from pydantic import BaseModel

from keepsake_cli.actions import ACTIONS, DEFAULT_ACTION, run_action
from keepsake_cli.cli.helpers import console, load_settings, print_json, run_or_exit
from keepsake_cli.keys import Keypair


def _render(result: Any) -> Any:
    if isinstance(result, Keypair):
        return {"secret": result.secret_hex, "address": result.address}
    if isinstance(result, BaseModel):
        return result.model_dump()
    if isinstance(result, list):
        return [_render(item) for item in result]
    return result


def run_command(
    action: Optional[str] = typer.Argument(
        None,
        help=f"One of: {', '.join(ACTIONS)} (default: {DEFAULT_ACTION})",
        show_default=False,
    ),
    args: Optional[List[str]] = typer.Argument(None, help="Positional arguments for the action"),
) -> None:
    """Run one action by name with positional arguments."""

    def _run() -> None:
        result = run_action(action, list(args or []), load_settings())
        if result is None:
            return
        rendered = _render(result)
        if isinstance(rendered, (dict, list)):
            print_json(rendered)
        else:
            console.print(str(rendered))

    run_or_exit(_run)

"""Ingredient minting commands."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from keepsake_cli.actions import ingredients as ingredient_actions
from keepsake_cli.cli.helpers import chain_context, console, load_settings, print_json, run_or_exit
from keepsake_cli.ingredients import load_ingredients, sort_ingredients

app = typer.Typer(help="Mint ingredients in dependency order")


@app.command("order")
def order_command(
    path: Optional[Path] = typer.Option(None, "--file", help="Ingredient JSON file"),
    as_json: bool = typer.Option(False, "--json", help="Render the order as JSON"),
) -> None:
    """Show the order ingredients would be minted in."""

    def _run() -> None:
        ordered = sort_ingredients(load_ingredients(path or load_settings().ingredients_path))
        if as_json:
            print_json({"order": [item.model_dump() for item in ordered]})
            return

        for position, item in enumerate(ordered, start=1):
            recipe = f" = {' + '.join(item.mix)}" if item.mix else ""
            status = item.address or "pending"
            console.print(f"{position:>3}. {item.name}{recipe}  [dim]{status}[/dim]")

    run_or_exit(_run)


@app.command("mint")
def mint_command(
    path: Optional[Path] = typer.Option(None, "--file", help="Ingredient JSON file"),
    module: str = typer.Option(ingredient_actions.INGREDIENT_MODULE, "--module", help="Move module with mint and mix"),
) -> None:
    """Mint every ingredient that has no address yet."""

    def _run() -> None:
        with chain_context() as ctx:
            minted = ingredient_actions.mint_ingredients(
                ctx,
                str(path) if path else None,
                module,
                on_minted=lambda item: console.print(f"✅ {item.name}: {item.address}"),
            )
        if not minted:
            console.print("Nothing to mint")
            return
        console.print(f"Minted {len(minted)} ingredients")

    run_or_exit(_run)

"""Marketplace commands."""

from __future__ import annotations

import typer
from rich.table import Table

from keepsake_cli.actions import market as market_actions
from keepsake_cli.cli.helpers import chain_context, console, print_json, run_or_exit

app = typer.Typer(help="Mint, list, buy and auction NFTs")


@app.command("create")
def create_command(
    module: str = typer.Argument(market_actions.MARKET_MODULE, help="Marketplace module to instantiate"),
) -> None:
    """Create a marketplace and record it in the ledger."""

    def _run() -> None:
        with chain_context() as ctx:
            market = market_actions.create(ctx, module)
        console.print(f"Market created: {market}")

    run_or_exit(_run)


@app.command("mint")
def mint_command(recipient: str = typer.Argument(..., help="Address receiving the NFT")) -> None:
    """Mint an NFT and send it to RECIPIENT."""

    def _run() -> None:
        with chain_context() as ctx:
            nft = market_actions.mint(ctx, recipient)
        console.print(f"new nft {nft}")

    run_or_exit(_run)


@app.command("list")
def list_command(
    price: int = typer.Argument(market_actions.DEFAULT_LIST_PRICE, min=0, help="Asking price in MIST"),
) -> None:
    """Mint an NFT and list it on the market."""

    def _run() -> None:
        with chain_context() as ctx:
            listing = market_actions.list_nft(ctx, price)
        console.print(f"Listing ID: {listing}")

    run_or_exit(_run)


@app.command("buy")
def buy_command(listing_id: str = typer.Argument(..., help="Listing to buy")) -> None:
    """Buy a listing."""

    def _run() -> None:
        with chain_context() as ctx:
            digest = market_actions.buy(ctx, listing_id)
        console.print(f"Bought {listing_id} ({digest})")

    run_or_exit(_run)


@app.command("auction")
def auction_command(bids: int = typer.Option(2, "--bids", min=1, max=100, help="Number of increasing bids")) -> None:
    """Mint an NFT, auction it, bid and settle."""

    def _run() -> None:
        with chain_context() as ctx:
            auction_id = market_actions.auction(ctx, bids)
        console.print(f"Auction completed: {auction_id}")

    run_or_exit(_run)


@app.command("objects")
def objects_command(as_json: bool = typer.Option(False, "--json", help="Render objects as JSON")) -> None:
    """List objects owned by the active address."""

    def _run() -> None:
        with chain_context() as ctx:
            objects = market_actions.owned_objects(ctx)
        if as_json:
            print_json({"objects": objects})
            return

        table = Table(title="Owned objects")
        table.add_column("Object ID", style="cyan", no_wrap=True)
        table.add_column("Type")
        for item in objects:
            table.add_row(item["objectId"], item.get("type") or "-")
        console.print(table)

    run_or_exit(_run)


@app.command("coins")
def coins_command(as_json: bool = typer.Option(False, "--json", help="Render coins as JSON")) -> None:
    """List SUI coins of the active address."""

    def _run() -> None:
        with chain_context() as ctx:
            coins = market_actions.coins(ctx)
        if as_json:
            print_json({"coins": [coin.model_dump() for coin in coins]})
            return

        if not coins:
            console.print("No coins found")
            return

        table = Table(title="SUI coins")
        table.add_column("Coin", style="cyan", no_wrap=True)
        table.add_column("Balance", justify="right")
        for coin in coins:
            table.add_row(coin.object_id, str(coin.balance))
        console.print(table)

    run_or_exit(_run)

"""
Keepsake CLI - publish Move packages and drive an NFT marketplace on Sui.

Usage:
    keepsake deploy deploy
    keepsake market list 1200
    keepsake ingredients mint
    keepsake run <action> [args...]
"""

import typer

from keepsake_cli.cli.commands import config_cmd, deploy, ingredients, market, run_command
from keepsake_cli.cli.helpers import configure_logging

app = typer.Typer(
    name="keepsake",
    help="Publish packages, mint and trade NFTs on a Sui full node",
    add_completion=False,
    no_args_is_help=True,
)
app.add_typer(deploy.app, name="deploy")
app.add_typer(market.app, name="market")
app.add_typer(ingredients.app, name="ingredients")
app.add_typer(config_cmd.app, name="config")
app.command("run")(run_command)


@app.callback()
def callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log RPC traffic and progress"),
) -> None:
    """Configure logging before any command runs."""
    configure_logging(verbose)


def main():
    app()


if __name__ == "__main__":
    main()

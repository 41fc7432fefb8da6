"""Package publishing and object transfer commands."""

from __future__ import annotations

from typing import Optional

import typer

from keepsake_cli.actions import deploy as deploy_actions
from keepsake_cli.cli.helpers import chain_context, console, run_or_exit

app = typer.Typer(help="Publish packages and move objects")


@app.command("deploy")
def deploy_command(
    package_path: Optional[str] = typer.Option(
        None,
        "--build",
        help="Compile the Move package at this path before publishing",
    ),
) -> None:
    """Publish every module of the configured package."""

    def _run() -> None:
        with chain_context() as ctx:
            console.print(f"using address: {ctx.address}")
            package_object_id = deploy_actions.deploy(ctx, package_path)
        console.print(f"Successfully deployed at: {package_object_id}")

    run_or_exit(_run)


@app.command("contract")
def contract_command(module: str = typer.Argument(..., help="Module name inside the configured package")) -> None:
    """Publish a single module on its own."""

    def _run() -> None:
        with chain_context() as ctx:
            package_object_id = deploy_actions.contract(ctx, module)
        console.print(f"Successfully deployed at: {package_object_id}")

    run_or_exit(_run)


@app.command("transfer")
def transfer_command(
    object_id: str = typer.Argument(..., help="Object to transfer"),
    recipient: str = typer.Argument(deploy_actions.DEFAULT_RECIPIENT, help="Receiving address"),
) -> None:
    """Transfer an owned object to another address."""

    def _run() -> None:
        with chain_context() as ctx:
            digest = deploy_actions.transfer(ctx, object_id, recipient)
        console.print(f"Transferred {object_id} to {recipient} ({digest})")

    run_or_exit(_run)


@app.command("keygen")
def keygen_command() -> None:
    """Generate a new key. Put it in your .env file as KEEPSAKE_PKEY."""
    keypair = deploy_actions.keygen()
    console.print(f"New key: {keypair.secret_hex}")
    console.print(f"using address: {keypair.address}")

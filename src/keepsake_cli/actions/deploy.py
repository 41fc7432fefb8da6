"""Publishing packages and moving objects around."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from keepsake_cli.build import FRAMEWORK_DEPENDENCIES, build_package, read_bytecode_module, read_bytecode_modules
from keepsake_cli.context import ChainContext
from keepsake_cli.keys import Keypair
from keepsake_cli.rpc.effects import CreatedObject, TransactionFailedError, created_object_ids, split_created

logger = logging.getLogger(__name__)

DEFAULT_RECIPIENT = "0xb758af2061e7c0e55df23de52c51968f6efbc959"
PUBLISH_WAIT = 5.0


def _publish(
    ctx: ChainContext,
    modules: list[str],
    dependencies: list[str],
) -> tuple[str, list[CreatedObject]]:
    response = ctx.signer.publish(modules, gas_budget=ctx.settings.gas_budget, dependencies=dependencies)
    created = created_object_ids(response)
    ctx.wait(PUBLISH_WAIT)

    package_object_id, created_objects = split_created(ctx.client.multi_get_objects(created))
    if package_object_id is None:
        raise TransactionFailedError("Publish succeeded but no package object was created", digest=response.get("digest"))
    return package_object_id, created_objects


def deploy(ctx: ChainContext, package_path: Optional[str] = None) -> str:
    """Publish every module of the configured package and record it in the ledger.

    With *package_path* the package is compiled first and publishes with the
    dependency ids the build reports; otherwise bytecode is read from the
    build directory and linked against the Move stdlib and Sui framework.
    """
    module_name = ctx.settings.require_module_name()
    if package_path:
        modules, dependencies = build_package(Path(package_path))
    else:
        modules, dependencies = read_bytecode_modules(ctx.settings.build_dir, module_name), list(FRAMEWORK_DEPENDENCIES)

    logger.info("Publishing %d modules of %s", len(modules), module_name)
    package_object_id, created = _publish(ctx, modules, dependencies)
    ctx.ledger.record_package(module_name, package_object_id, created)
    return package_object_id


def contract(ctx: ChainContext, module: str) -> str:
    """Publish a single module of the configured package on its own."""
    module_name = ctx.settings.require_module_name()
    compiled = read_bytecode_module(ctx.settings.build_dir, module_name, module)

    package_object_id, created = _publish(ctx, [compiled], list(FRAMEWORK_DEPENDENCIES))
    ctx.ledger.record_individual(module, package_object_id, created)
    return package_object_id


def transfer(ctx: ChainContext, object_id: str, recipient: str = DEFAULT_RECIPIENT) -> str:
    """Send an owned object to *recipient*; returns the transaction digest."""
    response = ctx.signer.transfer_object(
        object_id,
        recipient,
        gas_budget=ctx.settings.gas_budget,
    )
    return str(response.get("digest"))


def keygen() -> Keypair:
    return Keypair.generate()

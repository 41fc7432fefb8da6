"""Minting ingredient objects in dependency order."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from keepsake_cli.context import ChainContext
from keepsake_cli.ingredients import Ingredient, find_ingredient, load_ingredients, save_ingredients, sort_ingredients
from keepsake_cli.rpc.effects import require_created

logger = logging.getLogger(__name__)

INGREDIENT_MODULE = "ingredients"
BASE_FUNCTION = "mint"
MIX_FUNCTION = "mix"


def mint_ingredients(
    ctx: ChainContext,
    path: Optional[str] = None,
    module: str = INGREDIENT_MODULE,
    *,
    on_minted: Optional[Callable[[Ingredient], None]] = None,
) -> list[Ingredient]:
    """Mint every ingredient that has no address yet.

    The file is rewritten after each creation so an interrupted run picks up
    where it stopped. Returns the ingredients minted by this run.
    """
    ingredients_path = Path(path) if path else ctx.settings.ingredients_path
    ingredients = load_ingredients(ingredients_path)
    ordered = sort_ingredients(ingredients)
    package_object_id = ctx.ledger.package_id(ctx.settings.require_module_name())

    minted: list[Ingredient] = []
    for ingredient in ordered:
        if ingredient.is_minted:
            logger.debug("Skipping %s, already at %s", ingredient.name, ingredient.address)
            continue

        if ingredient.is_base:
            function, arguments = BASE_FUNCTION, [ingredient.name]
        else:
            components = [find_ingredient(ingredients, name) for name in ingredient.mix]
            function = MIX_FUNCTION
            arguments = [ingredient.name, *(component.address for component in components)]

        response = ctx.signer.execute_move_call(
            package_object_id=package_object_id,
            module=module,
            function=function,
            arguments=arguments,
            gas_budget=ctx.settings.gas_budget,
        )
        ingredient.address = require_created(response)
        save_ingredients(ingredients_path, ingredients)
        minted.append(ingredient)
        logger.info("Minted %s at %s", ingredient.name, ingredient.address)
        if on_minted is not None:
            on_minted(ingredient)

        ctx.wait(2.0)

    return minted

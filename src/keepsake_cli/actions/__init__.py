"""Named actions a single invocation can run.

``ACTIONS`` is the closed set of action names. Anything else is rejected
by ``resolve_action`` before a connection to the node is opened.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Optional

from keepsake_cli.config import ConfigurationError, Settings
from keepsake_cli.context import build_context
from keepsake_cli.rpc.client import SuiRpcClient

from . import deploy, ingredients, market


class UnknownActionError(ConfigurationError):
    """Raised for an action name outside ``ACTIONS``."""


@dataclass(frozen=True)
class Action:
    name: str
    func: Callable[..., Any]
    help: str
    needs_chain: bool = True


ACTIONS: dict[str, Action] = {
    action.name: action
    for action in (
        Action("deploy", deploy.deploy, "Publish the configured package"),
        Action("contract", deploy.contract, "Publish one module of the configured package"),
        Action("transfer", deploy.transfer, "Transfer an owned object"),
        Action("keygen", deploy.keygen, "Generate a new secret key", needs_chain=False),
        Action("create", market.create, "Create a marketplace"),
        Action("mint", market.mint, "Mint an NFT and send it to a recipient"),
        Action("list", market.list_nft, "Mint an NFT and list it"),
        Action("buy", market.buy, "Buy a listing"),
        Action("auction", market.auction, "Run an auction end to end"),
        Action("objects", market.owned_objects, "Objects owned by the active address"),
        Action("coins", market.coins, "SUI coins of the active address"),
        Action("ingredients", ingredients.mint_ingredients, "Mint ingredients in dependency order"),
    )
}

DEFAULT_ACTION = "deploy"


def resolve_action(name: Optional[str]) -> Action:
    action = ACTIONS.get((name or DEFAULT_ACTION).strip().lower())
    if action is None:
        raise UnknownActionError(f"Unknown action '{name}'. Expected one of: {', '.join(sorted(ACTIONS))}")
    return action


def run_action(
    name: Optional[str],
    args: list[str],
    settings: Settings,
    client: Optional[SuiRpcClient] = None,
) -> Any:
    """Resolve *name* and run it once with positional string *args*."""
    action = resolve_action(name)

    if not action.needs_chain:
        _check_arguments(action, args)
        return action.func(*args)

    _check_arguments(action, [None, *args])
    with build_context(settings, client) as ctx:
        return action.func(ctx, *args)


def _check_arguments(action: Action, args: list[Any]) -> None:
    try:
        inspect.signature(action.func).bind(*args)
    except TypeError as exc:
        raise ConfigurationError(f"Invalid arguments for '{action.name}': {exc}") from exc


__all__ = [
    "ACTIONS",
    "Action",
    "DEFAULT_ACTION",
    "UnknownActionError",
    "resolve_action",
    "run_action",
]

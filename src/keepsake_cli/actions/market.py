"""Marketplace actions against a deployed keepsake package."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Optional

from keepsake_cli.coins import Coin, get_all_coins, get_user_coins
from keepsake_cli.context import ChainContext
from keepsake_cli.ledger import LedgerError
from keepsake_cli.rpc.client import SUI_COIN_TYPE
from keepsake_cli.rpc.effects import get_item_by_type, require_created

logger = logging.getLogger(__name__)

MARKET_MODULE = "marketplace_nofee"
NFT_MODULE = "meta_nft"
UTILS_MODULE = "dev_utils"
ISSUER_CAP_TYPE = "MetaNFTIssuerCap"
BAG_TYPE = "::bag::Bag"
MARKET_TYPE = "::Marketplace"
AUCTION_TYPE = "::Auction"
MARKET_FEE_BPS = 250

NFT_NAME = "Keepsake NFT"
NFT_DESCRIPTION = "An Example Keepsake NFT"
NFT_URL = "https://ipfs.io/ipfs/QmZPWWy5Si54R3d26toaqRiqvCH7HkGdXkxwUgCm2oKKM2?filename=img-sq-01.png"

DEFAULT_LIST_PRICE = 1200
BUY_PAYMENT = 10_000_000
AUCTION_WINDOW_MS = 6000


@dataclass(frozen=True)
class MarketDeployment:
    """Ids recorded in the ledger for the configured module."""

    module_name: str
    package_object_id: str
    issuer_cap: Optional[str]
    market: Optional[str]
    bag: Optional[str]

    @property
    def nft_type(self) -> str:
        return f"{self.package_object_id}::{NFT_MODULE}::MetaNFT"

    @property
    def type_arguments(self) -> list[str]:
        return [self.nft_type, SUI_COIN_TYPE]

    def require(self, attr: str) -> str:
        value = getattr(self, attr)
        if not value:
            raise LedgerError(f"Module '{self.module_name}' has no {attr} recorded. Run the step that creates it first.")
        return value


def load_deployment(ctx: ChainContext) -> MarketDeployment:
    module_name = ctx.settings.require_module_name()
    entry = ctx.ledger.module(module_name)
    created = entry.get("createdObjects") or []
    return MarketDeployment(
        module_name=module_name,
        package_object_id=ctx.ledger.package_id(module_name),
        issuer_cap=get_item_by_type(created, ISSUER_CAP_TYPE),
        market=entry.get("market"),
        bag=entry.get("bag") or get_item_by_type(created, BAG_TYPE),
    )


def _gas_coin(ctx: ChainContext) -> str:
    return get_user_coins(ctx.client, ctx.address, ctx.settings.gas_budget).object_id


def _call(ctx: ChainContext, deployment: MarketDeployment, module: str, function: str, arguments: list[Any], **kwargs) -> dict[str, Any]:
    return ctx.signer.execute_move_call(
        package_object_id=deployment.package_object_id,
        module=module,
        function=function,
        arguments=arguments,
        gas_budget=ctx.settings.gas_budget,
        **kwargs,
    )


def _mint_nft(ctx: ChainContext, deployment: MarketDeployment) -> str:
    response = _call(
        ctx,
        deployment,
        NFT_MODULE,
        "mint",
        [deployment.require("issuer_cap"), NFT_NAME, NFT_DESCRIPTION, NFT_URL],
        gas_payment=_gas_coin(ctx),
    )
    nft = require_created(response, f"::{NFT_MODULE}::MetaNFT")
    logger.info("Minted NFT %s", nft)
    return nft


def create(ctx: ChainContext, module: str = MARKET_MODULE) -> str:
    """Create a marketplace and remember its id in the ledger."""
    deployment = load_deployment(ctx)
    response = _call(ctx, deployment, module, "create", [ctx.address, MARKET_FEE_BPS])
    market = require_created(response, MARKET_TYPE)
    ctx.ledger.set_field(deployment.module_name, "market", market)
    return market


def mint(ctx: ChainContext, recipient: str) -> str:
    """Mint an NFT and hand it to *recipient*."""
    deployment = load_deployment(ctx)
    nft = _mint_nft(ctx, deployment)

    ctx.wait(2.0)
    _call(
        ctx,
        deployment,
        UTILS_MODULE,
        "transfer",
        [nft, recipient],
        type_arguments=[deployment.nft_type],
        gas_payment=_gas_coin(ctx),
    )
    return nft


def list_nft(ctx: ChainContext, price: int | str = DEFAULT_LIST_PRICE) -> str:
    """Mint an NFT and list it on the market; returns the listing id."""
    price = int(price)
    deployment = load_deployment(ctx)
    market, bag = deployment.require("market"), deployment.require("bag")
    nft = _mint_nft(ctx, deployment)

    ctx.wait(2.0)
    response = _call(
        ctx,
        deployment,
        MARKET_MODULE,
        "list",
        [market, bag, nft, price],
        type_arguments=deployment.type_arguments,
    )
    return require_created(response, "Listing")


def buy(ctx: ChainContext, listing_id: str) -> str:
    """Buy a listed NFT, paying with the tightest fitting coin."""
    deployment = load_deployment(ctx)
    coin = get_user_coins(ctx.client, ctx.address, BUY_PAYMENT)

    response = _call(
        ctx,
        deployment,
        MARKET_MODULE,
        "buy_and_take",
        [deployment.require("market"), listing_id, coin.object_id],
        type_arguments=deployment.type_arguments,
    )
    return str(response.get("digest"))


def _bid(ctx: ChainContext, deployment: MarketDeployment, auction_id: str, amount: int) -> None:
    coin = get_user_coins(ctx.client, ctx.address, amount)
    _call(
        ctx,
        deployment,
        MARKET_MODULE,
        "bid",
        [deployment.require("market"), auction_id, coin.object_id, amount],
        type_arguments=deployment.type_arguments,
    )
    logger.info("Bid %s on auction %s", amount, auction_id)


def auction(ctx: ChainContext, bids: int | str = 2) -> str:
    """Mint, auction, bid against ourselves and settle; returns the auction id."""
    bids = int(bids)
    deployment = load_deployment(ctx)
    market = deployment.require("market")
    nft = _mint_nft(ctx, deployment)
    ctx.wait(2.0)

    now = int(time.time() * 1000)
    bid = 1
    response = _call(
        ctx,
        deployment,
        MARKET_MODULE,
        "auction",
        [market, nft, bid, now - AUCTION_WINDOW_MS, now + AUCTION_WINDOW_MS],
        type_arguments=deployment.type_arguments,
    )
    auction_id = require_created(response, AUCTION_TYPE)

    for _ in range(bids):
        ctx.wait(2.0)
        _bid(ctx, deployment, auction_id, bid)
        bid += 1

    _call(
        ctx,
        deployment,
        MARKET_MODULE,
        "complete_auction_and_take",
        [market, auction_id],
        type_arguments=deployment.type_arguments,
    )
    return auction_id


def owned_objects(ctx: ChainContext) -> list[dict[str, Any]]:
    return ctx.client.get_owned_objects(ctx.address)


def coins(ctx: ChainContext) -> list[Coin]:
    return get_all_coins(ctx.client, ctx.address)

"""Fee-payer coin selection."""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from keepsake_cli.rpc.client import SUI_COIN_TYPE, SuiRpcClient

logger = logging.getLogger(__name__)


class NoCoinsError(ValueError):
    """Raised when there is no coin to choose from."""


class InsufficientBalanceError(ValueError):
    """Raised when no single coin covers the requested amount."""

    def __init__(self, price: int, largest: int):
        super().__init__(f"No coin covers {price} (largest balance is {largest})")
        self.price = price
        self.largest = largest


class Coin(BaseModel):
    """A fungible balance usable for payments and gas."""

    model_config = ConfigDict(populate_by_name=True)

    object_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("object_id", "objectId", "coinObjectId"),
    )
    balance: int = Field(..., ge=0)


def select_coin(coins: Sequence[Coin], price: int, *, allow_insufficient: bool = False) -> Coin:
    """Pick the coin whose balance exceeds *price* by the least.

    Ties keep the earliest coin. When nothing covers *price* an
    ``InsufficientBalanceError`` is raised, unless *allow_insufficient* is
    set, in which case the first coin is returned and a warning logged.

    Raises:
        NoCoinsError: If *coins* is empty.
        InsufficientBalanceError: If no coin covers *price*.
    """
    if not coins:
        raise NoCoinsError("No coins available to pay with")

    best_index: Optional[int] = None
    best_diff: Optional[int] = None
    for index, coin in enumerate(coins):
        diff = coin.balance - price
        if diff >= 0 and (best_diff is None or diff < best_diff):
            best_diff = diff
            best_index = index

    if best_index is not None:
        return coins[best_index]

    if not allow_insufficient:
        raise InsufficientBalanceError(price, max(coin.balance for coin in coins))

    logger.warning(
        "No coin covers %s; falling back to %s with balance %s",
        price,
        coins[0].object_id,
        coins[0].balance,
    )
    return coins[0]


def get_all_coins(client: SuiRpcClient, owner: str, coin_type: str = SUI_COIN_TYPE) -> list[Coin]:
    return [Coin.model_validate(item) for item in client.get_coins(owner, coin_type)]


def get_user_coins(client: SuiRpcClient, owner: str, price: int, *, allow_insufficient: bool = False) -> Coin:
    """Fetch the owner's SUI coins and select the tightest fit for *price*."""
    return select_coin(get_all_coins(client, owner), price, allow_insufficient=allow_insufficient)

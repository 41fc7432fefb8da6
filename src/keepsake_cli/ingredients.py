"""Ingredient records and their mint order.

An ingredient is either a base ingredient (empty ``mix``) or a composite
made from exactly two other ingredients. Composites can only be minted once
both of their components exist on chain, so minting walks the collection in
dependency order.
"""

from __future__ import annotations

import heapq
from pathlib import Path
from typing import Iterable, Optional, Sequence

from pydantic import BaseModel, Field, ValidationError, field_validator

from keepsake_cli.ledger import LedgerError, locked, read_json, write_json


class IngredientConfigError(ValueError):
    """Raised when an ingredient collection is malformed."""


class IngredientCycleError(IngredientConfigError):
    """Raised when ingredients depend on each other in a loop."""

    def __init__(self, names: list[str]):
        super().__init__(f"Ingredients form a dependency cycle: {', '.join(names)}")
        self.names = names


class Ingredient(BaseModel):
    name: str = Field(..., min_length=1)
    mix: list[str] = Field(default_factory=list)
    address: Optional[str] = None

    @field_validator("mix")
    @classmethod
    def _mix_is_pair(cls, value: list[str]) -> list[str]:
        if len(value) not in (0, 2):
            raise ValueError("mix must name zero or two ingredients")
        return value

    @property
    def is_base(self) -> bool:
        return not self.mix

    @property
    def is_minted(self) -> bool:
        return bool(self.address)


def sort_ingredients(ingredients: Iterable[Ingredient]) -> list[Ingredient]:
    """Order ingredients so each composite follows both of its components.

    Stable topological sort: whenever several ingredients are ready, the
    one that came first in the input goes next, so an already valid order
    is returned unchanged. A ``mix`` name resolves to the first ingredient
    carrying that name.

    Raises:
        IngredientConfigError: If a ``mix`` entry names an unknown ingredient.
        IngredientCycleError: If the references contain a cycle.
    """
    items = list(ingredients)

    first_index: dict[str, int] = {}
    for index, item in enumerate(items):
        first_index.setdefault(item.name, index)

    dependents: list[list[int]] = [[] for _ in items]
    pending: list[int] = []
    for index, item in enumerate(items):
        requires = set()
        for dep in item.mix:
            dep_index = first_index.get(dep)
            if dep_index is None:
                raise IngredientConfigError(f"Ingredient '{item.name}' mixes unknown ingredient '{dep}'")
            requires.add(dep_index)
        for dep_index in requires:
            dependents[dep_index].append(index)
        pending.append(len(requires))

    ready = [index for index, count in enumerate(pending) if count == 0]
    heapq.heapify(ready)
    order: list[int] = []
    while ready:
        index = heapq.heappop(ready)
        order.append(index)
        for dependent in dependents[index]:
            pending[dependent] -= 1
            if pending[dependent] == 0:
                heapq.heappush(ready, dependent)

    if len(order) < len(items):
        raise IngredientCycleError([items[i].name for i, count in enumerate(pending) if count > 0])

    return [items[i] for i in order]


def find_ingredient(ingredients: Sequence[Ingredient], name: str) -> Ingredient:
    for item in ingredients:
        if item.name == name:
            return item
    raise IngredientConfigError(f"Unknown ingredient '{name}'")


def load_ingredients(path: Path) -> list[Ingredient]:
    """Load ingredient records from a JSON array file."""
    try:
        payload = read_json(path, None)
    except LedgerError as exc:
        raise IngredientConfigError(str(exc)) from exc
    if payload is None:
        raise IngredientConfigError(f"Ingredient file not found: {path}")
    if not isinstance(payload, list):
        raise IngredientConfigError(f"{path} must contain a JSON array of ingredients")

    try:
        return [Ingredient.model_validate(item) for item in payload]
    except ValidationError as exc:
        raise IngredientConfigError(f"Invalid ingredient in {path}: {exc}") from exc


def save_ingredients(path: Path, ingredients: Iterable[Ingredient]) -> None:
    payload = [item.model_dump(exclude_none=True) for item in ingredients]
    with locked(path):
        write_json(path, payload)

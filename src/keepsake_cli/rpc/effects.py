"""Helpers for reading transaction effects and created objects."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class TransactionFailedError(RuntimeError):
    """Raised when the node reports a non-success transaction status."""

    def __init__(self, message: str, *, digest: Optional[str] = None):
        super().__init__(message)
        self.digest = digest


class UnexpectedResponseError(RuntimeError):
    """Raised when a response lacks a field the caller depends on."""


class CreatedObject(BaseModel):
    """Object created by a transaction, as recorded in the deployment ledger."""

    model_config = ConfigDict(populate_by_name=True)

    type: Optional[str] = None
    object_id: str = Field(..., alias="objectId", min_length=1)
    owner: Optional[str] = None

    def to_ledger(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


def ensure_success(response: dict[str, Any]) -> dict[str, Any]:
    """Return the effects of *response* or raise if the transaction failed."""
    effects = response.get("effects")
    if not isinstance(effects, dict):
        raise TransactionFailedError("Transaction response carries no effects", digest=response.get("digest"))

    status = effects.get("status") or {}
    if status.get("status") != "success":
        reason = status.get("error") or status.get("status") or "unknown status"
        raise TransactionFailedError(f"Transaction failed: {reason}", digest=response.get("digest"))
    return effects


def created_object_ids(response: dict[str, Any]) -> list[str]:
    effects = ensure_success(response)
    return [item["reference"]["objectId"] for item in effects.get("created") or []]


def _owner_of(owner: Any) -> Optional[str]:
    if isinstance(owner, dict):
        return owner.get("AddressOwner") or owner.get("ObjectOwner")
    return None


def split_created(objects: Iterable[dict[str, Any]]) -> tuple[Optional[str], list[CreatedObject]]:
    """Separate the published package id from the other created objects."""
    package_object_id = None
    created: list[CreatedObject] = []
    for item in objects:
        data = item.get("data")
        if not data:
            logger.warning("Skipping unreadable object: %s", item.get("error"))
            continue
        content = data.get("content") or {}
        if content.get("dataType") == "package" or data.get("type") == "package":
            package_object_id = data["objectId"]
        else:
            created.append(CreatedObject(type=data.get("type"), objectId=data["objectId"], owner=_owner_of(data.get("owner"))))
    return package_object_id, created


def get_item_by_type(objects: Iterable[Any], type_fragment: str) -> Optional[str]:
    """Id of the first object whose type contains *type_fragment*."""
    for item in objects:
        if isinstance(item, CreatedObject):
            item_type, object_id = item.type, item.object_id
        else:
            item_type, object_id = item.get("type"), item.get("objectId")
        if item_type and type_fragment in item_type:
            return object_id
    return None


def created_objects(response: dict[str, Any]) -> list[CreatedObject]:
    """Created objects with their types, read from ``objectChanges``."""
    ensure_success(response)
    created = []
    for change in response.get("objectChanges") or []:
        if change.get("type") != "created":
            continue
        created.append(
            CreatedObject(
                type=change.get("objectType"),
                objectId=change["objectId"],
                owner=_owner_of(change.get("owner")),
            )
        )
    return created


def require_created(response: dict[str, Any], type_fragment: Optional[str] = None) -> str:
    """Id of the created object matching *type_fragment*, or the first one created."""
    if type_fragment is not None:
        object_id = get_item_by_type(created_objects(response), type_fragment)
        if object_id is None:
            raise UnexpectedResponseError(f"Transaction created no object of type '{type_fragment}'")
        return object_id

    ids = created_object_ids(response)
    if not ids:
        raise UnexpectedResponseError("Transaction created no objects")
    return ids[0]

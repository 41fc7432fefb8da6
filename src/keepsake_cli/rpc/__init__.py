"""Remote node access: JSON-RPC transport and effects parsing."""

from .client import SUI_COIN_TYPE, RpcError, SuiRpcClient
from .effects import (
    CreatedObject,
    TransactionFailedError,
    UnexpectedResponseError,
    created_object_ids,
    created_objects,
    ensure_success,
    get_item_by_type,
    require_created,
    split_created,
)

__all__ = [
    "SUI_COIN_TYPE",
    "RpcError",
    "SuiRpcClient",
    "CreatedObject",
    "TransactionFailedError",
    "UnexpectedResponseError",
    "created_object_ids",
    "created_objects",
    "ensure_success",
    "get_item_by_type",
    "require_created",
    "split_created",
]

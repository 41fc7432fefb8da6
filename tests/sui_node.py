"""A scripted Sui node served through httpx.MockTransport."""

from __future__ import annotations

import base64
import json
from typing import Any, Callable

import httpx

TEST_SECRET = "11" * 32
NODE_URL = "https://node.test"


def tx_response(
    created: list[tuple[str, str]] | None = None,
    *,
    status: str = "success",
    error: str | None = None,
    digest: str = "digest-1",
) -> dict[str, Any]:
    """Execution result creating ``(object_id, object_type)`` pairs."""
    created = created or []
    effects_status: dict[str, Any] = {"status": status}
    if error:
        effects_status["error"] = error
    return {
        "digest": digest,
        "effects": {
            "status": effects_status,
            "created": [
                {"owner": {"AddressOwner": "0xme"}, "reference": {"objectId": object_id, "version": 1, "digest": "d"}}
                for object_id, _ in created
            ],
        },
        "objectChanges": [
            {"type": "created", "objectId": object_id, "objectType": object_type, "owner": {"AddressOwner": "0xme"}}
            for object_id, object_type in created
        ],
    }


class FakeNode:
    """Answers JSON-RPC calls from scripted data and records every request."""

    def __init__(self) -> None:
        self.requests: list[tuple[str, list[Any]]] = []
        self.executions: list[dict[str, Any]] = []
        self.coins: list[dict[str, Any]] = [
            {"coinObjectId": "0xcoin-big", "balance": "50000000000", "coinType": "0x2::sui::SUI"},
        ]
        self.objects: dict[str, dict[str, Any]] = {}
        self.owned: list[dict[str, Any]] = []
        self.handlers: dict[str, Callable[[list[Any]], Any]] = {}

    # -- scripting helpers ------------------------------------------------

    def queue_execution(self, response: dict[str, Any]) -> None:
        self.executions.append(response)

    def add_object(self, object_id: str, object_type: str, *, package: bool = False, owner: str = "0xme") -> None:
        if package:
            self.objects[object_id] = {"data": {"objectId": object_id, "type": "package", "content": {"dataType": "package"}}}
        else:
            self.objects[object_id] = {
                "data": {
                    "objectId": object_id,
                    "type": object_type,
                    "owner": {"AddressOwner": owner},
                    "content": {"dataType": "moveObject", "type": object_type, "fields": {}},
                }
            }

    def calls(self, method: str) -> list[list[Any]]:
        return [params for name, params in self.requests if name == method]

    def move_calls(self) -> list[tuple[str, str, list[Any]]]:
        """``(module, function, arguments)`` of every unsafe_moveCall."""
        return [(params[2], params[3], params[5]) for params in self.calls("unsafe_moveCall")]

    # -- transport --------------------------------------------------------

    def _result(self, method: str, params: list[Any]) -> Any:
        if method in self.handlers:
            return self.handlers[method](params)
        if method.startswith("unsafe_"):
            tx = f"{method}:{len(self.requests)}".encode()
            return {"txBytes": base64.b64encode(tx).decode(), "gas": [], "inputObjects": []}
        if method == "sui_executeTransactionBlock":
            return self.executions.pop(0) if self.executions else tx_response()
        if method == "suix_getCoins":
            return {"data": self.coins, "nextCursor": None, "hasNextPage": False}
        if method == "suix_getOwnedObjects":
            return {"data": [{"data": item} for item in self.owned], "nextCursor": None, "hasNextPage": False}
        if method == "sui_multiGetObjects":
            return [self.objects.get(object_id, {"error": {"code": "notExists"}}) for object_id in params[0]]
        raise AssertionError(f"Unexpected RPC method {method}")

    def handle(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        method, params = body["method"], body["params"]
        self.requests.append((method, params))
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": body["id"], "result": self._result(method, params)})

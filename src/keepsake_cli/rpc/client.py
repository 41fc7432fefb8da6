"""JSON-RPC client for a Sui full node."""

from __future__ import annotations

import itertools
import logging
import ssl
from typing import Any, Iterator, Optional

import httpx
import truststore

logger = logging.getLogger(__name__)

SUI_COIN_TYPE = "0x2::sui::SUI"
WAIT_FOR_LOCAL_EXECUTION = "WaitForLocalExecution"
OBJECT_OPTIONS = {"showType": True, "showOwner": True, "showContent": True}
EFFECTS_OPTIONS = {"showEffects": True, "showObjectChanges": True}


class RpcError(RuntimeError):
    """Raised when the node cannot be reached or answers with an error."""

    def __init__(self, message: str, *, code: Optional[int] = None):
        super().__init__(message)
        self.code = code


class SuiRpcClient:
    """Thin request/response wrapper around the node's JSON-RPC endpoint."""

    def __init__(self, url: str, *, timeout: float = 30.0, transport: Optional[httpx.BaseTransport] = None):
        self.url = url
        self.timeout = timeout
        self._transport = transport
        self._http_client: Optional[httpx.Client] = None
        self._ids = itertools.count(1)

    def _get_http_client(self) -> httpx.Client:
        """Get or create HTTP client."""
        if self._http_client is None:
            if self._transport is not None:
                self._http_client = httpx.Client(timeout=self.timeout, transport=self._transport)
            else:
                ssl_context = truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
                self._http_client = httpx.Client(timeout=self.timeout, verify=ssl_context)
        return self._http_client

    def close(self):
        """Close HTTP client."""
        if self._http_client is not None:
            self._http_client.close()
            self._http_client = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def call(self, method: str, params: list[Any]) -> Any:
        """Send one JSON-RPC request and return its ``result`` member.

        Raises:
            RpcError: On transport failure, non-200 status, malformed body or
                a JSON-RPC ``error`` member.
        """
        payload = {"jsonrpc": "2.0", "id": next(self._ids), "method": method, "params": params}
        logger.debug("rpc %s %s", method, params)

        try:
            response = self._get_http_client().post(self.url, json=payload)
        except httpx.RequestError as exc:
            raise RpcError(f"Cannot reach node at {self.url}: {exc}") from exc

        if response.status_code != 200:
            raise RpcError(f"{method} failed: HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as exc:
            raise RpcError(f"{method} returned a non-JSON response") from exc

        if not isinstance(body, dict):
            raise RpcError(f"{method} returned an unexpected response")

        error = body.get("error")
        if error:
            if isinstance(error, dict):
                raise RpcError(f"{method} failed: {error.get('message', error)}", code=error.get("code"))
            raise RpcError(f"{method} failed: {error}")

        if "result" not in body:
            raise RpcError(f"{method} returned no result")
        return body["result"]

    # -- Transaction builders -------------------------------------------

    def unsafe_publish(
        self,
        sender: str,
        compiled_modules: list[str],
        dependencies: list[str],
        gas_budget: int,
        gas: Optional[str] = None,
    ) -> str:
        result = self.call("unsafe_publish", [sender, compiled_modules, dependencies, gas, str(gas_budget)])
        return result["txBytes"]

    def unsafe_move_call(
        self,
        signer: str,
        package_object_id: str,
        module: str,
        function: str,
        type_arguments: list[str],
        arguments: list[Any],
        gas_budget: int,
        gas: Optional[str] = None,
    ) -> str:
        result = self.call(
            "unsafe_moveCall",
            [signer, package_object_id, module, function, type_arguments, arguments, gas, str(gas_budget)],
        )
        return result["txBytes"]

    def unsafe_transfer_object(
        self,
        signer: str,
        object_id: str,
        recipient: str,
        gas_budget: int,
        gas: Optional[str] = None,
    ) -> str:
        result = self.call("unsafe_transferObject", [signer, object_id, gas, str(gas_budget), recipient])
        return result["txBytes"]

    def execute_transaction(self, tx_bytes: str, signature: str) -> dict[str, Any]:
        return self.call(
            "sui_executeTransactionBlock",
            [tx_bytes, [signature], EFFECTS_OPTIONS, WAIT_FOR_LOCAL_EXECUTION],
        )

    # -- Queries --------------------------------------------------------

    def _paged(self, method: str, params: list[Any], limit: int) -> Iterator[dict[str, Any]]:
        cursor = None
        while True:
            page = self.call(method, [*params, cursor, limit])
            yield from page.get("data", [])
            cursor = page.get("nextCursor")
            if not page.get("hasNextPage") or not cursor:
                return

    def get_owned_objects(self, address: str, *, limit: int = 50) -> list[dict[str, Any]]:
        """Objects owned by *address* as ``{objectId, type}`` records."""
        query = {"options": {"showType": True}}
        owned = []
        for item in self._paged("suix_getOwnedObjects", [address, query], limit):
            data = item.get("data") or {}
            if data.get("objectId"):
                owned.append({"objectId": data["objectId"], "type": data.get("type")})
        return owned

    def multi_get_objects(self, object_ids: list[str]) -> list[dict[str, Any]]:
        if not object_ids:
            return []
        return self.call("sui_multiGetObjects", [object_ids, OBJECT_OPTIONS])

    def get_coins(self, owner: str, coin_type: str = SUI_COIN_TYPE, *, limit: int = 50) -> list[dict[str, Any]]:
        return list(self._paged("suix_getCoins", [owner, coin_type], limit))

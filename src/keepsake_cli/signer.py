"""Build, sign and execute transactions for one keypair."""

from __future__ import annotations

import logging
from typing import Any, Optional

from keepsake_cli.keys import Keypair
from keepsake_cli.rpc.client import SuiRpcClient
from keepsake_cli.rpc.effects import ensure_success

logger = logging.getLogger(__name__)


class Signer:
    """Signs node-built transactions with a local keypair and submits them."""

    def __init__(self, keypair: Keypair, client: SuiRpcClient):
        self.keypair = keypair
        self.client = client

    @property
    def address(self) -> str:
        return self.keypair.address

    def _sign_and_execute(self, tx_bytes: str) -> dict[str, Any]:
        signature = self.keypair.sign_transaction(tx_bytes)
        response = self.client.execute_transaction(tx_bytes, signature)
        ensure_success(response)
        logger.info("Executed transaction %s", response.get("digest"))
        return response

    def publish(
        self,
        compiled_modules: list[str],
        *,
        gas_budget: int,
        dependencies: Optional[list[str]] = None,
        gas: Optional[str] = None,
    ) -> dict[str, Any]:
        tx_bytes = self.client.unsafe_publish(
            self.address,
            compiled_modules,
            dependencies or [],
            gas_budget,
            gas=gas,
        )
        return self._sign_and_execute(tx_bytes)

    def execute_move_call(
        self,
        *,
        package_object_id: str,
        module: str,
        function: str,
        arguments: list[Any],
        gas_budget: int,
        type_arguments: Optional[list[str]] = None,
        gas_payment: Optional[str] = None,
    ) -> dict[str, Any]:
        logger.debug("move call %s::%s::%s", package_object_id, module, function)
        tx_bytes = self.client.unsafe_move_call(
            self.address,
            package_object_id,
            module,
            function,
            type_arguments or [],
            arguments,
            gas_budget,
            gas=gas_payment,
        )
        return self._sign_and_execute(tx_bytes)

    def transfer_object(self, object_id: str, recipient: str, *, gas_budget: int) -> dict[str, Any]:
        tx_bytes = self.client.unsafe_transfer_object(self.address, object_id, recipient, gas_budget)
        return self._sign_and_execute(tx_bytes)

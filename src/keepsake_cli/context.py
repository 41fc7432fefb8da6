"""Per-invocation chain context handed to every action."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Optional

from keepsake_cli.config import Settings
from keepsake_cli.keys import Keypair
from keepsake_cli.ledger import DeploymentLedger
from keepsake_cli.rpc.client import SuiRpcClient
from keepsake_cli.signer import Signer

logger = logging.getLogger(__name__)


@dataclass
class ChainContext:
    settings: Settings
    client: SuiRpcClient
    keypair: Keypair
    signer: Signer
    ledger: DeploymentLedger

    @property
    def address(self) -> str:
        return self.keypair.address

    def wait(self, seconds: Optional[float] = None) -> None:
        """Pause so objects created by the previous transaction become queryable."""
        delay = self.settings.consistency_wait if seconds is None else min(seconds, self.settings.consistency_wait)
        if delay > 0:
            logger.debug("Waiting %.1fs for the node to catch up", delay)
            time.sleep(delay)

    def close(self) -> None:
        self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def build_context(settings: Settings, client: Optional[SuiRpcClient] = None) -> ChainContext:
    """Create the context for one invocation.

    Raises:
        ConfigurationError: If no usable key material is configured.
    """
    keypair = Keypair.from_secret_hex(settings.require_secret_key())
    client = client or SuiRpcClient(settings.rpc_url)
    logger.info("Using address %s", keypair.address)
    return ChainContext(
        settings=settings,
        client=client,
        keypair=keypair,
        signer=Signer(keypair, client),
        ledger=DeploymentLedger(settings.ledger_path),
    )

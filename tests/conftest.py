"""Shared fixtures for chain-facing tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Iterator

import httpx
import pytest

from keepsake_cli.config import Settings
from keepsake_cli.context import ChainContext, build_context
from keepsake_cli.rpc.client import SuiRpcClient
from tests.sui_node import NODE_URL, TEST_SECRET, FakeNode


@pytest.fixture
def fake_node() -> FakeNode:
    return FakeNode()


@pytest.fixture
def rpc_client(fake_node: FakeNode) -> Iterator[SuiRpcClient]:
    client = SuiRpcClient(NODE_URL, transport=httpx.MockTransport(fake_node.handle))
    yield client
    client.close()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        rpc_url=NODE_URL,
        secret_key=TEST_SECRET,
        module_name="keepsake",
        ledger_path=tmp_path / "deployed_modules" / "output.json",
        ingredients_path=tmp_path / "deployed_modules" / "ingredients.json",
        build_dir=tmp_path / "build",
        consistency_wait=0,
    )


@pytest.fixture
def chain(settings: Settings, rpc_client: SuiRpcClient) -> ChainContext:
    return build_context(settings, rpc_client)


@pytest.fixture
def deployed(chain: ChainContext) -> ChainContext:
    """Chain context whose ledger already holds a deployed keepsake package."""
    chain.settings.ledger_path.parent.mkdir(parents=True, exist_ok=True)
    chain.settings.ledger_path.write_text(
        json.dumps(
            {
                "keepsake": {
                    "packageObjectId": "0xpkg",
                    "createdObjects": [
                        {"type": "0xpkg::meta_nft::MetaNFTIssuerCap", "objectId": "0xcap", "owner": "0xme"},
                        {"type": "0x2::bag::Bag", "objectId": "0xbag", "owner": "0xme"},
                    ],
                    "market": "0xmarket",
                }
            }
        ),
        encoding="utf-8",
    )
    return chain

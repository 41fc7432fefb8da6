"""Tests for settings resolution."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from keepsake_cli.config import (
    DEFAULT_GAS_BUDGET,
    DEFAULT_LEDGER_PATH,
    DEFAULT_RPC_URL,
    ConfigurationError,
    KeepsakeConfig,
    Settings,
)

ENV_VARS = (
    "KEEPSAKE_RPC_URL",
    "KEEPSAKE_PKEY",
    "pkey",
    "KEEPSAKE_MODULE",
    "module_name",
    "KEEPSAKE_LEDGER",
    "KEEPSAKE_INGREDIENTS",
    "KEEPSAKE_BUILD_DIR",
    "KEEPSAKE_GAS_BUDGET",
    "KEEPSAKE_WAIT",
)


@pytest.fixture
def clean_env(tmp_path, monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def user_config(clean_env: Path) -> KeepsakeConfig:
    config = KeepsakeConfig()
    config.config_dir = clean_env / ".keepsake"
    config.config_file = config.config_dir / "config.toml"
    return config


class TestSettingsFromEnv:
    def test_defaults(self, clean_env, user_config):
        settings = Settings.from_env(config=user_config)
        assert settings.rpc_url == DEFAULT_RPC_URL
        assert settings.secret_key is None
        assert settings.ledger_path == DEFAULT_LEDGER_PATH
        assert settings.gas_budget == DEFAULT_GAS_BUDGET

    def test_environment_overrides(self, clean_env, user_config, monkeypatch):
        monkeypatch.setenv("KEEPSAKE_RPC_URL", "https://rpc.example.com")
        monkeypatch.setenv("KEEPSAKE_PKEY", "ab" * 32)
        monkeypatch.setenv("KEEPSAKE_MODULE", "keepsake")
        monkeypatch.setenv("KEEPSAKE_LEDGER", "state/ledger.json")
        monkeypatch.setenv("KEEPSAKE_GAS_BUDGET", "2000")
        monkeypatch.setenv("KEEPSAKE_WAIT", "0")

        settings = Settings.from_env(config=user_config)
        assert settings.rpc_url == "https://rpc.example.com"
        assert settings.secret_key == "ab" * 32
        assert settings.module_name == "keepsake"
        assert settings.ledger_path == Path("state/ledger.json")
        assert settings.gas_budget == 2000
        assert settings.consistency_wait == 0

    def test_legacy_variable_names(self, clean_env, user_config, monkeypatch):
        monkeypatch.setenv("pkey", "cd" * 32)
        monkeypatch.setenv("module_name", "legacy")
        settings = Settings.from_env(config=user_config)
        assert settings.secret_key == "cd" * 32
        assert settings.module_name == "legacy"

    def test_reads_dotenv_file(self, clean_env, user_config):
        dotenv = clean_env / ".env"
        dotenv.write_text("KEEPSAKE_MODULE=from_dotenv\n", encoding="utf-8")
        try:
            settings = Settings.from_env(dotenv_path=dotenv, config=user_config)
        finally:
            os.environ.pop("KEEPSAKE_MODULE", None)
        assert settings.module_name == "from_dotenv"

    def test_user_config_rpc_url(self, clean_env, user_config):
        user_config.set_rpc_url("https://configured.example.com")
        assert Settings.from_env(config=user_config).rpc_url == "https://configured.example.com"

    def test_env_beats_user_config(self, clean_env, user_config, monkeypatch):
        user_config.set_rpc_url("https://configured.example.com")
        monkeypatch.setenv("KEEPSAKE_RPC_URL", "https://env.example.com")
        assert Settings.from_env(config=user_config).rpc_url == "https://env.example.com"

    def test_invalid_gas_budget(self, clean_env, user_config, monkeypatch):
        monkeypatch.setenv("KEEPSAKE_GAS_BUDGET", "lots")
        with pytest.raises(ConfigurationError, match="KEEPSAKE_GAS_BUDGET"):
            Settings.from_env(config=user_config)

    def test_negative_wait(self, clean_env, user_config, monkeypatch):
        monkeypatch.setenv("KEEPSAKE_WAIT", "-1")
        with pytest.raises(ConfigurationError, match="negative"):
            Settings.from_env(config=user_config)


class TestRequirements:
    def test_missing_key(self):
        with pytest.raises(ConfigurationError, match="No key detected"):
            Settings().require_secret_key()

    def test_missing_module(self):
        with pytest.raises(ConfigurationError, match="No module selected"):
            Settings().require_module_name()


class TestKeepsakeConfig:
    def test_set_rpc_url_preserves_other_sections(self, user_config):
        user_config.config_dir.mkdir()
        user_config.config_file.write_text('[other]\nvalue = "kept"\n', encoding="utf-8")

        user_config.set_rpc_url("https://rpc.example.com")

        data = user_config.load()
        assert data["rpc"]["url"] == "https://rpc.example.com"
        assert data["other"]["value"] == "kept"

    def test_unparseable_file(self, user_config):
        user_config.config_dir.mkdir()
        user_config.config_file.write_text("[rpc\n", encoding="utf-8")
        with pytest.raises(ConfigurationError, match="Failed to parse"):
            user_config.get_rpc_url()

"""Invocation settings for keepsake commands."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import toml  # type: ignore[import-untyped]
from dotenv import load_dotenv

DEFAULT_RPC_URL = "https://fullnode.devnet.sui.io:443"
DEFAULT_LEDGER_PATH = Path("deployed_modules") / "output.json"
DEFAULT_INGREDIENTS_PATH = Path("deployed_modules") / "ingredients.json"
DEFAULT_BUILD_DIR = Path("build")
DEFAULT_GAS_BUDGET = 10_000_000
DEFAULT_CONSISTENCY_WAIT = 5.0


class ConfigurationError(RuntimeError):
    """Raised when required settings are missing or invalid."""


class KeepsakeConfig:
    """Manage ~/.keepsake/config.toml"""

    def __init__(self) -> None:
        self.config_dir = Path.home() / ".keepsake"
        self.config_file = self.config_dir / "config.toml"

    def load(self) -> dict[str, Any]:
        if not self.config_file.exists():
            return {}
        try:
            config: dict[str, Any] = toml.load(self.config_file)
        except (toml.TomlDecodeError, OSError) as exc:
            raise ConfigurationError(f"Failed to parse {self.config_file}: {exc}") from exc
        return config

    def get_rpc_url(self) -> str | None:
        """Get RPC URL from config"""
        rpc_section = self.load().get("rpc")
        if isinstance(rpc_section, dict):
            url = rpc_section.get("url")
            if isinstance(url, str) and url.strip():
                return url.strip()
        return None

    def set_rpc_url(self, url: str) -> None:
        """Set RPC URL in config"""
        self.config_dir.mkdir(exist_ok=True)

        config = self.load()
        rpc_section = config.get("rpc")
        if not isinstance(rpc_section, dict):
            rpc_section = {}
            config["rpc"] = rpc_section

        rpc_section["url"] = url

        with open(self.config_file, "w", encoding="utf-8") as f:
            toml.dump(config, f)


def _env(*names: str) -> str | None:
    for name in names:
        value = os.getenv(name, "").strip()
        if value:
            return value
    return None


def _int_env(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got '{raw}'") from exc


def _float_env(name: str, default: float) -> float:
    raw = _env(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got '{raw}'") from exc
    if value < 0:
        raise ConfigurationError(f"{name} cannot be negative")
    return value


@dataclass(slots=True)
class Settings:
    """Everything one invocation needs to reach the chain and the ledger."""

    rpc_url: str = DEFAULT_RPC_URL
    secret_key: str | None = None
    module_name: str | None = None
    ledger_path: Path = DEFAULT_LEDGER_PATH
    ingredients_path: Path = DEFAULT_INGREDIENTS_PATH
    build_dir: Path = DEFAULT_BUILD_DIR
    gas_budget: int = DEFAULT_GAS_BUDGET
    consistency_wait: float = DEFAULT_CONSISTENCY_WAIT

    @classmethod
    def from_env(cls, *, dotenv_path: Path | None = None, config: KeepsakeConfig | None = None) -> "Settings":
        """Resolve settings from .env, the process environment and the user config file.

        The legacy ``pkey`` and ``module_name`` variables are honoured so an
        existing ``.env`` keeps working.
        """
        load_dotenv(dotenv_path or Path.cwd() / ".env", override=False)
        config = config or KeepsakeConfig()

        rpc_url = _env("KEEPSAKE_RPC_URL") or config.get_rpc_url() or DEFAULT_RPC_URL
        ledger = _env("KEEPSAKE_LEDGER")
        ingredients = _env("KEEPSAKE_INGREDIENTS")
        build_dir = _env("KEEPSAKE_BUILD_DIR")

        return cls(
            rpc_url=rpc_url,
            secret_key=_env("KEEPSAKE_PKEY", "pkey"),
            module_name=_env("KEEPSAKE_MODULE", "module_name"),
            ledger_path=Path(ledger) if ledger else DEFAULT_LEDGER_PATH,
            ingredients_path=Path(ingredients) if ingredients else DEFAULT_INGREDIENTS_PATH,
            build_dir=Path(build_dir) if build_dir else DEFAULT_BUILD_DIR,
            gas_budget=_int_env("KEEPSAKE_GAS_BUDGET", DEFAULT_GAS_BUDGET),
            consistency_wait=_float_env("KEEPSAKE_WAIT", DEFAULT_CONSISTENCY_WAIT),
        )

    def require_secret_key(self) -> str:
        if not self.secret_key:
            raise ConfigurationError(
                "No key detected. Set KEEPSAKE_PKEY in your .env file or run 'keepsake deploy keygen'."
            )
        return self.secret_key

    def require_module_name(self) -> str:
        if not self.module_name:
            raise ConfigurationError("No module selected. Set KEEPSAKE_MODULE (or module_name) in your .env file.")
        return self.module_name

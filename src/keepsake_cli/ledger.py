"""Deployment ledger: ids of previously created remote objects, kept on disk."""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional

from filelock import FileLock, Timeout

from keepsake_cli.rpc.effects import CreatedObject, get_item_by_type

logger = logging.getLogger(__name__)

INDIVIDUAL_KEY = "individual"


class LedgerError(RuntimeError):
    """Raised when the ledger file cannot be read, written or lacks an entry."""


def lock_path_for(path: Path) -> Path:
    return path.with_name(path.name + ".lock")


@contextmanager
def locked(path: Path, timeout: float = 10) -> Iterator[None]:
    """Hold an exclusive lock beside *path* for a read-modify-write cycle."""
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with FileLock(lock_path_for(path), timeout=timeout):
            yield
    except Timeout as exc:
        raise LedgerError(f"Cannot acquire lock on {path}. Another process may be using it.") from exc


def read_json(path: Path, default: Any) -> Any:
    if not path.exists():
        return default
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LedgerError(f"Failed to read {path}: {exc}") from exc
    if not raw.strip():
        return default
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise LedgerError(f"Failed to parse {path}: {exc}") from exc


def write_json(path: Path, payload: Any) -> None:
    """Replace *path* with *payload*, tab-indented."""
    tmp_path = path.with_name(path.name + ".tmp")
    try:
        tmp_path.write_text(json.dumps(payload, indent="\t") + "\n", encoding="utf-8")
        tmp_path.replace(path)
    except OSError as exc:
        raise LedgerError(f"Failed to write {path}: {exc}") from exc


class DeploymentLedger:
    """JSON map of module name to ``{packageObjectId, createdObjects, ...}``."""

    def __init__(self, path: Path):
        self.path = path

    def load(self) -> dict[str, Any]:
        payload = read_json(self.path, {})
        if not isinstance(payload, dict):
            raise LedgerError(f"{self.path} must contain a JSON object")
        return payload

    def module(self, name: str) -> dict[str, Any]:
        """Entry for *name*; raises if it was never deployed."""
        entry = self.load().get(name)
        if not isinstance(entry, dict):
            raise LedgerError(f"Module '{name}' is not in {self.path}. Deploy it first.")
        return entry

    def package_id(self, name: str) -> str:
        package_object_id = self.module(name).get("packageObjectId")
        if not package_object_id:
            raise LedgerError(f"Module '{name}' has no packageObjectId in {self.path}")
        return package_object_id

    def field(self, name: str, key: str) -> Optional[Any]:
        return self.module(name).get(key)

    def require_field(self, name: str, key: str) -> Any:
        value = self.field(name, key)
        if value in (None, ""):
            raise LedgerError(f"Module '{name}' has no '{key}' recorded in {self.path}")
        return value

    def item_by_type(self, name: str, type_fragment: str) -> str:
        created = self.module(name).get("createdObjects") or []
        object_id = get_item_by_type(created, type_fragment)
        if object_id is None:
            raise LedgerError(f"No object of type '{type_fragment}' recorded for module '{name}'")
        return object_id

    def _update(self, mutate) -> None:
        with locked(self.path):
            payload = self.load()
            mutate(payload)
            write_json(self.path, payload)

    def record_package(self, name: str, package_object_id: Optional[str], created: Iterable[CreatedObject]) -> None:
        entry = {
            "packageObjectId": package_object_id,
            "createdObjects": [obj.to_ledger() for obj in created],
        }

        def _mutate(payload: dict[str, Any]) -> None:
            payload[name] = entry

        self._update(_mutate)
        logger.info("Recorded package %s for %s", package_object_id, name)

    def record_individual(self, module: str, package_object_id: Optional[str], created: Iterable[CreatedObject]) -> None:
        entry = {
            "packageObjectId": package_object_id,
            "createdObjects": [obj.to_ledger() for obj in created],
        }

        def _mutate(payload: dict[str, Any]) -> None:
            individual = payload.get(INDIVIDUAL_KEY)
            if not isinstance(individual, dict):
                individual = {}
                payload[INDIVIDUAL_KEY] = individual
            individual[module] = entry

        self._update(_mutate)

    def set_field(self, name: str, key: str, value: Any) -> None:
        def _mutate(payload: dict[str, Any]) -> None:
            entry = payload.get(name)
            if not isinstance(entry, dict):
                raise LedgerError(f"Module '{name}' is not in {self.path}. Deploy it first.")
            entry[key] = value

        self._update(_mutate)

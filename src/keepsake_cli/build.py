"""Compiled Move bytecode from the local build tool."""

from __future__ import annotations

import base64
import json
import logging
import shutil
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

SUI_BINARY = "sui"

# Move stdlib and Sui framework package ids every published package links against.
FRAMEWORK_DEPENDENCIES = ("0x1", "0x2")


class BuildError(RuntimeError):
    """Raised when bytecode cannot be produced or read."""


def _bytecode_dir(build_dir: Path, package: str) -> Path:
    return build_dir / package / "bytecode_modules"


def read_bytecode_modules(build_dir: Path, package: str) -> list[str]:
    """Base64 contents of every ``.mv`` file of an already built package."""
    module_dir = _bytecode_dir(build_dir, package)
    if not module_dir.is_dir():
        raise BuildError(f"No bytecode found at {module_dir}. Run 'sui move build' first.")

    modules = [
        base64.b64encode(path.read_bytes()).decode("ascii")
        for path in sorted(module_dir.glob("*.mv"))
    ]
    if not modules:
        raise BuildError(f"{module_dir} contains no .mv files")
    return modules


def read_bytecode_module(build_dir: Path, package: str, module: str) -> str:
    module_file = _bytecode_dir(build_dir, package) / f"{module}.mv"
    if not module_file.is_file():
        raise BuildError(f"Module bytecode not found: {module_file}")
    return base64.b64encode(module_file.read_bytes()).decode("ascii")


def build_package(package_path: Path) -> tuple[list[str], list[str]]:
    """Compile a Move package and return ``(modules, dependencies)``."""
    binary = shutil.which(SUI_BINARY)
    if binary is None:
        raise BuildError("The 'sui' CLI was not found on PATH")

    cmd = [binary, "move", "build", "--dump-bytecode-as-base64", "--path", str(package_path)]
    logger.debug("Running %s", " ".join(cmd))
    try:
        result = subprocess.run(cmd, check=True, capture_output=True, text=True)
    except subprocess.CalledProcessError as exc:
        raise BuildError(f"Build failed with exit code {exc.returncode}: {exc.stderr.strip()}") from exc

    # Build progress lines precede the JSON document.
    output = result.stdout.strip()
    start = output.find("{")
    if start < 0:
        raise BuildError("Build produced no bytecode output")
    try:
        payload = json.loads(output[start:])
    except json.JSONDecodeError as exc:
        raise BuildError(f"Unreadable build output: {exc}") from exc

    return list(payload.get("modules") or []), list(payload.get("dependencies") or [])

"""Tests for reading and producing Move bytecode."""

from __future__ import annotations

import base64
import json
import subprocess
from pathlib import Path
from unittest.mock import Mock, patch

import pytest

from keepsake_cli.build import BuildError, build_package, read_bytecode_module, read_bytecode_modules


@pytest.fixture
def build_dir(tmp_path: Path) -> Path:
    module_dir = tmp_path / "build" / "keepsake" / "bytecode_modules"
    module_dir.mkdir(parents=True)
    (module_dir / "meta_nft.mv").write_bytes(b"\xa1\x1c\xeb\x0bnft")
    (module_dir / "dev_utils.mv").write_bytes(b"\xa1\x1c\xeb\x0butils")
    (module_dir / "notes.txt").write_text("ignored")
    return tmp_path / "build"


class TestReadBytecode:
    def test_reads_all_modules_sorted(self, build_dir):
        modules = read_bytecode_modules(build_dir, "keepsake")
        assert [base64.b64decode(m) for m in modules] == [b"\xa1\x1c\xeb\x0butils", b"\xa1\x1c\xeb\x0bnft"]

    def test_missing_package(self, build_dir):
        with pytest.raises(BuildError, match="sui move build"):
            read_bytecode_modules(build_dir, "other")

    def test_empty_package(self, tmp_path):
        (tmp_path / "build" / "empty" / "bytecode_modules").mkdir(parents=True)
        with pytest.raises(BuildError, match="no .mv files"):
            read_bytecode_modules(tmp_path / "build", "empty")

    def test_single_module(self, build_dir):
        module = read_bytecode_module(build_dir, "keepsake", "meta_nft")
        assert base64.b64decode(module) == b"\xa1\x1c\xeb\x0bnft"

    def test_single_module_missing(self, build_dir):
        with pytest.raises(BuildError, match="not found"):
            read_bytecode_module(build_dir, "keepsake", "marketplace")


class TestBuildPackage:
    def test_parses_dumped_bytecode(self, tmp_path):
        stdout = "BUILDING keepsake\n" + json.dumps({"modules": ["AAA="], "dependencies": ["0x1", "0x2"], "digest": []})
        completed = Mock(stdout=stdout, stderr="", returncode=0)

        with patch("keepsake_cli.build.shutil.which", return_value="/usr/bin/sui"), patch(
            "keepsake_cli.build.subprocess.run", return_value=completed
        ) as mock_run:
            modules, dependencies = build_package(tmp_path)

        assert modules == ["AAA="]
        assert dependencies == ["0x1", "0x2"]
        cmd = mock_run.call_args.args[0]
        assert cmd[:4] == ["/usr/bin/sui", "move", "build", "--dump-bytecode-as-base64"]
        assert cmd[-1] == str(tmp_path)

    def test_missing_binary(self, tmp_path):
        with patch("keepsake_cli.build.shutil.which", return_value=None):
            with pytest.raises(BuildError, match="not found on PATH"):
                build_package(tmp_path)

    def test_failed_build(self, tmp_path):
        error = subprocess.CalledProcessError(1, ["sui"], output="", stderr="error[E01]: unbound module")
        with patch("keepsake_cli.build.shutil.which", return_value="/usr/bin/sui"), patch(
            "keepsake_cli.build.subprocess.run", side_effect=error
        ):
            with pytest.raises(BuildError, match="unbound module"):
                build_package(tmp_path)

    def test_output_without_json(self, tmp_path):
        completed = Mock(stdout="BUILDING keepsake\n", stderr="", returncode=0)
        with patch("keepsake_cli.build.shutil.which", return_value="/usr/bin/sui"), patch(
            "keepsake_cli.build.subprocess.run", return_value=completed
        ):
            with pytest.raises(BuildError, match="no bytecode"):
                build_package(tmp_path)

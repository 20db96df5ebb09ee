from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Verifies the application's external behavior by invoking the entry point
script via subprocess: argument parsing, exit codes, stream output and the
files left on disk.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"
ENTRY_POINT = SRC_DIR / "deploykit" / "main.py"


def run_cli(args: List[str], cwd: Optional[Path] = None) -> subprocess.CompletedProcess:
    """
    Execute the CLI in a separate process.

    Injects the 'src' directory into PYTHONPATH so the package resolves
    without being installed in site-packages.
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")

    cmd = [sys.executable, str(ENTRY_POINT)] + args

    return subprocess.run(
        cmd,
        cwd=cwd,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8",
    )


@pytest.fixture
def frontend_project(tmp_path: Path) -> Path:
    """
    Structure:
    /project
      /src
        /helpers
          LSTHelper.ts   -> ../abis/pool.json, ./math
          math.ts
        /abis
          pool.json
      /scripts/config
        shibuyaConfig.py
    """
    root = tmp_path / "project"
    helpers = root / "src" / "helpers"
    helpers.mkdir(parents=True)
    (root / "src" / "abis").mkdir()
    (root / "scripts" / "config").mkdir(parents=True)

    (helpers / "LSTHelper.ts").write_text(
        "import poolAbi from '../abis/pool.json';\n"
        "import { toWei } from './math';\n"
        "import { ethers } from 'ethers';\n",
        encoding="utf-8",
    )
    (helpers / "math.ts").write_text("export const toWei = (x: number) => x;\n", encoding="utf-8")
    (root / "src" / "abis" / "pool.json").write_text("[]", encoding="utf-8")
    (root / "scripts" / "config" / "shibuyaConfig.py").write_text(
        "config = {'rpcUrl': 'https://evm.shibuya.astar.network', 'privateKey': '0x1'}\n",
        encoding="utf-8",
    )
    return root


def test_help_lists_commands() -> None:
    result = run_cli(["--help"])

    assert result.returncode == 0
    assert "usage: deploykit" in result.stdout
    for command in ("copy-deps", "copy-config", "gen-abi"):
        assert command in result.stdout


def test_copy_deps_end_to_end(frontend_project: Path) -> None:
    result = run_cli(["copy-deps", "-i", "src/helpers/LSTHelper.ts", "-o", "out"], cwd=frontend_project)

    assert result.returncode == 0, result.stderr
    lines = result.stdout.splitlines()
    assert lines[0] == f"Copied [Depth 0]: {os.path.join('src', 'helpers', 'LSTHelper.ts')}"
    assert lines[-1] == "Dependencies copying completed!"

    out = frontend_project / "out"
    assert (out / "src" / "helpers" / "LSTHelper.ts").exists()
    assert (out / "src" / "helpers" / "math.ts").exists()
    assert (out / "src" / "abis" / "pool.json").read_text(encoding="utf-8") == "[]"


def test_copy_deps_missing_input(frontend_project: Path) -> None:
    result = run_cli(["copy-deps", "-i", "src/nope.ts", "-o", "out"], cwd=frontend_project)

    assert result.returncode == 2
    assert "does not exist" in result.stderr
    assert not (frontend_project / "out").exists()


def test_copy_config_end_to_end(frontend_project: Path) -> None:
    result = run_cli(
        ["--json", "copy-config", "-i", "scripts/config/shibuyaConfig.py"],
        cwd=frontend_project,
    )

    assert result.returncode == 0, result.stderr
    payload = json.loads(result.stdout)
    assert payload["stripped"] == ["privateKey"]

    written = frontend_project / "src" / "main" / "shibuyaConfig.json"
    assert json.loads(written.read_text(encoding="utf-8")) == {
        "rpcUrl": "https://evm.shibuya.astar.network"
    }


def test_gen_abi_empty_directory(frontend_project: Path) -> None:
    (frontend_project / "interfaces").mkdir()

    result = run_cli(["gen-abi", "interfaces"], cwd=frontend_project)

    assert result.returncode == 2
    assert "No .sol files found" in result.stderr

from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. A builder fixture for small TypeScript source trees.
3. Logging teardown so CLI tests do not leak queue listeners.
"""

import os
import sys
from pathlib import Path
from typing import Callable, Dict

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from deploykit.infra.logging import shutdown_logging  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture(autouse=True)
def reset_deploykit_logging(capsys):
    """
    Detach DeployKit handlers configured by CLI runs.

    Requests ``capsys`` so the queue listener is flushed and stopped before
    the captured streams are closed.
    """
    yield
    shutdown_logging()


@pytest.fixture
def make_tree(tmp_path: Path) -> Callable[[Dict[str, str]], Path]:
    """
    Return a helper writing ``{relative path: content}`` under ``tmp_path/project``.

    Returns:
        Callable: Builder returning the project root.
    """
    root = tmp_path / "project"

    def _build(files: Dict[str, str]) -> Path:
        for rel, content in files.items():
            target = root / rel
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        root.mkdir(exist_ok=True)
        return root

    return _build

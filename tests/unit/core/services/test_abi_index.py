from __future__ import annotations

"""
Unit tests for the ABI Index Emitter.
"""

from pathlib import Path

from deploykit.core.services.abi_index import render_index, unique_names, write_index_files
from deploykit.domain.constants import JSON_MODULE_DECLARATION


def test_render_index_layout() -> None:
    expected = (
        "import AABI from './A.json';\n"
        "import BABI from './B.json';\n"
        "\n"
        "export {\n"
        "    AABI,\n"
        "    BABI,\n"
        "};\n"
    )

    assert render_index(["A", "B"]) == expected


def test_unique_names_keeps_first_occurrence() -> None:
    assert unique_names(["IPool", "IToken", "IPool"]) == ["IPool", "IToken"]


def test_write_index_files(tmp_path: Path) -> None:
    index_path, declaration_path = write_index_files(str(tmp_path), ["IPool"])

    assert Path(index_path).name == "index.ts"
    assert Path(index_path).read_text(encoding="utf-8") == render_index(["IPool"])
    assert Path(declaration_path).name == "abis.d.ts"
    assert Path(declaration_path).read_text(encoding="utf-8") == JSON_MODULE_DECLARATION

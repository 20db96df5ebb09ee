from __future__ import annotations

"""
ABI Index Emitter.

Renders the TypeScript index module re-exporting every generated ABI and the
ambient declaration that lets ``*.json`` files be imported as modules.
"""

import os
from typing import List, Sequence, Tuple

from deploykit.domain.constants import (
    DECLARATION_FILE_NAME,
    INDEX_FILE_NAME,
    JSON_MODULE_DECLARATION,
)


def render_index(names: Sequence[str]) -> str:
    """Build the index module: one default import per ABI, then a grouped export."""
    imports = "\n".join(f"import {name}ABI from './{name}.json';" for name in names)
    exports = "\n".join(f"    {name}ABI," for name in names)
    return f"{imports}\n\nexport {{\n{exports}\n}};\n"


def write_index_files(output_dir: str, names: Sequence[str]) -> Tuple[str, str]:
    """
    Write ``index.ts`` and ``abis.d.ts`` into ``output_dir``.

    Returns:
        Tuple[str, str]: (index path, declaration path).
    """
    index_path = os.path.join(output_dir, INDEX_FILE_NAME)
    with open(index_path, "w", encoding="utf-8") as f:
        f.write(render_index(names))

    declaration_path = os.path.join(output_dir, DECLARATION_FILE_NAME)
    with open(declaration_path, "w", encoding="utf-8") as f:
        f.write(JSON_MODULE_DECLARATION)

    return index_path, declaration_path


def unique_names(names: Sequence[str]) -> List[str]:
    """Drop repeated names, keeping first occurrences in order."""
    seen = set()
    out: List[str] = []
    for name in names:
        if name not in seen:
            seen.add(name)
            out.append(name)
    return out

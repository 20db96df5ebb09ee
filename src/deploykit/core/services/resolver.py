from __future__ import annotations

"""
Local Reference Resolver.

Maps a relative import target onto concrete files, trying the ordered
extension list first and the directory ``index`` fallback second.
"""

import os
from typing import List, Optional, Sequence

from deploykit.domain.constants import INDEX_BASENAME, RESOLVE_EXTENSIONS


def resolve_file_candidate(base_path: str, extensions: Sequence[str] = RESOLVE_EXTENSIONS) -> Optional[str]:
    """
    Return the first ``base_path + ext`` that exists as a file.

    A path already ending with the extension is tried unchanged, so
    ``./abi.json`` resolves to ``abi.json`` rather than ``abi.json.json``.
    """
    for ext in extensions:
        candidate = base_path if base_path.endswith(ext) else base_path + ext
        if os.path.isfile(candidate):
            return candidate
    return None


def resolve_index_candidate(dir_path: str, extensions: Sequence[str] = RESOLVE_EXTENSIONS) -> Optional[str]:
    """Return the first ``dir_path/index<ext>`` that exists, if ``dir_path`` is a directory."""
    if not os.path.isdir(dir_path):
        return None
    for ext in extensions:
        candidate = os.path.join(dir_path, f"{INDEX_BASENAME}{ext}")
        if os.path.isfile(candidate):
            return candidate
    return None


def resolve_reference(
        importer_path: str,
        target: str,
        extensions: Sequence[str] = RESOLVE_EXTENSIONS,
) -> List[str]:
    """
    Resolve a local reference written in ``importer_path``.

    Both resolution rules are applied: a sibling file match and, when the
    target names a directory, that directory's index file. Either, both or
    neither may exist.

    Args:
        importer_path: Absolute path of the file containing the reference.
        target: Relative target as written (``./b``, ``../lib``).
        extensions: Ordered extension candidates.

    Returns:
        List[str]: Absolute, normalized paths of the resolved files.
    """
    base_path = os.path.normpath(os.path.join(os.path.dirname(importer_path), target))

    resolved: List[str] = []
    file_match = resolve_file_candidate(base_path, extensions)
    if file_match:
        resolved.append(file_match)

    index_match = resolve_index_candidate(base_path, extensions)
    if index_match:
        resolved.append(index_match)

    return resolved

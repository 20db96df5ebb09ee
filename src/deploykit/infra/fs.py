from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Provides path normalization, mirrored file copies and directory walking
helpers shared by the dependency copier, the config exporter and the ABI
generator.
"""

import os
import shutil
from typing import Iterator, List, Optional, Tuple

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

DEFAULT_OUTPUT_DIR = os.path.join("src", "main")
DEFAULT_ABI_OUTPUT_DIR = "./abis"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def normalize_path(path: Optional[str], fallback: str, base: Optional[str] = None) -> str:
    """
    Normalize a path string into an absolute filesystem path.

    Expands environment variables ($VAR/%VAR%) and user home shortcuts (~/).
    Relative paths are anchored on ``base`` (the working directory when
    omitted). Reverts to ``fallback`` if the input is empty.

    Args:
        path: Raw input path string.
        fallback: Default path to use when ``path`` is empty.
        base: Directory relative paths are resolved against.

    Returns:
        str: Normalized absolute path.
    """
    p = (path or "").strip() or fallback
    p = os.path.expandvars(os.path.expanduser(p))
    if not os.path.isabs(p):
        p = os.path.join(base or os.getcwd(), p)
    return os.path.normpath(p)


def canonical_key(path: str) -> str:
    """Return the canonical identity of a path (symlinks and '..' resolved)."""
    return os.path.normcase(os.path.realpath(path))


def mirror_path(file_path: str, source_root: str, destination_root: str) -> Tuple[str, str]:
    """
    Compute the destination of a file mirrored under another root.

    Returns:
        Tuple[str, str]: (relative path from ``source_root``, destination path).
    """
    rel_path = os.path.relpath(file_path, source_root)
    return rel_path, os.path.join(destination_root, rel_path)

# -----------------------------------------------------------------------------
# FILESYSTEM OPERATIONS API
# -----------------------------------------------------------------------------

def copy_file(source_path: str, dest_path: str) -> bool:
    """
    Copy bytes verbatim, creating the destination's parent directories.

    Returns:
        bool: False when ``dest_path`` already is ``source_path`` and nothing was written.
    """
    if os.path.exists(dest_path) and os.path.samefile(source_path, dest_path):
        return False
    parent = os.path.dirname(dest_path)
    if parent:
        os.makedirs(parent, exist_ok=True)
    shutil.copyfile(source_path, dest_path)
    return True


def read_text(file_path: str) -> str:
    """Read the whole file as UTF-8 text, replacing undecodable bytes."""
    with open(file_path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def iter_files_with_suffix(root_dir: str, suffix: str) -> Iterator[str]:
    """
    Walk ``root_dir`` recursively and yield files ending with ``suffix``.

    Directories and files are visited in sorted order so that output is
    stable across platforms.
    """
    for root, dirs, files in os.walk(root_dir):
        dirs.sort()
        for file_name in sorted(files):
            if file_name.endswith(suffix):
                yield os.path.join(root, file_name)


def list_dir(path: str) -> List[str]:
    """Return the sorted entries of a directory."""
    return sorted(os.listdir(path))

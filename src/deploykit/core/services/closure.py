from __future__ import annotations

"""
Dependency Closure Copier.

Copies a start file and every file it transitively references through local
imports to a mirrored location under a destination root. The walk is a
depth-first, pre-order traversal driven by an explicit stack of
``(path, depth)`` pairs, bounded by a visited set and a maximum depth.
"""

import logging
import os
from typing import Callable, List, Optional, Tuple

from deploykit.core.services.import_scanner import scan_local_references
from deploykit.core.services.resolver import resolve_reference
from deploykit.domain.closure_models import ClosureResult, CopiedFile, TraversalState
from deploykit.domain.constants import DEFAULT_MAX_DEPTH
from deploykit.domain.errors import StartFileNotFoundError, TraversalIOError
from deploykit.infra.fs import (
    DEFAULT_OUTPUT_DIR,
    canonical_key,
    copy_file,
    mirror_path,
    normalize_path,
    read_text,
)

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[CopiedFile], None]


# ==============================================================================
# PUBLIC API
# ==============================================================================

def copy_closure(
        start_file: str,
        destination_root: str,
        max_depth: int = DEFAULT_MAX_DEPTH,
        source_root: Optional[str] = None,
        on_copied: Optional[ProgressCallback] = None,
) -> ClosureResult:
    """
    Copy ``start_file`` and its local dependency closure.

    Args:
        start_file: File the traversal starts from (depth 0).
        destination_root: Directory copies are written under. Created if absent.
        max_depth: Files further than this many import edges are not visited.
        source_root: Directory the mirrored relative paths are computed from.
                     Defaults to the current working directory.
        on_copied: Called once per copied file, in visiting order.

    Returns:
        ClosureResult: Copied files and unresolved references.

    Raises:
        StartFileNotFoundError: ``start_file`` is not an existing regular file.
        TraversalIOError: A read, copy or mkdir failed mid-traversal.
    """
    source_root_abs = normalize_path(source_root, os.getcwd())
    start_abs = os.path.abspath(start_file)
    dest_abs = normalize_path(destination_root, DEFAULT_OUTPUT_DIR)

    if not os.path.isfile(start_abs):
        raise StartFileNotFoundError(start_abs)

    try:
        os.makedirs(dest_abs, exist_ok=True)
    except OSError as e:
        raise TraversalIOError(dest_abs, e) from e

    state = TraversalState()
    stack: List[Tuple[str, int]] = [(start_abs, 0)]

    logger.debug(f"Closure traversal from {start_abs} (max depth {max_depth})")

    while stack:
        path, depth = stack.pop()

        if depth > max_depth:
            logger.debug(f"Depth bound reached, skipping {path}")
            continue
        if not state.mark(canonical_key(path)):
            continue

        copied, content = _visit(path, depth, source_root_abs, dest_abs)
        state.copied.append(copied)
        logger.debug(f"Copied [Depth {depth}]: {copied.rel_path}")
        if on_copied:
            on_copied(copied)

        children = _discover_children(path, content, state)
        # Reversed so that targets are popped in discovery order
        for child in reversed(children):
            stack.append((child, depth + 1))

    return ClosureResult(
        start_file=start_abs,
        source_root=source_root_abs,
        destination_root=dest_abs,
        max_depth=max_depth,
        copied=list(state.copied),
        unresolved=list(state.unresolved),
    )


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _visit(path: str, depth: int, source_root: str, destination_root: str) -> Tuple[CopiedFile, str]:
    """Read one file and write its mirrored copy."""
    rel_path, dest_path = mirror_path(path, source_root, destination_root)
    if rel_path == os.pardir or rel_path.startswith(os.pardir + os.sep):
        logger.warning(f"{path} lies outside the source root; its copy is written to {dest_path}")

    try:
        content = read_text(path)
        written = copy_file(path, dest_path)
    except OSError as e:
        raise TraversalIOError(path, e) from e

    if not written:
        logger.debug(f"Destination is the source file itself, left untouched: {path}")

    return CopiedFile(source_path=path, rel_path=rel_path, dest_path=dest_path, depth=depth), content


def _discover_children(path: str, content: str, state: TraversalState) -> List[str]:
    """Resolve every local reference of a file, recording the unresolved ones."""
    children: List[str] = []
    for ref in scan_local_references(content):
        targets = resolve_reference(path, ref.target)
        if not targets:
            logger.debug(f"Unresolved {ref.syntax.value} reference '{ref.target}' in {path}")
            state.unresolved.append(f"{path} -> {ref.target}")
            continue
        children.extend(targets)
    return children

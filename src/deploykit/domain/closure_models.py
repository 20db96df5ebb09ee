from __future__ import annotations

"""
Dependency Closure Domain Models.

Defines the structured import references produced by the scanner, the
traversal-scoped state of one closure copy, and the result handed back to
the interface layer.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Set

from deploykit.domain.constants import LOCAL_REFERENCE_PREFIX


class ImportSyntax(str, Enum):
    MODULE = "module"
    REQUIRE = "require"
    DYNAMIC = "dynamic"


@dataclass(frozen=True)
class ImportReference:
    """
    One textual reference found in a source file.

    Attributes:
        syntax: Which of the recognized reference forms matched.
        target: The quoted path, exactly as written.
        offset: Character offset of the match in the scanned text.
    """
    syntax: ImportSyntax
    target: str
    offset: int

    @property
    def is_local(self) -> bool:
        return self.target.startswith(LOCAL_REFERENCE_PREFIX)


@dataclass(frozen=True)
class CopiedFile:
    """
    Progress record emitted once per copied file.

    Attributes:
        source_path: Absolute path of the original file.
        rel_path: Path relative to the traversal source root.
        dest_path: Absolute path of the written copy.
        depth: Number of import edges from the start file.
    """
    source_path: str
    rel_path: str
    dest_path: str
    depth: int


@dataclass
class TraversalState:
    """Mutable state owned by a single closure traversal."""
    visited: Set[str] = field(default_factory=set)
    copied: List[CopiedFile] = field(default_factory=list)
    unresolved: List[str] = field(default_factory=list)

    def mark(self, key: str) -> bool:
        """Record ``key`` as visited. Returns False if it was already present."""
        if key in self.visited:
            return False
        self.visited.add(key)
        return True


@dataclass(frozen=True)
class ClosureResult:
    """
    Outcome of a complete dependency closure copy.

    Attributes:
        start_file: Absolute path of the traversal root file.
        source_root: Directory destination paths are mirrored from.
        destination_root: Directory copies are written under.
        max_depth: Depth bound applied during the traversal.
        copied: Copied files in visiting order.
        unresolved: Local references no candidate file matched,
                    formatted as ``<importer> -> <target>``.
    """
    start_file: str
    source_root: str
    destination_root: str
    max_depth: int
    copied: List[CopiedFile] = field(default_factory=list)
    unresolved: List[str] = field(default_factory=list)

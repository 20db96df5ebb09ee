from __future__ import annotations

"""
ABI Generation Domain Models.
"""

from dataclasses import dataclass, field
from typing import List

from deploykit.domain.constants import (
    DEFAULT_COMPILER,
    DEFAULT_JOBS,
    DEFAULT_RETRY_DELAY,
)


@dataclass(frozen=True)
class CompilerSettings:
    """
    Knobs of the external compiler invocation.

    Attributes:
        compiler: Command used for the first attempt (split like a shell line).
        retry_delay: Seconds to wait before the version-pinned retry.
        jobs: Number of interface files compiled concurrently.
    """
    compiler: str = DEFAULT_COMPILER
    retry_delay: float = DEFAULT_RETRY_DELAY
    jobs: int = DEFAULT_JOBS


@dataclass(frozen=True)
class CompileFailure:
    """A captured per-file failure; siblings keep compiling."""
    path: str
    name: str
    error: str


@dataclass(frozen=True)
class AbiGenerationResult:
    """
    Outcome of a batch ABI generation.

    Attributes:
        output_dir: Directory holding the ``<Name>.json`` artifacts.
        successful: Contract names compiled, in discovery order.
        failures: Captured failures, in discovery order.
        index_path: Generated index module, empty if nothing succeeded.
        declaration_path: Generated JSON module declaration, empty if nothing succeeded.
    """
    output_dir: str
    successful: List[str] = field(default_factory=list)
    failures: List[CompileFailure] = field(default_factory=list)
    index_path: str = ""
    declaration_path: str = ""

    @property
    def ok(self) -> bool:
        return bool(self.successful)

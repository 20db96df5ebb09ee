from __future__ import annotations

"""
Config Export Domain Models.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class ConfigExportResult:
    """
    Outcome of a config export.

    Attributes:
        source: Absolute path of the config module that was loaded.
        output_path: Absolute path of the written JSON file.
        stripped: Secret fields that were present and removed.
    """
    source: str
    output_path: str
    stripped: List[str] = field(default_factory=list)

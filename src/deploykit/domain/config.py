from __future__ import annotations

"""
Configuration Domain Management.

Provides the flat default configuration shared by every command and loads
optional project overrides from a JSON file (``deploykit.json`` in the
working directory unless another path is given).
"""

import json
import logging
import os
from typing import Any, Dict, Optional

from deploykit.domain.constants import (
    CONFIG_FILE_NAME,
    CURRENT_CONFIG_VERSION,
    DEFAULT_COMPILER,
    DEFAULT_JOBS,
    DEFAULT_MAX_DEPTH,
    DEFAULT_RETRY_DELAY,
    DEFAULT_STRIP_FIELDS,
)
from deploykit.infra.fs import DEFAULT_ABI_OUTPUT_DIR, DEFAULT_OUTPUT_DIR

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # Dependency closure
        "input_path": "",
        "output_dir": DEFAULT_OUTPUT_DIR,
        "source_root": os.getcwd(),
        "max_depth": DEFAULT_MAX_DEPTH,

        # Config export
        "config_path": "",
        "config_output_dir": DEFAULT_OUTPUT_DIR,
        "strip_fields": list(DEFAULT_STRIP_FIELDS),

        # ABI generation
        "interfaces_dir": "",
        "abi_output_dir": DEFAULT_ABI_OUTPUT_DIR,
        "compiler": DEFAULT_COMPILER,
        "retry_delay": DEFAULT_RETRY_DELAY,
        "jobs": DEFAULT_JOBS,

        # Interface
        "locale": "en",
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load project overrides merged over the defaults.

    A missing file is not an error. A malformed file is logged and ignored so
    that commands still run with defaults and CLI flags.

    Args:
        path: Explicit config file. Defaults to ``deploykit.json`` in the cwd.

    Returns:
        Dict[str, Any]: Defaults updated with the file's known keys.
    """
    defaults = get_default_config()
    config_file = path or os.path.join(os.getcwd(), CONFIG_FILE_NAME)

    if not os.path.exists(config_file):
        logger.debug(f"Config file not found at {config_file}. Using defaults.")
        return defaults

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.error(f"Failed to load config '{config_file}': {e}. Using defaults.")
        return defaults

    if not isinstance(data, dict):
        logger.warning(f"Config '{config_file}' is not a JSON object. Using defaults.")
        return defaults

    version = data.pop("version", CURRENT_CONFIG_VERSION)
    if version != CURRENT_CONFIG_VERSION:
        logger.warning(f"Config version {version} differs from {CURRENT_CONFIG_VERSION}.")

    unknown = sorted(k for k in data if k not in defaults)
    if unknown:
        logger.warning(f"Ignoring unknown config keys: {', '.join(unknown)}")

    defaults.update({k: v for k, v in data.items() if k in defaults})
    logger.debug(f"Configuration loaded from {config_file}")
    return defaults

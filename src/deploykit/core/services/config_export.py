from __future__ import annotations

"""
Deployment Config Exporter.

Loads a network configuration module, removes secret fields (the deployer's
private key by default) and writes the remainder as JSON next to the
frontend sources.
"""

import dataclasses
import importlib.util
import json
import logging
import os
import sys
from typing import Any, Dict, List, Optional, Sequence, Tuple

from deploykit.domain.constants import CONFIG_ATTRIBUTE, DEFAULT_STRIP_FIELDS
from deploykit.domain.errors import ConfigLoadError, ConfigNotFoundError
from deploykit.domain.export_models import ConfigExportResult
from deploykit.infra.fs import DEFAULT_OUTPUT_DIR

logger = logging.getLogger(__name__)


# ==============================================================================
# PUBLIC API
# ==============================================================================

def export_config(
        config_path: str,
        output_dir: str = DEFAULT_OUTPUT_DIR,
        strip_fields: Optional[Sequence[str]] = None,
) -> ConfigExportResult:
    """
    Export the ``config`` of a module to ``<output_dir>/<module stem>.json``.

    Args:
        config_path: Python module (``.py``) or JSON file holding the config.
        output_dir: Destination directory. Created if absent.
        strip_fields: Top-level keys removed before writing.
                      Defaults to ``["privateKey"]``.

    Returns:
        ConfigExportResult: Written path and the fields actually removed.

    Raises:
        ConfigNotFoundError: ``config_path`` does not exist.
        ConfigLoadError: The module cannot be loaded or exposes no mapping.
    """
    source = os.path.abspath(config_path)
    if not os.path.isfile(source):
        raise ConfigNotFoundError(source)

    fields = list(DEFAULT_STRIP_FIELDS if strip_fields is None else strip_fields)

    config = load_config_object(source)
    cleaned, stripped = strip_secrets(config, fields)

    # Serialized up front so a failure never leaves a truncated file behind
    try:
        payload = json.dumps(cleaned, indent=2, ensure_ascii=False, default=str)
    except (TypeError, ValueError) as e:
        raise ConfigLoadError(f"Config in '{source}' cannot be serialized to JSON: {e}") from e

    out_dir = os.path.abspath(output_dir)
    os.makedirs(out_dir, exist_ok=True)

    stem = os.path.splitext(os.path.basename(source))[0]
    output_path = os.path.join(out_dir, f"{stem}.json")

    with open(output_path, "w", encoding="utf-8") as f:
        f.write(payload)

    if stripped:
        logger.debug(f"Stripped fields from {stem}: {', '.join(stripped)}")
    logger.debug(f"Config written to {output_path}")

    return ConfigExportResult(source=source, output_path=output_path, stripped=stripped)


def load_config_object(path: str) -> Dict[str, Any]:
    """
    Load the config mapping from a Python module or a JSON document.

    JSON documents may wrap the mapping in a top-level ``config`` key.
    """
    if path.endswith(".json"):
        data = _load_json(path)
        if isinstance(data, dict) and isinstance(data.get(CONFIG_ATTRIBUTE), dict):
            data = data[CONFIG_ATTRIBUTE]
    else:
        module = _import_module_from_path(path)
        if not hasattr(module, CONFIG_ATTRIBUTE):
            raise ConfigLoadError(f"Module '{path}' does not define '{CONFIG_ATTRIBUTE}'")
        data = getattr(module, CONFIG_ATTRIBUTE)

    return _as_mapping(data, path)


def strip_secrets(config: Dict[str, Any], fields: Sequence[str]) -> Tuple[Dict[str, Any], List[str]]:
    """Return a shallow copy without ``fields`` and the list of keys removed."""
    cleaned = dict(config)
    stripped = [name for name in fields if name in cleaned]
    for name in stripped:
        del cleaned[name]
    return cleaned, stripped


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _load_json(path: str) -> Any:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except ValueError as e:
        raise ConfigLoadError(f"Invalid JSON in '{path}': {e}") from e


def _import_module_from_path(path: str) -> Any:
    """Execute a Python file as an anonymous module and return it."""
    module_name = "_deploykit_config_" + os.path.splitext(os.path.basename(path))[0]
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ConfigLoadError(f"Cannot load '{path}' as a Python module")

    module = importlib.util.module_from_spec(spec)
    # Registered before execution so dataclasses and pickling can find the module
    sys.modules[module_name] = module
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        sys.modules.pop(module_name, None)
        raise ConfigLoadError(f"Failed to import config module '{path}': {e}") from e
    return module


def _as_mapping(data: Any, path: str) -> Dict[str, Any]:
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return dataclasses.asdict(data)
    if isinstance(data, dict):
        return data
    raise ConfigLoadError(
        f"'{CONFIG_ATTRIBUTE}' in '{path}' must be a mapping, received {type(data).__name__}"
    )

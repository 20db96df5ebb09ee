from __future__ import annotations

"""
Domain Constants and Static Data Structures.

Centralizes the resolution rules of the dependency copier, the secret fields
removed by the config exporter and the compiler conventions of the ABI
generator.
"""

from typing import List, Tuple

CURRENT_CONFIG_VERSION = "1.0.0"
CONFIG_FILE_NAME = "deploykit.json"

# -----------------------------------------------------------------------------
# DEPENDENCY CLOSURE
# -----------------------------------------------------------------------------

DEFAULT_MAX_DEPTH = 5

# Ordered: the first existing candidate wins
RESOLVE_EXTENSIONS: Tuple[str, ...] = (".ts", ".tsx", ".js", ".jsx", ".json")
INDEX_BASENAME = "index"
LOCAL_REFERENCE_PREFIX = "."

# -----------------------------------------------------------------------------
# CONFIG EXPORT
# -----------------------------------------------------------------------------

CONFIG_ATTRIBUTE = "config"
DEFAULT_STRIP_FIELDS: List[str] = ["privateKey"]

# -----------------------------------------------------------------------------
# ABI GENERATION
# -----------------------------------------------------------------------------

INTERFACE_SUFFIX = ".sol"
ABI_SUFFIX = ".abi"
DEFAULT_COMPILER = "solcjs"
DEFAULT_RETRY_DELAY = 3.0
DEFAULT_JOBS = 4
VERSION_MISMATCH_MARKER = "requires different compiler version"

INDEX_FILE_NAME = "index.ts"
DECLARATION_FILE_NAME = "abis.d.ts"
JSON_MODULE_DECLARATION = """declare module '*.json' {
    const value: any;
    export default value;
}"""

from __future__ import annotations

"""
Interface ABI Compiler.

Compiles a single Solidity interface into ``<Name>.json`` holding its ABI.
The first attempt shells out to the configured compiler command (``solcjs``
by default). When the compiler rejects the file's pragma, the required
version is installed and used through py-solc-x.
"""

import json
import logging
import os
import re
import shlex
import subprocess
import threading
import time
from typing import Any, Dict, List, Optional

import solcx
from solcx.exceptions import SolcError, SolcInstallationError, UnsupportedVersionError

from deploykit.domain.abi_models import CompilerSettings
from deploykit.domain.constants import ABI_SUFFIX, INTERFACE_SUFFIX, VERSION_MISMATCH_MARKER
from deploykit.domain.errors import AbiArtifactNotFoundError, CompilerError
from deploykit.infra.fs import list_dir

logger = logging.getLogger(__name__)

PRAGMA_VERSION_RX = re.compile(r"pragma\s+solidity\s+[\^~>=<]*\s*(\d+(?:\.\d+)*)")

# Serializes directory scans and renames between concurrent compilations
_ARTIFACT_LOCK = threading.Lock()


# ==============================================================================
# PUBLIC API
# ==============================================================================

def compile_interface(
        path: str,
        output_dir: str,
        settings: Optional[CompilerSettings] = None,
) -> str:
    """
    Compile one interface file and leave its ABI at ``<output_dir>/<Name>.json``.

    Args:
        path: Absolute path of the ``.sol`` file.
        output_dir: Existing directory for the ABI artifacts.
        settings: Compiler command and retry knobs.

    Returns:
        str: The contract name (file stem).

    Raises:
        CompilerError: Both the compiler and any version-pinned retry failed.
        AbiArtifactNotFoundError: The compiler succeeded but wrote no ABI for the contract.
    """
    settings = settings or CompilerSettings()
    name = contract_name(path)

    cmd = build_compile_command(settings.compiler, path, output_dir)
    logger.debug(f"Running: {' '.join(cmd)}")

    try:
        proc = subprocess.run(cmd, capture_output=True, text=True)
    except OSError as e:
        raise CompilerError(name, f"Cannot run compiler '{cmd[0]}': {e}") from e

    if proc.returncode != 0:
        required = extract_required_version(proc.stderr)
        if required is None:
            raise CompilerError(
                name,
                f"Compiling {name} failed (exit {proc.returncode}): {proc.stderr.strip()}",
                returncode=proc.returncode,
                stderr=proc.stderr,
            )

        logger.warning(f"{name} requires Solidity {required}, installing and retrying...")
        if settings.retry_delay > 0:
            time.sleep(settings.retry_delay)
        compile_with_version(path, name, output_dir, required)
        return name

    with _ARTIFACT_LOCK:
        artifact = locate_abi_artifact(output_dir, name)
        if artifact is None:
            raise AbiArtifactNotFoundError(name, output_dir)
        os.replace(os.path.join(output_dir, artifact), os.path.join(output_dir, f"{name}.json"))

    logger.debug(f"Renamed {artifact} -> {name}.json")
    return name


def contract_name(path: str) -> str:
    """Contract name of an interface file: its base name without ``.sol``."""
    base = os.path.basename(path)
    return base[:-len(INTERFACE_SUFFIX)] if base.endswith(INTERFACE_SUFFIX) else base


def build_compile_command(compiler: str, path: str, output_dir: str) -> List[str]:
    """Split the compiler command and append the ABI-only arguments."""
    return shlex.split(compiler) + ["--abi", path, "--output-dir", output_dir]


def extract_required_version(stderr: str) -> Optional[str]:
    """
    Return the Solidity version demanded by a pragma, if the compiler
    rejected the source for a version mismatch.
    """
    if not stderr or VERSION_MISMATCH_MARKER not in stderr:
        return None
    match = PRAGMA_VERSION_RX.search(stderr)
    return match.group(1) if match else None


def locate_abi_artifact(output_dir: str, name: str) -> Optional[str]:
    """
    Find the ABI file a compiler wrote for ``name``.

    Compilers name their artifacts differently (``solcjs`` flattens the
    source path into ``<path>_<Name>_sol_<Name>.abi``, ``solc -o`` writes
    ``<Name>.abi``), so candidates are tried from most to least specific.

    Returns:
        Optional[str]: File name relative to ``output_dir``.
    """
    entries = [e for e in list_dir(output_dir) if e.endswith(ABI_SUFFIX)]

    rules = (
        lambda e: e.endswith(f"_sol_{name}{ABI_SUFFIX}"),
        lambda e: e == f"{name}{ABI_SUFFIX}",
        lambda e: e.endswith(f"_{name}{ABI_SUFFIX}"),
        lambda e: name in e,
    )
    for rule in rules:
        for entry in entries:
            if rule(entry):
                return entry
    return None


def compile_with_version(path: str, name: str, output_dir: str, version: str) -> None:
    """
    Install ``version`` of solc and write ``<Name>.json`` from its ABI output.

    Raises:
        CompilerError: Installation or compilation failed, or the output holds no ABI.
    """
    try:
        solcx.install_solc(version)
        compiled = solcx.compile_files([path], output_values=["abi"], solc_version=version)
    except (SolcError, SolcInstallationError, UnsupportedVersionError) as e:
        raise CompilerError(name, f"Compiling {name} with solc {version} failed: {e}") from e

    abi = _pick_contract_abi(compiled, name)
    if abi is None:
        raise CompilerError(name, f"solc {version} produced no ABI for {name}")

    target = os.path.join(output_dir, f"{name}.json")
    with open(target, "w", encoding="utf-8") as f:
        json.dump(abi, f, indent=2)
        f.write("\n")


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _pick_contract_abi(compiled: Dict[str, Any], name: str) -> Optional[List[Any]]:
    """Select the ABI of ``name`` from ``{'<source>:<Contract>': {...}}`` output."""
    for contract_id, data in compiled.items():
        if contract_id.rsplit(":", 1)[-1] == name:
            return data.get("abi")
    if len(compiled) == 1:
        return next(iter(compiled.values())).get("abi")
    return None

from __future__ import annotations

"""
Batch ABI Generation Service.

Discovers every interface file under a directory, compiles them in parallel
and emits the index module for the ABIs that were produced. A failing file
never aborts its siblings: each outcome is captured as a value and reported
once all compilations have settled.
"""

import logging
import os
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, List, Optional, Tuple

from deploykit.core.services.abi_compiler import compile_interface, contract_name
from deploykit.core.services.abi_index import unique_names, write_index_files
from deploykit.domain.abi_models import AbiGenerationResult, CompileFailure, CompilerSettings
from deploykit.domain.constants import INTERFACE_SUFFIX
from deploykit.domain.errors import InterfacesDirNotFoundError, NoInterfaceFilesError
from deploykit.infra.fs import DEFAULT_ABI_OUTPUT_DIR, iter_files_with_suffix

logger = logging.getLogger(__name__)

OutcomeCallback = Callable[[str, Optional[CompileFailure]], None]


# ==============================================================================
# PUBLIC API
# ==============================================================================

def find_interface_files(interfaces_dir: str) -> List[str]:
    """
    List every ``.sol`` file under ``interfaces_dir``, recursively.

    Raises:
        InterfacesDirNotFoundError: The directory does not exist.
        NoInterfaceFilesError: No interface file was found.
    """
    root = os.path.abspath(interfaces_dir)
    if not os.path.isdir(root):
        raise InterfacesDirNotFoundError(root)

    files = list(iter_files_with_suffix(root, INTERFACE_SUFFIX))
    if not files:
        raise NoInterfaceFilesError(root)
    return files


def generate_abis(
        interfaces_dir: str,
        output_dir: str = DEFAULT_ABI_OUTPUT_DIR,
        settings: Optional[CompilerSettings] = None,
        on_outcome: Optional[OutcomeCallback] = None,
) -> AbiGenerationResult:
    """
    Compile all interfaces of a directory into ABI JSON files plus an index.

    Args:
        interfaces_dir: Directory searched recursively for ``.sol`` files.
        output_dir: Destination of ``<Name>.json``, ``index.ts`` and ``abis.d.ts``.
        settings: Compiler command, retry delay and parallelism.
        on_outcome: Called per file with its name and failure (None on success).

    Returns:
        AbiGenerationResult: Successes and captured failures in discovery order.

    Raises:
        InterfacesDirNotFoundError: ``interfaces_dir`` does not exist.
        NoInterfaceFilesError: ``interfaces_dir`` holds no interface file.
    """
    settings = settings or CompilerSettings()
    files = find_interface_files(interfaces_dir)

    out_dir = os.path.abspath(output_dir)
    if not os.path.isdir(out_dir):
        os.makedirs(out_dir, exist_ok=True)
        logger.info(f"Created output directory: {out_dir}")

    logger.info(f"Found {len(files)} interface files to process...")

    outcomes = _compile_all(files, out_dir, settings)

    successful: List[str] = []
    failures: List[CompileFailure] = []
    for path, failure in outcomes:
        name = contract_name(path)
        if failure is None:
            successful.append(name)
        else:
            failures.append(failure)
        if on_outcome:
            on_outcome(name, failure)

    if failures:
        logger.warning(f"{len(failures)} of {len(files)} interface files failed to compile.")

    index_path = ""
    declaration_path = ""
    if successful:
        index_path, declaration_path = write_index_files(out_dir, unique_names(successful))
        logger.debug(f"Index files written: {index_path}, {declaration_path}")

    return AbiGenerationResult(
        output_dir=out_dir,
        successful=successful,
        failures=failures,
        index_path=index_path,
        declaration_path=declaration_path,
    )


# ==============================================================================
# PRIVATE HELPERS
# ==============================================================================

def _compile_all(
        files: List[str],
        output_dir: str,
        settings: CompilerSettings,
) -> List[Tuple[str, Optional[CompileFailure]]]:
    """Run every compilation and reify each failure as a CompileFailure."""
    with ThreadPoolExecutor(max_workers=settings.jobs, thread_name_prefix="AbiCompiler") as executor:
        futures: List[Tuple[str, Future]] = [
            (path, executor.submit(compile_interface, path, output_dir, settings))
            for path in files
        ]

        outcomes: List[Tuple[str, Optional[CompileFailure]]] = []
        for path, future in futures:
            try:
                future.result()
                outcomes.append((path, None))
            except Exception as e:
                logger.error(f"Compiling {contract_name(path)} failed: {e}")
                outcomes.append((path, CompileFailure(path=path, name=contract_name(path), error=str(e))))

    return outcomes

from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration merge
(defaults, project JSON file, command-line overrides), command dispatch and
result rendering. Typed service errors are mapped to process exit codes.
"""

import json
import sys
from dataclasses import asdict
from typing import Any, Callable, Dict, List, Optional

from deploykit.core.services.abi_generator import generate_abis
from deploykit.core.services.closure import copy_closure
from deploykit.core.services.config_export import export_config
from deploykit.core.services.validator import validate_config
from deploykit.domain.abi_models import AbiGenerationResult, CompileFailure, CompilerSettings
from deploykit.domain.closure_models import ClosureResult, CopiedFile
from deploykit.domain.config import load_config
from deploykit.domain.errors import (
    ConfigLoadError,
    DeployKitError,
    FatalPreconditionError,
    TraversalIOError,
)
from deploykit.domain.export_models import ConfigExportResult
from deploykit.infra.logging import LoggingConfig, configure_logging, get_logger
from deploykit.interface.cli import args as cli_args
from deploykit.utils.i18n import i18n

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_PRECONDITION = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI application workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code (0 success, 1 mid-run failure,
             2 missing input, 130 interrupted).
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Logging bootstrap (console stderr, optional file)
    log_level = "DEBUG" if args.debug else "INFO"
    configure_logging(LoggingConfig(level=log_level, console=True, log_file=args.log_file))

    logger.debug(f"CLI command '{args.command}' initiated. Resolving configuration...")

    # 3. Configuration hierarchy: defaults < project file < CLI flags
    overrides = cli_args.args_to_overrides(args)
    raw_conf = _merge_config(load_config(args.config_file), overrides)
    cfg, warnings = validate_config(raw_conf, strict=False)
    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")

    if cfg["locale"] != i18n.locale:
        i18n.load_locale(cfg["locale"])

    runners: Dict[str, Callable[[Dict[str, Any], bool], int]] = {
        cli_args.COMMAND_COPY_DEPS: _run_copy_deps,
        cli_args.COMMAND_COPY_CONFIG: _run_copy_config,
        cli_args.COMMAND_GEN_ABI: _run_gen_abi,
    }

    # 4. Command execution phase
    try:
        return runners[args.command](cfg, bool(args.json_output))
    except FatalPreconditionError as e:
        return _fail(i18n.t("cli.errors.precondition", error=str(e)), EXIT_PRECONDITION)
    except TraversalIOError as e:
        logger.debug("Traversal aborted", exc_info=True)
        return _fail(i18n.t("cli.errors.io_failure", error=str(e)), EXIT_FAILURE)
    except ConfigLoadError as e:
        return _fail(i18n.t("cli.errors.config_load", error=str(e)), EXIT_FAILURE)
    except KeyboardInterrupt:
        msg = i18n.t("cli.errors.interrupted")
        logger.warning(msg)
        print(msg, file=sys.stderr)
        return EXIT_INTERRUPTED
    except (DeployKitError, OSError) as e:
        logger.critical(i18n.t("cli.errors.unexpected", error=str(e)), exc_info=True)
        print(f"ERROR: {i18n.t('cli.errors.unexpected', error=str(e))}", file=sys.stderr)
        return EXIT_FAILURE

# -----------------------------------------------------------------------------
# COMMAND RUNNERS
# -----------------------------------------------------------------------------

def _run_copy_deps(cfg: Dict[str, Any], json_output: bool) -> int:
    def report(copied: CopiedFile) -> None:
        print(i18n.t("cli.copy_deps.copied", depth=copied.depth, path=copied.rel_path))

    result = copy_closure(
        cfg["input_path"],
        cfg["output_dir"],
        max_depth=cfg["max_depth"],
        source_root=cfg["source_root"],
        on_copied=None if json_output else report,
    )

    if json_output:
        _print_json(result)
    else:
        _print_closure_summary(result)
    return EXIT_OK


def _run_copy_config(cfg: Dict[str, Any], json_output: bool) -> int:
    result = export_config(
        cfg["config_path"],
        cfg["config_output_dir"],
        strip_fields=cfg["strip_fields"],
    )

    if json_output:
        _print_json(result)
    else:
        _print_export_summary(result)
    return EXIT_OK


def _run_gen_abi(cfg: Dict[str, Any], json_output: bool) -> int:
    settings = CompilerSettings(
        compiler=cfg["compiler"],
        retry_delay=cfg["retry_delay"],
        jobs=cfg["jobs"],
    )

    def report(name: str, failure: Optional[CompileFailure]) -> None:
        if failure is None:
            print(i18n.t("cli.gen_abi.generated", name=name))

    result = generate_abis(
        cfg["interfaces_dir"],
        cfg["abi_output_dir"],
        settings=settings,
        on_outcome=None if json_output else report,
    )

    if json_output:
        _print_json(result)
    else:
        _print_abi_summary(result)

    return EXIT_OK if result.ok else EXIT_FAILURE

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Shallow-merge override values into the base configuration.

    Unset (None) overrides and keys unknown to the base are ignored.
    """
    out = dict(base)
    for k, v in overrides.items():
        if k in out and v is not None:
            out[k] = v
    return out

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _fail(msg: str, code: int) -> int:
    logger.error(msg)
    print(f"ERROR: {msg}", file=sys.stderr)
    return code


def _print_json(result: Any) -> None:
    print(json.dumps(asdict(result), ensure_ascii=False, indent=2))


def _print_closure_summary(result: ClosureResult) -> None:
    if result.unresolved:
        logger.debug("\n".join(result.unresolved))
        print(i18n.t("cli.copy_deps.unresolved", count=len(result.unresolved)))
    print(i18n.t("cli.copy_deps.completed"))


def _print_export_summary(result: ConfigExportResult) -> None:
    if result.stripped:
        print(i18n.t("cli.copy_config.stripped", fields=", ".join(result.stripped)))
    print(i18n.t("cli.copy_config.written", path=result.output_path))


def _print_abi_summary(result: AbiGenerationResult) -> None:
    if result.failures:
        print("\n" + i18n.t("cli.gen_abi.partial"), file=sys.stderr)
        for failure in result.failures:
            print(f"  - {i18n.t('cli.gen_abi.failed', name=failure.name, error=failure.error)}",
                  file=sys.stderr)

    if not result.ok:
        print(i18n.t("cli.gen_abi.none"), file=sys.stderr)
        return

    print("\n" + i18n.t("cli.gen_abi.index", path=result.index_path))
    print(i18n.t("cli.gen_abi.index", path=result.declaration_path))

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())

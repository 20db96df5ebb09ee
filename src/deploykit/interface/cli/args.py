from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema of the three DeployKit commands and
translates parsed namespaces into configuration overrides.
"""

import argparse
from typing import Any, Dict, List, Optional

from deploykit.utils.i18n import i18n

COMMAND_COPY_DEPS = "copy-deps"
COMMAND_COPY_CONFIG = "copy-config"
COMMAND_GEN_ABI = "gen-abi"

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the DeployKit CLI.

    Optional values default to None so that the config file can supply them;
    the documented defaults live in ``deploykit.domain.config``.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="deploykit",
        description=i18n.t("app.description"),
    )

    # --- Global options ---
    p.add_argument("--debug", action="store_true", help=i18n.t("cli.args.debug"))
    p.add_argument("--log-file", dest="log_file", default=None, help=i18n.t("cli.args.log_file"))
    p.add_argument(
        "--lang",
        dest="locale",
        default=None,
        choices=i18n.available_locales() or None,
        help=i18n.t("cli.args.lang"),
    )
    p.add_argument("--config", dest="config_file", default=None, help=i18n.t("cli.args.config"))
    p.add_argument("--json", dest="json_output", action="store_true", help=i18n.t("cli.args.json"))

    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    # --- copy-deps ---
    deps = sub.add_parser(COMMAND_COPY_DEPS, help=i18n.t("cli.args.copy_deps"))
    deps.add_argument(
        "-i", "--input",
        dest="input_path",
        required=True,
        help=i18n.t("cli.args.copy_deps_input"),
    )
    deps.add_argument(
        "-o", "--output",
        dest="output_dir",
        default=None,
        help=i18n.t("cli.args.copy_deps_output"),
    )
    deps.add_argument(
        "--max-depth",
        dest="max_depth",
        type=int,
        default=None,
        help=i18n.t("cli.args.max_depth"),
    )
    deps.add_argument(
        "--source-root",
        dest="source_root",
        default=None,
        help=i18n.t("cli.args.source_root"),
    )

    # --- copy-config ---
    conf = sub.add_parser(COMMAND_COPY_CONFIG, help=i18n.t("cli.args.copy_config"))
    conf.add_argument(
        "-i", "--input",
        dest="config_path",
        required=True,
        help=i18n.t("cli.args.copy_config_input"),
    )
    conf.add_argument(
        "-o", "--output",
        dest="config_output_dir",
        default=None,
        help=i18n.t("cli.args.copy_config_output"),
    )
    conf.add_argument(
        "--strip",
        dest="strip_fields",
        default=None,
        help=i18n.t("cli.args.strip"),
    )

    # --- gen-abi ---
    abi = sub.add_parser(COMMAND_GEN_ABI, help=i18n.t("cli.args.gen_abi"))
    abi.add_argument("interfaces_dir", help=i18n.t("cli.args.interfaces_dir"))
    abi.add_argument(
        "abi_output_dir",
        nargs="?",
        default=None,
        help=i18n.t("cli.args.abi_output_dir"),
    )
    abi.add_argument("--compiler", default=None, help=i18n.t("cli.args.compiler"))
    abi.add_argument(
        "--retry-delay",
        dest="retry_delay",
        type=float,
        default=None,
        help=i18n.t("cli.args.retry_delay"),
    )
    abi.add_argument("--jobs", type=int, default=None, help=i18n.t("cli.args.jobs"))

    return p

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into a configuration dictionary.

    Only options of the selected command are present; unset options map to None.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {"locale": args.locale}

    if args.command == COMMAND_COPY_DEPS:
        overrides["input_path"] = args.input_path
        overrides["output_dir"] = args.output_dir
        overrides["max_depth"] = args.max_depth
        overrides["source_root"] = args.source_root

    elif args.command == COMMAND_COPY_CONFIG:
        overrides["config_path"] = args.config_path
        overrides["config_output_dir"] = args.config_output_dir
        if args.strip_fields is not None:
            overrides["strip_fields"] = _split_csv(args.strip_fields)

    elif args.command == COMMAND_GEN_ABI:
        overrides["interfaces_dir"] = args.interfaces_dir
        overrides["abi_output_dir"] = args.abi_output_dir
        overrides["compiler"] = args.compiler
        overrides["retry_delay"] = args.retry_delay
        overrides["jobs"] = args.jobs

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """Convert a comma-separated string into a list of sanitized strings."""
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]

from __future__ import annotations

"""
Domain Error Taxonomy.

Fatal preconditions are detected before any filesystem mutation and map to
exit code 2 in the CLI. Every other error surfaces mid-run and maps to
exit code 1.
"""

from typing import Optional


class DeployKitError(Exception):
    """Base class for every error raised by DeployKit services."""


# -----------------------------------------------------------------------------
# FATAL PRECONDITIONS
# -----------------------------------------------------------------------------

class FatalPreconditionError(DeployKitError):
    """A required input is missing; nothing has been written."""

    def __init__(self, path: str, message: str):
        super().__init__(message)
        self.path = path


class StartFileNotFoundError(FatalPreconditionError):
    def __init__(self, path: str):
        super().__init__(path, f"Start file does not exist: {path}")


class ConfigNotFoundError(FatalPreconditionError):
    def __init__(self, path: str):
        super().__init__(path, f"Config file does not exist: {path}")


class InterfacesDirNotFoundError(FatalPreconditionError):
    def __init__(self, path: str):
        super().__init__(path, f"Interfaces directory does not exist: {path}")


class NoInterfaceFilesError(FatalPreconditionError):
    def __init__(self, path: str):
        super().__init__(path, f"No .sol files found under: {path}")


# -----------------------------------------------------------------------------
# MID-RUN FAILURES
# -----------------------------------------------------------------------------

class TraversalIOError(DeployKitError):
    """A read, copy or mkdir failed while walking the dependency closure."""

    def __init__(self, path: str, cause: OSError):
        super().__init__(f"I/O failure on '{path}': {cause}")
        self.path = path
        self.cause = cause


class ConfigLoadError(DeployKitError):
    """The config source could not be imported or exposes no usable mapping."""


class CompilerError(DeployKitError):
    """The external compiler (or its version-pinned retry) failed."""

    def __init__(self, name: str, message: str, returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.name = name
        self.returncode = returncode
        self.stderr = stderr


class AbiArtifactNotFoundError(DeployKitError):
    """The compiler reported success but no ABI file for the contract was found."""

    def __init__(self, name: str, output_dir: str):
        super().__init__(f"ABI artifact for '{name}' not found in {output_dir}")
        self.name = name
        self.output_dir = output_dir

"""
CLI Error Handling
==================

Consistent error messages and exit codes for the command-line tool.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from kefex_legacy.errors import (
    FileAccessError,
    InvalidArgumentError,
    KefexError,
)


class ExitCode(IntEnum):
    """Exit codes of the command-line tool."""
    SUCCESS = 0
    PROJECT_ERROR = 1    # Project files cannot be loaded or imported
    INVALID_ARGS = 2     # Invalid arguments or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error
    CHECK_FAILED = 4     # A file checksum does not verify


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None
) -> NoReturn:
    """
    Print an error message and exit with the matching exit code.

    Args:
        error: The exception that was raised
        verbose: If True, print the traceback of internal errors
        error_type: Optional prefix for the error message (e.g., "Import")

    Raises:
        SystemExit: Always
    """
    if isinstance(error, (InvalidArgumentError, FileAccessError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, KefexError):
        prefix = f"{error_type} error: " if error_type else "Error: "
        click.echo(f"{prefix}{error}", err=True)
        sys.exit(ExitCode.PROJECT_ERROR)

    elif isinstance(error, (FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)

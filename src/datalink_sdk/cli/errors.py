"""
CLI Error Reporting
===================

Maps exceptions raised while building or sending a transmission to a
one-line message on stderr and a process exit code.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

from datalink_sdk.errors import (
    CodecError,
    CommsError,
    ContainerError,
    DataFileError,
    DatalinkError,
)


class ExitCode(IntEnum):
    """Exit codes shared by every tdlink command."""
    SUCCESS = 0
    DATA_ERROR = 1       # Bad data file, container file or transfer failure
    INVALID_ARGS = 2     # Invalid arguments or missing files
    INTERNAL_ERROR = 3   # Unexpected internal error


# Checked in order; the first matching class names the failure
_LABELS: tuple[tuple[type, str], ...] = (
    (DataFileError, "Data file"),
    (ContainerError, "Container file"),
    (CodecError, "Invalid value"),
    (CommsError, "Transfer"),
)


def describe_error(error: DatalinkError) -> str:
    """One-line description of a library error, prefixed by its family."""
    label = next((name for cls, name in _LABELS if isinstance(error, cls)), "Error")
    return f"{label}: {error}"


def handle_cli_exception(
    error: Exception,
    verbose: bool = False,
    error_type: str | None = None,
) -> NoReturn:
    """
    Report ``error`` on stderr and exit.

    Library errors exit with DATA_ERROR, usage problems with INVALID_ARGS,
    anything else with INTERNAL_ERROR (traceback printed when verbose).

    Args:
        error: The exception that was raised
        verbose: Print a traceback for internal errors
        error_type: Overrides the derived message prefix (e.g., "Send")
    """
    if isinstance(error, DatalinkError):
        text = f"{error_type} error: {error}" if error_type else describe_error(error)
        click.echo(text, err=True)
        sys.exit(ExitCode.DATA_ERROR)

    if isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    click.echo(f"Internal error: {error}", err=True)
    if verbose:
        traceback.print_exc()
    sys.exit(ExitCode.INTERNAL_ERROR)

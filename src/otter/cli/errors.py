"""
CLI Error Handling
==================

Exit codes and the shared exception handler for the Otter CLI tools.
"""

import logging
import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click

logger = logging.getLogger(__name__)


class ExitCode(IntEnum):
    """Standard exit codes for CLI tools."""
    SUCCESS = 0
    BUILD_ERROR = 1      # Lexing, parsing or generation error
    INVALID_ARGS = 2     # Invalid arguments or unreadable input
    INTERNAL_ERROR = 3   # Unexpected internal error


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception raised by a CLI tool and exit.

    Compile errors are printed exactly as formatted by the error class
    (they already carry the "error:" prefix). Anything that is not an
    Otter or I/O error is reported as an internal error, with a traceback
    in verbose mode.

    Raises:
        SystemExit: Always
    """
    from otter.frontend.errors import OtterCompileError
    from otter.errors import OtterError

    if isinstance(error, OtterCompileError):
        click.echo(str(error), err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, OtterError):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.BUILD_ERROR)

    elif isinstance(error, (FileNotFoundError, PermissionError, IsADirectoryError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        logger.debug("Unhandled exception", exc_info=error)
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exception(type(error), error, error.__traceback__)
        sys.exit(ExitCode.INTERNAL_ERROR)

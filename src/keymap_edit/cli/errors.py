"""
kmedit Exit Codes
=================

Maps the failures of a kmedit command onto an exit status and a message
on stderr. Keymap errors print the parser's own "line:col: error:" report.
"""

import sys
import traceback
from enum import IntEnum
from typing import NoReturn

import click


class ExitCode(IntEnum):
    """Exit statuses of the kmedit commands."""
    SUCCESS = 0
    KEYMAP_ERROR = 1     # Source does not parse, or the edit would break it
    INVALID_ARGS = 2     # Bad option combination, unreadable or non-UTF-8 file
    INTERNAL_ERROR = 3


def handle_cli_exception(error: Exception, verbose: bool = False) -> NoReturn:
    """
    Report an exception raised by a kmedit command and exit.

    With verbose set, unexpected errors also print their traceback.
    """
    from keymap_edit.errors import KeymapError

    if isinstance(error, KeymapError):
        click.echo(str(error), err=True)
        sys.exit(ExitCode.KEYMAP_ERROR)

    elif isinstance(error, UnicodeDecodeError):
        click.echo(f"Error: source is not valid UTF-8: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    elif isinstance(error, (click.BadParameter, FileNotFoundError, PermissionError)):
        click.echo(f"Error: {error}", err=True)
        sys.exit(ExitCode.INVALID_ARGS)

    else:
        click.echo(f"Internal error: {error}", err=True)
        if verbose:
            traceback.print_exc()
        sys.exit(ExitCode.INTERNAL_ERROR)

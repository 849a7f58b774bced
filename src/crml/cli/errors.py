"""Shared error handling for the crml CLI."""

import sys
from typing import NoReturn

import typer

from crml.errors import CrmlError


def exit_with_error(message: str, exit_code: int = 1) -> NoReturn:
    """Exit the program with an error message."""
    typer.secho(f"Error: {message}", err=True, fg=typer.colors.RED)
    sys.exit(exit_code)


def handle_error(error: Exception) -> NoReturn:
    """Report a failed command and exit."""
    if isinstance(error, (CrmlError, OSError)):
        exit_with_error(str(error))
    # Unexpected error
    typer.secho(f"Unexpected error: {error}", err=True, fg=typer.colors.RED)
    sys.exit(1)

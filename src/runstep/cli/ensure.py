"""CLI error handling utilities with styled output.

Ensure reports fatal CLI errors with a consistent red "Error:" prefix.
"""

from typing import NoReturn

import click

from runstep.cli.output import user_output


class Ensure:
    """Helper class for failing CLI commands with consistent error handling."""

    @staticmethod
    def fail(error_message: str, exit_code: int = 1) -> NoReturn:
        """Output styled error and exit with the given code."""
        user_output(click.style("Error: ", fg="red") + error_message)
        raise SystemExit(exit_code)

"""Output routing for CLI commands.

user_output goes to stderr (status, errors, live command output).
machine_output goes to stdout (the command result, safe to pipe).
"""

import click


def user_output(message: str = "", nl: bool = True) -> None:
    click.echo(message, err=True, nl=nl)


def machine_output(message: str = "", nl: bool = True) -> None:
    click.echo(message, nl=nl)

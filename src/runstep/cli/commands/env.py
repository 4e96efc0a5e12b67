"""Env command implementation."""

from pathlib import Path
from typing import Any

import click

from runstep.cli.commands.context_options import (
    build_execution_context,
    execution_context_options,
)
from runstep.cli.output import machine_output
from runstep.core.context import RunStepApp


@click.command("env")
@click.option(
    "--dir",
    "path",
    type=click.Path(file_okay=False, resolve_path=True, path_type=Path),
    default=".",
    help="Working directory the command would run in.",
)
@click.option("--derived-only", is_flag=True, help="Omit variables inherited from this process.")
@execution_context_options
@click.pass_obj
def env_cmd(app: RunStepApp, path: Path, derived_only: bool, **context_values: Any) -> None:
    """Print the environment a run step would execute with."""
    ctx = build_execution_context(**context_values)
    runner = app.runner()
    if derived_only:
        runner.base_env = {}
    env = runner.environment(ctx, path)
    for key in sorted(env):
        machine_output(f"{key}={env[key]}")

"""Run command implementation."""

from pathlib import Path
from typing import Any

import click

from runstep.cli.commands.context_options import (
    build_execution_context,
    execution_context_options,
)
from runstep.cli.ensure import Ensure
from runstep.cli.output import machine_output
from runstep.core.context import RunStepApp
from runstep.core.errors import CommandFailedError
from runstep.core.post_process import PostProcessMode
from runstep.core.shell_runner import CommandShell
from runstep.core.terraform.abc import EnsureVersionError


def parse_env_pairs(
    ctx: click.Context, param: click.Parameter, values: tuple[str, ...]
) -> dict[str, str]:
    """Click callback turning repeated KEY=VALUE options into a dict."""
    envs: dict[str, str] = {}
    for value in values:
        key, sep, val = value.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {value!r}", ctx=ctx, param=param)
        envs[key] = val
    return envs


@click.command("run")
@click.argument("command")
@click.option(
    "--dir",
    "path",
    type=click.Path(exists=True, file_okay=False, resolve_path=True, path_type=Path),
    default=".",
    help="Working directory to run the command in.",
)
@click.option(
    "--env",
    "envs",
    multiple=True,
    callback=parse_env_pairs,
    help="Extra environment variable as KEY=VALUE. Repeatable.",
)
@click.option(
    "--post-process",
    type=click.Choice([mode.value for mode in PostProcessMode]),
    default=PostProcessMode.SHOW.value,
    show_default=True,
    help="How the output is returned once the command succeeds.",
)
@click.option("--shell", "shell_name", default="sh", show_default=True, help="Shell interpreter.")
@click.option(
    "--shell-arg",
    "shell_args",
    multiple=True,
    help="Argument passed to the shell before the command. Repeatable. [default: -c]",
)
@click.option("--no-stream", is_flag=True, help="Do not print output lines while running.")
@execution_context_options
@click.pass_obj
def run_cmd(
    app: RunStepApp,
    command: str,
    path: Path,
    envs: dict[str, str],
    post_process: str,
    shell_name: str,
    shell_args: tuple[str, ...],
    no_stream: bool,
    **context_values: Any,
) -> None:
    """Run COMMAND as a custom run step for a project.

    The command runs through a shell with the project's environment
    (WORKSPACE, PLANFILE, PULL_NUM, ...). Output lines are shown on stderr as
    they arrive; the final output is printed on stdout.
    """
    ctx = build_execution_context(**context_values)
    shell = CommandShell(shell=shell_name, shell_args=shell_args or ("-c",))

    try:
        output = app.runner().run(
            ctx,
            command,
            path,
            envs,
            stream_output=not no_stream,
            post_process=PostProcessMode(post_process),
            shell=shell,
        )
    except EnsureVersionError as e:
        Ensure.fail(str(e))
    except CommandFailedError as e:
        Ensure.fail(str(e).rstrip("\n"), exit_code=e.exit_code)

    machine_output(output, nl=False)

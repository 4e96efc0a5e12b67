import logging
import os

import click

from runstep.cli.commands.env import env_cmd
from runstep.cli.commands.run import run_cmd
from runstep.cli.ensure import Ensure
from runstep.core.context import create_app

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags

DEBUG_ENV_VAR = "RUNSTEP_DEBUG"


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="runstep")
@click.option("--debug", is_flag=True, help="Log debug output to stderr.")
@click.pass_context
def cli(ctx: click.Context, debug: bool) -> None:
    """Run custom Terraform/OpenTofu workflow steps."""
    if debug or os.environ.get(DEBUG_ENV_VAR):
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")

    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        try:
            ctx.obj = create_app()
        except ValueError as e:
            Ensure.fail(str(e))


cli.add_command(run_cmd)
cli.add_command(env_cmd)


def main() -> None:
    """CLI entry point used by the `runstep` console script."""
    cli()

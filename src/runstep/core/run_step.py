"""Custom run-step execution.

RunStepRunner is the entry point the workflow calls for a `run` step: it
makes sure the project's tool version is installed, builds the step's
environment, runs the command and post-processes the output.
"""

import os
from collections.abc import Mapping
from pathlib import Path

from runstep.core.config import ToolConfig
from runstep.core.environment import build_environment
from runstep.core.errors import CommandFailedError
from runstep.core.output_handler import OutputHandler
from runstep.core.post_process import PostProcessMode, apply_post_process
from runstep.core.project import ExecutionContext
from runstep.core.resolver import ResolvedTool, resolve_tool
from runstep.core.shell_runner import CommandShell, ShellCommandRunner
from runstep.core.terraform.abc import TerraformClient


class RunStepRunner:
    """Runs custom commands for a project.

    Attributes:
        terraform_client: Collaborator that installs tool versions on demand
        config: Default distribution, version and tool bin directory
        output_handler: Receives output lines while commands run
        base_env: Environment commands inherit; None means this process's
            environment at the time of each run
    """

    def __init__(
        self,
        terraform_client: TerraformClient,
        config: ToolConfig,
        output_handler: OutputHandler,
        base_env: Mapping[str, str] | None = None,
    ) -> None:
        self.terraform_client = terraform_client
        self.config = config
        self.output_handler = output_handler
        self.base_env = base_env

    def environment(
        self,
        ctx: ExecutionContext,
        path: Path,
        envs: Mapping[str, str] | None = None,
    ) -> dict[str, str]:
        """Environment a command for ctx would run with, without ensuring the tool."""
        return self._build_environment(ctx, resolve_tool(ctx, self.config), path, envs)

    def _build_environment(
        self,
        ctx: ExecutionContext,
        tool: ResolvedTool,
        path: Path,
        envs: Mapping[str, str] | None,
    ) -> dict[str, str]:
        base_env = self.base_env if self.base_env is not None else os.environ
        return build_environment(ctx, path, tool, self.config.bin_dir, envs, base_env)

    def run(
        self,
        ctx: ExecutionContext,
        command: str,
        path: Path,
        envs: Mapping[str, str] | None = None,
        stream_output: bool = True,
        post_process: PostProcessMode = PostProcessMode.SHOW,
        shell: CommandShell | None = None,
    ) -> str:
        """Run a custom command for a project.

        Args:
            ctx: Execution context of the step
            command: Shell command text, passed to the shell unchanged
            path: Existing working directory reserved for this step
            envs: Extra variables from the step definition
            stream_output: Whether lines go to the output handler while running
            post_process: How successful output is returned
            shell: Shell to run the command with; defaults to `sh -c`

        Returns:
            The command's output after post-processing

        Raises:
            EnsureVersionError: If the tool version could not be installed;
                nothing is run in that case
            CommandFailedError: If the command could not start or exited non-zero
        """
        tool = resolve_tool(ctx, self.config)
        try:
            self.terraform_client.ensure_version(ctx.log, tool.distribution, tool.version)
        except Exception as e:
            ctx.log.debug("error: %s: ensuring %s %s", e, tool.distribution.bin_name, tool.version)
            raise

        env = self._build_environment(ctx, tool, path, envs)

        runner = ShellCommandRunner(
            command,
            env=env,
            path=path,
            stream_output=stream_output,
            output_handler=self.output_handler,
            shell=shell,
        )
        try:
            output = runner.run(ctx)
        except CommandFailedError as e:
            if not ctx.custom_policy_check:
                ctx.log.debug("error: %s", e)
            raise

        return apply_post_process(post_process, output, tool.version)

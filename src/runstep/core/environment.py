"""Environment construction for run-step commands.

Every variable a custom command may rely on is derived here from the
execution context. The builder is pure: it reads nothing from the process
environment except through the explicit base_env argument.
"""

import os
from collections.abc import Mapping
from pathlib import Path

from runstep.core.project import ExecutionContext
from runstep.core.resolver import ResolvedTool

TERRAFORM_VERSION_VAR = "ATLANTIS_TERRAFORM_VERSION"
TERRAFORM_DISTRIBUTION_VAR = "ATLANTIS_TERRAFORM_DISTRIBUTION"
COMMENT_ARGS_VAR = "COMMENT_ARGS"


def derived_variables(
    ctx: ExecutionContext,
    path: Path,
    tool: ResolvedTool,
) -> dict[str, str]:
    """Variables computed from the context, excluding PATH."""
    directory = str(path)
    return {
        "WORKSPACE": ctx.workspace,
        TERRAFORM_VERSION_VAR: str(tool.version),
        TERRAFORM_DISTRIBUTION_VAR: tool.distribution.bin_name,
        "DIR": directory,
        "PLANFILE": os.path.join(directory, ctx.plan_filename),
        "SHOWFILE": os.path.join(directory, ctx.show_result_filename),
        "POLICYCHECKFILE": os.path.join(directory, ctx.policy_check_result_filename),
        "PROJECT_NAME": ctx.project_name,
        "REPO_REL_DIR": ctx.repo_rel_dir,
        "BASE_REPO_NAME": ctx.base_repo.name,
        "BASE_REPO_OWNER": ctx.base_repo.owner,
        "HEAD_REPO_NAME": ctx.head_repo.name,
        "HEAD_REPO_OWNER": ctx.head_repo.owner,
        "HEAD_BRANCH_NAME": ctx.pull.head_branch,
        "HEAD_COMMIT": ctx.pull.head_commit,
        "BASE_BRANCH_NAME": ctx.pull.base_branch,
        "PULL_NUM": str(ctx.pull.num),
        "PULL_URL": ctx.pull.url,
        "PULL_AUTHOR": ctx.pull.author,
        "USER_NAME": ctx.user.username,
        COMMENT_ARGS_VAR: " ".join(ctx.escaped_comment_args),
    }


def build_environment(
    ctx: ExecutionContext,
    path: Path,
    tool: ResolvedTool,
    bin_dir: Path,
    envs: Mapping[str, str] | None = None,
    base_env: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Build the complete environment a run-step command executes with.

    Merge order is base_env, then envs, then the derived variables, so a
    caller-supplied variable can never shadow WORKSPACE, PLANFILE, PATH and
    the rest.

    Args:
        ctx: Execution context of the run step
        path: Absolute working directory of the command
        tool: Effective distribution and version
        bin_dir: Directory holding the tool binaries; prepended to PATH
        envs: Extra variables from the step definition
        base_env: Inherited environment the child is allowed to see. Its PATH
            is the one bin_dir is prepended to.

    Returns:
        Fresh mapping of variable name to value
    """
    inherited = dict(base_env) if base_env is not None else {}
    inherited_path = inherited.get("PATH", "")

    env = inherited
    if envs:
        env.update(envs)
    env.update(derived_variables(ctx, path, tool))
    env["PATH"] = f"{bin_dir}:{inherited_path}"
    return env

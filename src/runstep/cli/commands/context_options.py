"""Shared click options describing the execution context of a run step."""

from collections.abc import Callable
from typing import Any, TypeVar

import click
from packaging.version import InvalidVersion, Version

from runstep.core.project import ExecutionContext, PullRequest, Repo, User

F = TypeVar("F", bound=Callable[..., Any])


class VersionParamType(click.ParamType):
    """Click parameter accepting a tool version such as 1.5.7 or v0.11.0."""

    name = "version"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> Version:
        if isinstance(value, Version):
            return value
        try:
            return Version(value)
        except InvalidVersion:
            self.fail(f"{value!r} is not a valid version", param, ctx)


VERSION = VersionParamType()


def parse_repo(full_name: str) -> Repo:
    """Split "owner/name" into a Repo; owners may themselves contain "/".

    Examples:
        >>> parse_repo("runatlantis/atlantis")
        Repo(name='atlantis', owner='runatlantis')
        >>> parse_repo("group/subgroup/project").owner
        'group/subgroup'
    """
    owner, _, name = full_name.rpartition("/")
    return Repo(name=name, owner=owner)


_CONTEXT_OPTIONS = [
    click.option("--workspace", "-w", default="default", show_default=True, help="Workspace."),
    click.option("--project", "project_name", default="", help="Project name from repo config."),
    click.option(
        "--repo-rel-dir",
        default=".",
        show_default=True,
        help="Project directory relative to the repo root.",
    ),
    click.option("--distribution", default=None, help="Tool distribution (terraform or opentofu)."),
    click.option("--tf-version", type=VERSION, default=None, help="Tool version the project pins."),
    click.option("--base-repo", default="", help="Base repository as OWNER/NAME."),
    click.option("--head-repo", default="", help="Head repository as OWNER/NAME."),
    click.option("--pull-num", type=int, default=0, help="Pull request number."),
    click.option("--pull-url", default="", help="Pull request URL."),
    click.option("--pull-author", default="", help="Pull request author."),
    click.option("--head-branch", default="", help="Pull request head branch."),
    click.option("--base-branch", default="", help="Pull request base branch."),
    click.option("--head-commit", default="", help="Pull request head commit."),
    click.option("--user", "username", default="", help="User that triggered the step."),
    click.option(
        "--comment-arg",
        "comment_args",
        multiple=True,
        help="Escaped extra argument from the triggering comment. Repeatable.",
    ),
    click.option("--policy-check", is_flag=True, help="Run as part of a policy check."),
]


def execution_context_options(func: F) -> F:
    """Attach all execution-context options to a command."""
    for option in reversed(_CONTEXT_OPTIONS):
        func = option(func)
    return func


def build_execution_context(
    *,
    workspace: str,
    project_name: str,
    repo_rel_dir: str,
    distribution: str | None,
    tf_version: Version | None,
    base_repo: str,
    head_repo: str,
    pull_num: int,
    pull_url: str,
    pull_author: str,
    head_branch: str,
    base_branch: str,
    head_commit: str,
    username: str,
    comment_args: tuple[str, ...],
    policy_check: bool,
) -> ExecutionContext:
    """Build an ExecutionContext from the values of execution_context_options."""
    base = parse_repo(base_repo)
    return ExecutionContext(
        base_repo=base,
        head_repo=parse_repo(head_repo) if head_repo else base,
        pull=PullRequest(
            num=pull_num,
            url=pull_url,
            author=pull_author,
            head_branch=head_branch,
            base_branch=base_branch,
            head_commit=head_commit,
        ),
        user=User(username=username),
        workspace=workspace,
        repo_rel_dir=repo_rel_dir,
        project_name=project_name,
        terraform_distribution=distribution,
        terraform_version=tf_version,
        escaped_comment_args=tuple(comment_args),
        custom_policy_check=policy_check,
    )

"""Per-invocation execution context for a project's run step.

ExecutionContext describes the repository, pull request, user and project that
triggered a run step. It is created by the caller for each step and never
mutated afterwards.
"""

import logging
from dataclasses import dataclass, field

from packaging.version import Version

PLAN_FILE_SUFFIX = ".tfplan"
SHOW_FILE_SUFFIX = ".json"
POLICY_CHECK_FILE_SUFFIX = "-policyout.json"

# Path separators in project names are folded into this token so that
# generated filenames stay flat.
PROJECT_NAME_SEPARATOR = "::"


@dataclass(frozen=True)
class Repo:
    """Repository identity as seen by the VCS host."""

    name: str = ""
    owner: str = ""

    @property
    def full_name(self) -> str:
        if not self.owner:
            return self.name
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True)
class PullRequest:
    """Pull request that triggered the run step."""

    num: int = 0
    url: str = ""
    author: str = ""
    head_branch: str = ""
    base_branch: str = ""
    head_commit: str = ""


@dataclass(frozen=True)
class User:
    """User whose comment or push triggered the run step."""

    username: str = ""


@dataclass(frozen=True)
class ExecutionContext:
    """Immutable descriptor of the state a run step executes against.

    Attributes:
        base_repo: Repository the pull request targets
        head_repo: Repository the pull request's changes come from
        pull: Pull request identity
        user: Triggering user
        workspace: Terraform workspace name
        repo_rel_dir: Project directory relative to the repository root
        project_name: Project name from repo config; may be empty or contain "/"
        terraform_distribution: Distribution requested by the project, None for default
        terraform_version: Version requested by the project, None for default
        escaped_comment_args: Extra arguments from the triggering comment,
            already shell-escaped
        custom_policy_check: Whether this step belongs to a policy check
        log: Logger for this project's run; passed through to collaborators
    """

    base_repo: Repo = field(default_factory=Repo)
    head_repo: Repo = field(default_factory=Repo)
    pull: PullRequest = field(default_factory=PullRequest)
    user: User = field(default_factory=User)
    workspace: str = "default"
    repo_rel_dir: str = "."
    project_name: str = ""
    terraform_distribution: str | None = None
    terraform_version: Version | None = None
    escaped_comment_args: tuple[str, ...] = ()
    custom_policy_check: bool = False
    log: logging.Logger = field(
        default_factory=lambda: logging.getLogger("runstep.project"), compare=False
    )

    @property
    def job_id(self) -> str:
        """Identifier the live output of this run is published under.

        Combines repository, pull request, project directory, workspace and
        project name so that concurrent steps of one pull request stay apart.
        """
        return "/".join(
            [
                self.base_repo.full_name,
                str(self.pull.num),
                self.repo_rel_dir,
                self.workspace,
                self.project_name,
            ]
        )

    @property
    def plan_filename(self) -> str:
        return _project_filename(self.workspace, self.project_name, PLAN_FILE_SUFFIX)

    @property
    def show_result_filename(self) -> str:
        return _project_filename(self.workspace, self.project_name, SHOW_FILE_SUFFIX)

    @property
    def policy_check_result_filename(self) -> str:
        return _project_filename(self.workspace, self.project_name, POLICY_CHECK_FILE_SUFFIX)


def sanitize_project_name(project_name: str) -> str:
    """Replace path separators so a project name can be part of a filename.

    Examples:
        >>> sanitize_project_name("my/project/name")
        'my::project::name'
    """
    return project_name.replace("/", PROJECT_NAME_SEPARATOR)


def _project_filename(workspace: str, project_name: str, suffix: str) -> str:
    if project_name == "":
        return f"{workspace}{suffix}"
    return f"{sanitize_project_name(project_name)}-{workspace}{suffix}"

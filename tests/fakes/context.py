"""Factory functions for creating test contexts."""

from pathlib import Path

from packaging.version import Version

from runstep.core.config import ToolConfig
from runstep.core.context import RunStepApp
from runstep.core.distribution import Distribution
from runstep.core.project import ExecutionContext, PullRequest, Repo, User
from tests.fakes.output_handler import FakeOutputHandler
from tests.fakes.terraform import FakeTerraformClient

TEST_BIN_DIR = Path("/bin/dir")


def create_test_config(
    *,
    default_distribution: Distribution = Distribution.TERRAFORM,
    default_version: str = "0.8",
    bin_dir: Path = TEST_BIN_DIR,
) -> ToolConfig:
    return ToolConfig(
        default_distribution=default_distribution,
        default_version=Version(default_version),
        bin_dir=bin_dir,
    )


def create_test_execution_context(**overrides: object) -> ExecutionContext:
    """ExecutionContext describing a typical pull request; fields can be overridden."""
    values: dict[str, object] = {
        "base_repo": Repo(name="basename", owner="baseowner"),
        "head_repo": Repo(name="headname", owner="headowner"),
        "pull": PullRequest(
            num=2,
            url="https://github.com/runatlantis/atlantis/pull/2",
            author="acme",
            head_branch="add-feat",
            base_branch="main",
            head_commit="12345abcdef",
        ),
        "user": User(username="acme-user"),
        "workspace": "myworkspace",
        "repo_rel_dir": "mydir",
        "escaped_comment_args": ("-target=resource1", "-target=resource2"),
    }
    values.update(overrides)
    return ExecutionContext(**values)  # type: ignore[arg-type]


def create_test_app(
    *,
    config: ToolConfig | None = None,
    terraform_client: FakeTerraformClient | None = None,
    output_handler: FakeOutputHandler | None = None,
) -> RunStepApp:
    """Create a RunStepApp wired entirely with fakes.

    Args:
        config: Tool config. If None, uses create_test_config() defaults.
        terraform_client: If None, creates a FakeTerraformClient that always succeeds.
        output_handler: If None, creates an empty FakeOutputHandler.
    """
    tool_config = config if config is not None else create_test_config()
    return RunStepApp(
        config=tool_config,
        terraform_client=terraform_client if terraform_client is not None else FakeTerraformClient(),
        output_handler=output_handler if output_handler is not None else FakeOutputHandler(),
    )

"""CLI tests for runstep run.

The runner itself is covered by tests/integration/test_run_step.py; these
tests only check option parsing, output routing and exit codes.
"""

from pathlib import Path

from click.testing import CliRunner
from packaging.version import Version

from runstep.cli.cli import cli
from runstep.core.distribution import Distribution
from runstep.core.terraform.abc import EnsureVersionError
from tests.fakes.context import create_test_app
from tests.fakes.output_handler import FakeOutputHandler
from tests.fakes.terraform import FakeTerraformClient


def test_run_prints_output_on_stdout(tmp_path: Path) -> None:
    app = create_test_app()

    result = CliRunner().invoke(cli, ["run", "echo hi", "--dir", str(tmp_path)], obj=app)

    assert result.exit_code == 0, result.output
    assert result.stdout == "hi\n"


def test_run_passes_context_options(tmp_path: Path) -> None:
    terraform = FakeTerraformClient()
    app = create_test_app(terraform_client=terraform)

    result = CliRunner().invoke(
        cli,
        [
            "run",
            "echo $WORKSPACE $PROJECT_NAME $BASE_REPO_OWNER/$BASE_REPO_NAME $PULL_NUM $COMMENT_ARGS",
            "--dir",
            str(tmp_path),
            "--workspace",
            "staging",
            "--project",
            "net/core",
            "--base-repo",
            "acme/infra",
            "--pull-num",
            "12",
            "--comment-arg",
            "-lock=false",
            "--comment-arg",
            "-refresh=false",
            "--distribution",
            "opentofu",
            "--tf-version",
            "1.6.2",
        ],
        obj=app,
    )

    assert result.exit_code == 0, result.output
    assert result.stdout == "staging net/core acme/infra 12 -lock=false -refresh=false\n"
    assert terraform.ensure_calls == [(Distribution.OPENTOFU, Version("1.6.2"))]


def test_run_streams_lines_to_output_handler(tmp_path: Path) -> None:
    handler = FakeOutputHandler()
    app = create_test_app(output_handler=handler)

    CliRunner().invoke(cli, ["run", "echo a; echo b", "--dir", str(tmp_path)], obj=app)

    assert list(handler.all_lines.values()) == [["a", "b"]]


def test_run_no_stream(tmp_path: Path) -> None:
    handler = FakeOutputHandler()
    app = create_test_app(output_handler=handler)

    result = CliRunner().invoke(
        cli, ["run", "echo a", "--dir", str(tmp_path), "--no-stream"], obj=app
    )

    assert result.exit_code == 0, result.output
    assert handler.all_lines == {}


def test_run_env_option(tmp_path: Path) -> None:
    app = create_test_app()

    result = CliRunner().invoke(
        cli,
        ["run", "echo $FOO", "--dir", str(tmp_path), "--env", "FOO=bar=baz"],
        obj=app,
    )

    assert result.exit_code == 0, result.output
    assert result.stdout == "bar=baz\n"


def test_run_rejects_malformed_env(tmp_path: Path) -> None:
    app = create_test_app()

    result = CliRunner().invoke(
        cli, ["run", "true", "--dir", str(tmp_path), "--env", "NOEQUALS"], obj=app
    )

    assert result.exit_code == 2
    assert "expected KEY=VALUE" in result.output


def test_run_rejects_invalid_version(tmp_path: Path) -> None:
    app = create_test_app()

    result = CliRunner().invoke(
        cli, ["run", "true", "--dir", str(tmp_path), "--tf-version", "latest!"], obj=app
    )

    assert result.exit_code == 2
    assert "not a valid version" in result.output


def test_run_failure_exits_with_command_status(tmp_path: Path) -> None:
    app = create_test_app()

    result = CliRunner().invoke(cli, ["run", "lkjlkj", "--dir", str(tmp_path)], obj=app)

    assert result.exit_code == 127
    assert 'Error: exit status 127: running "lkjlkj" in' in result.output
    assert result.stdout == ""


def test_run_ensure_failure_exits_1(tmp_path: Path) -> None:
    failure = EnsureVersionError(Distribution.TERRAFORM, Version("0.8"), "download failed")
    app = create_test_app(terraform_client=FakeTerraformClient(error=failure))

    result = CliRunner().invoke(cli, ["run", "echo hi", "--dir", str(tmp_path)], obj=app)

    assert result.exit_code == 1
    assert "download failed" in result.output


def test_run_hide_post_process(tmp_path: Path) -> None:
    app = create_test_app()

    result = CliRunner().invoke(
        cli, ["run", "echo hi", "--dir", str(tmp_path), "--post-process", "hide"], obj=app
    )

    assert result.exit_code == 0, result.output
    assert result.stdout == ""


def test_run_custom_shell(tmp_path: Path) -> None:
    app = create_test_app()

    result = CliRunner().invoke(
        cli,
        [
            "run",
            "false; echo unreachable",
            "--dir",
            str(tmp_path),
            "--shell",
            "sh",
            "--shell-arg",
            "-e",
            "--shell-arg",
            "-c",
        ],
        obj=app,
    )

    assert result.exit_code == 1
    assert "unreachable" not in result.stdout

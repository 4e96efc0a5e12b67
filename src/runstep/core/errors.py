"""Failure normalization for run-step commands.

Every way a command can fail once the tool is ready (it could not be
started, the shell rejected it, or it exited non-zero) is reported as a
CommandFailedError carrying the exit status, the command text and the
working directory.
"""

from enum import Enum

# Exit statuses POSIX shells use for these conditions.
SHELL_SYNTAX_ERROR_EXIT_CODE = 2
COMMAND_NOT_FOUND_EXIT_CODE = 127


class FailureKind(Enum):
    """Classification of a failed run-step command."""

    SYNTAX = "syntax"
    LAUNCH = "launch"
    NON_ZERO_EXIT = "non_zero_exit"


class CommandFailedError(Exception):
    """A run-step command did not complete successfully.

    Attributes:
        exit_code: Exit status of the shell, or 127 if it never started
        command: Command text exactly as supplied
        path: Working directory the command ran in
        output: Output captured before the failure, or the launch error detail
    """

    def __init__(self, exit_code: int, command: str, path: str, output: str) -> None:
        self.exit_code = exit_code
        self.command = command
        self.path = path
        self.output = output
        super().__init__(
            f'exit status {exit_code}: running "{command}" in {path}: \n{output}'
        )

    @property
    def kind(self) -> FailureKind:
        if self.exit_code == SHELL_SYNTAX_ERROR_EXIT_CODE:
            return FailureKind.SYNTAX
        if self.exit_code == COMMAND_NOT_FOUND_EXIT_CODE:
            return FailureKind.LAUNCH
        return FailureKind.NON_ZERO_EXIT


def normalize_failure(
    command: str,
    path: str,
    *,
    returncode: int | None = None,
    launch_error: OSError | None = None,
    output: str = "",
) -> CommandFailedError:
    """Map a raw process outcome to a CommandFailedError.

    Exactly one of returncode or launch_error describes the failure. A
    process that could not be started is reported like a shell that could
    not find its command. A process killed by a signal reports the shell
    convention 128 + signal number.
    """
    if launch_error is not None:
        detail = launch_error.strerror or str(launch_error)
        if launch_error.filename is not None:
            detail = f"{detail}: {launch_error.filename}"
        return CommandFailedError(COMMAND_NOT_FOUND_EXIT_CODE, command, path, detail)

    if returncode is None:
        raise ValueError("normalize_failure needs a returncode or a launch_error")

    exit_code = returncode if returncode >= 0 else 128 - returncode
    return CommandFailedError(exit_code, command, path, output)

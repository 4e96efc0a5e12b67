"""Shell command execution with live and buffered output.

ShellCommandRunner runs one command through a shell, forwards each output
line to an OutputHandler while the process is still running, and returns
the complete output once it exits.

Implementation details:
- stdout and stderr share one pipe, so lines keep the order the shell wrote them
- a single reader thread owns the line buffer; the caller's thread only reads
  it after joining the reader
- the child runs in its own session so that an interrupted wait can kill the
  whole process group, not just the shell
"""

import logging
import os
import signal
import subprocess
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import IO, cast

import click

from runstep.core.errors import normalize_failure
from runstep.core.output_handler import OutputHandler
from runstep.core.project import ExecutionContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandShell:
    """Shell interpreter and the arguments that precede the command text."""

    shell: str = "sh"
    shell_args: tuple[str, ...] = ("-c",)

    def argv(self, command: str) -> list[str]:
        return [self.shell, *self.shell_args, command]


DEFAULT_SHELL = CommandShell()


def clean_line(raw: bytes) -> str:
    """Decode one raw output line and drop its terminator and ANSI escapes."""
    line = raw.decode("utf-8", errors="replace")
    line = line.removesuffix("\n").removesuffix("\r")
    return click.unstyle(line)


class ShellCommandRunner:
    """Runs a single command and collects its output.

    Example:
        >>> from runstep.core.output_handler import NoopOutputHandler
        >>> runner = ShellCommandRunner(
        ...     "echo hi", env={"PATH": "/usr/bin:/bin"}, path=Path("/tmp"),
        ...     stream_output=False, output_handler=NoopOutputHandler(),
        ... )
        >>> runner.run(ExecutionContext())
        'hi\\n'
    """

    def __init__(
        self,
        command: str,
        *,
        env: Mapping[str, str],
        path: Path,
        stream_output: bool,
        output_handler: OutputHandler,
        shell: CommandShell | None = None,
    ) -> None:
        self.command = command
        self.env = dict(env)
        self.path = path
        self.stream_output = stream_output
        self.output_handler = output_handler
        self.shell = shell if shell is not None else DEFAULT_SHELL
        self._lines: list[str] = []
        self._reader_error: BaseException | None = None

    def run(self, ctx: ExecutionContext) -> str:
        """Run the command, streaming lines as they arrive.

        Returns:
            Every output line, each terminated by a newline. Empty for an
            empty command, which never starts a process.

        Raises:
            CommandFailedError: If the shell could not be started or exited
                with a non-zero status; a failing output handler is chained
                as its cause
            Exception: Whatever the output handler raised, once a successful
                command has finished
        """
        if self.command == "":
            return ""

        ctx.log.debug("starting %r in %r", self.command, str(self.path))
        try:
            process = subprocess.Popen(
                self.shell.argv(self.command),
                cwd=self.path,
                env=self.env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                start_new_session=True,
            )
        except OSError as e:
            raise normalize_failure(self.command, str(self.path), launch_error=e) from e

        stdout = cast(IO[bytes], process.stdout)  # stdout=PIPE
        reader = threading.Thread(
            target=self._read_output,
            args=(ctx, stdout),
            name=f"runstep-output-{process.pid}",
            daemon=True,
        )
        reader.start()

        try:
            returncode = process.wait()
            reader.join()
        except BaseException:
            _kill_process_group(process)
            reader.join()
            raise
        finally:
            stdout.close()

        output = "".join(f"{line}\n" for line in self._lines)
        if returncode != 0:
            raise normalize_failure(
                self.command, str(self.path), returncode=returncode, output=output
            ) from self._reader_error
        if self._reader_error is not None:
            raise self._reader_error

        ctx.log.info("successfully ran %r in %r", self.command, str(self.path))
        return output

    def _read_output(self, ctx: ExecutionContext, stream: IO[bytes]) -> None:
        """Reader thread body: drain the pipe until the process closes it."""
        for raw in iter(stream.readline, b""):
            line = clean_line(raw)
            self._lines.append(line)
            if self.stream_output and self._reader_error is None:
                try:
                    self.output_handler.send(ctx, line)
                except Exception as e:
                    # Keep draining so the child never blocks on a full pipe;
                    # the error is raised in the caller's thread after join.
                    logger.debug("output handler failed for %s: %s", ctx.job_id, e)
                    self._reader_error = e


def _kill_process_group(process: subprocess.Popen[bytes]) -> None:
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        pass
    process.wait()

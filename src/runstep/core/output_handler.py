"""Live output delivery for running commands.

The runner pushes each output line to an OutputHandler as soon as it is read
from the process. Handlers decide where lines go (a terminal, a websocket
hub, a log store); the runner only guarantees ordering per run.
"""

from abc import ABC, abstractmethod

from rich.console import Console
from rich.text import Text

from runstep.core.project import ExecutionContext


class OutputHandler(ABC):
    """Abstract interface for subscribers to a run step's live output."""

    @abstractmethod
    def send(self, ctx: ExecutionContext, line: str) -> None:
        """Deliver one output line of the run identified by ctx.job_id.

        Called from the runner's reader thread, in the order lines were
        produced. The line has no trailing newline.
        """
        ...


class NoopOutputHandler(OutputHandler):
    """Discards all output. Used when live output is disabled."""

    def send(self, ctx: ExecutionContext, line: str) -> None:
        pass


class ConsoleOutputHandler(OutputHandler):
    """Prints output lines to a Rich console as they arrive.

    Lines are printed as plain Text so that brackets in tool output are
    never interpreted as Rich markup.
    """

    def __init__(self, console: Console | None = None, *, show_job_id: bool = False) -> None:
        self._console = console if console is not None else Console(stderr=True)
        self._show_job_id = show_job_id

    def send(self, ctx: ExecutionContext, line: str) -> None:
        text = Text(line)
        if self._show_job_id:
            text = Text.assemble((f"[{ctx.job_id}] ", "dim"), text)
        self._console.print(text, highlight=False, soft_wrap=True)

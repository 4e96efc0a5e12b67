"""Fake output handler that records streamed lines per run."""

import threading

from runstep.core.output_handler import OutputHandler
from runstep.core.project import ExecutionContext


class FakeOutputHandler(OutputHandler):
    """Collects lines sent for each job id.

    send() is called from the runner's reader thread, so recording is
    guarded by a lock. An optional error makes send() fail, for testing how
    the runner reacts to a broken subscriber.
    """

    def __init__(self, *, error: Exception | None = None) -> None:
        self._error = error
        self._lines: dict[str, list[str]] = {}
        self._threads: set[str] = set()
        self._lock = threading.Lock()

    def send(self, ctx: ExecutionContext, line: str) -> None:
        with self._lock:
            self._lines.setdefault(ctx.job_id, []).append(line)
            self._threads.add(threading.current_thread().name)
        if self._error is not None:
            raise self._error

    def lines(self, ctx: ExecutionContext) -> list[str]:
        """Lines received for ctx's job, in arrival order."""
        with self._lock:
            return list(self._lines.get(ctx.job_id, []))

    @property
    def all_lines(self) -> dict[str, list[str]]:
        with self._lock:
            return {job_id: list(lines) for job_id, lines in self._lines.items()}

    @property
    def sender_threads(self) -> set[str]:
        """Names of the threads send() was called from."""
        return set(self._threads)

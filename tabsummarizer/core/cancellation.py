"""
Cancellation tokens identifying one pipeline run.
"""

import asyncio
import itertools
from typing import Optional

_run_ids = itertools.count(1)


class CancellationToken:
    """Signals that the work started for one run should stop."""

    def __init__(self):
        self.run_id = next(_run_ids)
        self._cancelled = False
        self._task: Optional[asyncio.Task] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def bind(self, task: asyncio.Task) -> None:
        """Attach the task doing the run's work so cancel() can interrupt it."""
        self._task = task

    def cancel(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        if self._task is not None and not self._task.done():
            self._task.cancel()

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise asyncio.CancelledError(f"run {self.run_id} was cancelled")

    def __repr__(self) -> str:
        state = "cancelled" if self._cancelled else "active"
        return f"<CancellationToken run={self.run_id} {state}>"

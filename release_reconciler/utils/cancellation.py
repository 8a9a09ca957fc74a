import threading
import time
from typing import Callable

from release_reconciler.errors import ReconciliationCancelledError


class CancellationScope:
    """Cancellation signal and optional deadline shared by a whole run.

    Every collaborator call receives the scope, so cancelling it (or letting
    the deadline pass) interrupts the run between calls and wakes any sleep
    in the visibility poll.
    """

    def __init__(self, timeout_seconds: float | None = None, clock: Callable[[], float] = time.monotonic):
        self._event: threading.Event = threading.Event()
        self._clock: Callable[[], float] = clock
        self._deadline: float | None = clock() + timeout_seconds if timeout_seconds is not None else None

    def now(self) -> float:
        return self._clock()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        return self._deadline is not None and self._clock() >= self._deadline

    def remaining(self) -> float | None:
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ReconciliationCancelledError("Reconciliation was cancelled")
        if self.cancelled:
            raise ReconciliationCancelledError("Reconciliation deadline exceeded")

    def sleep(self, seconds: float) -> None:
        remaining = self.remaining()
        if remaining is not None:
            seconds = min(seconds, remaining)
        self._event.wait(max(0.0, seconds))
        self.raise_if_cancelled()

"""A counting semaphore with timed waits and a shutdown switch."""

from __future__ import annotations

import threading


class Semaphore:
    """Counting semaphore whose waiters are released when it is shut down."""

    def __init__(self, count: int = 0) -> None:
        self._count = count
        self._shutdown = False
        self._condition = threading.Condition()

    def notify(self) -> None:
        """Increment the count and wake one waiter."""
        with self._condition:
            self._count += 1
            self._condition.notify()

    def wait_for(self, sec: float) -> bool:
        """Wait up to ``sec`` seconds to take one count.

        Returns True if a count was taken, False on timeout or shutdown.
        """
        with self._condition:
            ready = self._condition.wait_for(
                lambda: self._count > 0 or self._shutdown, timeout=sec
            )
            if not ready:
                return False
            if self._count > 0:
                self._count -= 1
                return True
            return False

    def shutdown(self) -> None:
        """Release all waiters; later waits only succeed on remaining counts."""
        with self._condition:
            self._shutdown = True
            self._condition.notify_all()
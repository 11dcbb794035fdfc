"""Coordinated start and stop of background tasks."""

import logging
import threading
from collections.abc import Callable


class LifecycleCoordinator:
    """Shared cancellation signal plus a counted join barrier.

    Background tasks register with :meth:`add` before they start and call
    :meth:`done` when they finish. :meth:`shutdown` broadcasts cancellation
    and blocks until every registered task has finished.
    """

    def __init__(self, logger: logging.Logger) -> None:
        """Initialize the coordinator.

        Args:
            logger: Logger instance for logging operations

        """
        self.logger = logger
        self.cancelled = threading.Event()
        self._condition = threading.Condition()
        self._pending = 0

    @property
    def pending(self) -> int:
        """Number of registered tasks that have not finished yet."""
        with self._condition:
            return self._pending

    def add(self, count: int = 1) -> None:
        """Register ``count`` tasks with the barrier."""
        with self._condition:
            self._pending += count

    def done(self) -> None:
        """Deregister one finished task.

        Raises:
            RuntimeError: If more tasks finished than were registered

        """
        with self._condition:
            if self._pending <= 0:
                error_msg = "done() called more often than add()"
                raise RuntimeError(error_msg)
            self._pending -= 1
            if self._pending == 0:
                self._condition.notify_all()

    def spawn(self, target: Callable[[], None], name: str) -> threading.Thread:
        """Register and start a daemon thread running ``target``."""
        self.add()

        def run() -> None:
            try:
                target()
            except Exception:
                self.logger.exception(f"Background task {name} failed")
            finally:
                self.done()

        thread = threading.Thread(target=run, name=name, daemon=True)
        thread.start()
        return thread

    def cancel(self) -> None:
        """Broadcast cancellation to all background tasks."""
        self.cancelled.set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until all registered tasks finished.

        Returns:
            True if the barrier was reached, False on timeout

        """
        with self._condition:
            return self._condition.wait_for(lambda: self._pending == 0, timeout=timeout)

    def shutdown(self, timeout: float | None = None) -> bool:
        """Cancel all background tasks and wait for them to finish.

        Returns:
            True if every task finished within ``timeout``

        """
        self.logger.info(f"Shutting down {self.pending} background tasks")
        self.cancel()
        finished = self.wait(timeout)
        if not finished:
            self.logger.error(f"{self.pending} background tasks did not stop in time")
        return finished

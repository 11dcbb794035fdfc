"""Fan-out of state transition events to notification sinks."""

import logging
from typing import Protocol

from probewatch.checks.state import StateEvent
from probewatch.notifier.exceptions import NotificationDeliveryError


class Notifier(Protocol):
    """Anything that accepts state transition events."""

    def notify(self, event: StateEvent) -> None:
        """Handle a state transition event."""


class NotificationHub:
    """Delivers events to every registered sink in registration order.

    Besides transitions the hub forwards baseline observations (the first
    evaluation of a check) to sinks that define ``record_baseline``. Those
    are not notifications; sinks such as the log never see them.
    """

    def __init__(self, logger: logging.Logger) -> None:
        """Initialize the hub without sinks.

        Args:
            logger: Logger instance for logging operations

        """
        self.logger = logger
        self.sinks: list[Notifier] = []

    def register(self, sink: Notifier) -> None:
        """Add a sink; it receives every subsequent event."""
        self.sinks.append(sink)

    def notify(self, event: StateEvent) -> None:
        """Deliver a transition event to all sinks.

        A failing sink never keeps the remaining sinks from receiving the
        event.

        Raises:
            NotificationDeliveryError: If at least one sink failed

        """
        self._deliver(event, "notify")

    def record_baseline(self, event: StateEvent) -> None:
        """Deliver a check's first observation to sinks that track state.

        Raises:
            NotificationDeliveryError: If at least one sink failed

        """
        self._deliver(event, "record_baseline")

    def _deliver(self, event: StateEvent, method_name: str) -> None:
        failures: list[tuple[str, Exception]] = []
        for sink in self.sinks:
            handler = getattr(sink, method_name, None)
            if handler is None:
                continue
            sink_name = type(sink).__name__
            try:
                handler(event)
            except Exception as e:  # noqa: BLE001
                self.logger.error(
                    f"Sink {sink_name} failed for check '{event.identity.id}': {e}",
                )
                failures.append((sink_name, e))

        if failures:
            failed = ", ".join(name for name, _ in failures)
            error_msg = f"{len(failures)} of {len(self.sinks)} sinks failed: {failed}"
            raise NotificationDeliveryError(error_msg, failures)

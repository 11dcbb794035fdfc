"""Sink writing state transitions to the process log."""

import logging

from probewatch.checks.state import StateEvent


class LogSink:
    """Logs recoveries as info and failures as warnings."""

    def __init__(self, logger: logging.Logger) -> None:
        """Initialize the sink.

        Args:
            logger: Logger receiving the transition records

        """
        self.logger = logger

    def notify(self, event: StateEvent) -> None:
        """Write one log line for the transition."""
        details = (
            f"name={event.identity.name!r} id={event.identity.id} "
            f"time={event.timestamp.isoformat()} reason={event.reason!r}"
        )
        if event.ok:
            self.logger.info(f"Check back to normal. {details}")
        else:
            self.logger.warning(f"Check failed. {details}")

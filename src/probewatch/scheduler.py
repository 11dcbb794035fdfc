"""Poll interval parsing and the polling loop."""

import logging
import re
import threading
from datetime import timedelta

from probewatch.checks.loader import HealthChecker
from probewatch.exceptions import InvalidIntervalError

DEFAULT_INTERVAL = "10m"

_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ms|h|m|s)")
_UNIT_SECONDS = {"h": 3600.0, "m": 60.0, "s": 1.0, "ms": 0.001}


def parse_interval(text: str) -> timedelta:
    """Parse a duration such as ``10m``, ``90s``, ``1h30m`` or ``500ms``.

    Raises:
        InvalidIntervalError: If the text is not a positive duration

    """
    value = text.strip()
    if not value:
        error_msg = "Interval must not be empty"
        raise InvalidIntervalError(error_msg)

    seconds = 0.0
    position = 0
    while position < len(value):
        match = _DURATION_PART.match(value, position)
        if match is None:
            error_msg = f"Invalid interval {text!r}, expected e.g. '10m', '90s' or '1h30m'"
            raise InvalidIntervalError(error_msg)
        seconds += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        position = match.end()

    if seconds <= 0:
        error_msg = f"Interval must be positive: {text!r}"
        raise InvalidIntervalError(error_msg)
    return timedelta(seconds=seconds)


class PollingLoop:
    """Runs all checks, then waits for the interval or a stop request."""

    def __init__(
        self,
        checker: HealthChecker,
        interval: timedelta,
        logger: logging.Logger,
        stop_event: threading.Event | None = None,
    ) -> None:
        """Initialize the polling loop.

        Args:
            checker: Root of the check tree
            interval: Time between the end of one pass and the start of the next
            logger: Logger instance for logging operations
            stop_event: Event ending the loop; created if not given

        """
        self.checker = checker
        self.interval = interval
        self.logger = logger
        self.stop_event = stop_event or threading.Event()
        self.passes = 0

    def stop(self) -> None:
        """Request the loop to exit; an in-flight pass is not interrupted."""
        self.stop_event.set()

    def run(self) -> None:
        """Poll until :meth:`stop` is called."""
        self.logger.info(f"Polling checks every {self.interval}")
        while True:
            all_ok = self.checker.perform_checks()
            self.passes += 1
            self.logger.debug(f"Pass {self.passes} finished, all checks ok: {all_ok}")

            if self.stop_event.wait(self.interval.total_seconds()):
                self.logger.info("Exiting.")
                return

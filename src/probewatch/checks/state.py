"""State tracking and transition events for checks."""

from dataclasses import dataclass
from datetime import UTC, datetime

from probewatch.checks.identity import CheckIdentity


@dataclass(frozen=True)
class StateEvent:
    """A check changed between healthy and unhealthy.

    ``reason`` is empty for healthy states and for group checks.
    """

    identity: CheckIdentity
    timestamp: datetime
    ok: bool
    reason: str = ""


@dataclass
class StateTracker:
    """Last known state of a single check."""

    last_evaluation_time: datetime | None = None
    last_transition_time: datetime | None = None
    last_ok: bool = False
    initialized: bool = False

    def observe(self, ok: bool, now: datetime | None = None) -> bool:
        """Record an observation and report whether it is a transition.

        The first observation only establishes the baseline and is never
        reported as a transition, whatever its outcome.

        Args:
            ok: Observed health of the check
            now: Observation time, defaults to the current UTC time

        Returns:
            True if the observation differs from the previous one

        """
        now = now or datetime.now(UTC)
        self.last_evaluation_time = now

        if not self.initialized:
            self.initialized = True
            self.last_ok = ok
            return False

        if ok == self.last_ok:
            return False

        self.last_ok = ok
        self.last_transition_time = now
        return True

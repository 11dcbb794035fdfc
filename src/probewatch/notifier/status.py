"""In-memory table of the latest state per check."""

import threading

from probewatch.checks.identity import CheckIdentity
from probewatch.checks.state import StateEvent


class StatusSink:
    """Keeps the most recent event of every check.

    Written by the polling loop, read concurrently by the status server.
    Entries are only ever overwritten, so the table is bounded by the size
    of the check tree.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._states: dict[CheckIdentity, StateEvent] = {}

    def notify(self, event: StateEvent) -> None:
        """Store the event, replacing the previous one for the same check."""
        with self._lock:
            self._states[event.identity] = event

    # The first observation of a check is stored like a transition.
    record_baseline = notify

    def snapshot(self) -> list[StateEvent]:
        """Return the latest events sorted by check id."""
        with self._lock:
            events = list(self._states.values())
        return sorted(events, key=lambda event: event.identity.id)

    def all_ok(self) -> bool:
        """Return whether every tracked check is healthy; True when empty."""
        with self._lock:
            return all(event.ok for event in self._states.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)

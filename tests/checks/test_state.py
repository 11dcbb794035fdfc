"""Tests for state tracking."""

from datetime import UTC, datetime, timedelta

from probewatch.checks.state import StateTracker


class TestStateTracker:
    """Test cases for transition detection."""

    def test_initial_state(self) -> None:
        """Test that a new tracker is uninitialized."""
        tracker = StateTracker()

        assert tracker.initialized is False
        assert tracker.last_evaluation_time is None
        assert tracker.last_transition_time is None

    def test_first_observation_is_baseline(self) -> None:
        """Test that the first observation never counts as transition."""
        for ok in (True, False):
            tracker = StateTracker()

            assert tracker.observe(ok) is False
            assert tracker.initialized is True
            assert tracker.last_ok is ok
            assert tracker.last_transition_time is None

    def test_transition_detected(self) -> None:
        """Test that a changed observation is a transition."""
        start = datetime(2026, 1, 1, tzinfo=UTC)
        tracker = StateTracker()
        tracker.observe(True, start)

        later = start + timedelta(minutes=10)
        assert tracker.observe(False, later) is True
        assert tracker.last_ok is False
        assert tracker.last_transition_time == later
        assert tracker.last_evaluation_time == later

    def test_unchanged_observation_only_advances_time(self) -> None:
        """Test that repeated observations only update the evaluation time."""
        start = datetime(2026, 1, 1, tzinfo=UTC)
        tracker = StateTracker()
        tracker.observe(True, start)
        tracker.observe(False, start + timedelta(minutes=1))

        later = start + timedelta(minutes=2)
        assert tracker.observe(False, later) is False
        assert tracker.last_evaluation_time == later
        assert tracker.last_transition_time == start + timedelta(minutes=1)

    def test_observe_defaults_to_current_time(self) -> None:
        """Test that the observation time defaults to now in UTC."""
        tracker = StateTracker()
        before = datetime.now(UTC)

        tracker.observe(True)

        assert tracker.last_evaluation_time is not None
        assert tracker.last_evaluation_time >= before

"""Check tree nodes: groups and probe-backed leaf checks."""

import logging
from typing import TYPE_CHECKING, ClassVar

from probewatch.checks.identity import CheckIdentity
from probewatch.checks.probes import ProbeResult, SmtpProbe, TlsProbe
from probewatch.checks.state import StateEvent, StateTracker
from probewatch.notifier.exceptions import NotificationError

if TYPE_CHECKING:
    from probewatch.notifier.hub import Notifier


class CheckNode:
    """A named unit of the check tree.

    The set of node kinds is closed: :class:`Group`, :class:`TlsCheck` and
    :class:`SmtpCheck`.
    """

    check_type: ClassVar[str]

    def __init__(
        self,
        identity: CheckIdentity,
        notifier: "Notifier",
        logger: logging.Logger,
    ) -> None:
        """Initialize the node.

        Args:
            identity: Name and id of the check
            notifier: Receives an event on every state transition
            logger: Logger instance for logging operations

        """
        self.identity = identity
        self.notifier = notifier
        self.logger = logger
        self.state = StateTracker()

    @property
    def name(self) -> str:
        """Display name of the check."""
        return self.identity.name

    @property
    def id(self) -> str:
        """Dotted-path id of the check."""
        return self.identity.id

    def evaluate(self) -> bool:
        """Run the check and return whether it is currently healthy."""
        raise NotImplementedError

    def update_state(self, ok: bool, reason: str = "") -> None:
        """Record an observation and notify if the state changed.

        The first observation is only passed on as a baseline, to notifiers
        that keep track of current state.
        """
        is_baseline = not self.state.initialized
        transitioned = self.state.observe(ok)

        if is_baseline:
            deliver = getattr(self.notifier, "record_baseline", None)
        elif transitioned:
            deliver = self.notifier.notify
        else:
            return
        if deliver is None:
            return

        event = StateEvent(
            identity=self.identity,
            timestamp=self.state.last_evaluation_time,
            ok=ok,
            reason=reason,
        )
        try:
            deliver(event)
        except NotificationError:
            self.logger.exception(f"Cannot notify about check '{self.id}'")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"


class Group(CheckNode):
    """Aggregates child checks; healthy only if every child is healthy."""

    check_type = "group"

    def __init__(
        self,
        identity: CheckIdentity,
        notifier: "Notifier",
        logger: logging.Logger,
        checks: list[CheckNode] | None = None,
    ) -> None:
        super().__init__(identity, notifier, logger)
        self.checks = checks if checks is not None else []

    def evaluate(self) -> bool:
        """Evaluate every child in order, then the group itself."""
        all_ok = True
        for check in self.checks:
            # No short-circuit: every child must be observed on every pass.
            if not check.evaluate():
                all_ok = False
        self.update_state(all_ok)
        return all_ok


class ProbeCheck(CheckNode):
    """Leaf check delegating to a single network probe."""

    probe: TlsProbe | SmtpProbe

    def evaluate(self) -> bool:
        """Run the probe once and record its outcome."""
        self.logger.debug(f"Running {self.check_type} check '{self.id}' against {self.probe.address}")
        result: ProbeResult = self.probe.run()
        if not result.ok:
            self.logger.debug(f"Check '{self.id}' failed: {result.reason}")
        self.update_state(result.ok, result.reason)
        return result.ok


class TlsCheck(ProbeCheck):
    """Verifies that a TLS handshake with an address succeeds."""

    check_type = "tls"

    def __init__(
        self,
        identity: CheckIdentity,
        notifier: "Notifier",
        logger: logging.Logger,
        address: str,
        insecure: bool = False,
    ) -> None:
        super().__init__(identity, notifier, logger)
        self.address = address
        self.insecure = insecure
        self.probe = TlsProbe(address, insecure=insecure)


class SmtpCheck(ProbeCheck):
    """Verifies that an SMTP server accepts connections and greets."""

    check_type = "smtp"

    def __init__(
        self,
        identity: CheckIdentity,
        notifier: "Notifier",
        logger: logging.Logger,
        address: str,
    ) -> None:
        super().__init__(identity, notifier, logger)
        self.address = address
        self.probe = SmtpProbe(address)

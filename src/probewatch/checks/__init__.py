"""Check tree: identities, state tracking, probes and tree construction."""

from probewatch.checks.identity import CheckIdentity, build_id
from probewatch.checks.state import StateEvent, StateTracker
from probewatch.checks.probes import ProbeResult, SmtpProbe, TlsProbe, split_address
from probewatch.checks.nodes import CheckNode, Group, SmtpCheck, TlsCheck
from probewatch.checks.loader import HealthChecker, build_checks, load_check_definitions

__all__ = [
    "CheckIdentity",
    "CheckNode",
    "Group",
    "HealthChecker",
    "ProbeResult",
    "SmtpCheck",
    "SmtpProbe",
    "StateEvent",
    "StateTracker",
    "TlsCheck",
    "TlsProbe",
    "build_checks",
    "build_id",
    "load_check_definitions",
    "split_address",
]

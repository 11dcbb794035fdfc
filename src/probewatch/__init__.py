"""Probewatch - periodic endpoint health checks.

Runs a tree of TLS and SMTP reachability checks on an interval, reports state
transitions to notification sinks and serves a status overview over HTTP.
"""

__version__ = "0.1.0"

from . import exceptions, logging

__all__ = ["exceptions", "logging"]

"""State transition notifications for Probewatch."""

from probewatch.notifier.exceptions import NotificationDeliveryError, NotificationError
from probewatch.notifier.hub import NotificationHub, Notifier
from probewatch.notifier.log_sink import LogSink
from probewatch.notifier.status import StatusSink

__all__ = [
    "LogSink",
    "NotificationDeliveryError",
    "NotificationError",
    "NotificationHub",
    "Notifier",
    "StatusSink",
]

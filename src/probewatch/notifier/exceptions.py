"""Custom exceptions for the notifier module."""


class NotificationError(Exception):
    """Base exception for all notification-related errors."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        """Initialize the exception with message and optional original error."""
        super().__init__(message)
        self.original_error = original_error
        self.message = message


class NotificationDeliveryError(NotificationError):
    """Raised when one or more sinks failed to receive an event."""

    def __init__(self, message: str, failures: list[tuple[str, Exception]]) -> None:
        """Initialize with the failing sinks and their errors."""
        super().__init__(message, original_error=failures[0][1] if failures else None)
        self.failures = failures

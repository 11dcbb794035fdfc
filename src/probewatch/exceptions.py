"""Common exceptions used across Probewatch."""


class ProbewatchError(Exception):
    """Base exception for all Probewatch errors."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        """Initialize the exception with message and optional original error."""
        super().__init__(message)
        self.original_error = original_error
        self.message = message


class ConfigurationError(ProbewatchError):
    """Raised when the service cannot start because of invalid configuration."""


class InvalidCheckDefinitionError(ConfigurationError):
    """Raised when a check definition is malformed."""


class UnknownCheckTypeError(InvalidCheckDefinitionError):
    """Raised when a check definition names an unsupported type."""


class DuplicateCheckIdError(InvalidCheckDefinitionError):
    """Raised when two checks in the tree resolve to the same id."""


class InvalidIntervalError(ConfigurationError):
    """Raised when the poll interval cannot be parsed."""


class ListenerStartupError(ProbewatchError):
    """Raised when the status server cannot bind its listening socket."""

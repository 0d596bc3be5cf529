"""
Burrow errors - exceptions raised while reconciling broker users.
"""


class BurrowError(Exception):
    """Base exception for all Burrow errors."""
    pass


class ConfigurationError(BurrowError):
    """Errors in configuration."""
    pass


class BrokerConnectionError(BurrowError):
    """The management API could not be reached."""
    pass


class BrokerAPIError(BurrowError):
    """The management API answered with a failure status."""

    def __init__(self, message: str, status_code: int, reason: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.reason = reason

    @property
    def status(self) -> str:
        """Status line, e.g. "500 Internal Server Error"."""
        return f"{self.status_code} {self.reason}".strip()


class NotFoundError(BrokerAPIError):
    """The requested object does not exist on the broker."""
    pass


class RetryTimeoutError(BurrowError):
    """A retry policy ran out of time before the call succeeded."""

    def __init__(self, message: str, last_error: BaseException | None = None):
        super().__init__(message)
        self.last_error = last_error


class UserCreationError(BurrowError):
    """A user could not be created within the create timeout."""
    pass

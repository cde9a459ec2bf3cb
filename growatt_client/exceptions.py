"""Exception classes raised by the Growatt web API client."""


class GrowattError(Exception):
    """Base class for all Growatt client errors."""


class GrowattParameterError(GrowattError):
    """Raised when a configuration value or call argument is invalid."""


class GrowattAuthError(GrowattError):
    """Raised when credentials are rejected, locally or by the server."""

    def __init__(self, message: str, error_msg: str | None = None) -> None:
        """
        Initialize the error.

        Args:
            message (str): Human readable description.
            error_msg (str | None): The message returned by the server, if any.

        """
        super().__init__(message)
        self.error_msg = error_msg


class GrowattRequestError(GrowattError):
    """Raised on a transport failure or an unsuccessful HTTP status."""


class GrowattJsonError(GrowattError):
    """Raised when a response body is not valid JSON."""


class GrowattInvalidResponseError(GrowattError):
    """Raised when a JSON response does not have the expected shape."""


class GrowattNotLoggedInError(GrowattError):
    """Raised when no authenticated session could be established."""

    def __init__(self, message: str = "Not logged in") -> None:
        """Initialize the error with a default message."""
        super().__init__(message)

"""Error kinds raised by the mail access layer."""

from typing import Optional


class GmailAccessError(Exception):
    """Base class for all gmail_access errors."""

    pass


class InvalidArgumentError(GmailAccessError, ValueError):
    """Caller violated a documented precondition. Raised before any Gmail call."""

    pass


class AuthError(GmailAccessError):
    """Stored credentials are missing or unreadable."""

    pass


class ProviderError(GmailAccessError):
    """
    A Gmail API call failed.

    The underlying message is kept verbatim. ``status`` is the raw HTTP status
    when the failure came back as an HTTP error, otherwise None.
    """

    def __init__(self, operation: str, message: str, status: Optional[int] = None) -> None:
        self.operation = operation
        self.message = message
        self.status = status
        super().__init__(f"Error {operation}: {message}")

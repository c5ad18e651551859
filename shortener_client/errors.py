"""Exceptions raised by the shortener client.

Every failure the gateway or the link store reports is one of these, so the
presentation layer can catch ``ShortenerClientError`` and show the message.
Nothing in this package retries on its own.
"""

from typing import Optional


class ShortenerClientError(Exception):
    """Base class for all shortener client errors."""

    pass


class TransportError(ShortenerClientError):
    """Network/connectivity failure, server error, or an unreadable response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class AuthError(ShortenerClientError):
    """Session is missing or expired. Surfaced, never retried."""

    pass


class ValidationError(ShortenerClientError, ValueError):
    """Input was rejected, either locally or by the remote authority."""

    pass


class InvalidInput(ValidationError):
    """Input rejected at the store boundary before any remote call."""

    pass


class NotFoundError(ShortenerClientError):
    """The authority does not know the targeted link id."""

    pass


class AlreadyInProgress(ShortenerClientError):
    """The same operation is already running for this link id."""

    def __init__(self, operation: str, link_id: str):
        super().__init__(f"{operation} already in progress for link '{link_id}'")
        self.operation = operation
        self.link_id = link_id


class StoreClosedError(ShortenerClientError):
    """The link store has been torn down."""

    pass

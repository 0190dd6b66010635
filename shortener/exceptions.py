"""Exceptions raised by the URL shortener core.

Every class carries the HTTP status the web layer answers with, so routes
never need to inspect error messages.

Classes:
    ShortenerError: base class for all application errors.
    InvalidInputError: client-fixable validation failure (400).
    ConflictError: short code already taken (409).
    NotFoundError: short code unknown (404).
    ExpiredError: short code exists but its validity window has passed (410).
    ResourceExhaustedError: no free short code after all retries (500).
    UnavailableError: the store or another dependency is down (500).
"""


class ShortenerError(Exception):
    """Base exception for all application-specific errors."""

    status_code = 500
    public_message = None

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    @property
    def client_message(self) -> str:
        """Message that is safe to show to API clients."""
        return self.public_message or self.message


class InvalidInputError(ShortenerError):
    """Raised when request input fails validation."""

    status_code = 400


class ConflictError(ShortenerError):
    """Raised when inserting a short code that already exists."""

    status_code = 409


class NotFoundError(ShortenerError):
    """Raised when a short code is not in the store."""

    status_code = 404


class ExpiredError(ShortenerError):
    """Raised when a short code is found but has expired."""

    status_code = 410


class ResourceExhaustedError(ShortenerError):
    """Raised when short code generation collides on every attempt."""

    status_code = 500


class UnavailableError(ShortenerError):
    """Raised when the store cannot be reached or fails.

    e.g. connection issues, timeouts, server selection errors.
    """

    status_code = 500
    public_message = "Internal Server Error"

"""
Exception types raised by the core and mapped to HTTP status codes by
utils.decorators.api_handler.

Storage failures (sqlite3.Error) are never wrapped; they propagate as-is.
"""


class TagpoolError(Exception):
    """Base class for errors raised on purpose by the application."""

    default_message = "Internal error"

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)


class NotFoundError(TagpoolError):
    """An id does not resolve, is not visible, or an index is out of range."""

    default_message = "Not found"


class BadRequestError(TagpoolError, ValueError):
    """A parameter could not be parsed or the request cannot be expressed."""

    default_message = "Bad request"


class ForbiddenError(TagpoolError, PermissionError):
    """The acting identity may not perform the operation."""

    default_message = "Not allowed"


class AuthenticationError(TagpoolError):
    """Login failed or a login is required."""

    default_message = "Authentication required"

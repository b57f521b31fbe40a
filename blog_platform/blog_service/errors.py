"""
Error taxonomy for the blog service.

The data-access layer raises these unchanged; the route layer is the only
place that turns them into HTTP status codes and JSON envelopes.
"""


class BlogError(Exception):
    """Base class for errors surfaced to API callers as ``<name> : <message>``."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def name(self) -> str:
        return type(self).__name__


class ValidationError(BlogError):
    """Missing or malformed input."""


class ConstraintError(BlogError):
    """A storage constraint (e.g. unique email) rejected the write."""


class AuthError(BlogError):
    """Bad credentials, unknown user or an unusable bearer token."""


class NotFoundError(BlogError):
    """The requested entity does not exist (or is not visible)."""

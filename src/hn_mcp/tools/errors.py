"""Errors raised by tool and resource handlers."""


class NotFoundError(LookupError):
    """The requested item, story or user does not exist upstream."""


class InvalidIdentifierError(ValueError):
    """A resource URI carried an identifier that is not a valid item ID."""

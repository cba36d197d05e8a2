"""Domain-level exceptions.

Every failure the browser can surface is a subclass of DomainException so
the CLI layer can catch them uniformly and display user-friendly messages.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """Client-side field checks failed, or the store rejected a payload.

    ``field_errors`` maps a field name (``name``, ``price``, ``stock``,
    ``category``) or a row label to its message.
    """

    def __init__(self, message: str, field_errors: dict[str, str] | None = None) -> None:
        super().__init__(message)
        self.field_errors: dict[str, str] = dict(field_errors or {})


class TransportError(DomainException):
    """Network or serialization failure talking to the product store."""


class NotFoundError(DomainException):
    """The target product vanished between view and action."""


class EditStateError(DomainException):
    """An edit operation was requested from a state that does not allow it."""


class ConfigError(DomainException):
    """A configuration value is missing or out of range."""

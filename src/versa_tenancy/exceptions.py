"""Exceptions for versa-tenancy."""

from typing import Any

# ---------------------------------------------------------------------------
# Base Exception
# ---------------------------------------------------------------------------


class VersaTenancyError(Exception):
    """
    Base exception for all versa-tenancy errors.

    All exceptions raised by this library inherit from this class,
    allowing callers to catch all library-specific errors with a single
    except clause.
    """

    pass


# ---------------------------------------------------------------------------
# Category Exceptions
# ---------------------------------------------------------------------------


class ConfigurationError(VersaTenancyError):
    """
    Raised when the migration is configured incorrectly.

    Configuration is validated before any table I/O happens, so this
    error always means nothing was read or written.
    """

    def __init__(self, setting: str, message: str) -> None:
        self.setting = setting
        super().__init__(f"Invalid configuration for {setting}: {message}")


class ValidationError(VersaTenancyError):
    """
    Raised when a user-provided value fails validation.

    Attributes:
        field: Name of the field that failed validation
        value: The rejected value
        reason: Why the value was rejected
    """

    def __init__(self, field: str, value: Any, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} {value!r}: {reason}")


class RecordDecodeError(VersaTenancyError):
    """Raised when a scanned item is not a DynamoDB attribute map."""

    def __init__(self, item: Any, reason: str) -> None:
        self.item = item
        self.reason = reason
        super().__init__(f"Cannot decode record: {reason}")

"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class UserInputError(DomainError):
    """Raised when a command cannot run in the caller's context.

    The message is meant for the user; nothing is mutated and nothing is
    logged as a fault.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message, code="USER_INPUT_ERROR")


class MetadataLookupError(DomainError, LookupError):
    """Raised when media or collection metadata cannot be fetched.

    Covers network and parse failures as well as access-restricted media
    (private, age-gated, removed).
    """

    def __init__(self, locator: str, message: str | None = None) -> None:
        msg = message or f"Could not fetch metadata for '{locator}'"
        super().__init__(msg, code="METADATA_LOOKUP_ERROR")
        self.locator = locator


class TransportError(DomainError):
    """Raised for voice-connection and stream-level failures."""

    def __init__(self, message: str, *, access_restricted: bool = False) -> None:
        super().__init__(message, code="TRANSPORT_ERROR")
        self.access_restricted = access_restricted


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class ConfigError(DomainError):
    """Raised when settings are missing or malformed at startup."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="CONFIG_ERROR")

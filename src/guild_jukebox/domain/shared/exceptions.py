"""Base exception classes for domain-level errors."""

from __future__ import annotations


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class EntityNotFoundError(DomainError):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, identifier: str | int, message: str | None = None) -> None:
        msg = message or f"{entity_type} with id '{identifier}' not found"
        super().__init__(msg, code="ENTITY_NOT_FOUND")
        self.entity_type = entity_type
        self.identifier = identifier


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


# ── Player errors ───────────────────────────────────────────────────


class PlayerError(DomainError):
    """Base class for failures raised by playback collaborators."""


class InvalidTrackError(PlayerError):
    """Raised when a URL is malformed or points at an unsupported source."""

    def __init__(self, url: str, reason: str | None = None) -> None:
        msg = f"Invalid track '{url}'" + (f": {reason}" if reason else "")
        super().__init__(msg, code="INVALID_TRACK")
        self.url = url
        self.reason = reason


class ResolutionError(PlayerError):
    """Raised when metadata lookup, stream fetch, or transcoding fails."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"Could not resolve '{url}': {reason}", code="RESOLUTION_FAILED")
        self.url = url
        self.reason = reason


class TransportError(PlayerError):
    """Raised when joining, subscribing to, or streaming over voice fails."""

    def __init__(self, guild_id: int, reason: str) -> None:
        super().__init__(f"Voice transport failed in guild {guild_id}: {reason}", code="TRANSPORT_FAILED")
        self.guild_id = guild_id
        self.reason = reason


class MessageGoneError(PlayerError):
    """Raised when editing a status message that was deleted externally."""

    def __init__(self, message: str = "Status message no longer exists") -> None:
        super().__init__(message, code="MESSAGE_GONE")

"""
Shared Domain Kernel

Contains the constrained types, messages, and exceptions shared across the domain.
"""

from guild_jukebox.domain.shared.exceptions import (
    DomainError,
    EntityNotFoundError,
    InvalidOperationError,
    InvalidTrackError,
    MessageGoneError,
    PlayerError,
    ResolutionError,
    TransportError,
)

__all__ = [
    "DomainError",
    "EntityNotFoundError",
    "InvalidOperationError",
    "PlayerError",
    "InvalidTrackError",
    "ResolutionError",
    "TransportError",
    "MessageGoneError",
]

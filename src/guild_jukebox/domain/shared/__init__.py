"""
Shared Domain Kernel

Contains exceptions, constrained types and message catalogues shared by
every layer.
"""

from guild_jukebox.domain.shared.exceptions import (
    ConfigError,
    DomainError,
    InvalidOperationError,
    MetadataLookupError,
    TransportError,
    UserInputError,
)

__all__ = [
    "ConfigError",
    "DomainError",
    "InvalidOperationError",
    "MetadataLookupError",
    "TransportError",
    "UserInputError",
]

# ruff: noqa: N999
"""
Domain Layer

Contains pure business logic organized by bounded contexts:
- shared/: Exceptions, constrained types, messages and constants
- music/: Durations, queue items, queue store and playback sessions
"""

from guild_jukebox.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]

"""
Application Commands

The command envelope and the facade that routes each verb to the
application services.
"""

from guild_jukebox.application.commands.envelope import CommandEnvelope, CommandVerb
from guild_jukebox.application.commands.facade import MusicCommandFacade

__all__ = [
    "CommandEnvelope",
    "CommandVerb",
    "MusicCommandFacade",
]

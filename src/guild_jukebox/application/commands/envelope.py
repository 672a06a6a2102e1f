"""Platform-neutral description of one music command invocation."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator

from guild_jukebox.application.interfaces.transport import ReplyChannel
from guild_jukebox.domain.shared.types import DiscordSnowflake


class CommandVerb(Enum):
    """Music commands understood by the facade."""

    PLAY = "play"
    STOP = "stop"
    SKIP = "skip"
    QUEUE = "queue"
    PAUSE = "pause"
    RESUME = "resume"


class CommandEnvelope(BaseModel):
    """Who asked for what, where, and where to answer."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    guild_id: DiscordSnowflake
    caller_id: DiscordSnowflake
    caller_voice_channel_id: DiscordSnowflake | None = None
    reply_channel: ReplyChannel
    verb: CommandVerb
    argument_text: str = ""

    @field_validator("argument_text", mode="before")
    @classmethod
    def _strip_argument(cls, v: str | None) -> str:
        if v is None:
            return ""
        if isinstance(v, str):
            return v.strip()
        return v

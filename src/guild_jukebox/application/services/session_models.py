"""DTOs and runtime holders for the playback session service."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from ..interfaces.transport import StreamHandle, TransportConnection


class ControlStatus(Enum):
    """Status codes for transport control results."""

    SUCCESS = "success"
    NOOP = "noop"  # valid request that changed nothing
    ERROR = "error"


class ControlResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: ControlStatus
    message: str | None = None

    @property
    def is_success(self) -> bool:
        return self.status == ControlStatus.SUCCESS

    @classmethod
    def success(cls, message: str | None = None) -> ControlResult:
        return cls(status=ControlStatus.SUCCESS, message=message)

    @classmethod
    def noop(cls, message: str) -> ControlResult:
        return cls(status=ControlStatus.NOOP, message=message)

    @classmethod
    def error(cls, message: str | None = None) -> ControlResult:
        return cls(status=ControlStatus.ERROR, message=message)


@dataclass
class GuildRuntime:
    """Platform handles borrowed by one guild's session.

    ``stream`` is the only stream whose callbacks are honoured; anything
    else reporting in is stale.
    """

    connection: TransportConnection | None = None
    stream: StreamHandle | None = None
    idle_timer: asyncio.TimerHandle | None = None

    def detach_stream(self) -> StreamHandle | None:
        stream, self.stream = self.stream, None
        return stream

    def cancel_idle_timer(self) -> bool:
        if self.idle_timer is None:
            return False
        self.idle_timer.cancel()
        self.idle_timer = None
        return True

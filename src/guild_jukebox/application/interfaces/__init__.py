"""
Application Interfaces (Ports)

Abstract interfaces that define contracts between the application
layer and infrastructure adapters. These are the "ports" in
hexagonal architecture.
"""

from guild_jukebox.application.interfaces.metadata_service import (
    CollectionInfo,
    CollectionMember,
    MediaInfo,
    MetadataService,
    SearchMatch,
)
from guild_jukebox.application.interfaces.transport import (
    AudioTransport,
    PresencePublisher,
    ReplyChannel,
    StreamHandle,
    TransportConnection,
)

__all__ = [
    "AudioTransport",
    "CollectionInfo",
    "CollectionMember",
    "MediaInfo",
    "MetadataService",
    "PresencePublisher",
    "ReplyChannel",
    "SearchMatch",
    "StreamHandle",
    "TransportConnection",
]

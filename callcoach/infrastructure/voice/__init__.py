"""Voice channel contract and event dispatch."""

from .channel import (
    ChannelEventKind, ChannelEvent, StartProfile,
    VoiceChannel, EventDispatchingChannel, ChannelEventHandler
)

__all__ = [
    "ChannelEventKind", "ChannelEvent", "StartProfile",
    "VoiceChannel", "EventDispatchingChannel", "ChannelEventHandler"
]

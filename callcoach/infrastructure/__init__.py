"""Infrastructure components for callcoach.

This module contains the external collaborators the session orchestrator
talks to: the voice channel, audio input and the feedback gateway.
"""

# Audio input
from .audio import AudioInput, PyAudioInput

# Voice channel contract
from .voice import ChannelEvent, ChannelEventKind, EventDispatchingChannel, StartProfile, VoiceChannel

# Feedback gateway
from .feedback import FeedbackGateway, HttpFeedbackGateway

__all__ = [
    # Audio input
    "AudioInput", "PyAudioInput",

    # Voice channel
    "ChannelEvent", "ChannelEventKind", "EventDispatchingChannel", "StartProfile", "VoiceChannel",

    # Feedback gateway
    "FeedbackGateway", "HttpFeedbackGateway"
]

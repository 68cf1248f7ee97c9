"""
Audio input for callcoach.

Only acquisition is handled here; the voice vendor owns capture and playback.
"""

from .microphone import AudioInput, PyAudioInput

__all__ = ["AudioInput", "PyAudioInput"]

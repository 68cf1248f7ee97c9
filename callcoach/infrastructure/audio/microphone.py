"""
Audio input acquisition: confirms the microphone can be opened before a call starts.
"""
import asyncio
import logging
from typing import Optional, Protocol

from ...config import PROBE_SAMPLE_RATE, PROBE_CHANNELS, PROBE_FRAMES
from ...interview.errors import AudioInputDeniedError
from ...utils import with_suppressed_audio_warnings

logger = logging.getLogger("audio_input")


class AudioInput(Protocol):
    async def acquire(self) -> None:
        """Raise AudioInputDeniedError if audio input cannot be used."""
        ...

    def release(self) -> None:
        ...


class PyAudioInput:
    """Probes an input device with PyAudio (opens and closes a short stream)."""

    def __init__(self,
                 input_device: Optional[int] = None,
                 sample_rate: int = PROBE_SAMPLE_RATE,
                 channels: int = PROBE_CHANNELS,
                 frames_per_buffer: int = PROBE_FRAMES):
        self.input_device = input_device
        self.sample_rate = sample_rate
        self.channels = channels
        self.frames_per_buffer = frames_per_buffer
        self.acquired = False

    async def acquire(self) -> None:
        await asyncio.to_thread(self._probe)
        self.acquired = True

    def release(self) -> None:
        self.acquired = False

    @with_suppressed_audio_warnings
    def _probe(self) -> None:
        # Imported lazily; needs native PortAudio
        import pyaudio

        pa = pyaudio.PyAudio()
        try:
            if self.input_device is None:
                try:
                    info = pa.get_default_input_device_info()
                except OSError as e:
                    raise AudioInputDeniedError(f"No default input device: {e}") from e
                device_index = int(info["index"])
            else:
                device_index = self.input_device

            try:
                stream = pa.open(
                    format=pyaudio.paInt16,
                    channels=self.channels,
                    rate=self.sample_rate,
                    input=True,
                    input_device_index=device_index,
                    frames_per_buffer=self.frames_per_buffer,
                )
            except OSError as e:
                raise AudioInputDeniedError(f"Cannot open input device {device_index}: {e}") from e

            stream.stop_stream()
            stream.close()
            logger.info(f"Audio input available on device {device_index}")
        finally:
            pa.terminate()

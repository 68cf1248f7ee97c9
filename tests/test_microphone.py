import sys
from unittest.mock import MagicMock, patch

import pytest

from callcoach.infrastructure.audio import PyAudioInput
from callcoach.interview.errors import AudioInputDeniedError


def _fake_pyaudio() -> MagicMock:
    module = MagicMock()
    module.paInt16 = 8
    module.PyAudio.return_value.get_default_input_device_info.return_value = {"index": 3}
    return module


@pytest.mark.asyncio
async def test_acquire_opens_and_closes_default_device():
    fake = _fake_pyaudio()
    audio_input = PyAudioInput()

    with patch.dict(sys.modules, {"pyaudio": fake}):
        await audio_input.acquire()

    pa = fake.PyAudio.return_value
    assert pa.open.call_args.kwargs["input_device_index"] == 3
    assert pa.open.call_args.kwargs["rate"] == 16000
    pa.open.return_value.close.assert_called_once()
    pa.terminate.assert_called_once()
    assert audio_input.acquired

    audio_input.release()
    assert not audio_input.acquired


@pytest.mark.asyncio
async def test_unopenable_device_is_denied():
    fake = _fake_pyaudio()
    fake.PyAudio.return_value.open.side_effect = OSError("Device unavailable")
    audio_input = PyAudioInput(input_device=1)

    with patch.dict(sys.modules, {"pyaudio": fake}):
        with pytest.raises(AudioInputDeniedError):
            await audio_input.acquire()

    fake.PyAudio.return_value.terminate.assert_called_once()
    assert not audio_input.acquired


@pytest.mark.asyncio
async def test_missing_default_device_is_denied():
    fake = _fake_pyaudio()
    fake.PyAudio.return_value.get_default_input_device_info.side_effect = OSError("No Default Input Device")

    with patch.dict(sys.modules, {"pyaudio": fake}):
        with pytest.raises(AudioInputDeniedError):
            await PyAudioInput().acquire()


@pytest.mark.asyncio
async def test_missing_pyaudio_is_not_reported_as_denial():
    with patch.dict(sys.modules, {"pyaudio": None}):
        with pytest.raises(ImportError) as excinfo:
            await PyAudioInput().acquire()

    assert not isinstance(excinfo.value, AudioInputDeniedError)

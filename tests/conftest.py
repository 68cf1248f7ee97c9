import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from callcoach.interview.models import SessionMode  # noqa: E402
from callcoach.interview.orchestrator import SessionOrchestrator  # noqa: E402
from callcoach.interview.testing import (  # noqa: E402
    MockAudioInput,
    MockFeedbackGateway,
    MockVoiceChannel,
    create_test_config,
    create_test_context,
)


@pytest.fixture(autouse=True)
def _test_env(monkeypatch: pytest.MonkeyPatch):
    for name in (
        "VAPI_WEB_TOKEN",
        "NEXT_PUBLIC_VAPI_WEB_TOKEN",
        "VAPI_WORKFLOW_ID",
        "NEXT_PUBLIC_VAPI_WORKFLOW_ID",
        "FEEDBACK_API_URL",
        "FEEDBACK_API_KEY",
        "FEEDBACK_TIMEOUT",
        "CONNECT_TIMEOUT_SECONDS",
        "CALLCOACH_LOG_FILE",
        "CALLCOACH_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def channel() -> MockVoiceChannel:
    return MockVoiceChannel()


@pytest.fixture
def gateway() -> MockFeedbackGateway:
    return MockFeedbackGateway()


@pytest.fixture
def audio_input() -> MockAudioInput:
    return MockAudioInput()


@pytest.fixture
def make_orchestrator(channel, gateway, audio_input):
    def _make(mode=SessionMode.INTERVIEW, config=None, **context_overrides) -> SessionOrchestrator:
        return SessionOrchestrator(
            context=create_test_context(mode, **context_overrides),
            channel=channel,
            gateway=gateway,
            config=config or create_test_config(),
            audio_input=audio_input,
            session_id="s-test",
        )

    return _make

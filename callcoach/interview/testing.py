"""
Testing infrastructure with mock collaborators for the call session.
"""
from typing import Dict, Any, List, Optional, Tuple, Union

from ..config import Config
from ..infrastructure.voice import EventDispatchingChannel, StartProfile
from .errors import AudioInputDeniedError
from .models import SessionContext, SessionMode
from .schemas import FeedbackRequest, FeedbackResult


class MockVoiceChannel(EventDispatchingChannel):
    """
    Scripted voice channel.

    Records every command it receives; tests drive the inbound stream with the
    ``emit_*`` helpers, which go through the same vendor-event translation as
    a real adapter.
    """

    def __init__(self,
                 start_error: Optional[Exception] = None,
                 auto_start: bool = False):
        super().__init__()
        self.start_error = start_error
        self.auto_start = auto_start
        self.start_calls: List[Tuple[StartProfile, Dict[str, str]]] = []
        self.stop_count = 0

    @property
    def command_count(self) -> int:
        return len(self.start_calls) + self.stop_count

    async def start(self, profile: StartProfile, variables: Dict[str, str]) -> None:
        self.start_calls.append((profile, dict(variables)))
        if self.start_error is not None:
            raise self.start_error
        if self.auto_start:
            await self.emit_started()

    def stop(self) -> None:
        self.stop_count += 1

    async def emit_started(self) -> None:
        await self.handle_vendor_event("call-start")

    async def emit_ended(self) -> None:
        await self.handle_vendor_event("call-end")

    async def emit_message(self, text: str, role: str = "user", final: bool = True) -> None:
        await self.handle_vendor_event("message", {
            "type": "transcript",
            "role": role,
            "transcript": text,
            "transcriptType": "final" if final else "interim",
        })

    async def emit_speech(self, started: bool) -> None:
        await self.handle_vendor_event("speech-start" if started else "speech-end")

    async def emit_error(self, details: Any) -> None:
        await self.handle_vendor_event("error", details)


class MockFeedbackGateway:
    """Feedback gateway returning canned results (or raising)."""

    def __init__(self, results: Optional[List[Union[FeedbackResult, Exception]]] = None):
        self.results = list(results or [])
        self.requests: List[FeedbackRequest] = []

    async def submit(self, request: FeedbackRequest) -> FeedbackResult:
        self.requests.append(request)
        if not self.results:
            return FeedbackResult(success=True, feedback_id="mock-feedback")
        result = self.results.pop(0)
        if isinstance(result, Exception):
            raise result
        return result


class MockAudioInput:
    """Audio input that is granted or denied on demand."""

    def __init__(self, denied: bool = False, error: Optional[Exception] = None):
        self.denied = denied
        self.error = error
        self.acquire_count = 0
        self.release_count = 0

    async def acquire(self) -> None:
        self.acquire_count += 1
        if self.error is not None:
            raise self.error
        if self.denied:
            raise AudioInputDeniedError("Permission denied by user")

    def release(self) -> None:
        self.release_count += 1


def create_test_config(**overrides: Any) -> Config:
    """Config with every credential present."""
    values: Dict[str, Any] = {
        "vapi_web_token": "test-web-token",
        "vapi_workflow_id": "test-workflow",
    }
    values.update(overrides)
    return Config(**values)


def create_test_context(mode: Union[str, SessionMode] = SessionMode.INTERVIEW, **overrides: Any) -> SessionContext:
    """Session context that satisfies the start guards for ``mode``."""
    values: Dict[str, Any] = {
        "mode": mode,
        "candidate_display_name": "Alice",
        "candidate_id": "user-1",
    }
    if SessionMode(mode) == SessionMode.INTERVIEW:
        values.update({
            "interview_id": "interview-1",
            "question_list": ("Tell me about yourself.", "Why this role?"),
        })
    values.update(overrides)
    return SessionContext(**values)


def create_mock_session_setup(mode: Union[str, SessionMode] = SessionMode.INTERVIEW,
                              feedback_results: Optional[List[Union[FeedbackResult, Exception]]] = None,
                              audio_denied: bool = False,
                              **context_overrides: Any) -> Dict[str, Any]:
    """Create a complete mock session setup for testing."""
    return {
        "context": create_test_context(mode, **context_overrides),
        "channel": MockVoiceChannel(),
        "gateway": MockFeedbackGateway(feedback_results),
        "audio_input": MockAudioInput(denied=audio_denied),
        "config": create_test_config(),
    }

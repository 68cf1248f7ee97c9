"""
Data models for the call session.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from ..config import HOME_PATH, FEEDBACK_PATH_TEMPLATE


class CallState(str, Enum):
    """Lifecycle of one call."""
    IDLE = "idle"
    CONNECTING = "connecting"
    ACTIVE = "active"
    FINISHED = "finished"
    FAILED = "failed"


class SessionMode(str, Enum):
    """Purpose of a call."""
    ONBOARDING = "onboarding"
    INTERVIEW = "interview"


class Speaker(str, Enum):
    """Who produced an utterance."""
    CANDIDATE = "candidate"
    SYSTEM = "system"
    AGENT = "agent"


class FailureKind(str, Enum):
    """Why a call could not proceed or ended abnormally."""
    PERMISSION_DENIED = "permission_denied"
    MISSING_CREDENTIAL = "missing_credential"
    CHANNEL_ERROR = "channel_error"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class TranscriptEntry:
    """A single finalized utterance."""
    speaker: Speaker
    text: str


@dataclass(frozen=True)
class FailureReason:
    """Tagged failure carried by a FAILED call."""
    kind: FailureKind
    detail: str = ""


@dataclass(frozen=True)
class SessionContext:
    """Invariant configuration for one call."""
    mode: SessionMode
    candidate_display_name: str
    candidate_id: Optional[str] = None
    interview_id: Optional[str] = None
    existing_feedback_id: Optional[str] = None
    question_list: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Accept plain strings and lists from callers
        object.__setattr__(self, "mode", SessionMode(self.mode))
        object.__setattr__(self, "question_list", tuple(self.question_list or ()))


class NavigationTarget(str, Enum):
    """Where the hosting UI should go after a call."""
    HOME = "home"
    FEEDBACK = "feedback"


@dataclass(frozen=True)
class NavigationSignal:
    """Outbound navigation request for the hosting UI."""
    target: NavigationTarget
    feedback_id: Optional[str] = None
    interview_id: Optional[str] = None

    @classmethod
    def home(cls) -> "NavigationSignal":
        return cls(NavigationTarget.HOME)

    @classmethod
    def feedback(cls, feedback_id: str, interview_id: Optional[str] = None) -> "NavigationSignal":
        return cls(NavigationTarget.FEEDBACK, feedback_id=feedback_id, interview_id=interview_id)

    @property
    def path(self) -> str:
        if self.target == NavigationTarget.FEEDBACK and self.interview_id:
            return FEEDBACK_PATH_TEMPLATE.format(interview_id=self.interview_id)
        return HOME_PATH


@dataclass(frozen=True)
class SessionSnapshot:
    """Everything the hosting UI observes about a session."""
    state: CallState
    failure_reason: Optional[FailureReason] = None
    failure_message: Optional[str] = None
    latest_text: str = ""
    agent_speaking: bool = False
    transcript_length: int = 0
    navigation: Optional[NavigationSignal] = None

"""Call session components.

This module contains the business logic for conducting a voice interview call:
the state machine, transcript accumulation, failure classification and the
session orchestrator that ties them to the voice channel.
"""

# Core orchestrator class
from .orchestrator import SessionOrchestrator

# Data models
from .models import (
    CallState, SessionMode, Speaker, FailureKind, FailureReason,
    TranscriptEntry, SessionContext, NavigationTarget, NavigationSignal,
    SessionSnapshot
)

# Structured schemas
from .schemas import (
    Finality, TranscriptEvent, FeedbackRequest, FeedbackResult,
    parse_transcript_event
)

# State machine and transcript
from .state_machine import CallStateMachine, Transition, Trigger, next_state
from .transcript import TranscriptAccumulator

# Failure handling
from .errors import (
    CallError, AudioInputDeniedError, MissingCredentialError,
    TranscriptDrainedError, FeedbackSubmissionError,
    classify_failure, describe_failure
)

# Start profiles
from .profiles import INTERVIEWER_ASSISTANT, format_questions, build_start_variables, select_profile

# Event system
from .events import (
    SessionEventBus, EventLogger, CallMetrics,
    EventType, SessionEvent, CallStartingEvent, CallStartedEvent,
    CallFinishedEvent, CallFailedEvent, CallResetEvent,
    TranscriptAppendedEvent, SpeechActivityEvent, FeedbackSubmittedEvent,
    NavigationRequestedEvent, ErrorOccurredEvent
)

__all__ = [
    # Orchestrator
    "SessionOrchestrator",

    # Data models
    "CallState", "SessionMode", "Speaker", "FailureKind", "FailureReason",
    "TranscriptEntry", "SessionContext", "NavigationTarget", "NavigationSignal",
    "SessionSnapshot",

    # Schemas
    "Finality", "TranscriptEvent", "FeedbackRequest", "FeedbackResult",
    "parse_transcript_event",

    # State machine and transcript
    "CallStateMachine", "Transition", "Trigger", "next_state",
    "TranscriptAccumulator",

    # Failure handling
    "CallError", "AudioInputDeniedError", "MissingCredentialError",
    "TranscriptDrainedError", "FeedbackSubmissionError",
    "classify_failure", "describe_failure",

    # Start profiles
    "INTERVIEWER_ASSISTANT", "format_questions", "build_start_variables", "select_profile",

    # Events
    "SessionEventBus", "EventLogger", "CallMetrics",
    "EventType", "SessionEvent", "CallStartingEvent", "CallStartedEvent",
    "CallFinishedEvent", "CallFailedEvent", "CallResetEvent",
    "TranscriptAppendedEvent", "SpeechActivityEvent", "FeedbackSubmittedEvent",
    "NavigationRequestedEvent", "ErrorOccurredEvent"
]

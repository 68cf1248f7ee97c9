"""
Event-driven notifications from the call session to the hosting UI.
"""
import logging
from abc import ABC
from typing import Dict, Any, List, Callable, Optional
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger("events")


class EventType(str, Enum):
    """Types of session events."""
    CALL_STARTING = "call_starting"
    CALL_STARTED = "call_started"
    CALL_FINISHED = "call_finished"
    CALL_FAILED = "call_failed"
    CALL_RESET = "call_reset"
    TRANSCRIPT_APPENDED = "transcript_appended"
    SPEECH_ACTIVITY = "speech_activity"
    FEEDBACK_SUBMITTED = "feedback_submitted"
    NAVIGATION_REQUESTED = "navigation_requested"
    ERROR_OCCURRED = "error_occurred"


@dataclass
class SessionEvent(ABC):
    """Base class for all session events."""
    event_type: EventType
    session_id: str
    timestamp: float
    data: Dict[str, Any]


@dataclass
class CallStartingEvent(SessionEvent):
    """Event fired when the start command is issued."""
    def __init__(self, session_id: str, timestamp: float, mode: str, profile: str,
                 diagnostic: bool = False):
        super().__init__(
            event_type=EventType.CALL_STARTING,
            session_id=session_id,
            timestamp=timestamp,
            data={"mode": mode, "profile": profile, "diagnostic": diagnostic}
        )


@dataclass
class CallStartedEvent(SessionEvent):
    """Event fired when the channel reports the call is live."""
    def __init__(self, session_id: str, timestamp: float):
        super().__init__(
            event_type=EventType.CALL_STARTED,
            session_id=session_id,
            timestamp=timestamp,
            data={}
        )


@dataclass
class CallFinishedEvent(SessionEvent):
    """Event fired on the transition into FINISHED."""
    def __init__(self, session_id: str, timestamp: float, trigger: str, transcript_length: int):
        super().__init__(
            event_type=EventType.CALL_FINISHED,
            session_id=session_id,
            timestamp=timestamp,
            data={"trigger": trigger, "transcript_length": transcript_length}
        )


@dataclass
class CallFailedEvent(SessionEvent):
    """Event fired on the transition into FAILED."""
    def __init__(self, session_id: str, timestamp: float, kind: str, detail: str, message: str):
        super().__init__(
            event_type=EventType.CALL_FAILED,
            session_id=session_id,
            timestamp=timestamp,
            data={"kind": kind, "detail": detail, "message": message}
        )


@dataclass
class CallResetEvent(SessionEvent):
    """Event fired when a failed call is reset for retry."""
    def __init__(self, session_id: str, timestamp: float):
        super().__init__(
            event_type=EventType.CALL_RESET,
            session_id=session_id,
            timestamp=timestamp,
            data={}
        )


@dataclass
class TranscriptAppendedEvent(SessionEvent):
    """Event fired when a final utterance is accumulated."""
    def __init__(self, session_id: str, timestamp: float, index: int, speaker: str, text: str):
        super().__init__(
            event_type=EventType.TRANSCRIPT_APPENDED,
            session_id=session_id,
            timestamp=timestamp,
            data={"index": index, "speaker": speaker, "text": text}
        )


@dataclass
class SpeechActivityEvent(SessionEvent):
    """Event fired when the agent starts or stops speaking."""
    def __init__(self, session_id: str, timestamp: float, agent_speaking: bool):
        super().__init__(
            event_type=EventType.SPEECH_ACTIVITY,
            session_id=session_id,
            timestamp=timestamp,
            data={"agent_speaking": agent_speaking}
        )


@dataclass
class FeedbackSubmittedEvent(SessionEvent):
    """Event fired after the feedback gateway answered (or failed)."""
    def __init__(self, session_id: str, timestamp: float, success: bool,
                 feedback_id: Optional[str], interview_id: Optional[str]):
        super().__init__(
            event_type=EventType.FEEDBACK_SUBMITTED,
            session_id=session_id,
            timestamp=timestamp,
            data={"success": success, "feedback_id": feedback_id, "interview_id": interview_id}
        )


@dataclass
class NavigationRequestedEvent(SessionEvent):
    """Event fired with the terminal navigation signal."""
    def __init__(self, session_id: str, timestamp: float, target: str, path: str,
                 feedback_id: Optional[str]):
        super().__init__(
            event_type=EventType.NAVIGATION_REQUESTED,
            session_id=session_id,
            timestamp=timestamp,
            data={"target": target, "path": path, "feedback_id": feedback_id}
        )


@dataclass
class ErrorOccurredEvent(SessionEvent):
    """Event fired when a collaborator error is handled locally."""
    def __init__(self, session_id: str, timestamp: float, error_type: str,
                 error_message: str, component: str):
        super().__init__(
            event_type=EventType.ERROR_OCCURRED,
            session_id=session_id,
            timestamp=timestamp,
            data={
                "error_type": error_type,
                "error_message": error_message,
                "component": component
            }
        )


EventHandler = Callable[[SessionEvent], None]


class SessionEventBus:
    """Event bus between the session orchestrator and its observers."""

    def __init__(self):
        self._handlers: Dict[EventType, List[EventHandler]] = {}
        self._global_handlers: List[EventHandler] = []

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """
        Subscribe to specific event type.

        Args:
            event_type: Type of event to listen for
            handler: Function to call when event occurs
        """
        self._handlers.setdefault(event_type, []).append(handler)
        logger.debug(f"Subscribed handler to {event_type}")

    def subscribe_all(self, handler: EventHandler) -> None:
        """Subscribe to all events."""
        self._global_handlers.append(handler)
        logger.debug("Subscribed global handler")

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> None:
        """
        Unsubscribe from specific event type.

        Args:
            event_type: Type of event to stop listening for
            handler: Handler function to remove
        """
        if event_type in self._handlers:
            try:
                self._handlers[event_type].remove(handler)
                logger.debug(f"Unsubscribed handler from {event_type}")
            except ValueError:
                logger.warning(f"Handler not found for {event_type}")

    def emit(self, event: SessionEvent) -> None:
        """
        Emit an event to all subscribers. Handler errors are logged, not raised.

        Args:
            event: Event to emit
        """
        logger.debug(f"Emitting event: {event.event_type} for session {event.session_id}")

        for handler in list(self._handlers.get(event.event_type, [])):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in event handler for {event.event_type}: {e}")

        for handler in list(self._global_handlers):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in global event handler: {e}")

    def clear_handlers(self) -> None:
        """Clear all event handlers."""
        self._handlers.clear()
        self._global_handlers.clear()
        logger.debug("Cleared all event handlers")


class EventLogger:
    """Logs all events for debugging and analysis."""

    def __init__(self, log_level: int = logging.INFO):
        self.logger = logging.getLogger("event_logger")
        self.logger.setLevel(log_level)

    def handle_event(self, event: SessionEvent) -> None:
        """Log event details."""
        self.logger.info(f"Event: {event.event_type.value} | Session: {event.session_id} | Data: {event.data}")


class CallMetrics:
    """Collects metrics from session events."""

    def __init__(self):
        self.reset()

    def handle_event(self, event: SessionEvent) -> None:
        """Update metrics based on event."""
        if event.event_type == EventType.CALL_STARTING:
            self.calls_started += 1
        elif event.event_type == EventType.CALL_FINISHED:
            self.calls_finished += 1
        elif event.event_type == EventType.CALL_FAILED:
            self.calls_failed += 1
        elif event.event_type == EventType.TRANSCRIPT_APPENDED:
            self.transcript_entries += 1
        elif event.event_type == EventType.FEEDBACK_SUBMITTED:
            if event.data.get("success"):
                self.feedback_submitted += 1
            else:
                self.feedback_failed += 1
        elif event.event_type == EventType.ERROR_OCCURRED:
            self.errors_occurred += 1

    def get_metrics(self) -> Dict[str, int]:
        """Get current metrics snapshot."""
        return {
            "calls_started": self.calls_started,
            "calls_finished": self.calls_finished,
            "calls_failed": self.calls_failed,
            "transcript_entries": self.transcript_entries,
            "feedback_submitted": self.feedback_submitted,
            "feedback_failed": self.feedback_failed,
            "errors_occurred": self.errors_occurred
        }

    def reset(self) -> None:
        """Reset all metrics to zero."""
        self.calls_started = 0
        self.calls_finished = 0
        self.calls_failed = 0
        self.transcript_entries = 0
        self.feedback_submitted = 0
        self.feedback_failed = 0
        self.errors_occurred = 0

"""
Finite-state core of a single call.

Every mutating method returns a ``Transition`` when the state actually changed
and ``None`` otherwise. Callers key their side effects on the returned
transition, never on the current state, so a trigger that is not in the table
cannot cause a second start command or a second terminal action.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Tuple

from ..config import Config
from .models import CallState, FailureKind, FailureReason, SessionContext, SessionMode

logger = logging.getLogger("state_machine")


class Trigger(str, Enum):
    """Inputs the state machine reacts to."""
    START_ACCEPTED = "start_accepted"
    START_REJECTED = "start_rejected"
    CHANNEL_STARTED = "channel_started"
    CHANNEL_ENDED = "channel_ended"
    CHANNEL_ERROR = "channel_error"
    STOP_REQUESTED = "stop_requested"
    RETRY = "retry"


TRANSITIONS: Dict[Tuple[CallState, Trigger], CallState] = {
    (CallState.IDLE, Trigger.START_ACCEPTED): CallState.CONNECTING,
    (CallState.IDLE, Trigger.START_REJECTED): CallState.FAILED,
    (CallState.CONNECTING, Trigger.CHANNEL_STARTED): CallState.ACTIVE,
    (CallState.CONNECTING, Trigger.CHANNEL_ERROR): CallState.FAILED,
    (CallState.CONNECTING, Trigger.STOP_REQUESTED): CallState.FINISHED,
    (CallState.ACTIVE, Trigger.CHANNEL_ENDED): CallState.FINISHED,
    (CallState.ACTIVE, Trigger.CHANNEL_ERROR): CallState.FAILED,
    (CallState.ACTIVE, Trigger.STOP_REQUESTED): CallState.FINISHED,
    (CallState.FAILED, Trigger.RETRY): CallState.IDLE,
}

LIVE_STATES = frozenset({CallState.CONNECTING, CallState.ACTIVE})


def next_state(state: CallState, trigger: Trigger) -> Optional[CallState]:
    """Target state for ``trigger`` in ``state``, or None if the pair is not allowed."""
    return TRANSITIONS.get((state, trigger))


@dataclass(frozen=True)
class Transition:
    """A state change that actually happened."""
    previous: CallState
    current: CallState
    trigger: Trigger

    @property
    def entered_finished(self) -> bool:
        return self.current == CallState.FINISHED

    @property
    def entered_failed(self) -> bool:
        return self.current == CallState.FAILED


class CallStateMachine:
    """Tracks one call's lifecycle and the failure that ended it, if any."""

    def __init__(self):
        self._state = CallState.IDLE
        self._failure: Optional[FailureReason] = None

    @property
    def state(self) -> CallState:
        return self._state

    @property
    def failure_reason(self) -> Optional[FailureReason]:
        return self._failure

    @property
    def is_live(self) -> bool:
        return self._state in LIVE_STATES

    def _fire(self, trigger: Trigger, failure: Optional[FailureReason] = None) -> Optional[Transition]:
        target = next_state(self._state, trigger)
        if target is None:
            logger.debug(f"Ignoring {trigger.value} in state {self._state.value}")
            return None

        transition = Transition(self._state, target, trigger)
        self._state = target
        if target == CallState.FAILED:
            self._failure = failure or FailureReason(FailureKind.UNKNOWN)
        elif target == CallState.IDLE:
            self._failure = None
        logger.info(f"Transition {transition.previous.value} -> {transition.current.value} ({trigger.value})")
        return transition

    @staticmethod
    def validate(context: SessionContext, config: Config) -> Optional[FailureReason]:
        """
        Check start preconditions without side effects.

        Args:
            context: Session context for the call
            config: Injected configuration

        Returns:
            FailureReason(MISSING_CREDENTIAL) describing the first problem, or None
        """
        missing = config.missing_credentials(context.mode.value)
        if missing:
            return FailureReason(FailureKind.MISSING_CREDENTIAL, f"Missing configuration: {', '.join(missing)}")

        if context.mode == SessionMode.ONBOARDING and not context.candidate_id:
            return FailureReason(FailureKind.MISSING_CREDENTIAL, "Onboarding call requires a candidate id")

        if context.mode == SessionMode.INTERVIEW and not any(q.strip() for q in context.question_list):
            return FailureReason(FailureKind.MISSING_CREDENTIAL, "Interview call requires at least one question")

        return None

    def accept_start(self) -> Optional[Transition]:
        return self._fire(Trigger.START_ACCEPTED)

    def reject(self, reason: FailureReason) -> Optional[Transition]:
        return self._fire(Trigger.START_REJECTED, reason)

    def request_stop(self) -> Optional[Transition]:
        """Force the call to FINISHED. No-op unless CONNECTING or ACTIVE."""
        return self._fire(Trigger.STOP_REQUESTED)

    def on_channel_event(self, trigger: Trigger, failure: Optional[FailureReason] = None) -> Optional[Transition]:
        """Apply a channel-originated trigger (started, ended or error)."""
        if trigger not in (Trigger.CHANNEL_STARTED, Trigger.CHANNEL_ENDED, Trigger.CHANNEL_ERROR):
            raise ValueError(f"Not a channel trigger: {trigger}")
        return self._fire(trigger, failure)

    def reset(self) -> Optional[Transition]:
        """Retry after FAILED: back to IDLE with the failure cleared."""
        return self._fire(Trigger.RETRY)

"""
Session orchestrator: owns the lifecycle of one voice interview call.
"""
import asyncio
import logging
import time
import uuid
from typing import Optional, Dict, Any

from ..config import Config, get_config
from ..infrastructure.audio import AudioInput, PyAudioInput
from ..infrastructure.feedback import FeedbackGateway, HttpFeedbackGateway
from ..infrastructure.voice import ChannelEvent, ChannelEventKind, VoiceChannel
from .errors import AudioInputDeniedError, classify_failure, describe_failure
from .events import (
    SessionEventBus, EventLogger, CallMetrics,
    CallStartingEvent, CallStartedEvent, CallFinishedEvent, CallFailedEvent,
    CallResetEvent, TranscriptAppendedEvent, SpeechActivityEvent,
    FeedbackSubmittedEvent, NavigationRequestedEvent, ErrorOccurredEvent
)
from .models import (
    CallState, FailureKind, FailureReason, NavigationSignal,
    SessionContext, SessionMode, SessionSnapshot
)
from .profiles import build_start_variables, select_profile
from .schemas import FeedbackRequest, parse_transcript_event
from .state_machine import CallStateMachine, Transition, Trigger
from .transcript import TranscriptAccumulator

logger = logging.getLogger("orchestrator")


class SessionOrchestrator:
    """
    Mediates between the voice channel and the rest of the application.

    Inbound channel events drive the state machine and the transcript
    accumulator. When the call reaches FINISHED the orchestrator runs exactly
    one terminal action: home navigation for onboarding calls, or feedback
    submission followed by navigation for interview calls. Failures of any kind
    end in FAILED with a FailureReason and never propagate to the caller.
    """

    def __init__(self,
                 context: SessionContext,
                 channel: VoiceChannel,
                 gateway: Optional[FeedbackGateway] = None,
                 config: Optional[Config] = None,
                 audio_input: Optional[AudioInput] = None,
                 event_bus: Optional[SessionEventBus] = None,
                 session_id: Optional[str] = None):

        self.context = context
        self.channel = channel
        # Read once; never re-read mid-call
        self.config = config if config is not None else get_config()
        if gateway is None and self.config.feedback_api_url:
            gateway = HttpFeedbackGateway(
                self.config.feedback_api_url,
                api_key=self.config.feedback_api_key,
                timeout=self.config.feedback_timeout,
            )
        self.gateway = gateway
        self.audio_input = audio_input if audio_input is not None else PyAudioInput()
        self.session_id = session_id or f"call_{uuid.uuid4().hex[:8]}"

        # Initialize event system
        self.event_bus = event_bus or SessionEventBus()
        self.event_logger = EventLogger()
        self.metrics = CallMetrics()
        self.event_bus.subscribe_all(self.event_logger.handle_event)
        self.event_bus.subscribe_all(self.metrics.handle_event)

        # Per-session state, never shared across calls
        self.machine = CallStateMachine()
        self.transcript = TranscriptAccumulator()
        self.agent_speaking = False
        self.navigation: Optional[NavigationSignal] = None

        self._terminal_fired = False
        self._audio_acquired = False
        self._unsubscribe = None
        self._start_lock = asyncio.Lock()
        self._connect_watchdog: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def state(self) -> CallState:
        return self.machine.state

    @property
    def failure_reason(self) -> Optional[FailureReason]:
        return self.machine.failure_reason

    @property
    def subscribed(self) -> bool:
        return self._unsubscribe is not None

    def open(self) -> None:
        """Subscribe to the channel's event stream (once per session)."""
        if self._unsubscribe is None:
            self._unsubscribe = self.channel.subscribe(self.on_channel_event)
            logger.debug(f"Session {self.session_id} subscribed to channel")

    async def close(self) -> None:
        """Tear down: stop a live call, then always unsubscribe."""
        try:
            if self.machine.is_live:
                await self.request_stop()
        finally:
            self._cancel_connect_watchdog()
            self._release_audio()
            if self._unsubscribe is not None:
                self._unsubscribe()
                self._unsubscribe = None
                logger.debug(f"Session {self.session_id} unsubscribed from channel")

    async def __aenter__(self) -> "SessionOrchestrator":
        self.open()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def request_start(self) -> CallState:
        """
        Start the call with the production profile for this session's mode.

        Returns:
            The call state once the start command was acknowledged (or refused)
        """
        return await self._start(overrides=None, diagnostic=False)

    async def request_diagnostic_start(self, variables: Dict[str, str]) -> CallState:
        """
        Re-attempt the start command with synthetic variable values.

        A failed call is reset first. All start guards still apply.
        """
        if self.machine.state == CallState.FAILED:
            self.reset()
        return await self._start(overrides=dict(variables), diagnostic=True)

    async def request_stop(self) -> CallState:
        """End the call locally and tell the channel to stop. Idempotent."""
        transition = self.machine.request_stop()
        if transition is None:
            logger.debug(f"Stop ignored in state {self.machine.state.value}")
            return self.machine.state

        # Fire-and-forget: FINISHED does not wait for the vendor
        self._stop_channel()
        await self._after_transition(transition)
        return self.machine.state

    def reset(self) -> CallState:
        """Retry after a failure: back to IDLE with a fresh transcript."""
        transition = self.machine.reset()
        if transition is None:
            logger.debug(f"Reset ignored in state {self.machine.state.value}")
            return self.machine.state

        self._release_audio()
        self.transcript = TranscriptAccumulator()
        self.agent_speaking = False
        self.event_bus.emit(CallResetEvent(self.session_id, time.time()))
        return self.machine.state

    async def _start(self, overrides: Optional[Dict[str, str]], diagnostic: bool) -> CallState:
        if self._start_lock.locked() or self.machine.state != CallState.IDLE:
            logger.warning(f"Start ignored in state {self.machine.state.value}")
            return self.machine.state

        async with self._start_lock:
            self.open()

            failure = self.machine.validate(self.context, self.config)
            if failure is not None:
                await self._after_transition(self.machine.reject(failure))
                return self.machine.state

            try:
                await self.audio_input.acquire()
            except Exception as e:
                await self._after_transition(self.machine.reject(self._classify_audio_failure(e)))
                return self.machine.state
            self._audio_acquired = True

            profile = select_profile(self.context, self.config.vapi_workflow_id)
            variables = build_start_variables(self.context)
            if overrides:
                variables.update(overrides)

            await self._after_transition(self.machine.accept_start())
            self.event_bus.emit(CallStartingEvent(
                self.session_id, time.time(), self.context.mode.value, profile.name, diagnostic
            ))
            logger.info(f"Starting {self.context.mode.value} call with profile '{profile.name}'")

            try:
                await self.channel.start(profile, variables)
            except Exception as e:
                logger.error("Channel start failed: %s", e)
                self._emit_error(e, "voice_channel")
                await self._after_transition(
                    self.machine.on_channel_event(Trigger.CHANNEL_ERROR, classify_failure(e))
                )

            return self.machine.state

    # ------------------------------------------------------------------
    # Inbound events
    # ------------------------------------------------------------------

    async def on_channel_event(self, event: ChannelEvent) -> None:
        """Handle one channel event to completion."""
        kind = event.kind

        if kind == ChannelEventKind.STARTED:
            await self._after_transition(self.machine.on_channel_event(Trigger.CHANNEL_STARTED))

        elif kind == ChannelEventKind.ENDED:
            await self._after_transition(self.machine.on_channel_event(Trigger.CHANNEL_ENDED))

        elif kind == ChannelEventKind.ERROR:
            reason = classify_failure(event.payload)
            logger.error(f"Channel error ({reason.kind.value}): {reason.detail}")
            transition = self.machine.on_channel_event(Trigger.CHANNEL_ERROR, reason)
            if transition is None:
                logger.info(f"Channel error ignored in state {self.machine.state.value}")
            await self._after_transition(transition)

        elif kind == ChannelEventKind.MESSAGE:
            self._handle_message(event.payload)

        elif kind == ChannelEventKind.SPEECH_STARTED:
            self._set_agent_speaking(True)

        elif kind == ChannelEventKind.SPEECH_ENDED:
            self._set_agent_speaking(False)

    def _handle_message(self, payload: Any) -> None:
        try:
            transcript_event = parse_transcript_event(payload)
        except ValueError as e:
            logger.warning(f"Dropping malformed message: {e}")
            return
        if transcript_event is None:
            return

        entry = self.transcript.append(transcript_event, self.machine.state)
        if entry is not None:
            self.event_bus.emit(TranscriptAppendedEvent(
                self.session_id, time.time(), len(self.transcript), entry.speaker.value, entry.text
            ))

    def _set_agent_speaking(self, speaking: bool) -> None:
        if not self.machine.is_live or self.agent_speaking == speaking:
            return
        self.agent_speaking = speaking
        self.event_bus.emit(SpeechActivityEvent(self.session_id, time.time(), speaking))

    # ------------------------------------------------------------------
    # Transitions and the terminal action
    # ------------------------------------------------------------------

    async def _after_transition(self, transition: Optional[Transition]) -> None:
        """Run side effects for a transition that actually happened."""
        if transition is None:
            return

        if transition.current == CallState.CONNECTING:
            self._arm_connect_watchdog()
        else:
            self._cancel_connect_watchdog()

        if transition.current == CallState.ACTIVE:
            self.event_bus.emit(CallStartedEvent(self.session_id, time.time()))

        elif transition.entered_failed:
            self.agent_speaking = False
            self._release_audio()
            reason = self.machine.failure_reason
            self.event_bus.emit(CallFailedEvent(
                self.session_id, time.time(), reason.kind.value, reason.detail, describe_failure(reason)
            ))

        elif transition.entered_finished:
            self.agent_speaking = False
            self.event_bus.emit(CallFinishedEvent(
                self.session_id, time.time(), transition.trigger.value, len(self.transcript)
            ))
            await self._run_terminal_action()

    async def _run_terminal_action(self) -> None:
        if self._terminal_fired:
            logger.warning("Terminal action already fired; skipping")
            return
        self._terminal_fired = True
        self._release_audio()

        entries = self.transcript.drain()
        if self.context.mode == SessionMode.ONBOARDING:
            self._navigate(NavigationSignal.home())
            return

        self._navigate(await self._submit_feedback(entries))

    async def _submit_feedback(self, entries) -> NavigationSignal:
        """Submit the transcript; any failure degrades to home navigation."""
        interview_id = self.context.interview_id
        candidate_id = self.context.candidate_id

        if not interview_id or not candidate_id or self.gateway is None:
            logger.warning(
                f"Skipping feedback submission (interview_id={interview_id}, "
                f"candidate_id={candidate_id}, gateway={'set' if self.gateway else 'missing'})"
            )
            self.event_bus.emit(FeedbackSubmittedEvent(self.session_id, time.time(), False, None, interview_id))
            return NavigationSignal.home()

        request = FeedbackRequest.from_entries(
            interview_id=interview_id,
            candidate_id=candidate_id,
            entries=entries,
            existing_feedback_id=self.context.existing_feedback_id,
        )

        try:
            result = await self.gateway.submit(request)
        except Exception as e:
            logger.error("Feedback submission failed: %s", e)
            self._emit_error(e, "feedback_gateway")
            self.event_bus.emit(FeedbackSubmittedEvent(self.session_id, time.time(), False, None, interview_id))
            return NavigationSignal.home()

        self.event_bus.emit(FeedbackSubmittedEvent(
            self.session_id, time.time(), result.success, result.feedback_id, interview_id
        ))
        if result.success and result.feedback_id:
            return NavigationSignal.feedback(result.feedback_id, interview_id)
        return NavigationSignal.home()

    def _navigate(self, signal: NavigationSignal) -> None:
        self.navigation = signal
        logger.info(f"Navigation requested: {signal.target.value} -> {signal.path}")
        self.event_bus.emit(NavigationRequestedEvent(
            self.session_id, time.time(), signal.target.value, signal.path, signal.feedback_id
        ))

    # ------------------------------------------------------------------
    # Connect watchdog (disabled unless connect_timeout_seconds is set)
    # ------------------------------------------------------------------

    def _arm_connect_watchdog(self) -> None:
        timeout = self.config.connect_timeout_seconds
        if not timeout or self._connect_watchdog is not None:
            return
        self._connect_watchdog = asyncio.create_task(self._watch_connect(float(timeout)))

    def _cancel_connect_watchdog(self) -> None:
        task = self._connect_watchdog
        self._connect_watchdog = None
        if task is not None and task is not asyncio.current_task() and not task.done():
            task.cancel()

    async def _watch_connect(self, timeout: float) -> None:
        await asyncio.sleep(timeout)
        if self.machine.state != CallState.CONNECTING:
            return
        logger.warning(f"Call still connecting after {timeout:.1f}s; giving up")
        reason = FailureReason(FailureKind.CHANNEL_ERROR, f"connect timeout after {timeout:.1f}s")
        transition = self.machine.on_channel_event(Trigger.CHANNEL_ERROR, reason)
        if transition is not None:
            self._stop_channel()
        await self._after_transition(transition)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _classify_audio_failure(error: Exception) -> FailureReason:
        if isinstance(error, (AudioInputDeniedError, PermissionError)):
            return classify_failure(error)
        return FailureReason(FailureKind.UNKNOWN, f"{type(error).__name__}: {error}")

    def _stop_channel(self) -> None:
        try:
            self.channel.stop()
        except Exception as e:
            logger.error("Channel stop failed: %s", e)
            self._emit_error(e, "voice_channel")

    def _release_audio(self) -> None:
        if self._audio_acquired:
            self._audio_acquired = False
            self.audio_input.release()

    def _emit_error(self, error: Exception, component: str) -> None:
        self.event_bus.emit(ErrorOccurredEvent(
            self.session_id, time.time(), type(error).__name__, str(error), component
        ))

    def snapshot(self) -> SessionSnapshot:
        """What the hosting UI observes."""
        reason = self.machine.failure_reason
        return SessionSnapshot(
            state=self.machine.state,
            failure_reason=reason,
            failure_message=describe_failure(reason),
            latest_text=self.transcript.latest(),
            agent_speaking=self.agent_speaking,
            transcript_length=len(self.transcript),
            navigation=self.navigation,
        )

    def get_metrics(self) -> Dict[str, int]:
        """Get current session metrics."""
        return self.metrics.get_metrics()

"""
Voice channel contract: one inbound event stream, two outbound commands.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol

logger = logging.getLogger("voice_channel")


class ChannelEventKind(str, Enum):
    """Events emitted by the vendor connection (values are vendor event names)."""
    STARTED = "call-start"
    ENDED = "call-end"
    MESSAGE = "message"
    SPEECH_STARTED = "speech-start"
    SPEECH_ENDED = "speech-end"
    ERROR = "error"


@dataclass(frozen=True)
class ChannelEvent:
    """A single inbound event; ``payload`` is the vendor's loosely typed body."""
    kind: ChannelEventKind
    payload: Any = None

    @classmethod
    def started(cls) -> "ChannelEvent":
        return cls(ChannelEventKind.STARTED)

    @classmethod
    def ended(cls) -> "ChannelEvent":
        return cls(ChannelEventKind.ENDED)

    @classmethod
    def message(cls, payload: Any) -> "ChannelEvent":
        return cls(ChannelEventKind.MESSAGE, payload)

    @classmethod
    def speech_started(cls) -> "ChannelEvent":
        return cls(ChannelEventKind.SPEECH_STARTED)

    @classmethod
    def speech_ended(cls) -> "ChannelEvent":
        return cls(ChannelEventKind.SPEECH_ENDED)

    @classmethod
    def error(cls, details: Any) -> "ChannelEvent":
        return cls(ChannelEventKind.ERROR, details)


@dataclass(frozen=True)
class StartProfile:
    """What the vendor should run: an inline assistant or a stored workflow."""
    name: str
    assistant: Optional[Dict[str, Any]] = field(default=None, compare=False)
    workflow_id: Optional[str] = None

    def __post_init__(self):
        if (self.assistant is None) == (self.workflow_id is None):
            raise ValueError("StartProfile needs exactly one of assistant or workflow_id")


ChannelEventHandler = Callable[[ChannelEvent], Awaitable[None]]


class VoiceChannel(Protocol):
    async def start(self, profile: StartProfile, variables: Dict[str, str]) -> None:
        ...

    def stop(self) -> None:
        ...

    def subscribe(self, handler: ChannelEventHandler) -> Callable[[], None]:
        ...


class EventDispatchingChannel(ABC):
    """
    Base class for vendor adapters.

    Subclasses implement ``start``/``stop`` and feed vendor callbacks into
    ``handle_vendor_event``. Handlers are awaited one at a time in subscription
    order, so each event is fully processed before the next one.
    """

    def __init__(self):
        self._handlers: List[ChannelEventHandler] = []

    @property
    def handler_count(self) -> int:
        return len(self._handlers)

    def subscribe(self, handler: ChannelEventHandler) -> Callable[[], None]:
        """
        Subscribe to the event stream.

        Returns:
            Callable that removes the subscription
        """
        self._handlers.append(handler)
        logger.debug("Subscribed channel handler")
        return lambda: self.unsubscribe(handler)

    def unsubscribe(self, handler: ChannelEventHandler) -> None:
        try:
            self._handlers.remove(handler)
            logger.debug("Unsubscribed channel handler")
        except ValueError:
            logger.warning("Channel handler not found")

    async def dispatch(self, event: ChannelEvent) -> None:
        """Deliver an event to every subscriber, in order."""
        logger.debug(f"Dispatching {event.kind.value}")
        for handler in list(self._handlers):
            try:
                await handler(event)
            except Exception as e:
                logger.error(f"Error in channel handler for {event.kind.value}: {e}")

    async def handle_vendor_event(self, name: str, payload: Any = None) -> None:
        """Translate a vendor callback (e.g. ``"call-start"``) into a ChannelEvent."""
        try:
            kind = ChannelEventKind(name)
        except ValueError:
            logger.warning(f"Ignoring unknown vendor event: {name}")
            return
        await self.dispatch(ChannelEvent(kind, payload))

    @abstractmethod
    async def start(self, profile: StartProfile, variables: Dict[str, str]) -> None:
        """Issue the start command; return once the vendor acknowledged it."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Issue the stop command without waiting for the vendor."""
        pass

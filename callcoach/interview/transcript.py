"""
Transcript accumulation for a single call.
"""
import logging
from typing import List, Optional, Tuple

from .errors import TranscriptDrainedError
from .models import CallState, TranscriptEntry
from .schemas import TranscriptEvent

logger = logging.getLogger("transcript")

ACCEPTING_STATES = frozenset({CallState.CONNECTING, CallState.ACTIVE})


class TranscriptAccumulator:
    """Ordered, append-only list of finalized utterances."""

    def __init__(self):
        self._entries: List[TranscriptEntry] = []
        self._drained = False

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> Tuple[TranscriptEntry, ...]:
        """Snapshot of what has been accumulated so far."""
        return tuple(self._entries)

    @property
    def drained(self) -> bool:
        return self._drained

    def append(self, event: TranscriptEvent, state: CallState) -> Optional[TranscriptEntry]:
        """
        Append a transcript event if it is final and the call is live.

        Args:
            event: Parsed transcript event from the channel
            state: Current call state

        Returns:
            The appended entry, or None if the event was discarded
        """
        if self._drained:
            logger.debug("Discarding transcript after drain")
            return None
        if state not in ACCEPTING_STATES:
            logger.debug(f"Discarding transcript in state {state.value}")
            return None
        if not event.is_final:
            return None

        entry = event.to_entry()
        self._entries.append(entry)
        logger.debug(f"Transcript #{len(self._entries)} [{entry.speaker.value}]: {entry.text}")
        return entry

    def latest(self) -> str:
        """Text of the most recent entry, for live display."""
        return self._entries[-1].text if self._entries else ""

    def drain(self) -> List[TranscriptEntry]:
        """
        Hand off the full transcript. Callable once.

        Raises:
            TranscriptDrainedError: If the transcript was already drained
        """
        if self._drained:
            raise TranscriptDrainedError("Transcript already drained")
        self._drained = True
        return list(self._entries)

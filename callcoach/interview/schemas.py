"""
Structured schemas for vendor messages and feedback submission.
"""
from enum import Enum
from typing import Optional, Dict, Any, List, Tuple, Iterable

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .models import Speaker, TranscriptEntry


class Finality(str, Enum):
    """Whether a transcript fragment is settled."""
    FINAL = "final"
    INTERIM = "interim"


# Vendor role names <-> speakers
ROLE_TO_SPEAKER = {
    "user": Speaker.CANDIDATE,
    "assistant": Speaker.AGENT,
    "system": Speaker.SYSTEM,
}
SPEAKER_TO_ROLE = {speaker: role for role, speaker in ROLE_TO_SPEAKER.items()}


class TranscriptEvent(BaseModel):
    """Transcript message streamed by the voice channel."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    type: str = "transcript"
    speaker: Speaker = Field(alias="role")
    text: str = Field(alias="transcript")
    finality: Optional[Finality] = Field(default=None, alias="transcriptType")

    @field_validator("speaker", mode="before")
    @classmethod
    def _map_vendor_role(cls, value: Any) -> Any:
        if isinstance(value, str):
            return ROLE_TO_SPEAKER.get(value.strip().lower(), value)
        return value

    @property
    def is_final(self) -> bool:
        return self.finality == Finality.FINAL

    def to_entry(self) -> TranscriptEntry:
        return TranscriptEntry(speaker=self.speaker, text=self.text)


def parse_transcript_event(payload: Any) -> Optional[TranscriptEvent]:
    """
    Parse a channel ``message`` payload into a transcript event.

    Args:
        payload: Raw message from the vendor, or an already parsed event

    Returns:
        TranscriptEvent, or None if the message is not a transcript

    Raises:
        ValueError: If the message claims to be a transcript but is malformed
    """
    if isinstance(payload, TranscriptEvent):
        return payload
    if not isinstance(payload, dict) or payload.get("type") != "transcript":
        return None
    try:
        return TranscriptEvent.model_validate(payload)
    except ValidationError as e:
        raise ValueError(f"Invalid transcript message: {e}") from e


class FeedbackRequest(BaseModel):
    """Payload handed to the feedback submission gateway."""
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    interview_id: str = Field(alias="interviewId")
    candidate_id: str = Field(alias="userId")
    transcript: Tuple[TranscriptEntry, ...] = ()
    existing_feedback_id: Optional[str] = Field(default=None, alias="feedbackId")

    @classmethod
    def from_entries(cls,
                     interview_id: str,
                     candidate_id: str,
                     entries: Iterable[TranscriptEntry],
                     existing_feedback_id: Optional[str] = None) -> "FeedbackRequest":
        return cls(
            interview_id=interview_id,
            candidate_id=candidate_id,
            transcript=tuple(entries),
            existing_feedback_id=existing_feedback_id,
        )

    def to_payload(self) -> Dict[str, Any]:
        """Wire format: camelCase keys, transcript as role/content pairs."""
        lines: List[Dict[str, str]] = [
            {"role": SPEAKER_TO_ROLE[entry.speaker], "content": entry.text}
            for entry in self.transcript
        ]
        payload: Dict[str, Any] = {
            "interviewId": self.interview_id,
            "userId": self.candidate_id,
            "transcript": lines,
        }
        if self.existing_feedback_id:
            payload["feedbackId"] = self.existing_feedback_id
        return payload


class FeedbackResult(BaseModel):
    """Gateway answer: success flag plus the stored feedback identifier."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    success: bool = False
    feedback_id: Optional[str] = Field(default=None, alias="feedbackId")

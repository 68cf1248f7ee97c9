import pytest

from callcoach.interview.models import Speaker, TranscriptEntry
from callcoach.interview.schemas import (
    FeedbackRequest,
    FeedbackResult,
    Finality,
    TranscriptEvent,
    parse_transcript_event,
)


@pytest.mark.parametrize("role,speaker", [
    ("user", Speaker.CANDIDATE),
    ("assistant", Speaker.AGENT),
    ("system", Speaker.SYSTEM),
    ("Assistant", Speaker.AGENT),
])
def test_vendor_roles_map_to_speakers(role, speaker):
    event = parse_transcript_event({
        "type": "transcript", "role": role, "transcript": "hi", "transcriptType": "final",
    })
    assert event.speaker == speaker
    assert event.finality == Finality.FINAL
    assert event.is_final


def test_extra_vendor_fields_are_ignored():
    event = parse_transcript_event({
        "type": "transcript", "role": "user", "transcript": "hi",
        "transcriptType": "interim", "timestamp": 123,
    })
    assert event.is_final is False


@pytest.mark.parametrize("payload", [
    None,
    "transcript",
    {"type": "function-call"},
    {"role": "user", "transcript": "no type"},
])
def test_non_transcript_payloads_parse_to_none(payload):
    assert parse_transcript_event(payload) is None


def test_parsed_event_passes_through():
    event = TranscriptEvent(speaker=Speaker.AGENT, text="hello", finality=Finality.FINAL)
    assert parse_transcript_event(event) is event


@pytest.mark.parametrize("payload", [
    {"type": "transcript", "role": "user"},
    {"type": "transcript", "role": "moderator", "transcript": "x"},
    {"type": "transcript", "role": "user", "transcript": "x", "transcriptType": "partial"},
])
def test_malformed_transcripts_raise_value_error(payload):
    with pytest.raises(ValueError):
        parse_transcript_event(payload)


def test_feedback_request_payload():
    request = FeedbackRequest.from_entries(
        interview_id="i-1",
        candidate_id="u-1",
        entries=[
            TranscriptEntry(Speaker.AGENT, "Why this role?"),
            TranscriptEntry(Speaker.CANDIDATE, "Because."),
        ],
    )

    assert request.to_payload() == {
        "interviewId": "i-1",
        "userId": "u-1",
        "transcript": [
            {"role": "assistant", "content": "Why this role?"},
            {"role": "user", "content": "Because."},
        ],
    }


def test_feedback_request_includes_existing_feedback_id():
    request = FeedbackRequest.from_entries("i-1", "u-1", [], existing_feedback_id="fb-1")
    assert request.to_payload()["feedbackId"] == "fb-1"
    assert request.to_payload()["transcript"] == []


def test_feedback_result_accepts_wire_names():
    result = FeedbackResult.model_validate({"success": True, "feedbackId": "abc", "extra": 1})
    assert result.success is True
    assert result.feedback_id == "abc"
    assert FeedbackResult().success is False

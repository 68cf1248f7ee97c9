import pytest

from callcoach.interview.errors import TranscriptDrainedError
from callcoach.interview.models import CallState, Speaker
from callcoach.interview.schemas import TranscriptEvent
from callcoach.interview.transcript import TranscriptAccumulator


def _event(text: str, role: str = "user", final: bool = True) -> TranscriptEvent:
    return TranscriptEvent.model_validate({
        "type": "transcript",
        "role": role,
        "transcript": text,
        "transcriptType": "final" if final else "interim",
    })


def test_only_final_events_are_accumulated_in_order():
    acc = TranscriptAccumulator()
    acc.append(_event("Hello", role="assistant"), CallState.ACTIVE)
    acc.append(_event("Hi th", final=False), CallState.ACTIVE)
    acc.append(_event("Hi there"), CallState.ACTIVE)

    assert [(e.speaker, e.text) for e in acc.entries] == [
        (Speaker.AGENT, "Hello"),
        (Speaker.CANDIDATE, "Hi there"),
    ]
    assert acc.latest() == "Hi there"


def test_event_without_finality_is_not_final():
    acc = TranscriptAccumulator()
    event = TranscriptEvent.model_validate({"type": "transcript", "role": "user", "transcript": "x"})
    assert acc.append(event, CallState.ACTIVE) is None
    assert len(acc) == 0


@pytest.mark.parametrize("state", [CallState.IDLE, CallState.FINISHED, CallState.FAILED])
def test_events_outside_live_states_are_discarded(state):
    acc = TranscriptAccumulator()
    assert acc.append(_event("late"), state) is None
    assert len(acc) == 0


def test_connecting_state_accepts_events():
    acc = TranscriptAccumulator()
    entry = acc.append(_event("early"), CallState.CONNECTING)
    assert entry.text == "early"


def test_latest_is_empty_without_entries():
    assert TranscriptAccumulator().latest() == ""


def test_drain_returns_everything_once():
    acc = TranscriptAccumulator()
    acc.append(_event("one"), CallState.ACTIVE)
    acc.append(_event("two"), CallState.ACTIVE)

    drained = acc.drain()

    assert [e.text for e in drained] == ["one", "two"]
    assert acc.drained
    with pytest.raises(TranscriptDrainedError):
        acc.drain()


def test_appends_after_drain_are_discarded():
    acc = TranscriptAccumulator()
    acc.drain()
    assert acc.append(_event("too late"), CallState.ACTIVE) is None
    assert len(acc) == 0


def test_empty_transcript_drains_to_empty_list():
    assert TranscriptAccumulator().drain() == []

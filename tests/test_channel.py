import pytest

from callcoach.infrastructure.voice import ChannelEvent, ChannelEventKind, EventDispatchingChannel, StartProfile
from callcoach.interview.testing import MockVoiceChannel


def test_dispatch_base_cannot_be_instantiated():
    with pytest.raises(TypeError):
        EventDispatchingChannel()


def test_start_profile_needs_exactly_one_target():
    with pytest.raises(ValueError):
        StartProfile(name="none")
    with pytest.raises(ValueError):
        StartProfile(name="both", assistant={}, workflow_id="wf")


@pytest.mark.asyncio
async def test_handlers_run_in_subscription_order_and_errors_are_contained():
    channel = MockVoiceChannel()
    seen = []

    async def broken(event: ChannelEvent) -> None:
        raise RuntimeError("boom")

    async def first(event: ChannelEvent) -> None:
        seen.append(("first", event.kind))

    async def second(event: ChannelEvent) -> None:
        seen.append(("second", event.kind))

    channel.subscribe(first)
    channel.subscribe(broken)
    unsubscribe = channel.subscribe(second)
    await channel.emit_started()
    unsubscribe()
    await channel.emit_ended()

    assert seen == [
        ("first", ChannelEventKind.STARTED),
        ("second", ChannelEventKind.STARTED),
        ("first", ChannelEventKind.ENDED),
    ]


@pytest.mark.asyncio
async def test_unknown_vendor_events_are_ignored():
    channel = MockVoiceChannel()
    seen = []

    async def record(event: ChannelEvent) -> None:
        seen.append(event)

    channel.subscribe(record)
    await channel.handle_vendor_event("volume-level", 0.4)

    assert seen == []

from __future__ import annotations

import asyncio

import pytest

from permflow.permission import (
    GRANTED,
    PERMANENTLY_DENIED,
    Denied,
    EventType,
    InvalidKeyError,
    LaunchCancelledError,
    LauncherNotRegisteredError,
    PermissionStatus,
    RequestState,
)
from permflow.permission.launcher import MULTIPLE, SINGLE
from permflow.testing import ALLOW, DENY, DENY_DONT_ASK

CAMERA = "android.permission.CAMERA"
MIC = "android.permission.RECORD_AUDIO"
SMS = "android.permission.SEND_SMS"


# =============================================================================
# Single requests
# =============================================================================

@pytest.mark.asyncio
async def test_granted_key_short_circuits_without_launch(coordinator, fake_os) -> None:
    fake_os.grant(CAMERA)

    assert await coordinator.request_one(CAMERA) == GRANTED
    assert fake_os.launches == []
    assert coordinator.state == RequestState.IDLE


@pytest.mark.asyncio
async def test_first_denial_with_rationale_marks_history(coordinator, fake_os, history) -> None:
    fake_os.respond(CAMERA, DENY)

    outcome = await coordinator.request_one(CAMERA)

    assert outcome == Denied(should_show_rationale=True)
    assert history.was_requested(CAMERA) is True
    assert fake_os.launched_keys == [CAMERA]


@pytest.mark.asyncio
async def test_second_denial_without_rationale_is_permanent(coordinator, fake_os, history) -> None:
    fake_os.respond(CAMERA, DENY, DENY_DONT_ASK)

    assert await coordinator.request_one(CAMERA) == Denied(True)
    assert await coordinator.request_one(CAMERA) == PERMANENTLY_DENIED
    assert history.was_requested(CAMERA) is True


@pytest.mark.asyncio
async def test_known_permanent_denial_skips_the_dialog(coordinator, fake_os, history) -> None:
    history.mark_requested(CAMERA)

    assert await coordinator.request_one(CAMERA) == PERMANENTLY_DENIED
    assert fake_os.launches == []


@pytest.mark.asyncio
async def test_grant_after_denial_clears_history(coordinator, fake_os, history) -> None:
    fake_os.respond(CAMERA, DENY, ALLOW)

    await coordinator.request_one(CAMERA)
    assert await coordinator.request_one(CAMERA) == GRANTED
    assert history.was_requested(CAMERA) is False


@pytest.mark.asyncio
async def test_unregistered_launcher_raises(coordinator, fake_os) -> None:
    fake_os.launcher.unregister()

    with pytest.raises(LauncherNotRegisteredError):
        await coordinator.request_one(CAMERA)
    assert coordinator.state == RequestState.IDLE


@pytest.mark.asyncio
async def test_granted_key_needs_no_launcher(coordinator, fake_os) -> None:
    fake_os.launcher.unregister()
    fake_os.grant(CAMERA)

    assert await coordinator.request_one(CAMERA) == GRANTED


@pytest.mark.asyncio
async def test_invalid_key_propagates(coordinator, fake_os) -> None:
    fake_os.make_unknown(CAMERA)

    with pytest.raises(InvalidKeyError):
        await coordinator.request_one(CAMERA)
    with pytest.raises(InvalidKeyError):
        await coordinator.request_one("")


@pytest.mark.asyncio
async def test_cancelled_launch_produces_no_outcome(coordinator, fake_os, history, tracker) -> None:
    fake_os.hold()
    pending = asyncio.ensure_future(coordinator.request_one(CAMERA))
    await fake_os.wait_until_launched()
    assert coordinator.state == RequestState.AWAITING_LAUNCH

    fake_os.launcher.unregister()

    with pytest.raises(LaunchCancelledError):
        await pending
    assert history.snapshot() == {}
    assert tracker.events_of_type(EventType.DENIED) == []
    assert coordinator.state == RequestState.IDLE


@pytest.mark.asyncio
async def test_state_is_tracked_per_channel(coordinator, fake_os) -> None:
    fake_os.grant(MIC)
    fake_os.respond(CAMERA, ALLOW)
    fake_os.hold()
    pending = asyncio.ensure_future(coordinator.request_one(CAMERA))
    await fake_os.wait_until_launched()

    result = await coordinator.request_many([MIC])

    assert result.all_granted
    assert coordinator.state == RequestState.AWAITING_LAUNCH
    assert coordinator.state_of(SINGLE) == RequestState.AWAITING_LAUNCH
    assert coordinator.state_of(MULTIPLE) == RequestState.IDLE

    fake_os.release()
    assert await pending == GRANTED
    assert coordinator.state == RequestState.IDLE


# =============================================================================
# Multi-key requests
# =============================================================================

@pytest.mark.asyncio
async def test_batch_already_granted_skips_launch(coordinator, fake_os) -> None:
    fake_os.grant(CAMERA, MIC)

    result = await coordinator.request_many([CAMERA, MIC])

    assert result.all_granted
    assert result.granted == {CAMERA, MIC}
    assert fake_os.launches == []


@pytest.mark.asyncio
async def test_batch_launches_every_key_when_one_is_missing(coordinator, fake_os) -> None:
    fake_os.grant(CAMERA)
    fake_os.respond(CAMERA, ALLOW)
    fake_os.respond(MIC, DENY)

    result = await coordinator.request_many([CAMERA, MIC, CAMERA])

    assert fake_os.launched_keys == [CAMERA, MIC]
    assert result.granted == {CAMERA}
    assert result.denied == {MIC}
    assert result.per_key[MIC] == Denied(True)


@pytest.mark.asyncio
async def test_batch_partition_covers_exactly_the_requested_keys(coordinator, fake_os, history) -> None:
    history.mark_requested(SMS)
    fake_os.respond(CAMERA, ALLOW)
    fake_os.respond(MIC, DENY)
    fake_os.respond(SMS, DENY_DONT_ASK)

    result = await coordinator.request_many([CAMERA, MIC, SMS])

    assert result.granted | result.denied | result.permanently_denied == {CAMERA, MIC, SMS}
    assert result.permanently_denied == {SMS}
    assert result.any_permanently_denied
    assert not result.all_granted


@pytest.mark.asyncio
async def test_batch_missing_key_in_launch_result_counts_as_denied(fake_os) -> None:
    async def forgetful(keys):
        return {keys[0]: True}

    fake_os.launcher.register(single=fake_os.show_dialog, multiple=forgetful)
    coordinator = fake_os.coordinator()

    result = await coordinator.request_many([CAMERA, MIC])

    assert result.granted == {CAMERA}
    assert result.denied == {MIC}


# =============================================================================
# Retry
# =============================================================================

@pytest.mark.asyncio
async def test_retry_stops_when_granted(coordinator, fake_os) -> None:
    fake_os.respond(CAMERA, DENY, ALLOW)

    assert await coordinator.request_with_retry(CAMERA, max_retries=3, delay_ms=0) == GRANTED
    assert len(fake_os.launches) == 2


@pytest.mark.asyncio
async def test_retry_never_retries_permanent_denial(coordinator, fake_os) -> None:
    fake_os.respond(CAMERA, DENY, DENY_DONT_ASK, ALLOW)

    assert await coordinator.request_with_retry(CAMERA, max_retries=5, delay_ms=0) == PERMANENTLY_DENIED
    assert len(fake_os.launches) == 2


@pytest.mark.asyncio
async def test_retry_gives_up_after_max_retries(coordinator, fake_os) -> None:
    fake_os.respond(CAMERA, DENY, DENY, DENY, DENY)

    assert await coordinator.request_with_retry(CAMERA, max_retries=2) == Denied(True)
    assert len(fake_os.launches) == 3


@pytest.mark.asyncio
async def test_retry_uses_coordinator_defaults(fake_os) -> None:
    coordinator = fake_os.coordinator(retry_max_attempts=1, retry_delay_ms=0)
    fake_os.respond(CAMERA, DENY, DENY, DENY)

    assert await coordinator.request_with_retry(CAMERA) == Denied(True)
    assert len(fake_os.launches) == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("kwargs", [{"max_retries": -1}, {"delay_ms": -5}])
async def test_retry_rejects_negative_arguments(coordinator, kwargs) -> None:
    with pytest.raises(ValueError):
        await coordinator.request_with_retry(CAMERA, **kwargs)


# =============================================================================
# Status
# =============================================================================

@pytest.mark.asyncio
async def test_check_status_never_launches_or_mutates(coordinator, fake_os, history) -> None:
    fake_os.respond(CAMERA, DENY)
    await coordinator.request_one(CAMERA)
    fake_os.reset_log()
    before = history.snapshot()

    first = coordinator.check_status(CAMERA)
    second = coordinator.check_status(CAMERA)

    assert first == second == PermissionStatus.SHOULD_SHOW_RATIONALE
    assert fake_os.launches == []
    assert history.snapshot() == before


@pytest.mark.asyncio
async def test_check_statuses_after_denials(coordinator, fake_os) -> None:
    fake_os.grant(SMS)
    fake_os.respond(CAMERA, DENY)
    fake_os.respond(MIC, DENY_DONT_ASK, DENY_DONT_ASK)
    await coordinator.request_one(CAMERA)
    await coordinator.request_one(MIC)
    await coordinator.request_one(MIC)

    assert coordinator.check_statuses([CAMERA, MIC, SMS]) == {
        CAMERA: PermissionStatus.SHOULD_SHOW_RATIONALE,
        MIC: PermissionStatus.PERMANENTLY_DENIED,
        SMS: PermissionStatus.GRANTED,
    }
    assert coordinator.is_granted(SMS)
    assert not coordinator.are_all_granted([SMS, CAMERA])


def test_clear_history(coordinator, history, tracker) -> None:
    history.mark_requested(CAMERA)
    history.mark_requested(MIC)

    coordinator.clear_history(CAMERA)
    assert history.snapshot() == {MIC: True}

    coordinator.clear_all_history()
    assert history.snapshot() == {}
    assert [e.permission for e in tracker.events_of_type(EventType.HISTORY_CLEARED)] == [CAMERA, "*"]


@pytest.mark.asyncio
async def test_observe_yields_changes_and_stops_on_unregister(coordinator, fake_os) -> None:
    seen = []

    async def watch():
        async for status in coordinator.observe(CAMERA, interval_s=0.01):
            seen.append(status)
            if status == PermissionStatus.GRANTED:
                fake_os.launcher.unregister()

    watcher = asyncio.ensure_future(watch())
    await asyncio.sleep(0.03)
    fake_os.grant(CAMERA)
    await asyncio.wait_for(watcher, timeout=1.0)

    assert seen == [PermissionStatus.NOT_GRANTED, PermissionStatus.GRANTED]


# =============================================================================
# Analytics
# =============================================================================

@pytest.mark.asyncio
async def test_request_events_are_tracked(coordinator, fake_os, tracker) -> None:
    fake_os.respond(CAMERA, DENY)

    await coordinator.request_one(CAMERA)

    events = tracker.events_for(CAMERA)
    assert [e.event_type for e in events] == [EventType.REQUESTED, EventType.DENIED]
    assert events[1].result == Denied(True)


@pytest.mark.asyncio
async def test_multi_request_is_tracked_once(coordinator, fake_os, tracker) -> None:
    fake_os.grant(CAMERA, MIC)

    result = await coordinator.request_many([CAMERA, MIC])

    assert tracker.multi_permission_events == [([CAMERA, MIC], result, {"launched": False})]

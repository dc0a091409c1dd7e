"""
Unit tests for PulseScheduler.

Tests the scheduler's core functionality:
- Interval sampling from the trajectory
- Tick toggling, listener notification and re-arming
- Deferred parameter setters
- Reset and stop semantics
- At most one pending tick at any time
"""

import asyncio
import logging
from unittest.mock import MagicMock

import pytest

from heartpace.pulse.enums import HeartGlyph, SchedulerState
from heartpace.pulse.scheduler import PulseScheduler
from tests.fixtures.clock import FakeClock

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    """Default scheduler on a fake clock (not started)."""
    return PulseScheduler(clock=clock)


@pytest.fixture
async def running(scheduler):
    """Scheduler started on the test's event loop; stopped afterwards."""
    scheduler.start()
    yield scheduler
    scheduler.stop()


def armed_delay(scheduler: PulseScheduler) -> float:
    """Seconds until the armed tick fires."""
    return scheduler._handle.when() - scheduler.loop.time()


# ============================================================================
# Interval Sampling Tests
# ============================================================================


def test_initial_interval(scheduler):
    """Test interval at t=0 is 60 / initial BPM."""
    assert scheduler.current_interval() == pytest.approx(60 / 135)


def test_halfway_interval(scheduler, clock):
    """Test 135 -> 60 over 1800s at t=900 gives 97.5 BPM (~0.615s)."""
    clock.advance(900)

    assert scheduler.current_bpm() == pytest.approx(97.5)
    assert scheduler.current_interval() == pytest.approx(60 / 97.5)


def test_interval_holds_after_slope(scheduler, clock):
    """Test interval settles at 60 / target once the slope is done."""
    clock.advance(5000)

    assert scheduler.current_bpm() == 60.0
    assert scheduler.current_interval() == pytest.approx(1.0)


def test_elapsed_never_negative(scheduler, clock):
    """Test a clock that moves backwards reads as zero elapsed."""
    clock.advance(-10)
    assert scheduler.elapsed() == 0.0


def test_constructor_clamps_defaults(clock):
    """Test out-of-domain defaults are clamped and remembered for reset()."""
    scheduler = PulseScheduler(initial_bpm=400, slope_duration_seconds=10, clock=clock)

    assert scheduler.default_initial_bpm == 150.0
    assert scheduler.default_slope_duration_seconds == 1200.0


# ============================================================================
# Start / Tick Tests
# ============================================================================


def test_start_without_loop_raises(scheduler):
    """Test start() outside an event loop raises and leaves the scheduler idle."""
    with pytest.raises(RuntimeError):
        scheduler.start()

    assert scheduler.state == SchedulerState.IDLE
    assert not scheduler.pending


@pytest.mark.asyncio
async def test_start_arms_one_tick(running):
    """Test start() arms a tick at the current interval."""
    assert running.state == SchedulerState.RUNNING
    assert running.pending
    assert armed_delay(running) == pytest.approx(60 / 135, abs=0.05)


@pytest.mark.asyncio
async def test_start_is_idempotent(running):
    """Test a second start() keeps the same armed handle."""
    handle = running._handle

    running.start()

    assert running._handle is handle
    assert not handle.cancelled()


@pytest.mark.asyncio
async def test_tick_toggles_and_notifies(running):
    """Test tick() flips icon_on and calls every listener with the new state."""
    listener = MagicMock()
    running.add_listener(listener)

    running.tick()
    running.tick()

    assert listener.call_args_list[0].args == (False,)
    assert listener.call_args_list[1].args == (True,)
    assert running.tick_count == 2
    assert running.icon_on is True


@pytest.mark.asyncio
async def test_tick_rearms_with_single_pending(running):
    """Test tick() cancels the previous handle and arms exactly one new tick."""
    first = running._handle

    running.tick()

    assert first.cancelled()
    assert running._handle is not first
    assert running.pending


@pytest.mark.asyncio
async def test_tick_samples_instantaneous_bpm(running, clock):
    """Test each tick's delay follows the BPM at the moment it fires."""
    clock.advance(900)
    running.tick()
    assert armed_delay(running) == pytest.approx(60 / 97.5, abs=0.05)

    clock.advance(900)
    running.tick()
    assert armed_delay(running) == pytest.approx(1.0, abs=0.05)


@pytest.mark.asyncio
async def test_ticks_fire_on_the_event_loop():
    """Test the loop drives ticks on its own at the computed cadence."""
    scheduler = PulseScheduler()
    toggles = []
    scheduler.add_listener(toggles.append)

    scheduler.start()
    try:
        await asyncio.sleep(1.0)
    finally:
        scheduler.stop()

    # 135 BPM is a toggle every ~0.44s
    assert 1 <= len(toggles) <= 3
    assert toggles[0] is False
    assert scheduler.tick_count == len(toggles)


# ============================================================================
# Listener Tests
# ============================================================================


@pytest.mark.asyncio
async def test_listener_failure_does_not_stop_cadence(running, caplog):
    """Test a raising listener is logged and later listeners still run."""
    broken = MagicMock(side_effect=RuntimeError("display gone"))
    healthy = MagicMock()
    running.add_listener(broken)
    running.add_listener(healthy)

    with caplog.at_level(logging.ERROR, logger="heartpace.scheduler"):
        running.tick()

    healthy.assert_called_once_with(False)
    assert running.pending
    assert "display gone" in caplog.text


def test_add_listener_is_deduplicated(scheduler):
    listener = MagicMock()
    scheduler.add_listener(listener)
    scheduler.add_listener(listener)

    assert scheduler._listeners == [listener]


@pytest.mark.asyncio
async def test_remove_listener(running):
    listener = MagicMock()
    running.add_listener(listener)
    running.remove_listener(listener)
    running.remove_listener(listener)  # no error when absent

    running.tick()

    listener.assert_not_called()


# ============================================================================
# Setter Tests
# ============================================================================


def test_setters_clamp_and_return_stored_values(scheduler):
    assert scheduler.set_initial_bpm(200) == 150.0
    assert scheduler.set_initial_bpm(10) == 50.0
    assert scheduler.set_target_bpm(151) == 150.0
    assert scheduler.set_slope_duration(10 * 60) == 20 * 60
    assert scheduler.set_slope_duration_minutes(90) == 3600.0


@pytest.mark.asyncio
async def test_setters_do_not_rearm(running):
    """Test setters leave the armed tick untouched, however often called."""
    handle = running._handle

    for bpm in range(50, 151, 5):
        running.set_initial_bpm(bpm)
        running.set_target_bpm(bpm)
        running.set_slope_duration_minutes(bpm / 3)

    assert running._handle is handle
    assert not handle.cancelled()
    assert running.pending


@pytest.mark.asyncio
async def test_setter_applies_at_next_tick(running):
    """Test a new initial BPM only shapes the delay armed by the next tick."""
    delay_before = armed_delay(running)

    running.set_initial_bpm(150)
    assert armed_delay(running) == pytest.approx(delay_before, abs=0.01)

    running.tick()
    assert armed_delay(running) == pytest.approx(0.4, abs=0.05)


# ============================================================================
# Reset / Stop Tests
# ============================================================================


@pytest.mark.asyncio
async def test_reset_restores_defaults_but_not_target(running, clock):
    """Test reset() restores initial BPM and slope, keeps target, restarts time."""
    clock.advance(900)
    running.set_initial_bpm(100)
    running.set_target_bpm(70)
    running.set_slope_duration_minutes(40)
    old_handle = running._handle

    running.reset()

    assert running.trajectory.initial_bpm == 135.0
    assert running.trajectory.slope_duration_seconds == 1800.0
    assert running.trajectory.target_bpm == 70.0
    assert running.elapsed() == 0.0
    assert running.current_interval() == pytest.approx(60 / 135)
    assert old_handle.cancelled()
    assert running.pending
    assert armed_delay(running) == pytest.approx(60 / 135, abs=0.05)


def test_reset_while_idle_does_not_arm(scheduler, clock):
    clock.advance(600)

    scheduler.reset()

    assert scheduler.elapsed() == 0.0
    assert not scheduler.pending
    assert scheduler.state == SchedulerState.IDLE


@pytest.mark.asyncio
async def test_stop_cancels_pending_tick(running):
    handle = running._handle

    running.stop()
    running.stop()

    assert handle.cancelled()
    assert not running.pending
    assert running.state == SchedulerState.STOPPED


@pytest.mark.asyncio
async def test_tick_after_stop_is_ignored(running):
    """Test a stale tick against a stopped scheduler neither toggles nor re-arms."""
    listener = MagicMock()
    running.add_listener(listener)
    running.stop()

    running.tick()

    listener.assert_not_called()
    assert running.tick_count == 0
    assert not running.pending


@pytest.mark.asyncio
async def test_reset_after_stop_does_not_rearm(running):
    running.stop()
    running.reset()

    assert not running.pending


# ============================================================================
# Snapshot Tests
# ============================================================================


@pytest.mark.asyncio
async def test_snapshot(running, clock):
    clock.advance(900)
    running.tick()

    snap = running.snapshot()

    assert snap.initial_bpm == 135.0
    assert snap.target_bpm == 60.0
    assert snap.slope_duration_minutes == 30.0
    assert snap.elapsed_seconds == 900.0
    assert snap.progress == 0.5
    assert snap.current_bpm == pytest.approx(97.5)
    assert snap.current_interval == pytest.approx(60 / 97.5)
    assert snap.icon_on is False
    assert snap.glyph == HeartGlyph.OUTLINE
    assert snap.tick_count == 1
    assert snap.state == SchedulerState.RUNNING
    assert snap.pending is True

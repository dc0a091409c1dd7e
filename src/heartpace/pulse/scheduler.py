"""
Pulse Scheduler - adaptive-rate toggle timer.

The scheduler owns the BPM trajectory and exactly one armed
`asyncio.TimerHandle`. Every tick flips the icon state, notifies listeners,
then samples the instantaneous BPM to arm the next tick. The cadence therefore
"coasts" at each momentary BPM until the next toggle instead of polling.

Parameter setters only store (clamped) values; they never touch the timer.
A change takes effect when the next natural tick recomputes the interval.
"""

import asyncio
import logging
import time
from typing import Callable, List, Optional

from .enums import HeartGlyph, SchedulerState
from .models import (
    DEFAULT_INITIAL_BPM,
    DEFAULT_SLOPE_DURATION_SECONDS,
    DEFAULT_TARGET_BPM,
    PulseSnapshot,
    Trajectory,
)

PulseListener = Callable[[bool], None]


class PulseScheduler:
    """
    Drives the pulse cadence on a single event loop.

    Listeners subscribe with `add_listener()` and receive
    `pulse_toggled(icon_on)` once per tick.
    """

    def __init__(
        self,
        initial_bpm: float = DEFAULT_INITIAL_BPM,
        target_bpm: float = DEFAULT_TARGET_BPM,
        slope_duration_seconds: float = DEFAULT_SLOPE_DURATION_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        """
        Initialize the scheduler. No tick is armed until `start()`.

        Args:
            initial_bpm: Starting pulse rate; also the value `reset()` restores
            target_bpm: Rate the trajectory settles at
            slope_duration_seconds: Ramp length; also the value `reset()` restores
            clock: Monotonic clock in seconds (injectable for tests)
            loop: Event loop to arm ticks on (defaults to the running loop)
        """
        self.clock = clock
        self.loop = loop
        self.trajectory = Trajectory(
            start_time=clock(),
            initial_bpm=initial_bpm,
            target_bpm=target_bpm,
            slope_duration_seconds=slope_duration_seconds,
        )
        # Stored post-clamp so reset() restores in-domain values
        self.default_initial_bpm = self.trajectory.initial_bpm
        self.default_slope_duration_seconds = self.trajectory.slope_duration_seconds

        self.state = SchedulerState.IDLE
        self.tick_count = 0
        self._handle: Optional[asyncio.TimerHandle] = None
        self._listeners: List[PulseListener] = []
        self.logger = logging.getLogger("heartpace.scheduler")

    # ========================================================================
    # Trajectory sampling
    # ========================================================================

    def elapsed(self) -> float:
        """Seconds since the trajectory's start_time (never negative)."""
        return max(0.0, self.clock() - self.trajectory.start_time)

    def current_bpm(self) -> float:
        return self.trajectory.bpm_at(self.elapsed())

    def current_interval(self) -> float:
        """Seconds until the next toggle at the instantaneous BPM."""
        return 60.0 / self.current_bpm()

    @property
    def icon_on(self) -> bool:
        return self.trajectory.icon_on

    @property
    def pending(self) -> bool:
        """True while a tick is armed."""
        return self._handle is not None and not self._handle.cancelled()

    # ========================================================================
    # Listeners
    # ========================================================================

    def add_listener(self, listener: PulseListener) -> None:
        """Subscribe to pulse_toggled(icon_on) notifications."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def remove_listener(self, listener: PulseListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, icon_on: bool) -> None:
        for listener in list(self._listeners):
            try:
                listener(icon_on)
            except Exception as e:
                # Listener errors never stop the cadence
                self.logger.error(f"Pulse listener {listener!r} failed: {e}", exc_info=True)

    # ========================================================================
    # Timer management
    # ========================================================================

    def _cancel_pending(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _arm(self) -> float:
        """Cancel any armed tick, then arm one at the current interval."""
        self._cancel_pending()
        if self.loop is None:
            self.loop = asyncio.get_running_loop()
        interval = self.current_interval()
        self._handle = self.loop.call_later(interval, self.tick)
        return interval

    def start(self) -> None:
        """
        Arm the first tick. Idempotent while running.

        Raises:
            RuntimeError: If no loop was given and none is running
        """
        if self.state == SchedulerState.RUNNING:
            return

        interval = self._arm()
        self.state = SchedulerState.RUNNING
        self.logger.info(
            f"Scheduler started: {self.trajectory.initial_bpm:.0f} -> "
            f"{self.trajectory.target_bpm:.0f} BPM over "
            f"{self.trajectory.slope_duration_minutes:.0f} min "
            f"(first tick in {interval:.3f}s)"
        )

    def stop(self) -> None:
        """Cancel the armed tick. No further ticks fire. Idempotent."""
        self._cancel_pending()
        if self.state != SchedulerState.STOPPED:
            self.state = SchedulerState.STOPPED
            self.logger.info(f"Scheduler stopped after {self.tick_count} ticks")

    def tick(self) -> None:
        """
        Fire one pulse: toggle, notify, then re-arm at the freshly sampled interval.

        Normally invoked by the event loop; calling it directly is allowed and
        still leaves exactly one tick armed.
        """
        # Cancelling a handle that already fired is a no-op
        self._cancel_pending()
        if self.state == SchedulerState.STOPPED:
            return

        self.trajectory.icon_on = not self.trajectory.icon_on
        self.tick_count += 1
        self._notify(self.trajectory.icon_on)

        if self.state == SchedulerState.RUNNING:
            interval = self._arm()
            self.logger.debug(
                f"Tick {self.tick_count}: icon_on={self.trajectory.icon_on}, "
                f"next in {interval:.3f}s"
            )

    # ========================================================================
    # Inbound calls from the display layer
    # ========================================================================

    def set_initial_bpm(self, bpm: float) -> float:
        """Store a clamped initial BPM. Applied at the next natural tick."""
        self.trajectory.initial_bpm = bpm
        self.logger.info(f"Initial BPM set to {self.trajectory.initial_bpm:.0f} (requested {bpm})")
        return self.trajectory.initial_bpm

    def set_target_bpm(self, bpm: float) -> float:
        """Store a clamped target BPM. Applied at the next natural tick."""
        self.trajectory.target_bpm = bpm
        self.logger.info(f"Target BPM set to {self.trajectory.target_bpm:.0f} (requested {bpm})")
        return self.trajectory.target_bpm

    def set_slope_duration(self, seconds: float) -> float:
        """Store a clamped slope duration in seconds. Applied at the next natural tick."""
        self.trajectory.slope_duration_seconds = seconds
        self.logger.info(
            f"Slope duration set to {self.trajectory.slope_duration_minutes:.0f} min "
            f"(requested {seconds}s)"
        )
        return self.trajectory.slope_duration_seconds

    def set_slope_duration_minutes(self, minutes: float) -> float:
        return self.set_slope_duration(minutes * 60)

    def reset(self) -> None:
        """
        Restart the trajectory from now with the default initial BPM and slope.

        target_bpm is intentionally left as-is. When running, the pending tick
        is cancelled and a new one armed at the fresh interval before returning.
        """
        self.trajectory.start_time = self.clock()
        self.trajectory.initial_bpm = self.default_initial_bpm
        self.trajectory.slope_duration_seconds = self.default_slope_duration_seconds

        if self.state == SchedulerState.RUNNING:
            interval = self._arm()
        else:
            interval = self.current_interval()

        self.logger.info(
            f"Trajectory reset: {self.trajectory.initial_bpm:.0f} -> "
            f"{self.trajectory.target_bpm:.0f} BPM, next tick in {interval:.3f}s"
        )

    # ========================================================================
    # Reporting
    # ========================================================================

    def snapshot(self) -> PulseSnapshot:
        elapsed = self.elapsed()
        bpm = self.trajectory.bpm_at(elapsed)
        return PulseSnapshot(
            initial_bpm=self.trajectory.initial_bpm,
            target_bpm=self.trajectory.target_bpm,
            slope_duration_seconds=self.trajectory.slope_duration_seconds,
            slope_duration_minutes=self.trajectory.slope_duration_minutes,
            elapsed_seconds=elapsed,
            progress=self.trajectory.progress(elapsed),
            current_bpm=bpm,
            current_interval=60.0 / bpm,
            icon_on=self.trajectory.icon_on,
            glyph=HeartGlyph.for_state(self.trajectory.icon_on),
            tick_count=self.tick_count,
            state=self.state,
            pending=self.pending,
        )

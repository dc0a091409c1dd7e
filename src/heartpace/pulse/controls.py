"""
Pulse Controls - the settings popover's buttons.

Step sizes and UI ranges belong to the display layer. The scheduler still
clamps whatever it receives.
"""

import logging

from .scheduler import PulseScheduler

BPM_STEP = 5.0
BPM_UI_MIN = 50.0
BPM_UI_MAX = 150.0

SLOPE_STEP_MINUTES = 5.0
SLOPE_UI_MIN_MINUTES = 20.0
SLOPE_UI_MAX_MINUTES = 60.0

CONTROLS = ("initial_bpm", "target_bpm", "slope_duration")
DIRECTIONS = ("increment", "decrement")


class PulseControls:
    """Increment/decrement/reset handlers bound to one scheduler."""

    def __init__(self, scheduler: PulseScheduler):
        self.scheduler = scheduler
        self.logger = logging.getLogger("heartpace.controls")

    def increment_initial_bpm(self) -> float:
        bpm = min(self.scheduler.trajectory.initial_bpm + BPM_STEP, BPM_UI_MAX)
        return self.scheduler.set_initial_bpm(bpm)

    def decrement_initial_bpm(self) -> float:
        bpm = max(self.scheduler.trajectory.initial_bpm - BPM_STEP, BPM_UI_MIN)
        return self.scheduler.set_initial_bpm(bpm)

    def increment_target_bpm(self) -> float:
        bpm = min(self.scheduler.trajectory.target_bpm + BPM_STEP, BPM_UI_MAX)
        return self.scheduler.set_target_bpm(bpm)

    def decrement_target_bpm(self) -> float:
        bpm = max(self.scheduler.trajectory.target_bpm - BPM_STEP, BPM_UI_MIN)
        return self.scheduler.set_target_bpm(bpm)

    def increment_slope_duration(self) -> float:
        """Lengthen the slope by one step; returns the stored value in minutes."""
        minutes = min(
            self.scheduler.trajectory.slope_duration_minutes + SLOPE_STEP_MINUTES,
            SLOPE_UI_MAX_MINUTES,
        )
        return self.scheduler.set_slope_duration_minutes(minutes) / 60

    def decrement_slope_duration(self) -> float:
        """Shorten the slope by one step; returns the stored value in minutes."""
        minutes = max(
            self.scheduler.trajectory.slope_duration_minutes - SLOPE_STEP_MINUTES,
            SLOPE_UI_MIN_MINUTES,
        )
        return self.scheduler.set_slope_duration_minutes(minutes) / 60

    def reset_to_defaults(self) -> None:
        self.scheduler.reset()

    def adjust(self, control: str, direction: str) -> float:
        """
        Dispatch a button press by name.

        Args:
            control: One of "initial_bpm", "target_bpm", "slope_duration"
            direction: "increment" or "decrement"

        Returns:
            The stored value (BPM, or minutes for slope_duration)

        Raises:
            ValueError: If control or direction is unknown
        """
        if control not in CONTROLS:
            raise ValueError(f"Unknown control: {control!r} (expected one of {', '.join(CONTROLS)})")
        if direction not in DIRECTIONS:
            raise ValueError(f"Unknown direction: {direction!r} (expected increment or decrement)")

        self.logger.debug(f"Control pressed: {direction} {control}")
        return getattr(self, f"{direction}_{control}")()

"""
Pulse Models

The BPM trajectory owned by the scheduler and the snapshot model reported
to the display layer and the control API.
"""

from pydantic import BaseModel, Field

from .enums import HeartGlyph, SchedulerState

MIN_BPM = 50.0
MAX_BPM = 150.0

MIN_SLOPE_DURATION_SECONDS = 20 * 60.0
MAX_SLOPE_DURATION_SECONDS = 60 * 60.0

DEFAULT_INITIAL_BPM = 135.0
DEFAULT_TARGET_BPM = 60.0
DEFAULT_SLOPE_DURATION_SECONDS = 30 * 60.0


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(float(value), high))


class Trajectory:
    """
    A linear BPM ramp from `initial_bpm` to `target_bpm`.

    The rate moves linearly over `slope_duration_seconds` measured from
    `start_time`, then holds at `target_bpm`. Every field is clamped into
    its domain on assignment, so the BPM can never reach zero.
    """

    def __init__(
        self,
        start_time: float,
        initial_bpm: float = DEFAULT_INITIAL_BPM,
        target_bpm: float = DEFAULT_TARGET_BPM,
        slope_duration_seconds: float = DEFAULT_SLOPE_DURATION_SECONDS,
    ):
        self.start_time = start_time
        self.initial_bpm = initial_bpm
        self.target_bpm = target_bpm
        self.slope_duration_seconds = slope_duration_seconds
        self.icon_on = True

    @property
    def initial_bpm(self) -> float:
        return self._initial_bpm

    @initial_bpm.setter
    def initial_bpm(self, bpm: float) -> None:
        self._initial_bpm = clamp(bpm, MIN_BPM, MAX_BPM)

    @property
    def target_bpm(self) -> float:
        return self._target_bpm

    @target_bpm.setter
    def target_bpm(self, bpm: float) -> None:
        self._target_bpm = clamp(bpm, MIN_BPM, MAX_BPM)

    @property
    def slope_duration_seconds(self) -> float:
        return self._slope_duration_seconds

    @slope_duration_seconds.setter
    def slope_duration_seconds(self, seconds: float) -> None:
        self._slope_duration_seconds = clamp(
            seconds, MIN_SLOPE_DURATION_SECONDS, MAX_SLOPE_DURATION_SECONDS
        )

    @property
    def slope_duration_minutes(self) -> float:
        return self._slope_duration_seconds / 60

    @slope_duration_minutes.setter
    def slope_duration_minutes(self, minutes: float) -> None:
        self.slope_duration_seconds = minutes * 60

    def progress(self, elapsed: float) -> float:
        """Fraction of the slope covered after `elapsed` seconds, in [0, 1]."""
        if elapsed <= 0:
            return 0.0
        return min(elapsed / self._slope_duration_seconds, 1.0)

    def bpm_at(self, elapsed: float) -> float:
        """
        Instantaneous BPM `elapsed` seconds after start_time.

        Holds exactly at target_bpm once the slope is complete.
        """
        progress = self.progress(elapsed)
        if progress >= 1.0:
            return self._target_bpm
        return self._initial_bpm - (self._initial_bpm - self._target_bpm) * progress

    def __repr__(self) -> str:
        return (
            f"<Trajectory(initial_bpm={self._initial_bpm}, target_bpm={self._target_bpm}, "
            f"slope_duration_seconds={self._slope_duration_seconds}, icon_on={self.icon_on})>"
        )


class PulseSnapshot(BaseModel):
    """Point-in-time view of a running scheduler."""

    initial_bpm: float
    target_bpm: float
    slope_duration_seconds: float
    slope_duration_minutes: float
    elapsed_seconds: float = Field(..., ge=0)
    progress: float = Field(..., ge=0, le=1)
    current_bpm: float
    current_interval: float = Field(..., description="Seconds until the next toggle at the current BPM")
    icon_on: bool
    glyph: HeartGlyph
    tick_count: int
    state: SchedulerState
    pending: bool = Field(..., description="True when a tick is armed")

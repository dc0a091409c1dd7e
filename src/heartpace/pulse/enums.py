"""
Pulse Enums

Type-safe enumerations for the heart glyph and the scheduler lifecycle.
"""

from enum import Enum


class HeartGlyph(str, Enum):
    """
    The two visual states of the heart icon.

    Values are the SF Symbol names a macOS menu-bar renderer would use;
    `symbol` is the text fallback for terminal renderers.
    """

    FILLED = "heart.fill"  # ♥ icon on
    OUTLINE = "heart"  # ♡ icon off

    @property
    def symbol(self) -> str:
        return "♥" if self is HeartGlyph.FILLED else "♡"

    @classmethod
    def for_state(cls, icon_on: bool) -> "HeartGlyph":
        """Map the scheduler's icon_on flag to a glyph."""
        return cls.FILLED if icon_on else cls.OUTLINE

    def __str__(self) -> str:
        """Return the string value for easy serialization."""
        return self.value


class SchedulerState(str, Enum):
    """
    Lifecycle of a PulseScheduler.

    State transitions:
    IDLE -> RUNNING -> STOPPED
    """

    IDLE = "idle"  # Created, no tick armed yet
    RUNNING = "running"  # Exactly one tick armed
    STOPPED = "stopped"  # Timer cancelled, no further ticks

    def __str__(self) -> str:
        """Return the string value for easy serialization."""
        return self.value

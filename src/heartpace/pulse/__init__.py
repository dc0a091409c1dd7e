"""
Pulse Scheduling

Adaptive-rate heart pulse: trajectory model, scheduler and controls.
"""

from .enums import HeartGlyph, SchedulerState
from .models import PulseSnapshot, Trajectory
from .scheduler import PulseScheduler

__all__ = ["HeartGlyph", "SchedulerState", "PulseSnapshot", "Trajectory", "PulseScheduler"]

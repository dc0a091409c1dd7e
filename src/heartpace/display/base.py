"""Base class for heart display backends."""

from abc import ABC, abstractmethod
from typing import Optional


class DisplayBackend(ABC):
    """Abstract base class for pulse renderers.

    Implementations must:
    - Never raise exceptions from pulse_toggled(); log and carry on
    - Be constructable from a HeartpaceConfig via from_config()
    """

    @abstractmethod
    def pulse_toggled(self, icon_on: bool) -> None:
        """Render the glyph for the new icon state. Must never raise."""
        ...

    def close(self) -> None:
        """Release the renderer. Called once on daemon shutdown."""

    @classmethod
    @abstractmethod
    def from_config(cls, config, bpm_source=None) -> Optional["DisplayBackend"]:
        """Create a backend from configuration.

        bpm_source is an optional zero-argument callable returning the
        current BPM, for renderers that show it.
        """
        ...

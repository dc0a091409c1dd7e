"""Display backend that only logs each toggle."""

import logging
from typing import Optional

from heartpace.display.base import DisplayBackend
from heartpace.pulse.enums import HeartGlyph

logger = logging.getLogger("heartpace.display.log")


class LogDisplay(DisplayBackend):
    """Log the glyph name at DEBUG. Useful headless and under systemd."""

    def pulse_toggled(self, icon_on: bool) -> None:
        logger.debug(f"Pulse: {HeartGlyph.for_state(icon_on).value}")

    @classmethod
    def from_config(cls, config, bpm_source=None) -> Optional["LogDisplay"]:
        return cls()

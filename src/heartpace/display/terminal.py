"""Display backend that redraws a single status line in the terminal."""

import logging
import sys
from typing import Callable, Optional, TextIO

from heartpace.display.base import DisplayBackend
from heartpace.pulse.enums import HeartGlyph

logger = logging.getLogger("heartpace.display.terminal")


class TerminalDisplay(DisplayBackend):
    """Rewrite one line on a text stream: the heart symbol and current BPM.

    Write failures (closed pipe, detached tty) are logged and swallowed so the
    scheduler keeps its cadence.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        bpm_source: Optional[Callable[[], float]] = None,
    ):
        self.stream = stream if stream is not None else sys.stdout
        self.bpm_source = bpm_source
        self._drawn = False

    def render(self, icon_on: bool) -> str:
        line = HeartGlyph.for_state(icon_on).symbol
        if self.bpm_source is not None:
            line += f"  {self.bpm_source():5.1f} BPM"
        return line

    def pulse_toggled(self, icon_on: bool) -> None:
        try:
            self.stream.write("\r" + self.render(icon_on))
            self.stream.flush()
            self._drawn = True
        except Exception as e:
            logger.warning(f"Terminal display write failed: {e}")

    def close(self) -> None:
        if not self._drawn:
            return
        try:
            self.stream.write("\n")
            self.stream.flush()
        except Exception as e:
            logger.warning(f"Terminal display close failed: {e}")
        self._drawn = False

    @classmethod
    def from_config(cls, config, bpm_source=None) -> Optional["TerminalDisplay"]:
        return cls(bpm_source=bpm_source)

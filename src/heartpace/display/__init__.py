"""Heart display backend registry."""

import logging
from typing import Callable, Optional

from heartpace.display.base import DisplayBackend
from heartpace.display.log import LogDisplay
from heartpace.display.terminal import TerminalDisplay
from heartpace.utils.config import get_config

logger = logging.getLogger("heartpace.display")

_BACKENDS: list[tuple[str, type[DisplayBackend]]] = [
    ("terminal", TerminalDisplay),
    ("log", LogDisplay),
]


def get_display(
    name: str | None = None,
    config=None,
    bpm_source: Optional[Callable[[], float]] = None,
) -> DisplayBackend:
    """Get a display backend by name.

    Args:
        name: Backend name ("terminal" or "log"). If None, uses the
              HEARTPACE_DISPLAY setting.
        config: HeartpaceConfig to build from (defaults to the global config)
        bpm_source: Optional callable returning the current BPM

    Returns:
        A DisplayBackend. Unknown names fall back to LogDisplay.
    """
    config = config or get_config()
    name = (name or config.display).strip().lower()

    for backend_name, backend_cls in _BACKENDS:
        if backend_name == name:
            backend = backend_cls.from_config(config, bpm_source=bpm_source)
            if backend is not None:
                return backend

    logger.warning(f"Unknown display backend: {name}, falling back to log")
    return LogDisplay()


__all__ = ["DisplayBackend", "LogDisplay", "TerminalDisplay", "get_display"]

"""
Configuration Management for Heartpace

Loads configuration from environment variables with sensible defaults.
Handles path expansion and clamps trajectory defaults into their domains.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from heartpace.pulse.models import (
    DEFAULT_INITIAL_BPM,
    DEFAULT_SLOPE_DURATION_SECONDS,
    DEFAULT_TARGET_BPM,
    MAX_BPM,
    MAX_SLOPE_DURATION_SECONDS,
    MIN_BPM,
    MIN_SLOPE_DURATION_SECONDS,
    clamp,
)
from heartpace.utils.logging import validate_log_level

# Load .env file from project root (if it exists)
# This should run once when the module is imported
_project_root = Path(
    __file__
).parent.parent.parent.parent  # heartpace/utils -> src/heartpace/utils -> src -> project root
_env_path = _project_root / ".env"
if _env_path.exists():
    load_dotenv(_env_path)


def expand_path(path: str) -> str:
    """
    Expand user home directory (~) and environment variables in a path.

    Args:
        path: Path string potentially containing ~ or $VAR

    Returns:
        Fully expanded absolute path
    """
    return str(Path(os.path.expandvars(os.path.expanduser(path))).resolve())


def parse_bool(value: str) -> bool:
    """Interpret common truthy strings ("1", "true", "yes", "on")."""
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


class HeartpaceConfig:
    """
    Central configuration for Heartpace.

    Loads settings from environment variables with fallback defaults.
    All paths are automatically expanded (~ and environment variables).
    """

    def __init__(self) -> None:
        """Initialize configuration from environment variables."""
        # Core paths
        self.heartpace_home: str = expand_path(os.getenv("HEARTPACE_HOME", "~/.heartpace"))

        # Trajectory defaults (also what "reset to defaults" restores)
        self.initial_bpm: float = clamp(
            _env_float("HEARTPACE_INITIAL_BPM", DEFAULT_INITIAL_BPM), MIN_BPM, MAX_BPM
        )
        self.target_bpm: float = clamp(
            _env_float("HEARTPACE_TARGET_BPM", DEFAULT_TARGET_BPM), MIN_BPM, MAX_BPM
        )
        self.slope_duration_seconds: float = clamp(
            _env_float("HEARTPACE_SLOPE_MINUTES", DEFAULT_SLOPE_DURATION_SECONDS / 60) * 60,
            MIN_SLOPE_DURATION_SECONDS,
            MAX_SLOPE_DURATION_SECONDS,
        )

        # Display layer
        self.display: str = os.getenv("HEARTPACE_DISPLAY", "terminal").strip().lower()

        # API configuration
        self.api_enabled: bool = parse_bool(os.getenv("HEARTPACE_API_ENABLED", "true"))
        self.api_port: int = int(os.getenv("HEARTPACE_API_PORT", "8766"))
        self.api_token: Optional[str] = os.getenv("HEARTPACE_API_TOKEN")
        self.api_url: str = os.getenv("HEARTPACE_API_URL", f"http://localhost:{self.api_port}")

        # Logging
        self.log_level: str = validate_log_level(os.getenv("LOG_LEVEL", "INFO"))

        # Ensure heartpace_home directory exists
        Path(self.heartpace_home).mkdir(parents=True, exist_ok=True)

    @property
    def log_file(self) -> str:
        """Path of the rotating daemon log file."""
        return os.path.join(self.heartpace_home, "logs", "heartpace.log")

    @property
    def slope_duration_minutes(self) -> float:
        return self.slope_duration_seconds / 60

    def __repr__(self) -> str:
        """String representation for debugging."""
        return (
            f"<HeartpaceConfig(\n"
            f"  heartpace_home={self.heartpace_home},\n"
            f"  initial_bpm={self.initial_bpm},\n"
            f"  target_bpm={self.target_bpm},\n"
            f"  slope_duration_seconds={self.slope_duration_seconds},\n"
            f"  display={self.display},\n"
            f"  api_enabled={self.api_enabled},\n"
            f"  api_port={self.api_port}\n"
            f")>"
        )


# Global configuration instance
_config: Optional[HeartpaceConfig] = None


def get_config() -> HeartpaceConfig:
    """
    Get the global configuration instance (singleton pattern).

    Returns:
        The global HeartpaceConfig instance

    Example:
        >>> from heartpace.utils.config import get_config
        >>> config = get_config()
        >>> print(config.initial_bpm)
        135.0
    """
    global _config
    if _config is None:
        _config = HeartpaceConfig()
    return _config


def reload_config() -> HeartpaceConfig:
    """
    Force reload of configuration from environment variables.

    Useful for testing or when environment changes at runtime.

    Returns:
        Newly created HeartpaceConfig instance
    """
    global _config
    _config = HeartpaceConfig()
    return _config

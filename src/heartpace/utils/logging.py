"""
Logging configuration for the Heartpace daemon.

Provides structured logging with file rotation and optional console output.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def validate_log_level(log_level: str) -> str:
    """
    Normalize a level name to upper case.

    Raises:
        ValueError: If the name is not one of LOG_LEVELS
    """
    level = log_level.strip().upper()
    if level not in LOG_LEVELS:
        raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {log_level!r}")
    return level


def setup_logging(
    log_level: str = "INFO",
    log_file: str | None = None,
    console: bool = True,
) -> None:
    """
    Setup structured logging with file rotation and console output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Path to log file (optional). If provided, enables file logging
                  with rotation (10MB max, 5 backups)
        console: Whether to output logs to console (default: True)

    Example:
        >>> setup_logging(log_level="DEBUG", log_file="~/.heartpace/logs/heartpace.log")
        >>> logger = logging.getLogger("heartpace.scheduler")
        >>> logger.info("Scheduler started")

    Raises:
        ValueError: If log_level is not a known level name
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, validate_log_level(log_level)))

    # Clear any existing handlers
    root_logger.handlers.clear()

    # Format: "2026-10-17 15:30:45 | INFO     | heartpace.scheduler | Reset trajectory"
    formatter = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
    )

    if console:
        # stderr keeps stdout free for the terminal heart display
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)

        # RotatingFileHandler: 10MB max, 5 backups
        file_handler = RotatingFileHandler(
            log_path, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    logger = logging.getLogger("heartpace.logging")
    logger.debug(f"Logging configured: level={log_level}, file={log_file}, console={console}")


def setup_logging_from_config(config, console: bool = True) -> None:
    """
    Setup logging from a HeartpaceConfig: its level and its rotating log file.

    Args:
        config: HeartpaceConfig (log_level is already validated at load)
        console: Whether to output logs to console (default: True)
    """
    setup_logging(log_level=config.log_level, log_file=config.log_file, console=console)

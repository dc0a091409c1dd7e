"""
Entry point for running the Pulse Daemon as a module.

Usage:
    # Development
    python -m heartpace.pulse

    # With custom log level
    LOG_LEVEL=DEBUG python -m heartpace.pulse
"""

import asyncio
import logging
import sys

from heartpace.pulse.daemon import PulseDaemon
from heartpace.utils.config import get_config
from heartpace.utils.logging import setup_logging, setup_logging_from_config


async def async_main() -> None:
    """Async entry point for the daemon."""
    try:
        config = get_config()
    except ValueError as e:
        setup_logging(log_level="INFO", console=True)
        logging.getLogger("heartpace.main").error(f"Invalid configuration: {e}")
        sys.exit(1)

    # Setup logging (console + file)
    setup_logging_from_config(config)

    logger = logging.getLogger("heartpace.main")
    logger.info("=" * 60)
    logger.info("Starting Heartpace")
    logger.info("=" * 60)
    logger.info(f"Initial BPM: {config.initial_bpm:.0f}")
    logger.info(f"Target BPM: {config.target_bpm:.0f}")
    logger.info(f"Slope: {config.slope_duration_minutes:.0f} min")
    logger.info(f"Display: {config.display}")
    logger.info(f"API: {'port ' + str(config.api_port) if config.api_enabled else 'disabled'}")
    logger.info(f"Log file: {config.log_file}")
    logger.info("=" * 60)

    daemon = PulseDaemon(config)

    try:
        await daemon.start()
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)

    logger.info("Heartpace stopped")


def main() -> None:
    """Synchronous entry point."""
    try:
        asyncio.run(async_main())
    except KeyboardInterrupt:
        # Graceful exit on Ctrl+C (SIGINT is already handled by daemon)
        pass


if __name__ == "__main__":
    main()

"""
Pulse Daemon - runs the heart pulse and its control API.

This daemon runs in the foreground, managing:
1. The pulse scheduler (one armed tick at a time)
2. The display backend that renders each toggle
3. The HTTP control API (optional)
4. Graceful shutdown handling

Usage:
    # Development
    python -m heartpace.pulse

    # Installed
    heartpace
"""

import asyncio
import logging
import signal
from typing import Optional

from heartpace.display import get_display
from heartpace.display.base import DisplayBackend
from heartpace.pulse.scheduler import PulseScheduler
from heartpace.utils.config import HeartpaceConfig


class PulseDaemon:
    """
    Main daemon process that owns the scheduler.

    The scheduler ticks on this daemon's event loop; the API server runs
    concurrently on the same loop, so every trajectory read and write happens
    on one thread.
    """

    def __init__(self, config: HeartpaceConfig, display: Optional[DisplayBackend] = None):
        """
        Initialize the daemon.

        Args:
            config: HeartpaceConfig with trajectory defaults, display and API settings
            display: Display backend override (defaults to config.display)
        """
        self.config = config
        self.scheduler = PulseScheduler(
            initial_bpm=config.initial_bpm,
            target_bpm=config.target_bpm,
            slope_duration_seconds=config.slope_duration_seconds,
        )
        self.display = display or get_display(
            config.display, config=config, bpm_source=self.scheduler.current_bpm
        )
        self.scheduler.add_listener(self.display.pulse_toggled)
        self.logger = logging.getLogger("heartpace.daemon")

        # State
        self.running = False
        self.api_task: Optional[asyncio.Task] = None
        self.shutdown_event = asyncio.Event()

    async def _run_api_server(self) -> None:
        """
        Run the FastAPI control server using uvicorn.

        Runs on the daemon's loop so API handlers and scheduler ticks never
        overlap.
        """
        import uvicorn

        from heartpace.api.server import create_app

        self.logger.info(f"Starting API server on http://127.0.0.1:{self.config.api_port}")

        app = create_app(self.scheduler, self.config)

        config = uvicorn.Config(
            app,
            host="127.0.0.1",
            port=self.config.api_port,
            log_level="warning",
            access_log=False,  # Reduce noise, we have our own logging
        )
        server = uvicorn.Server(config)

        try:
            await server.serve()
        except asyncio.CancelledError:
            self.logger.info("API server cancelled, shutting down")
        except Exception as e:
            self.logger.error(f"API server error: {e}", exc_info=True)

        self.logger.info("API server stopped")

    def _register_signal_handlers(self) -> None:
        """
        Register SIGTERM and SIGINT handlers for graceful shutdown.

        This allows the daemon to be stopped cleanly via:
        - Ctrl+C (SIGINT)
        - kill <pid> (SIGTERM)
        """
        loop = asyncio.get_running_loop()

        def create_shutdown_task(s: signal.Signals) -> asyncio.Task[None]:
            return asyncio.create_task(self._handle_shutdown(s))

        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(
                sig,
                create_shutdown_task,
                sig,
            )

        self.logger.info("Signal handlers registered (SIGTERM, SIGINT)")

    async def _handle_shutdown(self, sig: Optional[signal.Signals] = None) -> None:
        """
        Handle graceful shutdown.

        Shutdown process:
        1. Stop the scheduler (cancels the armed tick)
        2. Cancel the API task
        3. Close the display

        Args:
            sig: The signal that triggered shutdown, if any
        """
        if not self.running:
            return
        reason = sig.name if sig else "shutdown request"
        self.logger.info(f"Received {reason}, shutting down gracefully...")

        self.running = False
        self.scheduler.stop()

        if self.api_task:
            self.api_task.cancel()
            try:
                await self.api_task
            except asyncio.CancelledError:
                pass

        self.display.close()

        self.shutdown_event.set()
        self.logger.info("Shutdown complete")

    async def stop(self) -> None:
        """Request shutdown from code (tests, embedding)."""
        await self._handle_shutdown()

    async def start(self) -> None:
        """
        Start the daemon (blocks until shutdown).

        1. Registers signal handlers
        2. Starts the scheduler and, if enabled, the API server
        3. Waits for shutdown
        """
        self.logger.info("Starting Pulse Daemon...")
        self.running = True

        self._register_signal_handlers()

        self.scheduler.start()

        if self.config.api_enabled:
            self.api_task = asyncio.create_task(self._run_api_server())
        else:
            self.logger.info("API server disabled (HEARTPACE_API_ENABLED=false)")

        await self.shutdown_event.wait()

        self.logger.info("Pulse Daemon stopped")

"""
HTTP API Server - REST endpoints standing in for the settings popover.

Endpoints:
    GET  /api/health                              - Health check (no auth)
    GET  /api/status                              - Current pulse snapshot
    PUT  /api/trajectory                          - Set initial/target BPM, slope
    POST /api/trajectory/reset                    - Reset to defaults
    POST /api/controls/{control}/{direction}      - ±5 BPM / ±5 min button press
"""

from typing import Optional

from fastapi import Depends, FastAPI, Header, HTTPException
from pydantic import BaseModel, Field

from heartpace.pulse.controls import PulseControls
from heartpace.pulse.models import PulseSnapshot
from heartpace.pulse.scheduler import PulseScheduler
from heartpace.utils.config import HeartpaceConfig

# ========================================================================
# Request Models
# ========================================================================


class TrajectoryUpdateRequest(BaseModel):
    """Request body for updating trajectory parameters.

    Values outside their domains are clamped by the scheduler, not rejected.
    """

    initial_bpm: Optional[float] = Field(
        default=None,
        description="Starting pulse rate (clamped to 50-150)",
        examples=[120],
    )

    target_bpm: Optional[float] = Field(
        default=None,
        description="Rate the pulse settles at (clamped to 50-150)",
        examples=[60],
    )

    slope_duration_minutes: Optional[float] = Field(
        default=None,
        description="Minutes to move from initial to target (clamped to 20-60)",
        examples=[30],
    )


# ========================================================================
# Authentication
# ========================================================================


def create_bearer_token_dependency(config: HeartpaceConfig):
    """
    Create a dependency for bearer token authentication.

    Args:
        config: HeartpaceConfig instance with API token

    Returns:
        FastAPI dependency function for token verification
    """

    async def verify_bearer_token(authorization: str = Header(None)) -> bool:
        """
        Verify API token from Authorization header.

        Raises:
            HTTPException: 401 if missing/malformed header, 403 if invalid token
        """
        api_token = config.api_token

        if not api_token:
            raise HTTPException(
                status_code=500,
                detail="API token not configured. Set HEARTPACE_API_TOKEN environment variable.",
            )

        if not authorization or not authorization.startswith("Bearer "):
            raise HTTPException(
                status_code=401,
                detail="Missing or invalid Authorization header. Expected: 'Bearer <token>'",
            )

        token = authorization[7:]  # Remove "Bearer " prefix

        if token != api_token:
            raise HTTPException(status_code=403, detail="Invalid API token")

        return True

    return verify_bearer_token


# ========================================================================
# App Factory
# ========================================================================


def create_app(scheduler: PulseScheduler, config: HeartpaceConfig) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        scheduler: The running PulseScheduler
        config: HeartpaceConfig instance with configuration

    Returns:
        FastAPI app instance
    """
    app = FastAPI(
        title="Heartpace Control API",
        description="Adjust the pulse trajectory of a running Heartpace daemon",
        version="0.1.0",
    )

    verify_token = create_bearer_token_dependency(config)
    controls = PulseControls(scheduler)

    # ========================================================================
    # Endpoints
    # ========================================================================

    @app.get("/api/health")
    async def health_check():
        """
        Health check endpoint (no auth required).

        Example:
            curl -X GET http://localhost:8766/api/health
        """
        return {"status": "healthy", "service": "heartpace"}

    @app.get("/api/status", response_model=PulseSnapshot)
    async def pulse_status(authorized: bool = Depends(verify_token)):
        """
        Current trajectory, BPM, interval and icon state.

        Example:
            curl -X GET http://localhost:8766/api/status \\
                 -H "Authorization: Bearer your_token_here"
        """
        return scheduler.snapshot()

    @app.put("/api/trajectory", response_model=PulseSnapshot)
    async def update_trajectory(
        request: TrajectoryUpdateRequest, authorized: bool = Depends(verify_token)
    ):
        """
        Set any of initial BPM, target BPM and slope duration.

        New values are picked up at the next natural tick.

        Example:
            curl -X PUT http://localhost:8766/api/trajectory \\
                 -H "Authorization: Bearer your_token_here" \\
                 -H "Content-Type: application/json" \\
                 -d '{"initial_bpm": 120, "slope_duration_minutes": 45}'
        """
        if request.initial_bpm is not None:
            scheduler.set_initial_bpm(request.initial_bpm)
        if request.target_bpm is not None:
            scheduler.set_target_bpm(request.target_bpm)
        if request.slope_duration_minutes is not None:
            scheduler.set_slope_duration_minutes(request.slope_duration_minutes)
        return scheduler.snapshot()

    @app.post("/api/trajectory/reset", response_model=PulseSnapshot)
    async def reset_trajectory(authorized: bool = Depends(verify_token)):
        """
        Restart the ramp now with the default initial BPM and slope duration.

        Example:
            curl -X POST http://localhost:8766/api/trajectory/reset \\
                 -H "Authorization: Bearer your_token_here"
        """
        controls.reset_to_defaults()
        return scheduler.snapshot()

    @app.post("/api/controls/{control}/{direction}", response_model=PulseSnapshot)
    async def press_control(
        control: str, direction: str, authorized: bool = Depends(verify_token)
    ):
        """
        Press one of the popover buttons.

        Example:
            curl -X POST http://localhost:8766/api/controls/target_bpm/decrement \\
                 -H "Authorization: Bearer your_token_here"
        """
        try:
            controls.adjust(control, direction)
        except ValueError as e:
            raise HTTPException(status_code=404, detail=str(e))
        return scheduler.snapshot()

    return app

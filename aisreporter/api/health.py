"""Health endpoints: liveness and readiness."""
import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from aisreporter.models.schemas import HealthOut
from aisreporter.services.reporter_state import get_scheduler, get_status_provider
from worker.scheduler import SchedulerState

router = APIRouter(tags=["health"])
logger = logging.getLogger("ais.health")


@router.get("/health/live")
async def liveness():
    """Liveness: process is running. No dependencies checked."""
    return {"status": "ok"}


@router.get("/health/ready", response_model=HealthOut)
async def readiness():
    """Readiness: the heartbeat scheduler is running."""
    try:
        message = get_status_provider().message
    except RuntimeError as e:
        logger.warning("readiness check failed: %s", e)
        message = "not initialized"
    scheduler = get_scheduler()
    if scheduler is None or scheduler.state is not SchedulerState.RUNNING:
        return JSONResponse(
            status_code=503,
            content={"status": "unhealthy", "message": message},
        )
    return HealthOut(status="ok", message=message)

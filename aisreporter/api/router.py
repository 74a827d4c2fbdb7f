"""
AIS reporter API: endpoint status.

- GET /status — per-endpoint totals and rolling window sums (from in-memory statistics)
"""
import logging

from fastapi import APIRouter, HTTPException

from aisreporter.models.schemas import StatusOut
from aisreporter.services.reporter_state import get_status_provider

router = APIRouter()
logger = logging.getLogger("ais.api")


@router.get("/status", response_model=StatusOut, summary="Status of all configured endpoints")
async def status():
    """Status report for each endpoint keyed by endpoint name."""
    try:
        snapshot = get_status_provider().snapshot()
    except Exception as exc:
        logger.warning("status snapshot failed: %s", exc)
        raise HTTPException(status_code=500, detail="internal server error") from exc
    return StatusOut.model_validate(snapshot)

"""
FastAPI application for the AIS reporter (in-process worker).

- Health: /health/live, /health/ready
- API: /api/v1/status
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI

from aisreporter.core.config import settings
from aisreporter.api.health import router as health_router
from aisreporter.api.router import router as api_router
from aisreporter.services.reporter_state import set_scheduler, set_status_provider
from aisreporter.services.status import StatusProvider
from worker.main import ReporterWorker, setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()

    status = StatusProvider()
    set_status_provider(status)

    worker = ReporterWorker(status=status)
    await worker.start()
    set_scheduler(worker.scheduler)

    yield

    await worker.stop()
    set_scheduler(None)


app = FastAPI(
    title="AIS Reporter API",
    description="Status of AIS reporting to remote UDP endpoints",
    lifespan=lifespan,
)

app.include_router(health_router)
app.include_router(api_router, prefix=settings.API_PREFIX)

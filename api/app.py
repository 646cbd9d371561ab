"""
Exchange Rate API

Read-only HTTP surface over the rate store and the event log:

- GET /api/latest-rate  most recently stored observation (404 when empty)
- GET /api/rates        every observation, newest date first
- GET /api/cron-status  last 10 event log lines

Interactive docs are served at /api-docs.
"""

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from fx.models import RateObservation
from fx.store import RateStore
from ingestion.event_log import EventLog, LogIOError
from ingestion.job import IngestionJob
from ingestion.scheduler import DailyScheduler
from ratedb.errors import StorageError

logger = logging.getLogger(__name__)

CRON_STATUS_LINES = 10


# ---------------------------- Schemas ----------------------------

class RateOut(BaseModel):
    id: int
    date: str
    rate: float


class LatestRateResponse(BaseModel):
    success: bool
    data: RateOut


class RatesResponse(BaseModel):
    success: bool
    data: list[RateOut]


class CronStatusResponse(BaseModel):
    success: bool
    logs: list[str]


class ErrorResponse(BaseModel):
    success: bool = False
    message: str


def _rate_out(observation: RateObservation) -> RateOut:
    return RateOut(**observation.to_dict())


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


# ---------------------------- Routes ----------------------------

router = APIRouter(prefix="/api", tags=["Exchange Rates"])


@router.get(
    "/latest-rate",
    response_model=LatestRateResponse,
    responses={404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    summary="Get the latest exchange rate",
)
def latest_rate(request: Request):
    """Retrieves the most recent USD to INR exchange rate."""
    store: RateStore = request.app.state.store
    try:
        latest = store.get_latest()
    except StorageError as e:
        logger.error("Error reading latest rate: %s", e)
        return _error(500, str(e))
    if latest is None:
        return _error(404, "No data available")
    return LatestRateResponse(success=True, data=_rate_out(latest))


@router.get(
    "/rates",
    response_model=RatesResponse,
    responses={500: {"model": ErrorResponse}},
    summary="Get all exchange rates",
)
def all_rates(request: Request):
    """Retrieves all stored USD to INR exchange rates."""
    store: RateStore = request.app.state.store
    try:
        rates = store.get_all()
    except StorageError as e:
        logger.error("Error reading rates: %s", e)
        return _error(500, str(e))
    return RatesResponse(success=True, data=[_rate_out(r) for r in rates])


@router.get(
    "/cron-status",
    response_model=CronStatusResponse,
    responses={500: {"model": ErrorResponse}},
    summary="Get cron job status",
)
def cron_status(request: Request):
    """Retrieves the last 10 log entries from the cron job."""
    event_log: EventLog = request.app.state.event_log
    try:
        logs = event_log.tail(CRON_STATUS_LINES)
    except LogIOError as e:
        logger.error("%s", e)
        return _error(500, "Error reading log file")
    return CronStatusResponse(success=True, logs=logs)


# ---------------------------- Application ----------------------------

def create_app(
    store: RateStore,
    event_log: EventLog,
    job: IngestionJob | None = None,
    scheduler: DailyScheduler | None = None,
) -> FastAPI:
    """Build the API around explicitly constructed components.

    With a job, startup seeds an empty store in the background; with a
    scheduler, the daily timer runs for the life of the app.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        bootstrap = asyncio.create_task(job.bootstrap()) if job is not None else None
        if scheduler is not None:
            scheduler.start()
        try:
            yield
        finally:
            if scheduler is not None:
                await scheduler.stop()
            if bootstrap is not None:
                # an in-flight seed must finish before the pool closes
                (result,) = await asyncio.gather(bootstrap, return_exceptions=True)
                if isinstance(result, Exception):
                    logger.error("Startup bootstrap crashed", exc_info=result)

    app = FastAPI(
        title="Exchange Rate API",
        description="API for tracking USD to INR exchange rates",
        version="1.0.0",
        docs_url="/api-docs",
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.event_log = event_log

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app

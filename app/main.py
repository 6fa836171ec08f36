"""EOP score capture service - FastAPI application."""

from contextlib import asynccontextmanager
from functools import partial

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.api.v1.router import v1_router
from app.api.v1.health import router as health_root_router
from app.api.v1 import jobs as jobs_api
from app.jobs.in_process_queue import InProcessQueue
from app.jobs.orchestrator import process_job
from app.jobs.service import JobService
from app.jobs.store import job_store
from app.logger import get_logger
from app.scraping.client import SourceClient

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic."""
    logger.info("Starting EOP score capture service on port %s", settings.port)
    logger.info("Source host: %s, job TTL: %ss", settings.host, settings.job_ttl_seconds)

    client = SourceClient()
    dispatcher = InProcessQueue(worker_fn=partial(process_job, client=client))
    await dispatcher.start()
    logger.info("Job runner started")

    jobs_api.set_service(JobService(store=job_store, client=client, dispatcher=dispatcher))

    yield

    logger.info("Shutting down EOP score capture service")
    jobs_api.set_service(None)
    await dispatcher.stop()
    await client.aclose()


app = FastAPI(
    title="EOP Score Capture Service",
    description="Turns everyonepiano song pages into downloadable PDF scores",
    version=settings.version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount routers
app.include_router(health_root_router, tags=["health"])  # GET /health at root
app.include_router(v1_router)  # All /api/v1/* endpoints

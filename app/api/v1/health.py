"""Health check endpoint."""

from fastapi import APIRouter
import platform
import sys

from app.config import settings
from app.jobs.store import job_store

router = APIRouter()


@router.get("/health")
async def health_check():
    """Service health and system info."""
    return {
        "status": "healthy",
        "version": settings.version,
        "live_jobs": len(job_store.list_all()),
        "python_version": sys.version,
        "platform": platform.platform(),
    }

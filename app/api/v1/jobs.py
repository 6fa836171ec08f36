"""Score job API: submit a song link, poll status, download PDFs."""

from typing import List, Optional
from urllib.parse import quote

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response
from pydantic import BaseModel

from app.errors import EopError, FetchError, InvalidUrl, JobNotFound, ParseError
from app.jobs.models import JobPublic, SheetKind
from app.jobs.service import JobService

router = APIRouter()

# Set by main.py during lifespan
_service: Optional[JobService] = None


def set_service(service: Optional[JobService]):
    global _service
    _service = service


def _require_service() -> JobService:
    if _service is None:
        raise HTTPException(status_code=503, detail="Job service not initialized")
    return _service


# Maps error classes to the status code returned for them
_ERROR_STATUS = (
    (InvalidUrl, 400),
    (JobNotFound, 404),
    (ParseError, 422),
    (FetchError, 502),
)


def _http_error(exc: EopError) -> HTTPException:
    for error_cls, status_code in _ERROR_STATUS:
        if isinstance(exc, error_cls):
            return HTTPException(status_code=status_code, detail=exc.message)
    return HTTPException(status_code=500, detail=exc.message)


class AnalyzeRequest(BaseModel):
    url: Optional[str] = None


@router.post("/eop/analyze", response_model=JobPublic)
async def analyze_song(request: AnalyzeRequest):
    """Analyze a song link and create (or reuse) a capture job."""
    service = _require_service()
    try:
        job = await service.submit(request.url)
    except EopError as exc:
        raise _http_error(exc)
    return job.to_public()


@router.get("/eop/jobs", response_model=List[JobPublic])
async def list_jobs():
    return _require_service().list_jobs()


@router.get("/eop/jobs/{job_id}", response_model=JobPublic)
async def get_job(job_id: str):
    """Current job state. Polling a pending job starts its processing."""
    service = _require_service()
    try:
        job = service.get(job_id)
    except EopError as exc:
        raise _http_error(exc)
    return job.to_public()


@router.post("/eop/jobs/{job_id}/retry", response_model=JobPublic)
async def retry_job(job_id: str):
    """Reset a failed job so the next poll processes it again."""
    service = _require_service()
    try:
        job = await service.retry(job_id)
    except EopError as exc:
        raise _http_error(exc)
    return job.to_public()


@router.get("/eop/jobs/{job_id}/download")
async def download_score(job_id: str, kind: Optional[SheetKind] = None):
    """Download the assembled PDF of one sheet kind."""
    service = _require_service()
    if kind is None:
        raise HTTPException(status_code=400, detail="Missing sheet kind (stave or number)")

    try:
        filename, pdf_bytes = service.download(job_id, kind)
    except EopError as exc:
        raise _http_error(exc)

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f"attachment; filename*=UTF-8''{quote(filename)}",
        },
    )

"""Drives a job's sheets through the sheet processor."""

from typing import Sequence

from app.jobs.models import ACTIVE_SHEET_STATUSES, Job, JobStatus, Sheet, SheetStatus
from app.processing.sheet_processor import process_sheet
from app.scraping.client import SourceClient
from app.scraping.song_urls import extract_song_id


def derive_job_status(sheets: Sequence[Sheet]) -> JobStatus:
    """Job status as a function of its sheets.

    Any completed sheet makes the job completed, even when a sibling failed.
    """
    if any(s.status == SheetStatus.COMPLETED for s in sheets):
        return JobStatus.COMPLETED
    if any(s.status in ACTIVE_SHEET_STATUSES for s in sheets):
        return JobStatus.PROCESSING
    return JobStatus.ERROR


async def process_job(job: Job, client: SourceClient) -> None:
    """Process every sheet of ``job`` one after another.

    Sheets run sequentially to keep the load on the source site bounded.
    Exceptions that escape a sheet propagate to the caller.
    """
    if not job.sheets:
        return

    job.status = JobStatus.PROCESSING
    song_id = extract_song_id(job.song_url)

    for sheet in job.sheets:
        await process_sheet(sheet, song_id, client)

    job.status = derive_job_status(job.sheets)

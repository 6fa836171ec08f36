"""In-memory job store with lazy TTL-based expiry."""

from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional

from app.config import settings
from app.jobs.models import Job, JobStatus
from app.logger import get_logger
from app.scraping.song_urls import extract_song_id

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class JobStore:
    """Keeps jobs in a dict keyed by id.

    Expired jobs are dropped on every read instead of by a background
    timer. Jobs are live objects: the orchestrator mutates them in place and
    readers see progress immediately.
    """

    def __init__(self, ttl_seconds: int = 3600, clock: Callable[[], datetime] = _utcnow):
        self._jobs: Dict[str, Job] = {}
        self._ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock

    def _is_expired(self, job: Job, now: datetime) -> bool:
        return now - job.created_at > self._ttl

    def purge_expired(self, now: Optional[datetime] = None) -> int:
        """Remove jobs older than the TTL. Returns count of removed jobs."""
        now = now or self._clock()
        expired = [job_id for job_id, job in self._jobs.items() if self._is_expired(job, now)]
        for job_id in expired:
            del self._jobs[job_id]
        if expired:
            logger.info("Purged %d expired job(s)", len(expired))
        return len(expired)

    def create(self, song_url: str) -> Job:
        """New pending job with no sheets. Not stored until ``save``."""
        return Job(song_url=song_url, created_at=self._clock())

    def save(self, job: Job) -> None:
        self._jobs[job.id] = job

    def get(self, job_id: str) -> Optional[Job]:
        self.purge_expired()
        return self._jobs.get(job_id)

    def list_all(self) -> List[Job]:
        self.purge_expired()
        return list(self._jobs.values())

    def find_reusable(self, song_url: str) -> Optional[Job]:
        """Newest live, non-failed job for the same song id."""
        self.purge_expired()
        target_id = extract_song_id(song_url)
        if not target_id:
            return None

        latest = None
        for job in self._jobs.values():
            if job.status == JobStatus.ERROR:
                continue
            if extract_song_id(job.song_url) != target_id:
                continue
            if latest is None or job.created_at > latest.created_at:
                latest = job
        return latest

    def reset(self, job: Job) -> Job:
        """Put a job back to pending so it can be reprocessed under its id."""
        job.status = JobStatus.PENDING
        job.error = None
        for sheet in job.sheets:
            sheet.clear_progress()
        return job


# Global instance
job_store = JobStore(ttl_seconds=settings.job_ttl_seconds)

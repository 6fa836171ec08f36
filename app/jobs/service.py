"""Job lifecycle operations used by the HTTP layer.

submit -> analyze the song page, store the job
get    -> poll a job; the first poll of a pending job starts processing
download -> assembled PDF for one sheet of a job
retry  -> reset a failed job so it is processed again under the same id
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from app.errors import EopError, InvalidUrl, JobNotFound, ParseError
from app.jobs.dispatcher import JobDispatcher
from app.jobs.models import Job, JobPublic, JobStatus, SheetKind
from app.jobs.store import JobStore
from app.logger import get_logger
from app.scraping.analyzer import analyze_song_page
from app.scraping.client import SourceClient
from app.scraping.song_urls import extract_song_id

logger = get_logger(__name__)


@dataclass
class JobService:
    store: JobStore
    client: SourceClient
    dispatcher: Optional[JobDispatcher] = None

    async def submit(self, song_url: str) -> Job:
        song_url = (song_url or "").strip()
        if not song_url:
            raise InvalidUrl("Missing song link")
        if not extract_song_id(song_url):
            raise InvalidUrl(
                "Could not find a song id in the link; expected something like Music-XXXX.html"
            )

        existing = self.store.find_reusable(song_url)
        if existing is not None:
            logger.info("Reusing job %s (%s) for %s", existing.id, existing.status.value, song_url)
            return existing

        job = self.store.create(song_url)
        await self._analyze(job)
        logger.info(
            "Created job %s for %s with sheets %s",
            job.id, song_url, [s.kind.value for s in job.sheets],
        )
        return job

    async def _analyze(self, job: Job) -> None:
        """Populate title and sheets from the song page, saving the job either way.

        A failed analysis leaves the job in ``error`` and re-raises.
        """
        try:
            analysis = await analyze_song_page(job.song_url, self.client)
            if not analysis.sheets:
                raise ParseError("No sheet preview links found on the song page")
        except Exception as e:
            job.status = JobStatus.ERROR
            job.error = e.message if isinstance(e, EopError) else str(e)
            self.store.save(job)
            logger.warning("Analysis of %s failed: %s", job.song_url, job.error)
            raise

        job.song_title = analysis.title
        job.set_sheets(analysis.sheets)
        self.store.save(job)

    def get(self, job_id: str) -> Job:
        """Look up a job and start processing it if it is still pending."""
        job = self.store.get(job_id)
        if job is None:
            raise JobNotFound("Job does not exist or has expired")

        if job.status == JobStatus.PENDING and self.dispatcher is not None:
            self.dispatcher.trigger(job)
        return job

    def list_jobs(self) -> List[JobPublic]:
        return [job.to_public() for job in self.store.list_all()]

    async def retry(self, job_id: str) -> Job:
        """Reset a failed job under its id; the next poll processes it again.

        A job that failed before any sheet was found is analyzed again right
        away, since a job without sheets has nothing to process.
        """
        job = self.store.get(job_id)
        if job is None:
            raise JobNotFound("Job does not exist or has expired")
        if job.status != JobStatus.ERROR:
            return job

        self.store.reset(job)
        if not job.sheets:
            await self._analyze(job)
        logger.info("Reset failed job %s", job.id)
        return job

    def download(self, job_id: str, kind: SheetKind) -> Tuple[str, bytes]:
        """Returns (suggested filename, PDF bytes)."""
        job = self.store.get(job_id)
        if job is None:
            raise JobNotFound("Job does not exist or has expired")

        sheet = job.get_sheet(kind)
        if sheet is None or sheet.pdf_bytes is None:
            raise JobNotFound("PDF not generated yet or sheet kind not available")

        filename = f"{job.song_title or 'score'}-{sheet.name}.pdf"
        return filename, sheet.pdf_bytes

"""In-process job runner using asyncio tasks.

Each job is processed by one background task on the event loop. No
external dependencies (Redis, Celery) needed.
"""

import asyncio
from typing import Awaitable, Callable, Dict, Optional

from app.jobs.dispatcher import JobDispatcher
from app.jobs.models import Job, JobStatus
from app.logger import get_logger

logger = get_logger(__name__)


class InProcessQueue(JobDispatcher):
    """Runs jobs as asyncio tasks with at most one task per job id.

    A trigger for a job that is already being processed joins the existing
    task instead of starting a second run.
    """

    def __init__(self, worker_fn: Callable[[Job], Awaitable[None]]):
        """
        worker_fn: async callable(job: Job) -> None
            Processes the job in place.
        """
        self._worker_fn = worker_fn
        self._inflight: Dict[str, asyncio.Task] = {}
        self._running = False

    def trigger(self, job: Job) -> Optional[asyncio.Task]:
        if not self._running:
            raise RuntimeError("Job runner is not started")

        task = self._inflight.get(job.id)
        if task is not None and not task.done():
            return task
        if job.status != JobStatus.PENDING:
            return None

        task = asyncio.create_task(self._run(job))
        self._inflight[job.id] = task
        task.add_done_callback(lambda t, job_id=job.id: self._forget(job_id, t))
        return task

    def _forget(self, job_id: str, task: asyncio.Task) -> None:
        if self._inflight.get(job_id) is task:
            del self._inflight[job_id]

    def is_running(self, job_id: str) -> bool:
        task = self._inflight.get(job_id)
        return task is not None and not task.done()

    async def _run(self, job: Job) -> None:
        """Job-level boundary: anything the sheets did not absorb fails the job."""
        try:
            await self._worker_fn(job)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            job.status = JobStatus.ERROR
            job.error = f"{type(e).__name__}: {e}"
            logger.exception("Job %s failed", job.id)

    async def start(self) -> None:
        self._running = True

    async def stop(self) -> None:
        self._running = False
        tasks = list(self._inflight.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        self._inflight.clear()

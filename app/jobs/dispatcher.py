"""Job dispatcher interface."""

import asyncio
from abc import ABC, abstractmethod
from typing import Optional

from app.jobs.models import Job


class JobDispatcher(ABC):
    """Abstract interface for starting job processing in the background."""

    @abstractmethod
    def trigger(self, job: Job) -> Optional[asyncio.Task]:
        """Start processing a pending job. Returns the task running it, if any."""
        ...

    @abstractmethod
    def is_running(self, job_id: str) -> bool:
        ...

    @abstractmethod
    async def start(self) -> None:
        ...

    @abstractmethod
    async def stop(self) -> None:
        """Stop the dispatcher, cancelling in-flight work."""
        ...

"""Scraping job repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.scraping_job import ScrapingJob


class IScrapingJobRepository(Protocol):
    """Repository interface for ScrapingJob entities."""

    async def get(self, id: UUID) -> ScrapingJob | None:
        """Get a job by ID."""
        ...

    async def get_recent_for_user(self, user_id: UUID, limit: int) -> list[ScrapingJob]:
        """Get a user's jobs, newest first."""
        ...

    async def create(self, job: ScrapingJob) -> ScrapingJob:
        """Create a new job."""
        ...

    async def update(self, job: ScrapingJob) -> ScrapingJob:
        """Persist status, counters and timestamps of a job."""
        ...

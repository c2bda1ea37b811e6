"""Scraping job service layer with business logic."""

from collections.abc import Callable
from datetime import datetime
from typing import Optional
from uuid import UUID

import structlog

from core.config import settings
from core.exceptions import (
    ApifyKeyNotFoundError,
    InvalidJobTransitionError,
    InvalidLinkedInUrlError,
    ScrapingJobNotFoundError,
)
from domain.entities.linkedin_profile import normalize_linkedin_url
from domain.entities.scraping_job import (
    CANCELLED_MESSAGE,
    JobStatus,
    JobType,
    ScrapingJob,
    can_transition,
)
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class ScrapingJobService:
    """Service layer tracking the lifecycle of Apify scraping runs."""

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        page_size: int = settings.scraping_jobs_page_size,
    ) -> None:
        self._uow_factory = uow_factory
        self._page_size = page_size

    async def list_for_user(self, user_id: UUID) -> list[ScrapingJob]:
        """Get the user's most recent jobs, newest first."""
        async with self._uow_factory() as uow:
            return await uow.scraping_jobs.get_recent_for_user(  # type: ignore[no-any-return]
                user_id, self._page_size
            )

    async def get(self, job_id: UUID, user_id: UUID) -> ScrapingJob:
        """Get a job owned by the user."""
        async with self._uow_factory() as uow:
            return await self._get_owned(uow, job_id, user_id)

    async def create(
        self,
        user_id: UUID,
        job_type: JobType,
        input_url: str,
        apify_key_id: Optional[UUID] = None,
    ) -> ScrapingJob:
        """Record a new job. Jobs are created as soon as the scrape starts, so they begin running."""
        url = normalize_linkedin_url(input_url)
        if not url:
            raise InvalidLinkedInUrlError(input_url)

        async with self._uow_factory() as uow:
            if apify_key_id:
                key = await uow.apify_keys.get(apify_key_id)
                if not key or key.user_id != user_id or not key.is_active:
                    raise ApifyKeyNotFoundError(str(apify_key_id))

            job = ScrapingJob(
                user_id=user_id,
                job_type=job_type,
                input_url=url,
                apify_key_id=apify_key_id,
                status=JobStatus.RUNNING,
            )
            created = await uow.scraping_jobs.create(job)
            await uow.commit()

            logger.info(
                "scraping_job_created",
                job_id=str(created.id),
                job_type=job_type.value,
                user_id=str(user_id),
            )
            return created

    async def update_status(
        self,
        job_id: UUID,
        user_id: UUID,
        status: JobStatus,
        results_count: Optional[int] = None,
        error_message: Optional[str] = None,
    ) -> ScrapingJob:
        """Move a job to a new status, recording results or the failure reason."""
        async with self._uow_factory() as uow:
            job = await self._get_owned(uow, job_id, user_id)
            self._apply_transition(job, status)

            if results_count is not None:
                job.results_count = results_count
            if error_message:
                job.error_message = error_message

            updated = await uow.scraping_jobs.update(job)
            await uow.commit()

            logger.info(
                "scraping_job_status_changed",
                job_id=str(job_id),
                status=status.value,
                results_count=updated.results_count,
            )
            return updated

    async def cancel(self, job_id: UUID, user_id: UUID) -> ScrapingJob:
        """Cancel a job that has not finished yet."""
        return await self.update_status(
            job_id,
            user_id,
            JobStatus.CANCELLED,
            error_message=CANCELLED_MESSAGE,
        )

    async def _get_owned(self, uow: IUnitOfWork, job_id: UUID, user_id: UUID) -> ScrapingJob:
        job = await uow.scraping_jobs.get(job_id)
        if not job or job.user_id != user_id:
            raise ScrapingJobNotFoundError(str(job_id))
        return job

    @staticmethod
    def _apply_transition(job: ScrapingJob, status: JobStatus) -> None:
        if not can_transition(job.status, status):
            raise InvalidJobTransitionError(job.status.value, status.value)
        job.status = status
        if job.is_finished:
            job.completed_at = datetime.utcnow()

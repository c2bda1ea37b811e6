"""SQLAlchemy implementation of ScrapingJob repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.scraping_job import JobStatus, JobType, ScrapingJob
from infrastructure.database.models import ScrapingJobModel


class SQLAlchemyScrapingJobRepository:
    """SQLAlchemy implementation of IScrapingJobRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> ScrapingJob | None:
        """Get a job by ID."""
        stmt = select(ScrapingJobModel).where(ScrapingJobModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_recent_for_user(self, user_id: UUID, limit: int) -> list[ScrapingJob]:
        """Get a user's jobs, newest first."""
        stmt = (
            select(ScrapingJobModel)
            .where(ScrapingJobModel.user_id == user_id)
            .order_by(ScrapingJobModel.created_at.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, job: ScrapingJob) -> ScrapingJob:
        """Create a new job."""
        model = self._to_model(job)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, job: ScrapingJob) -> ScrapingJob:
        """Persist status, counters and timestamps of a job."""
        stmt = select(ScrapingJobModel).where(ScrapingJobModel.id == job.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"Scraping job {job.id} not found")

        model.status = job.status.value
        model.results_count = job.results_count
        model.error_message = job.error_message
        model.completed_at = job.completed_at

        await self._session.flush()
        return self._to_entity(model)

    def _to_entity(self, model: ScrapingJobModel) -> ScrapingJob:
        """Convert ORM model to domain entity."""
        return ScrapingJob(
            id=model.id,
            user_id=model.user_id,
            apify_key_id=model.apify_key_id,
            job_type=JobType(model.job_type),
            input_url=model.input_url,
            status=JobStatus(model.status),
            results_count=model.results_count,
            error_message=model.error_message,
            created_at=model.created_at,
            completed_at=model.completed_at,
        )

    def _to_model(self, entity: ScrapingJob) -> ScrapingJobModel:
        """Convert domain entity to ORM model."""
        return ScrapingJobModel(
            id=entity.id,
            user_id=entity.user_id,
            apify_key_id=entity.apify_key_id,
            job_type=entity.job_type.value,
            input_url=entity.input_url,
            status=entity.status.value,
            results_count=entity.results_count,
            error_message=entity.error_message,
            created_at=entity.created_at,
            completed_at=entity.completed_at,
        )

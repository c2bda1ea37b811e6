"""SQLAlchemy implementation of LinkedInProfile repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import DuplicateKeyError
from domain.entities.linkedin_profile import LinkedInProfile
from infrastructure.database.constraints import unique_violation_field
from infrastructure.database.models import LinkedInProfileModel

_UNIQUE_CONSTRAINTS = {"linkedin_url": "uq_linkedin_profiles_linkedin_url"}


class SQLAlchemyLinkedInProfileRepository:
    """SQLAlchemy implementation of ILinkedInProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> LinkedInProfile | None:
        """Get a stored profile by ID."""
        stmt = select(LinkedInProfileModel).where(LinkedInProfileModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_url(self, linkedin_url: str) -> LinkedInProfile | None:
        """Get a stored profile by its canonical URL."""
        stmt = select(LinkedInProfileModel).where(
            LinkedInProfileModel.linkedin_url == linkedin_url
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_urls(self, linkedin_urls: list[str]) -> list[LinkedInProfile]:
        """Get stored profiles for several URLs in a single query."""
        if not linkedin_urls:
            return []
        stmt = select(LinkedInProfileModel).where(
            LinkedInProfileModel.linkedin_url.in_(linkedin_urls)
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_all_for_user(self, user_id: UUID) -> list[LinkedInProfile]:
        """Get profiles stored by a user, most recently updated first."""
        stmt = (
            select(LinkedInProfileModel)
            .where(LinkedInProfileModel.user_id == user_id)
            .order_by(LinkedInProfileModel.last_updated.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_all(self, limit: int | None = None) -> list[LinkedInProfile]:
        """Get all stored profiles, most recently updated first."""
        stmt = select(LinkedInProfileModel).order_by(LinkedInProfileModel.last_updated.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def create(self, profile: LinkedInProfile) -> LinkedInProfile:
        """Create a stored profile."""
        model = self._to_model(profile)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            field = unique_violation_field(
                exc, LinkedInProfileModel.__tablename__, _UNIQUE_CONSTRAINTS
            )
            if field is None:
                raise
            raise DuplicateKeyError(field, _UNIQUE_CONSTRAINTS[field]) from exc
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, profile: LinkedInProfile) -> LinkedInProfile:
        """Replace data and tags of a stored profile."""
        stmt = select(LinkedInProfileModel).where(LinkedInProfileModel.id == profile.id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            raise ValueError(f"LinkedIn profile {profile.id} not found")

        model.profile_data = profile.profile_data
        model.tags = list(profile.tags)
        model.last_updated = profile.last_updated

        await self._session.flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete a stored profile."""
        stmt = select(LinkedInProfileModel).where(LinkedInProfileModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    def _to_entity(self, model: LinkedInProfileModel) -> LinkedInProfile:
        """Convert ORM model to domain entity."""
        return LinkedInProfile(
            id=model.id,
            user_id=model.user_id,
            linkedin_url=model.linkedin_url,
            profile_data=dict(model.profile_data or {}),
            tags=list(model.tags or []),
            last_updated=model.last_updated,
            created_at=model.created_at,
        )

    def _to_model(self, entity: LinkedInProfile) -> LinkedInProfileModel:
        """Convert domain entity to ORM model."""
        return LinkedInProfileModel(
            id=entity.id,
            user_id=entity.user_id,
            linkedin_url=entity.linkedin_url,
            profile_data=entity.profile_data,
            tags=list(entity.tags),
            last_updated=entity.last_updated,
            created_at=entity.created_at,
        )

"""SQLAlchemy implementation of Profile repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import DuplicateKeyError
from domain.entities.profile import Profile
from infrastructure.database.constraints import unique_violation_field
from infrastructure.database.models import ProfileModel

_UNIQUE_CONSTRAINTS = {
    "external_subject_id": "uq_profiles_external_subject_id",
    "username": "uq_profiles_username",
    "email": "uq_profiles_email",
}


class SQLAlchemyProfileRepository:
    """SQLAlchemy implementation of IProfileRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by ID."""
        stmt = select(ProfileModel).where(ProfileModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_external_subject_id(self, external_subject_id: str) -> Profile | None:
        """Get the profile linked to an identity provider subject."""
        stmt = select(ProfileModel).where(
            ProfileModel.external_subject_id == external_subject_id
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, profile: Profile) -> Profile:
        """Insert a new profile, reporting which unique field collided."""
        model = self._to_model(profile)
        self._session.add(model)
        try:
            await self._session.flush()
        except IntegrityError as exc:
            field = unique_violation_field(exc, ProfileModel.__tablename__, _UNIQUE_CONSTRAINTS)
            if field is None:
                raise
            raise DuplicateKeyError(field, _UNIQUE_CONSTRAINTS[field]) from exc
        await self._session.refresh(model)
        return self._to_entity(model)

    def _to_entity(self, model: ProfileModel) -> Profile:
        """Convert ORM model to domain entity."""
        return Profile(
            id=model.id,
            external_subject_id=model.external_subject_id,
            username=model.username,
            email=model.email,
            display_name=model.display_name,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Profile) -> ProfileModel:
        """Convert domain entity to ORM model."""
        return ProfileModel(
            id=entity.id,
            external_subject_id=entity.external_subject_id,
            username=entity.username,
            email=entity.email,
            display_name=entity.display_name,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

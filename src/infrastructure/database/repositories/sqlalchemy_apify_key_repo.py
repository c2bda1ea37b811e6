"""SQLAlchemy implementation of ApifyKey repository."""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import DuplicateKeyError
from domain.entities.apify_key import ApifyKey
from infrastructure.database.constraints import unique_violation_field
from infrastructure.database.models import ApifyKeyModel

_UNIQUE_CONSTRAINTS = {"key_name": "uq_apify_keys_user_key_name"}


class SQLAlchemyApifyKeyRepository:
    """SQLAlchemy implementation of IApifyKeyRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: UUID) -> ApifyKey | None:
        """Get an API key by ID."""
        model = await self._get_model(id)
        return self._to_entity(model) if model else None

    async def get_all_for_user(self, user_id: UUID) -> list[ApifyKey]:
        """Get all API keys for a user, newest first."""
        stmt = (
            select(ApifyKeyModel)
            .where(ApifyKeyModel.user_id == user_id)
            .order_by(ApifyKeyModel.created_at.desc())
        )
        result = await self._session.execute(stmt)
        return [self._to_entity(model) for model in result.scalars()]

    async def get_by_name(self, user_id: UUID, key_name: str) -> ApifyKey | None:
        """Get a user's API key by name."""
        stmt = select(ApifyKeyModel).where(
            ApifyKeyModel.user_id == user_id,
            ApifyKeyModel.key_name == key_name,
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, key: ApifyKey) -> ApifyKey:
        """Create a new API key."""
        model = self._to_model(key)
        self._session.add(model)
        await self._flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def update(self, key: ApifyKey) -> ApifyKey:
        """Update an existing API key."""
        model = await self._get_model(key.id)
        if not model:
            raise ValueError(f"Apify key {key.id} not found")

        model.key_name = key.key_name
        model.is_active = key.is_active
        model.updated_at = key.updated_at

        await self._flush()
        return self._to_entity(model)

    async def delete(self, id: UUID) -> bool:
        """Delete an API key."""
        model = await self._get_model(id)
        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def _get_model(self, id: UUID) -> ApifyKeyModel | None:
        stmt = select(ApifyKeyModel).where(ApifyKeyModel.id == id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def _flush(self) -> None:
        try:
            await self._session.flush()
        except IntegrityError as exc:
            field = unique_violation_field(exc, ApifyKeyModel.__tablename__, _UNIQUE_CONSTRAINTS)
            if field is None:
                raise
            raise DuplicateKeyError(field, _UNIQUE_CONSTRAINTS[field]) from exc

    def _to_entity(self, model: ApifyKeyModel) -> ApifyKey:
        """Convert ORM model to domain entity."""
        return ApifyKey(
            id=model.id,
            user_id=model.user_id,
            key_name=model.key_name,
            api_key=model.api_key,
            is_active=model.is_active,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: ApifyKey) -> ApifyKeyModel:
        """Convert domain entity to ORM model."""
        return ApifyKeyModel(
            id=entity.id,
            user_id=entity.user_id,
            key_name=entity.key_name,
            api_key=entity.api_key,
            is_active=entity.is_active,
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

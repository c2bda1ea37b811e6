"""Apify key service layer with business logic."""

from collections.abc import Callable
from datetime import datetime
from typing import Optional
from uuid import UUID

import structlog

from core.exceptions import (
    ApifyKeyNotFoundError,
    DuplicateApifyKeyError,
    DuplicateKeyError,
)
from domain.entities.apify_key import ApifyKey
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class ApifyKeyService:
    """Service layer for a user's Apify API keys."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def list_for_user(self, user_id: UUID) -> list[ApifyKey]:
        """Get all API keys for a user."""
        async with self._uow_factory() as uow:
            return await uow.apify_keys.get_all_for_user(user_id)  # type: ignore[no-any-return]

    async def get_active(self, key_id: UUID, user_id: UUID) -> ApifyKey:
        """Get a key the user owns and has not deactivated."""
        async with self._uow_factory() as uow:
            key = await uow.apify_keys.get(key_id)
            if not key or key.user_id != user_id or not key.is_active:
                raise ApifyKeyNotFoundError(str(key_id))
            return key

    async def create(self, user_id: UUID, key_name: str, api_key: str) -> ApifyKey:
        """Store a new API key. Key names are unique per user."""
        async with self._uow_factory() as uow:
            existing = await uow.apify_keys.get_by_name(user_id, key_name)
            if existing:
                raise DuplicateApifyKeyError(key_name)

            key = ApifyKey(user_id=user_id, key_name=key_name, api_key=api_key)
            try:
                created = await uow.apify_keys.create(key)
            except DuplicateKeyError as exc:
                raise DuplicateApifyKeyError(key_name) from exc
            await uow.commit()

            logger.info("apify_key_created", key_id=str(created.id), user_id=str(user_id))
            return created

    async def update(
        self,
        key_id: UUID,
        user_id: UUID,
        key_name: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> ApifyKey:
        """Rename or (de)activate an API key."""
        async with self._uow_factory() as uow:
            key = await uow.apify_keys.get(key_id)
            if not key or key.user_id != user_id:
                raise ApifyKeyNotFoundError(str(key_id))

            if key_name and key_name != key.key_name:
                existing = await uow.apify_keys.get_by_name(user_id, key_name)
                if existing:
                    raise DuplicateApifyKeyError(key_name)
                key.key_name = key_name

            if is_active is not None:
                key.is_active = is_active

            key.updated_at = datetime.utcnow()
            try:
                updated = await uow.apify_keys.update(key)
            except DuplicateKeyError as exc:
                raise DuplicateApifyKeyError(key.key_name) from exc
            await uow.commit()
            return updated

    async def delete(self, key_id: UUID, user_id: UUID) -> bool:
        """Delete an API key. Jobs that used it keep running with no key reference."""
        async with self._uow_factory() as uow:
            key = await uow.apify_keys.get(key_id)
            if not key or key.user_id != user_id:
                raise ApifyKeyNotFoundError(str(key_id))

            deleted = await uow.apify_keys.delete(key_id)
            await uow.commit()
            return deleted  # type: ignore[no-any-return]

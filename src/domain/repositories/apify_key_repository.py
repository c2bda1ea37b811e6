"""Apify key repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.apify_key import ApifyKey


class IApifyKeyRepository(Protocol):
    """Repository interface for ApifyKey entities."""

    async def get(self, id: UUID) -> ApifyKey | None:
        """Get an API key by ID."""
        ...

    async def get_all_for_user(self, user_id: UUID) -> list[ApifyKey]:
        """Get all API keys for a user."""
        ...

    async def get_by_name(self, user_id: UUID, key_name: str) -> ApifyKey | None:
        """Get a user's API key by name."""
        ...

    async def create(self, key: ApifyKey) -> ApifyKey:
        """Create a new API key."""
        ...

    async def update(self, key: ApifyKey) -> ApifyKey:
        """Update an existing API key."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete an API key and return success status."""
        ...

"""LinkedIn profile repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.linkedin_profile import LinkedInProfile


class ILinkedInProfileRepository(Protocol):
    """Repository interface for stored LinkedIn profiles."""

    async def get(self, id: UUID) -> LinkedInProfile | None:
        """Get a stored profile by ID."""
        ...

    async def get_by_url(self, linkedin_url: str) -> LinkedInProfile | None:
        """Get a stored profile by its canonical URL."""
        ...

    async def get_by_urls(self, linkedin_urls: list[str]) -> list[LinkedInProfile]:
        """Get every stored profile matching one of the URLs (batch fetch)."""
        ...

    async def get_all_for_user(self, user_id: UUID) -> list[LinkedInProfile]:
        """Get profiles stored by a user, most recently updated first."""
        ...

    async def get_all(self, limit: int | None = None) -> list[LinkedInProfile]:
        """Get all stored profiles, most recently updated first."""
        ...

    async def create(self, profile: LinkedInProfile) -> LinkedInProfile:
        """Create a stored profile."""
        ...

    async def update(self, profile: LinkedInProfile) -> LinkedInProfile:
        """Update data, tags and last_updated of a stored profile."""
        ...

    async def delete(self, id: UUID) -> bool:
        """Delete a stored profile and return success status."""
        ...

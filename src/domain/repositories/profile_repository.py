"""Profile repository protocol."""

from typing import Protocol
from uuid import UUID

from domain.entities.profile import Profile


class IProfileRepository(Protocol):
    """Repository interface for Profile entities."""

    async def get(self, id: UUID) -> Profile | None:
        """Get a profile by ID."""
        ...

    async def get_by_external_subject_id(self, external_subject_id: str) -> Profile | None:
        """Get the profile linked to an identity provider subject."""
        ...

    async def create(self, profile: Profile) -> Profile:
        """Insert a new profile.

        Raises:
            DuplicateKeyError: If username, email or external_subject_id is taken
        """
        ...

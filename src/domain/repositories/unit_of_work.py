"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.apify_key_repository import IApifyKeyRepository
from domain.repositories.linkedin_profile_repository import ILinkedInProfileRepository
from domain.repositories.profile_repository import IProfileRepository
from domain.repositories.scraping_job_repository import IScrapingJobRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface for managing transactions."""

    profiles: IProfileRepository
    apify_keys: IApifyKeyRepository
    linkedin_profiles: ILinkedInProfileRepository
    scraping_jobs: IScrapingJobRepository

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...

"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Annotated, Callable

from fastapi import Depends

from api.dependencies.auth import CurrentUser
from domain.entities.profile import Profile
from domain.services.apify_key_service import ApifyKeyService
from domain.services.linkedin_profile_service import LinkedInProfileService
from domain.services.profile_service import ProfileService
from domain.services.scraping_job_service import ScrapingJobService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_profile_service() -> ProfileService:
    """Get Profile service instance."""
    return ProfileService(get_uow_factory())


@lru_cache
def get_apify_key_service() -> ApifyKeyService:
    """Get Apify key service instance."""
    return ApifyKeyService(get_uow_factory())


@lru_cache
def get_linkedin_profile_service() -> LinkedInProfileService:
    """Get LinkedIn profile service instance."""
    return LinkedInProfileService(get_uow_factory())


@lru_cache
def get_scraping_job_service() -> ScrapingJobService:
    """Get Scraping job service instance."""
    return ScrapingJobService(get_uow_factory())


async def get_current_profile(
    user: CurrentUser,
    service: ProfileService = Depends(get_profile_service),
) -> Profile:
    """
    Resolve the caller's profile, provisioning it on first use.

    After the first request this is a single lookup by subject id.
    """
    return await service.get_or_create(user.subject, user.claims)


CurrentProfile = Annotated[Profile, Depends(get_current_profile)]

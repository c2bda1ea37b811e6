"""LinkedIn profile service layer with business logic."""

from collections.abc import Callable
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

import structlog

from core.exceptions import (
    AuthorizationError,
    DuplicateKeyError,
    InvalidLinkedInUrlError,
    LinkedInProfileNotFoundError,
)
from domain.entities.linkedin_profile import (
    LinkedInProfile,
    ProfileLookup,
    normalize_linkedin_url,
    normalize_tags,
)
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()


class LinkedInProfileService:
    """Service layer for scraped LinkedIn profile data.

    Every authenticated user may read every stored profile; only the user who
    stored a profile may overwrite or delete it.
    """

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_by_url(self, linkedin_url: str) -> LinkedInProfile:
        """Get a stored profile by URL."""
        url = self._canonical(linkedin_url)
        async with self._uow_factory() as uow:
            profile = await uow.linkedin_profiles.get_by_url(url)
            if not profile:
                raise LinkedInProfileNotFoundError(url)
            return profile

    async def lookup(self, linkedin_urls: list[str]) -> ProfileLookup:
        """Split URLs into already-stored profiles and URLs that still need scraping."""
        urls = list(dict.fromkeys(self._canonical(u) for u in linkedin_urls))
        if not urls:
            return ProfileLookup(found=[], missing=[])

        async with self._uow_factory() as uow:
            stored = await uow.linkedin_profiles.get_by_urls(urls)

        by_url = {p.linkedin_url: p for p in stored}
        found = [by_url[u] for u in urls if u in by_url]
        missing = [u for u in urls if u not in by_url]
        logger.debug("linkedin_lookup", requested=len(urls), cached=len(found))
        return ProfileLookup(found=found, missing=missing)

    async def upsert(
        self,
        user_id: UUID,
        linkedin_url: str,
        profile_data: dict[str, Any],
        tags: Optional[list[str]] = None,
    ) -> LinkedInProfile:
        """Insert a profile, or refresh data and tags of one the user already stored."""
        url = self._canonical(linkedin_url)
        async with self._uow_factory() as uow:
            existing = await uow.linkedin_profiles.get_by_url(url)
            if existing:
                updated = await self._refresh(uow, existing, user_id, profile_data, tags)
                await uow.commit()
                return updated

            profile = LinkedInProfile(
                user_id=user_id,
                linkedin_url=url,
                profile_data=profile_data,
                tags=tags or [],
            )
            try:
                created = await uow.linkedin_profiles.create(profile)
                await uow.commit()
                return created
            except DuplicateKeyError:
                await uow.rollback()

        # Stored concurrently by another request
        async with self._uow_factory() as uow:
            existing = await uow.linkedin_profiles.get_by_url(url)
            if not existing:
                raise LinkedInProfileNotFoundError(url)
            updated = await self._refresh(uow, existing, user_id, profile_data, tags)
            await uow.commit()
            return updated

    async def list_for_user(self, user_id: UUID) -> list[LinkedInProfile]:
        """Get profiles stored by a user, most recently updated first."""
        async with self._uow_factory() as uow:
            return await uow.linkedin_profiles.get_all_for_user(user_id)  # type: ignore[no-any-return]

    async def list_all(self, limit: Optional[int] = None) -> list[LinkedInProfile]:
        """Get every stored profile, most recently updated first."""
        async with self._uow_factory() as uow:
            return await uow.linkedin_profiles.get_all(limit)  # type: ignore[no-any-return]

    async def delete(self, profile_id: UUID, user_id: UUID) -> bool:
        """Delete a stored profile owned by the user."""
        async with self._uow_factory() as uow:
            profile = await uow.linkedin_profiles.get(profile_id)
            if not profile or profile.user_id != user_id:
                raise LinkedInProfileNotFoundError(str(profile_id))

            deleted = await uow.linkedin_profiles.delete(profile_id)
            await uow.commit()
            return deleted  # type: ignore[no-any-return]

    async def _refresh(
        self,
        uow: IUnitOfWork,
        profile: LinkedInProfile,
        user_id: UUID,
        profile_data: dict[str, Any],
        tags: Optional[list[str]],
    ) -> LinkedInProfile:
        if profile.user_id != user_id:
            raise AuthorizationError("This LinkedIn profile was stored by another user")

        profile.profile_data = profile_data
        if tags is not None:
            profile.tags = normalize_tags(tags)
        profile.last_updated = datetime.utcnow()
        return await uow.linkedin_profiles.update(profile)  # type: ignore[no-any-return]

    @staticmethod
    def _canonical(linkedin_url: str) -> str:
        url = normalize_linkedin_url(linkedin_url)
        if not url:
            raise InvalidLinkedInUrlError(linkedin_url)
        return url

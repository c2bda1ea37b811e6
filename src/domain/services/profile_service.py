"""Profile service: get-or-create a profile for an authenticated identity."""

import re
from collections.abc import Callable
from typing import Optional
from uuid import UUID

import structlog
from sqlalchemy.exc import InterfaceError, OperationalError

from core.config import settings
from core.exceptions import (
    AppException,
    DuplicateKeyError,
    ErrorCode,
    IdentityConflictError,
    ProfileNotFoundError,
    ProfileProvisioningError,
    StoreUnavailableError,
    UsernameUnavailableError,
)
from domain.entities.profile import IdentityClaims, Profile, email_local_part
from domain.repositories.unit_of_work import IUnitOfWork

logger = structlog.get_logger()

# Connection-level failures, reported as StoreUnavailable and never retried here.
_STORE_ERRORS = (OperationalError, InterfaceError, OSError)

_NON_ALNUM = re.compile(r"[^A-Za-z0-9]")


class ProfileService:
    """Service layer for profile provisioning.

    Uniqueness of subject id, email and username is enforced only by the
    database constraints. Each insert attempt runs in its own unit of work, so
    a failed or abandoned attempt leaves either no row or a complete one.
    """

    def __init__(
        self,
        uow_factory: Callable[[], IUnitOfWork],
        placeholder_email_domain: str = settings.placeholder_email_domain,
        max_username_attempts: int = settings.max_username_attempts,
    ) -> None:
        self._uow_factory = uow_factory
        self._placeholder_email_domain = placeholder_email_domain
        self._max_username_attempts = max_username_attempts

    async def get(self, profile_id: UUID) -> Profile:
        """Get a profile by ID."""
        async with self._uow_factory() as uow:
            profile = await uow.profiles.get(profile_id)
            if not profile:
                raise ProfileNotFoundError(str(profile_id))
            return profile

    async def get_or_create(
        self,
        external_subject_id: str,
        claims: Optional[IdentityClaims] = None,
    ) -> Profile:
        """Return the profile for ``external_subject_id``, creating it on first use.

        The existing-profile path is a single read. On the create path a
        username collision is retried with suffixed candidates, then with a
        subject-derived fallback. A collision on subject id or email means a
        concurrent caller won the race: the row is re-read and returned, or
        IdentityConflictError is raised if it belongs to someone else.
        """
        if not external_subject_id or not external_subject_id.strip():
            raise AppException(
                ErrorCode.VALIDATION_ERROR,
                "External subject id is required",
                400,
            )

        existing = await self._find(external_subject_id)
        if existing:
            return existing

        profile = self._build_profile(external_subject_id, claims or IdentityClaims())
        seed = profile.username

        for attempt in range(self._max_username_attempts):
            if attempt:
                profile.username = self._suffixed_username(seed, profile.id, attempt)
            try:
                return await self._insert(profile)
            except DuplicateKeyError as exc:
                if exc.field != "username":
                    return await self._resolve_identity_conflict(external_subject_id, exc)
                logger.info(
                    "profile_username_taken",
                    external_subject_id=external_subject_id,
                    username=profile.username,
                    attempt=attempt + 1,
                )

        profile.username = self._fallback_username(profile.email, external_subject_id)
        try:
            return await self._insert(profile)
        except DuplicateKeyError as exc:
            if exc.field != "username":
                return await self._resolve_identity_conflict(external_subject_id, exc)
            logger.error(
                "profile_username_exhausted",
                external_subject_id=external_subject_id,
                attempts=self._max_username_attempts + 1,
            )
            raise UsernameUnavailableError(external_subject_id) from exc

    async def _find(self, external_subject_id: str) -> Profile | None:
        try:
            async with self._uow_factory() as uow:
                return await uow.profiles.get_by_external_subject_id(external_subject_id)
        except _STORE_ERRORS as exc:
            raise StoreUnavailableError(external_subject_id) from exc

    async def _insert(self, profile: Profile) -> Profile:
        """Insert one candidate row in its own transaction."""
        try:
            async with self._uow_factory() as uow:
                created = await uow.profiles.create(profile)
                await uow.commit()
        except (DuplicateKeyError, AppException):
            raise
        except _STORE_ERRORS as exc:
            raise StoreUnavailableError(profile.external_subject_id) from exc
        except Exception as exc:
            logger.error(
                "profile_insert_failed",
                external_subject_id=profile.external_subject_id,
                error=str(exc),
                error_type=type(exc).__name__,
            )
            raise ProfileProvisioningError(profile.external_subject_id, str(exc)) from exc

        logger.info(
            "profile_created",
            profile_id=str(created.id),
            external_subject_id=created.external_subject_id,
            username=created.username,
        )
        return created

    async def _resolve_identity_conflict(
        self, external_subject_id: str, exc: DuplicateKeyError
    ) -> Profile:
        """Re-read after losing a race on subject id or email."""
        winner = await self._find(external_subject_id)
        if winner:
            logger.debug(
                "profile_created_concurrently",
                external_subject_id=external_subject_id,
                profile_id=str(winner.id),
            )
            return winner
        logger.warning(
            "profile_identity_conflict",
            external_subject_id=external_subject_id,
            field=exc.field,
        )
        raise IdentityConflictError(external_subject_id, exc.field) from exc

    def _build_profile(self, external_subject_id: str, claims: IdentityClaims) -> Profile:
        email = claims.email or self._placeholder_email(external_subject_id)
        return Profile(
            external_subject_id=external_subject_id,
            email=email,
            username=claims.username or email_local_part(email),
            display_name=self._derive_display_name(claims, email),
        )

    def _placeholder_email(self, external_subject_id: str) -> str:
        return f"{external_subject_id}@{self._placeholder_email_domain}"

    @staticmethod
    def _derive_display_name(claims: IdentityClaims, email: str) -> str:
        """Pick the best available human name, falling back to the email local part."""
        if claims.full_name:
            return claims.full_name
        if claims.first_name and claims.last_name:
            return f"{claims.first_name} {claims.last_name}"
        return claims.first_name or claims.last_name or email_local_part(email)

    @staticmethod
    def _suffixed_username(seed: str, profile_id: UUID, attempt: int) -> str:
        return f"{seed}-{str(profile_id)[:8]}-{attempt}"

    @staticmethod
    def _fallback_username(email: str, external_subject_id: str) -> str:
        return f"{email_local_part(email)}-{_NON_ALNUM.sub('', external_subject_id)}"

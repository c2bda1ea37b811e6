"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"

    # Not found errors (404)
    PROFILE_NOT_FOUND = "PROFILE_NOT_FOUND"
    IDENTITY_NOT_FOUND_UPSTREAM = "IDENTITY_NOT_FOUND_UPSTREAM"
    APIFY_KEY_NOT_FOUND = "APIFY_KEY_NOT_FOUND"
    LINKEDIN_PROFILE_NOT_FOUND = "LINKEDIN_PROFILE_NOT_FOUND"
    SCRAPING_JOB_NOT_FOUND = "SCRAPING_JOB_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_LINKEDIN_URL = "INVALID_LINKEDIN_URL"
    INVALID_JOB_TRANSITION = "INVALID_JOB_TRANSITION"

    # Conflict errors (409)
    IDENTITY_CONFLICT = "IDENTITY_CONFLICT"
    DUPLICATE_APIFY_KEY = "DUPLICATE_APIFY_KEY"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500/503)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    PROFILE_PROVISIONING_FAILED = "PROFILE_PROVISIONING_FAILED"
    USERNAME_UNAVAILABLE = "USERNAME_UNAVAILABLE"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class DuplicateKeyError(Exception):
    """A write was rejected by a unique constraint.

    Raised by repositories, never rendered directly. ``field`` names the
    column whose uniqueness was violated.
    """

    def __init__(self, field: str, constraint: str | None = None) -> None:
        self.field = field
        self.constraint = constraint
        super().__init__(f"Duplicate value for {field}")


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class AuthorizationError(AppException):
    """Authorization failed."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=message,
            status_code=403,
        )


class ProfileNotFoundError(AppException):
    """Profile not found."""

    def __init__(self, profile_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_NOT_FOUND,
            message=f"Profile not found: {profile_id}",
            status_code=404,
            details={"profile_id": profile_id},
        )


class UpstreamIdentityNotFoundError(AppException):
    """The identity provider has no record of the subject."""

    def __init__(self, external_subject_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.IDENTITY_NOT_FOUND_UPSTREAM,
            message=f"Identity not found upstream: {external_subject_id}",
            status_code=404,
            details={"external_subject_id": external_subject_id},
        )


class IdentityConflictError(AppException):
    """Another profile already owns this subject id or email."""

    def __init__(self, external_subject_id: str, field: str) -> None:
        super().__init__(
            error_code=ErrorCode.IDENTITY_CONFLICT,
            message=f"A profile with this {field} already exists",
            status_code=409,
            details={"external_subject_id": external_subject_id, "field": field},
        )


class UsernameUnavailableError(AppException):
    """Every candidate username, including the fallback, was taken."""

    def __init__(self, external_subject_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.USERNAME_UNAVAILABLE,
            message="Could not allocate a unique username, please retry",
            status_code=503,
            details={"external_subject_id": external_subject_id},
        )


class StoreUnavailableError(AppException):
    """The database could not be reached."""

    def __init__(self, external_subject_id: str | None = None) -> None:
        super().__init__(
            error_code=ErrorCode.STORE_UNAVAILABLE,
            message="The data store is temporarily unavailable, please retry",
            status_code=503,
            details=(
                {"external_subject_id": external_subject_id}
                if external_subject_id
                else None
            ),
        )


class ProfileProvisioningError(AppException):
    """Creating a profile failed for a reason other than a key conflict."""

    def __init__(self, external_subject_id: str, reason: str) -> None:
        super().__init__(
            error_code=ErrorCode.PROFILE_PROVISIONING_FAILED,
            message=f"Failed to create profile for {external_subject_id}: {reason}",
            status_code=500,
            details={"external_subject_id": external_subject_id},
        )


class ApifyKeyNotFoundError(AppException):
    """Apify key not found."""

    def __init__(self, key_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.APIFY_KEY_NOT_FOUND,
            message=f"Apify key not found: {key_id}",
            status_code=404,
            details={"key_id": key_id},
        )


class DuplicateApifyKeyError(AppException):
    """The user already has an Apify key with this name."""

    def __init__(self, key_name: str) -> None:
        super().__init__(
            error_code=ErrorCode.DUPLICATE_APIFY_KEY,
            message=f"Apify key '{key_name}' already exists",
            status_code=409,
            details={"key_name": key_name},
        )


class LinkedInProfileNotFoundError(AppException):
    """Stored LinkedIn profile not found."""

    def __init__(self, identifier: str) -> None:
        super().__init__(
            error_code=ErrorCode.LINKEDIN_PROFILE_NOT_FOUND,
            message=f"LinkedIn profile not found: {identifier}",
            status_code=404,
            details={"identifier": identifier},
        )


class InvalidLinkedInUrlError(AppException):
    """URL does not point at linkedin.com."""

    def __init__(self, url: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_LINKEDIN_URL,
            message=f"Not a LinkedIn URL: {url}",
            status_code=400,
            details={"url": url},
        )


class ScrapingJobNotFoundError(AppException):
    """Scraping job not found."""

    def __init__(self, job_id: str) -> None:
        super().__init__(
            error_code=ErrorCode.SCRAPING_JOB_NOT_FOUND,
            message=f"Scraping job not found: {job_id}",
            status_code=404,
            details={"job_id": job_id},
        )


class InvalidJobTransitionError(AppException):
    """Job status change not allowed from the current status."""

    def __init__(self, current: str, requested: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_JOB_TRANSITION,
            message=f"Cannot move job from '{current}' to '{requested}'",
            status_code=400,
            details={"current": current, "requested": requested},
        )

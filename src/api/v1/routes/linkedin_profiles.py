"""LinkedIn profile API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from api.v1.dependencies import CurrentProfile, get_linkedin_profile_service
from api.v1.schemas.linkedin_profile import (
    LinkedInLookupRequest,
    LinkedInLookupResponse,
    LinkedInLookupResult,
    LinkedInProfileDetailResponse,
    LinkedInProfileListResponse,
    LinkedInProfileResponse,
    LinkedInProfileUpsert,
)
from core.rate_limit import limiter
from domain.services.linkedin_profile_service import LinkedInProfileService

router = APIRouter(prefix="/linkedin-profiles", tags=["linkedin-profiles"])


@router.get(
    "",
    response_model=LinkedInProfileListResponse,
    summary="List profiles I stored",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_my_linkedin_profiles(
    request: Request,
    profile: CurrentProfile,
    service: LinkedInProfileService = Depends(get_linkedin_profile_service),
) -> LinkedInProfileListResponse:
    """Get the profiles stored by the caller, most recently updated first."""
    profiles = await service.list_for_user(profile.id)
    data = [LinkedInProfileResponse.model_validate(p) for p in profiles]
    return LinkedInProfileListResponse(data=data, meta={"total": len(data)})


@router.get(
    "/all",
    response_model=LinkedInProfileListResponse,
    summary="List all stored profiles",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_all_linkedin_profiles(
    request: Request,
    profile: CurrentProfile,
    limit: int | None = Query(None, ge=1, le=1000),
    service: LinkedInProfileService = Depends(get_linkedin_profile_service),
) -> LinkedInProfileListResponse:
    """Get every stored profile regardless of who scraped it, most recently updated first."""
    profiles = await service.list_all(limit)
    data = [LinkedInProfileResponse.model_validate(p) for p in profiles]
    return LinkedInProfileListResponse(data=data, meta={"total": len(data)})


@router.get(
    "/by-url",
    response_model=LinkedInProfileDetailResponse,
    summary="Get a stored profile by URL",
    responses={
        400: {"description": "Not a LinkedIn URL"},
        404: {"description": "Profile not stored yet"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_linkedin_profile_by_url(
    request: Request,
    profile: CurrentProfile,
    url: str = Query(..., min_length=1, max_length=2048),
    service: LinkedInProfileService = Depends(get_linkedin_profile_service),
) -> LinkedInProfileDetailResponse:
    """Get a stored profile. The URL is normalised before lookup."""
    stored = await service.get_by_url(url)
    return LinkedInProfileDetailResponse(data=LinkedInProfileResponse.model_validate(stored))


@router.post(
    "/lookup",
    response_model=LinkedInLookupResponse,
    summary="Check which URLs are already stored",
    responses={400: {"description": "One of the URLs is not a LinkedIn URL"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def lookup_linkedin_profiles(
    request: Request,
    body: LinkedInLookupRequest,
    profile: CurrentProfile,
    service: LinkedInProfileService = Depends(get_linkedin_profile_service),
) -> LinkedInLookupResponse:
    """Split URLs into stored profiles and URLs that still need scraping."""
    result = await service.lookup(body.linkedin_urls)
    return LinkedInLookupResponse(
        data=LinkedInLookupResult(
            found=[LinkedInProfileResponse.model_validate(p) for p in result.found],
            missing=result.missing,
        )
    )


@router.put(
    "",
    response_model=LinkedInProfileDetailResponse,
    summary="Store or refresh a profile",
    responses={
        200: {"description": "Profile stored"},
        400: {"description": "Not a LinkedIn URL"},
        403: {"description": "Profile was stored by another user"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def upsert_linkedin_profile(
    request: Request,
    body: LinkedInProfileUpsert,
    profile: CurrentProfile,
    service: LinkedInProfileService = Depends(get_linkedin_profile_service),
) -> LinkedInProfileDetailResponse:
    """Insert scraped data, or replace data and tags of a profile the caller stored."""
    stored = await service.upsert(
        user_id=profile.id,
        linkedin_url=body.linkedin_url,
        profile_data=body.profile_data,
        tags=body.tags,
    )
    return LinkedInProfileDetailResponse(data=LinkedInProfileResponse.model_validate(stored))


@router.delete(
    "/{profile_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a stored profile",
    responses={
        204: {"description": "Profile deleted successfully"},
        404: {"description": "Profile not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_linkedin_profile(
    request: Request,
    profile_id: UUID,
    profile: CurrentProfile,
    service: LinkedInProfileService = Depends(get_linkedin_profile_service),
) -> None:
    """Delete a profile the caller stored."""
    await service.delete(profile_id, profile.id)
    return None

"""Profile API routes."""

from fastapi import APIRouter, Request

from api.v1.dependencies import CurrentProfile
from api.v1.schemas.common import AUTH_RESPONSES
from api.v1.schemas.profile import ProfileDetailResponse, ProfileResponse
from core.rate_limit import limiter

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get(
    "/me",
    response_model=ProfileDetailResponse,
    summary="Get my profile",
    responses=AUTH_RESPONSES,
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_my_profile(
    request: Request,
    profile: CurrentProfile,
) -> ProfileDetailResponse:
    """
    Return the caller's profile, creating it on the first authenticated request.

    Username, email and display name are derived from the token claims when
    the profile is created and are not changed afterwards.
    """
    return ProfileDetailResponse(data=ProfileResponse.model_validate(profile))

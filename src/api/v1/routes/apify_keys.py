"""Apify key API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.v1.dependencies import CurrentProfile, get_apify_key_service
from api.v1.schemas.apify_key import (
    ApifyKeyCreate,
    ApifyKeyDetailResponse,
    ApifyKeyListResponse,
    ApifyKeyResponse,
    ApifyKeyUpdate,
)
from core.rate_limit import limiter
from domain.services.apify_key_service import ApifyKeyService

router = APIRouter(prefix="/apify-keys", tags=["apify-keys"])


@router.get(
    "",
    response_model=ApifyKeyListResponse,
    summary="List my Apify keys",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_apify_keys(
    request: Request,
    profile: CurrentProfile,
    service: ApifyKeyService = Depends(get_apify_key_service),
) -> ApifyKeyListResponse:
    """Get all Apify keys of the caller, newest first. Tokens are masked."""
    keys = await service.list_for_user(profile.id)
    data = [ApifyKeyResponse.model_validate(k) for k in keys]
    return ApifyKeyListResponse(data=data, meta={"total": len(data)})


@router.post(
    "",
    response_model=ApifyKeyDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Store an Apify key",
    responses={
        201: {"description": "Key stored successfully"},
        409: {"description": "A key with this name already exists"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_apify_key(
    request: Request,
    body: ApifyKeyCreate,
    profile: CurrentProfile,
    service: ApifyKeyService = Depends(get_apify_key_service),
) -> ApifyKeyDetailResponse:
    """Store a new Apify key. Key names are unique per user."""
    key = await service.create(
        user_id=profile.id,
        key_name=body.key_name,
        api_key=body.api_key,
    )
    return ApifyKeyDetailResponse(data=ApifyKeyResponse.model_validate(key))


@router.patch(
    "/{key_id}",
    response_model=ApifyKeyDetailResponse,
    summary="Update an Apify key",
    responses={
        200: {"description": "Key updated successfully"},
        404: {"description": "Key not found"},
        409: {"description": "A key with this name already exists"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_apify_key(
    request: Request,
    key_id: UUID,
    body: ApifyKeyUpdate,
    profile: CurrentProfile,
    service: ApifyKeyService = Depends(get_apify_key_service),
) -> ApifyKeyDetailResponse:
    """Rename a key or toggle whether it may be used for new scrapes."""
    key = await service.update(
        key_id=key_id,
        user_id=profile.id,
        key_name=body.key_name,
        is_active=body.is_active,
    )
    return ApifyKeyDetailResponse(data=ApifyKeyResponse.model_validate(key))


@router.delete(
    "/{key_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete an Apify key",
    responses={
        204: {"description": "Key deleted successfully"},
        404: {"description": "Key not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_apify_key(
    request: Request,
    key_id: UUID,
    profile: CurrentProfile,
    service: ApifyKeyService = Depends(get_apify_key_service),
) -> None:
    """Delete a key. Jobs that used it keep their history without the key reference."""
    await service.delete(key_id, profile.id)
    return None

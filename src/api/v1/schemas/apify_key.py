"""Pydantic schemas for Apify key API."""

from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ApifyKeyCreate(BaseModel):
    """Schema for storing an Apify key."""

    key_name: str = Field(..., min_length=1, max_length=100)
    api_key: str = Field(..., min_length=1, max_length=500)

    @field_validator("key_name", "api_key")
    @classmethod
    def strip_value(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class ApifyKeyUpdate(BaseModel):
    """Schema for renaming or (de)activating an Apify key."""

    key_name: Optional[str] = Field(None, min_length=1, max_length=100)
    is_active: Optional[bool] = None


class ApifyKeyResponse(BaseModel):
    """Schema for Apify key response. The token itself is never returned."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "key_name": "Main account",
                "masked_key": "********a1b2",
                "is_active": True,
                "created_at": "2026-02-01T10:00:00",
                "updated_at": "2026-02-01T10:00:00",
            }
        },
    )

    id: UUID
    key_name: str
    masked_key: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


class ApifyKeyListResponse(BaseModel):
    """Schema for list of Apify keys."""

    data: List[ApifyKeyResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class ApifyKeyDetailResponse(BaseModel):
    """Schema for single Apify key."""

    data: ApifyKeyResponse

"""Pydantic schemas for LinkedIn profile API."""

from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class LinkedInProfileUpsert(BaseModel):
    """Schema for storing or refreshing a scraped profile."""

    linkedin_url: str = Field(..., min_length=1, max_length=2048)
    profile_data: dict[str, Any] = Field(default_factory=dict)
    tags: Optional[List[str]] = Field(None, max_length=50)


class LinkedInLookupRequest(BaseModel):
    """Schema for checking which URLs are already stored."""

    linkedin_urls: List[str] = Field(..., min_length=1, max_length=500)


class LinkedInProfileResponse(BaseModel):
    """Schema for LinkedIn profile response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "user_id": "456e4567-e89b-12d3-a456-426614174000",
                "linkedin_url": "https://www.linkedin.com/in/janedoe",
                "profile_data": {"fullName": "Jane Doe", "headline": "Engineer"},
                "tags": ["lead", "berlin"],
                "last_updated": "2026-02-01T10:00:00",
                "created_at": "2026-02-01T10:00:00",
            }
        },
    )

    id: UUID
    user_id: UUID
    linkedin_url: str
    profile_data: dict[str, Any]
    tags: List[str]
    last_updated: datetime
    created_at: datetime


class LinkedInProfileListResponse(BaseModel):
    """Schema for list of LinkedIn profiles."""

    data: List[LinkedInProfileResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class LinkedInProfileDetailResponse(BaseModel):
    """Schema for single LinkedIn profile."""

    data: LinkedInProfileResponse


class LinkedInLookupResult(BaseModel):
    """Stored profiles and the URLs that still need scraping."""

    found: List[LinkedInProfileResponse]
    missing: List[str]


class LinkedInLookupResponse(BaseModel):
    """Schema for lookup response."""

    data: LinkedInLookupResult

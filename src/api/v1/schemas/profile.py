"""Pydantic schemas for Profile API."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class ProfileResponse(BaseModel):
    """Schema for Profile response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "external_subject_id": "user_2abcDEF",
                "username": "jane",
                "email": "jane@example.com",
                "display_name": "Jane Doe",
                "created_at": "2026-02-01T10:00:00",
                "updated_at": "2026-02-01T10:00:00",
            }
        },
    )

    id: UUID
    external_subject_id: str
    username: str
    email: str
    display_name: Optional[str]
    created_at: datetime
    updated_at: datetime


class ProfileDetailResponse(BaseModel):
    """Schema for single Profile response."""

    data: ProfileResponse

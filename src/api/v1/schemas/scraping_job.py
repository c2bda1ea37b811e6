"""Pydantic schemas for Scraping job API."""

from datetime import datetime
from typing import Any, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.scraping_job import JobStatus, JobType


class ScrapingJobCreate(BaseModel):
    """Schema for recording a new scraping run."""

    job_type: JobType
    input_url: str = Field(..., min_length=1, max_length=2048)
    apify_key_id: Optional[UUID] = None


class ScrapingJobStatusUpdate(BaseModel):
    """Schema for moving a job to a new status."""

    status: JobStatus
    results_count: Optional[int] = Field(None, ge=0)
    error_message: Optional[str] = Field(None, max_length=2000)


class ScrapingJobResponse(BaseModel):
    """Schema for Scraping job response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "123e4567-e89b-12d3-a456-426614174000",
                "job_type": "post_comments",
                "input_url": "https://www.linkedin.com/posts/janedoe_activity-123",
                "apify_key_id": "456e4567-e89b-12d3-a456-426614174000",
                "status": "completed",
                "results_count": 42,
                "error_message": None,
                "created_at": "2026-02-01T10:00:00",
                "completed_at": "2026-02-01T10:03:00",
            }
        },
    )

    id: UUID
    job_type: JobType
    input_url: str
    apify_key_id: Optional[UUID]
    status: JobStatus
    results_count: int
    error_message: Optional[str]
    created_at: datetime
    completed_at: Optional[datetime]


class ScrapingJobListResponse(BaseModel):
    """Schema for list of Scraping jobs."""

    data: List[ScrapingJobResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class ScrapingJobDetailResponse(BaseModel):
    """Schema for single Scraping job."""

    data: ScrapingJobResponse

"""Scraping job API routes."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request, status

from api.v1.dependencies import CurrentProfile, get_scraping_job_service
from api.v1.schemas.scraping_job import (
    ScrapingJobCreate,
    ScrapingJobDetailResponse,
    ScrapingJobListResponse,
    ScrapingJobResponse,
    ScrapingJobStatusUpdate,
)
from core.rate_limit import limiter
from domain.services.scraping_job_service import ScrapingJobService

router = APIRouter(prefix="/scraping-jobs", tags=["scraping-jobs"])


@router.get(
    "",
    response_model=ScrapingJobListResponse,
    summary="List my recent jobs",
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_scraping_jobs(
    request: Request,
    profile: CurrentProfile,
    service: ScrapingJobService = Depends(get_scraping_job_service),
) -> ScrapingJobListResponse:
    """Get the caller's most recent scraping jobs, newest first."""
    jobs = await service.list_for_user(profile.id)
    data = [ScrapingJobResponse.model_validate(j) for j in jobs]
    return ScrapingJobListResponse(data=data, meta={"total": len(data)})


@router.get(
    "/{job_id}",
    response_model=ScrapingJobDetailResponse,
    summary="Get a job",
    responses={404: {"description": "Job not found"}},
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_scraping_job(
    request: Request,
    job_id: UUID,
    profile: CurrentProfile,
    service: ScrapingJobService = Depends(get_scraping_job_service),
) -> ScrapingJobDetailResponse:
    """Get a single job owned by the caller."""
    job = await service.get(job_id, profile.id)
    return ScrapingJobDetailResponse(data=ScrapingJobResponse.model_validate(job))


@router.post(
    "",
    response_model=ScrapingJobDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record a new job",
    responses={
        201: {"description": "Job recorded and running"},
        400: {"description": "Not a LinkedIn URL"},
        404: {"description": "Apify key not found or inactive"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_scraping_job(
    request: Request,
    body: ScrapingJobCreate,
    profile: CurrentProfile,
    service: ScrapingJobService = Depends(get_scraping_job_service),
) -> ScrapingJobDetailResponse:
    """Record a scraping run that is about to start."""
    job = await service.create(
        user_id=profile.id,
        job_type=body.job_type,
        input_url=body.input_url,
        apify_key_id=body.apify_key_id,
    )
    return ScrapingJobDetailResponse(data=ScrapingJobResponse.model_validate(job))


@router.patch(
    "/{job_id}",
    response_model=ScrapingJobDetailResponse,
    summary="Update job status",
    responses={
        400: {"description": "Transition not allowed"},
        404: {"description": "Job not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_scraping_job_status(
    request: Request,
    job_id: UUID,
    body: ScrapingJobStatusUpdate,
    profile: CurrentProfile,
    service: ScrapingJobService = Depends(get_scraping_job_service),
) -> ScrapingJobDetailResponse:
    """Move a job to a new status, recording the result count or failure reason."""
    job = await service.update_status(
        job_id=job_id,
        user_id=profile.id,
        status=body.status,
        results_count=body.results_count,
        error_message=body.error_message,
    )
    return ScrapingJobDetailResponse(data=ScrapingJobResponse.model_validate(job))


@router.post(
    "/{job_id}/cancel",
    response_model=ScrapingJobDetailResponse,
    summary="Cancel a job",
    responses={
        400: {"description": "Job already finished"},
        404: {"description": "Job not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def cancel_scraping_job(
    request: Request,
    job_id: UUID,
    profile: CurrentProfile,
    service: ScrapingJobService = Depends(get_scraping_job_service),
) -> ScrapingJobDetailResponse:
    """Cancel a job that has not finished yet."""
    job = await service.cancel(job_id, profile.id)
    return ScrapingJobDetailResponse(data=ScrapingJobResponse.model_validate(job))

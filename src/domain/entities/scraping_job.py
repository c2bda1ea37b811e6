"""Scraping job domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Optional
from uuid import UUID, uuid4


class JobType(StrEnum):
    """What a scraping run collects."""

    POST_COMMENTS = "post_comments"
    PROFILE_DETAILS = "profile_details"
    MIXED = "mixed"


class JobStatus(StrEnum):
    """Lifecycle status of a scraping run."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"


TERMINAL_STATUSES = frozenset({JobStatus.COMPLETED, JobStatus.FAILED, JobStatus.CANCELLED})

_ALLOWED_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.PENDING: frozenset({JobStatus.RUNNING, JobStatus.FAILED, JobStatus.CANCELLED}),
    JobStatus.RUNNING: frozenset({JobStatus.COMPLETED, JobStatus.FAILED, JobStatus.CANCELLED}),
    JobStatus.COMPLETED: frozenset(),
    JobStatus.FAILED: frozenset(),
    JobStatus.CANCELLED: frozenset(),
}

CANCELLED_MESSAGE = "Job cancelled by user"


def can_transition(current: JobStatus, target: JobStatus) -> bool:
    """Check whether a job may move from ``current`` to ``target``."""
    return target in _ALLOWED_TRANSITIONS[current]


@dataclass
class ScrapingJob:
    """Domain entity for one Apify scraping run."""

    user_id: UUID
    job_type: JobType
    input_url: str
    id: UUID = field(default_factory=uuid4)
    apify_key_id: Optional[UUID] = None
    status: JobStatus = JobStatus.PENDING
    results_count: int = 0
    error_message: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    completed_at: Optional[datetime] = None

    @property
    def is_finished(self) -> bool:
        return self.status in TERMINAL_STATUSES

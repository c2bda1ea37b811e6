"""Unit tests for domain entities and value helpers."""

from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from domain.entities.linkedin_profile import LinkedInProfile, normalize_linkedin_url, normalize_tags
from domain.entities.profile import IdentityClaims, Profile, email_local_part
from domain.entities.scraping_job import JobStatus, JobType, ScrapingJob, can_transition


class TestIdentityClaims:
    def test_strips_values(self):
        claims = IdentityClaims(username="  jane ", email=" jane@x.com ")

        assert claims.username == "jane"
        assert claims.email == "jane@x.com"

    def test_blank_values_become_none(self):
        claims = IdentityClaims(username="", email="   ", first_name="\t")

        assert claims.username is None
        assert claims.email is None
        assert claims.first_name is None

    def test_is_immutable(self):
        claims = IdentityClaims(username="jane")

        with pytest.raises(AttributeError):
            claims.username = "other"  # type: ignore[misc]


class TestProfile:
    def test_updated_at_never_precedes_created_at(self):
        created = datetime(2026, 1, 2)
        profile = Profile(
            external_subject_id="s",
            username="u",
            email="e@x.com",
            created_at=created,
            updated_at=created - timedelta(days=1),
        )

        assert profile.updated_at == created

    def test_ids_are_unique(self):
        a = Profile(external_subject_id="a", username="a", email="a@x.com")
        b = Profile(external_subject_id="b", username="b", email="b@x.com")

        assert a.id != b.id

    def test_email_local_part(self):
        assert email_local_part("jane.doe@example.com") == "jane.doe"
        assert email_local_part("no-at-sign") == "no-at-sign"


class TestNormalizeLinkedInUrl:
    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("https://www.linkedin.com/in/janedoe", "https://www.linkedin.com/in/janedoe"),
            ("http://www.linkedin.com/in/janedoe/", "https://www.linkedin.com/in/janedoe"),
            ("www.LinkedIn.com/in/janedoe?trk=x#top", "https://www.linkedin.com/in/janedoe"),
            ("https://linkedin.com/posts/abc_activity-1", "https://linkedin.com/posts/abc_activity-1"),
            ("https://de.linkedin.com/in/max", "https://de.linkedin.com/in/max"),
        ],
    )
    def test_canonical_form(self, raw: str, expected: str):
        assert normalize_linkedin_url(raw) == expected

    @pytest.mark.parametrize(
        "raw",
        [
            "",
            "   ",
            "https://example.com/in/janedoe",
            "https://notlinkedin.com/in/janedoe",
            "https://www.linkedin.com/",
            "ftp://www.linkedin.com/in/janedoe",
            "https://[linkedin.com/in/x",
            "https://[::1/in/x",
        ],
    )
    def test_rejects_non_linkedin_urls(self, raw: str):
        assert normalize_linkedin_url(raw) is None


class TestTags:
    def test_normalize_tags(self):
        assert normalize_tags([" a ", "b", "a", "", "  "]) == ["a", "b"]
        assert normalize_tags(None) == []

    def test_entity_normalizes_tags(self):
        profile = LinkedInProfile(
            user_id=uuid4(),
            linkedin_url="https://www.linkedin.com/in/x",
            tags=["x", " x "],
        )

        assert profile.tags == ["x"]


class TestJobTransitions:
    def test_allowed(self):
        assert can_transition(JobStatus.PENDING, JobStatus.RUNNING)
        assert can_transition(JobStatus.RUNNING, JobStatus.COMPLETED)
        assert can_transition(JobStatus.RUNNING, JobStatus.CANCELLED)

    def test_disallowed(self):
        assert not can_transition(JobStatus.COMPLETED, JobStatus.RUNNING)
        assert not can_transition(JobStatus.RUNNING, JobStatus.PENDING)
        assert not can_transition(JobStatus.PENDING, JobStatus.COMPLETED)

    @pytest.mark.parametrize(
        "status,finished",
        [
            (JobStatus.PENDING, False),
            (JobStatus.RUNNING, False),
            (JobStatus.COMPLETED, True),
            (JobStatus.FAILED, True),
            (JobStatus.CANCELLED, True),
        ],
    )
    def test_is_finished(self, status: JobStatus, finished: bool):
        job = ScrapingJob(
            user_id=uuid4(),
            job_type=JobType.MIXED,
            input_url="https://www.linkedin.com/posts/x",
            status=status,
        )

        assert job.is_finished is finished

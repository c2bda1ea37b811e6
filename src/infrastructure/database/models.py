"""SQLAlchemy ORM models."""

from datetime import datetime
from typing import Any, Optional
from uuid import UUID, uuid4

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import ARRAY, JSONB
from sqlalchemy.dialects.postgresql import UUID as PG_UUID
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass


class ProfileModel(Base):
    """User profile, one row per external identity."""

    __tablename__ = "profiles"
    __table_args__ = (
        UniqueConstraint("external_subject_id", name="uq_profiles_external_subject_id"),
        UniqueConstraint("username", name="uq_profiles_username"),
        UniqueConstraint("email", name="uq_profiles_email"),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    external_subject_id: Mapped[str] = mapped_column(Text, nullable=False)
    username: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    display_name: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    # Relationships
    apify_keys: Mapped[list["ApifyKeyModel"]] = relationship(
        "ApifyKeyModel",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    linkedin_profiles: Mapped[list["LinkedInProfileModel"]] = relationship(
        "LinkedInProfileModel",
        back_populates="user",
        cascade="all, delete-orphan",
    )
    scraping_jobs: Mapped[list["ScrapingJobModel"]] = relationship(
        "ScrapingJobModel",
        back_populates="user",
        cascade="all, delete-orphan",
    )


class ApifyKeyModel(Base):
    """Apify API key stored by a user."""

    __tablename__ = "apify_keys"
    __table_args__ = (
        UniqueConstraint("user_id", "key_name", name="uq_apify_keys_user_key_name"),
        Index("ix_apify_keys_user_id", "user_id"),
        Index("ix_apify_keys_is_active", "is_active"),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    key_name: Mapped[str] = mapped_column(String(100), nullable=False)
    api_key: Mapped[str] = mapped_column(Text, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
    )

    user: Mapped["ProfileModel"] = relationship("ProfileModel", back_populates="apify_keys")


class LinkedInProfileModel(Base):
    """Scraped LinkedIn profile data keyed by canonical URL."""

    __tablename__ = "linkedin_profiles"
    __table_args__ = (
        UniqueConstraint("linkedin_url", name="uq_linkedin_profiles_linkedin_url"),
        Index("ix_linkedin_profiles_user_id", "user_id"),
        Index("ix_linkedin_profiles_last_updated", "last_updated"),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    linkedin_url: Mapped[str] = mapped_column(Text, nullable=False)
    profile_data: Mapped[dict[str, Any]] = mapped_column(JSONB, default=dict, nullable=False)
    tags: Mapped[list[str]] = mapped_column(
        ARRAY(Text).with_variant(JSON(), "sqlite"),
        default=list,
        nullable=False,
    )
    last_updated: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    user: Mapped["ProfileModel"] = relationship(
        "ProfileModel", back_populates="linkedin_profiles"
    )


class ScrapingJobModel(Base):
    """One Apify scraping run and its outcome."""

    __tablename__ = "scraping_jobs"
    __table_args__ = (
        CheckConstraint(
            "job_type IN ('post_comments', 'profile_details', 'mixed')",
            name="ck_scraping_jobs_job_type",
        ),
        CheckConstraint(
            "status IN ('pending', 'running', 'completed', 'failed', 'cancelled')",
            name="ck_scraping_jobs_status",
        ),
        Index("ix_scraping_jobs_user_created", "user_id", "created_at"),
        Index("ix_scraping_jobs_status", "status"),
    )

    id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )
    user_id: Mapped[UUID] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    apify_key_id: Mapped[Optional[UUID]] = mapped_column(
        PG_UUID(as_uuid=True),
        ForeignKey("apify_keys.id", ondelete="SET NULL"),
    )
    job_type: Mapped[str] = mapped_column(String(20), nullable=False)
    input_url: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    results_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    error_message: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime)

    user: Mapped["ProfileModel"] = relationship("ProfileModel", back_populates="scraping_jobs")

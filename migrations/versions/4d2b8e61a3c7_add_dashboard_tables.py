"""add_dashboard_tables

Revision ID: 4d2b8e61a3c7
Revises: 1a7c3e5f9b20
Create Date: 2025-06-29 09:06:43.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = "4d2b8e61a3c7"
down_revision: str | Sequence[str] | None = "1a7c3e5f9b20"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create apify_keys, linkedin_profiles and scraping_jobs tables."""
    # Create apify_keys table
    op.create_table(
        "apify_keys",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("key_name", sa.String(length=100), nullable=False),
        sa.Column("api_key", sa.Text(), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("user_id", "key_name", name="uq_apify_keys_user_key_name"),
    )
    op.create_index("ix_apify_keys_user_id", "apify_keys", ["user_id"], unique=False)
    op.create_index("ix_apify_keys_is_active", "apify_keys", ["is_active"], unique=False)

    # Create linkedin_profiles table
    op.create_table(
        "linkedin_profiles",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("linkedin_url", sa.Text(), nullable=False),
        sa.Column(
            "profile_data",
            postgresql.JSONB(astext_type=sa.Text()),
            server_default="{}",
            nullable=False,
        ),
        sa.Column(
            "tags",
            postgresql.ARRAY(sa.Text()),
            server_default="{}",
            nullable=False,
        ),
        sa.Column("last_updated", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("linkedin_url", name="uq_linkedin_profiles_linkedin_url"),
    )
    op.create_index("ix_linkedin_profiles_user_id", "linkedin_profiles", ["user_id"], unique=False)
    op.create_index(
        "ix_linkedin_profiles_last_updated", "linkedin_profiles", ["last_updated"], unique=False
    )
    op.create_index(
        "ix_linkedin_profiles_tags",
        "linkedin_profiles",
        ["tags"],
        unique=False,
        postgresql_using="gin",
    )
    op.create_index(
        "ix_linkedin_profiles_profile_data",
        "linkedin_profiles",
        ["profile_data"],
        unique=False,
        postgresql_using="gin",
    )

    # Create scraping_jobs table
    op.create_table(
        "scraping_jobs",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("user_id", sa.UUID(), nullable=False),
        sa.Column("apify_key_id", sa.UUID(), nullable=True),
        sa.Column("job_type", sa.String(length=20), nullable=False),
        sa.Column("input_url", sa.Text(), nullable=False),
        sa.Column("status", sa.String(length=20), server_default="pending", nullable=False),
        sa.Column("results_count", sa.Integer(), server_default="0", nullable=False),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("completed_at", sa.DateTime(), nullable=True),
        sa.CheckConstraint(
            "job_type IN ('post_comments', 'profile_details', 'mixed')",
            name="ck_scraping_jobs_job_type",
        ),
        sa.CheckConstraint(
            "status IN ('pending', 'running', 'completed', 'failed', 'cancelled')",
            name="ck_scraping_jobs_status",
        ),
        sa.ForeignKeyConstraint(["user_id"], ["profiles.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["apify_key_id"], ["apify_keys.id"], ondelete="SET NULL"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        "ix_scraping_jobs_user_created",
        "scraping_jobs",
        ["user_id", "created_at"],
        unique=False,
    )
    op.create_index("ix_scraping_jobs_status", "scraping_jobs", ["status"], unique=False)

    op.execute("""
        CREATE TRIGGER update_apify_keys_updated_at
            BEFORE UPDATE ON apify_keys
            FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();
    """)


def downgrade() -> None:
    """Drop dashboard tables."""
    op.execute("DROP TRIGGER IF EXISTS update_apify_keys_updated_at ON apify_keys;")
    op.drop_index("ix_scraping_jobs_status", table_name="scraping_jobs")
    op.drop_index("ix_scraping_jobs_user_created", table_name="scraping_jobs")
    op.drop_table("scraping_jobs")
    op.drop_index("ix_linkedin_profiles_profile_data", table_name="linkedin_profiles")
    op.drop_index("ix_linkedin_profiles_tags", table_name="linkedin_profiles")
    op.drop_index("ix_linkedin_profiles_last_updated", table_name="linkedin_profiles")
    op.drop_index("ix_linkedin_profiles_user_id", table_name="linkedin_profiles")
    op.drop_table("linkedin_profiles")
    op.drop_index("ix_apify_keys_is_active", table_name="apify_keys")
    op.drop_index("ix_apify_keys_user_id", table_name="apify_keys")
    op.drop_table("apify_keys")

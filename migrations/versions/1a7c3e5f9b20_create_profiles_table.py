"""create_profiles_table

Revision ID: 1a7c3e5f9b20
Revises:
Create Date: 2025-06-29 07:53:02.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "1a7c3e5f9b20"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Create the profiles table keyed by the identity provider's subject id.

    The three unique constraints are named so the application can tell which
    field collided when an insert fails.
    """
    op.create_table(
        "profiles",
        sa.Column("id", sa.UUID(), nullable=False),
        sa.Column("external_subject_id", sa.Text(), nullable=False),
        sa.Column("username", sa.Text(), nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("display_name", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("external_subject_id", name="uq_profiles_external_subject_id"),
        sa.UniqueConstraint("username", name="uq_profiles_username"),
        sa.UniqueConstraint("email", name="uq_profiles_email"),
        sa.CheckConstraint(
            "length(btrim(external_subject_id)) > 0",
            name="ck_profiles_external_subject_id_not_blank",
        ),
        sa.CheckConstraint("updated_at >= created_at", name="ck_profiles_updated_after_created"),
    )

    # --- Shared updated_at trigger function ---
    op.execute("""
        CREATE OR REPLACE FUNCTION update_updated_at_column()
        RETURNS TRIGGER
        LANGUAGE plpgsql
        AS $$
        BEGIN
            NEW.updated_at = GREATEST(now(), NEW.created_at);
            RETURN NEW;
        END;
        $$;
    """)
    op.execute("""
        CREATE TRIGGER update_profiles_updated_at
            BEFORE UPDATE ON profiles
            FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();
    """)


def downgrade() -> None:
    """Drop the profiles table and the updated_at trigger function."""
    op.execute("DROP TRIGGER IF EXISTS update_profiles_updated_at ON profiles;")
    op.drop_table("profiles")
    op.execute("DROP FUNCTION IF EXISTS update_updated_at_column();")

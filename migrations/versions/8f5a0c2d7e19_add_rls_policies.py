"""add_rls_policies

Revision ID: 8f5a0c2d7e19
Revises: 4d2b8e61a3c7
Create Date: 2025-06-29 09:10:32.000000

"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "8f5a0c2d7e19"
down_revision: str | Sequence[str] | None = "4d2b8e61a3c7"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

TABLES = ["profiles", "apify_keys", "linkedin_profiles", "scraping_jobs"]


def upgrade() -> None:
    """Add Row Level Security policies keyed by the token's ``sub`` claim.

    Note: The FastAPI backend connects with a service account that bypasses
    RLS. These policies apply to direct Supabase client connections.
    The subject id is read from the JWT rather than ``auth.uid()`` so the
    policies hold for third-party identity providers whose ids are not UUIDs.
    """
    # --- Helper: profile id of the caller ---
    op.execute("""
        CREATE OR REPLACE FUNCTION current_profile_id()
        RETURNS UUID
        LANGUAGE sql
        SECURITY DEFINER
        STABLE
        SET search_path = public
        AS $$
            SELECT id FROM profiles
            WHERE external_subject_id = (SELECT auth.jwt() ->> 'sub');
        $$;
    """)

    for table in TABLES:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY;")

    # --- Profiles policies ---
    op.execute("""
        CREATE POLICY profiles_select ON profiles
            FOR SELECT USING (
                external_subject_id = (SELECT auth.jwt() ->> 'sub')
            );
    """)
    op.execute("""
        CREATE POLICY profiles_insert ON profiles
            FOR INSERT WITH CHECK (
                external_subject_id = (SELECT auth.jwt() ->> 'sub')
            );
    """)
    op.execute("""
        CREATE POLICY profiles_update ON profiles
            FOR UPDATE USING (
                external_subject_id = (SELECT auth.jwt() ->> 'sub')
            );
    """)

    # --- Apify keys: owner only ---
    op.execute("""
        CREATE POLICY apify_keys_owner ON apify_keys
            FOR ALL USING (user_id = (SELECT current_profile_id()))
            WITH CHECK (user_id = (SELECT current_profile_id()));
    """)

    # --- LinkedIn profiles: shared read, owner write ---
    op.execute("""
        CREATE POLICY linkedin_profiles_select ON linkedin_profiles
            FOR SELECT USING ((SELECT auth.jwt() ->> 'sub') IS NOT NULL);
    """)
    op.execute("""
        CREATE POLICY linkedin_profiles_insert ON linkedin_profiles
            FOR INSERT WITH CHECK (user_id = (SELECT current_profile_id()));
    """)
    op.execute("""
        CREATE POLICY linkedin_profiles_update ON linkedin_profiles
            FOR UPDATE USING (user_id = (SELECT current_profile_id()));
    """)
    op.execute("""
        CREATE POLICY linkedin_profiles_delete ON linkedin_profiles
            FOR DELETE USING (user_id = (SELECT current_profile_id()));
    """)

    # --- Scraping jobs: owner only ---
    op.execute("""
        CREATE POLICY scraping_jobs_owner ON scraping_jobs
            FOR ALL USING (user_id = (SELECT current_profile_id()))
            WITH CHECK (user_id = (SELECT current_profile_id()));
    """)


def downgrade() -> None:
    """Remove RLS policies and disable RLS."""
    policies = {
        "profiles": ["profiles_select", "profiles_insert", "profiles_update"],
        "apify_keys": ["apify_keys_owner"],
        "linkedin_profiles": [
            "linkedin_profiles_select",
            "linkedin_profiles_insert",
            "linkedin_profiles_update",
            "linkedin_profiles_delete",
        ],
        "scraping_jobs": ["scraping_jobs_owner"],
    }
    for table, names in policies.items():
        for name in names:
            op.execute(f"DROP POLICY IF EXISTS {name} ON {table};")
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY;")

    op.execute("DROP FUNCTION IF EXISTS current_profile_id();")

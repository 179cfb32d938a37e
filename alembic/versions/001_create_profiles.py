"""001: create profiles table and the updated_at trigger function

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_update_timestamp()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TABLE profiles (
            id              VARCHAR(64)     PRIMARY KEY,
            username        VARCHAR(64),
            tokens          BIGINT          NOT NULL DEFAULT 5,
            points          BIGINT          NOT NULL DEFAULT 0,
            version         BIGINT          NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_profiles_tokens_gte_0 CHECK (tokens >= 0),
            CONSTRAINT ck_profiles_points_gte_0 CHECK (points >= 0)
        );
    """)
    op.execute("CREATE INDEX idx_profiles_created ON profiles (created_at, id);")
    op.execute("""
        CREATE TRIGGER trg_profiles_updated_at
            BEFORE UPDATE ON profiles
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.execute("COMMENT ON TABLE profiles IS 'Player roster and balances — id is the auth provider subject';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS profiles CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_update_timestamp();")

"""002: create questions table

Revision ID: 002
Revises: 001
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE questions (
            id              VARCHAR(64)     PRIMARY KEY,
            category        VARCHAR(64)     NOT NULL,
            subject         VARCHAR(255),
            prompt          VARCHAR(500)    NOT NULL,
            option_a        VARCHAR(255)    NOT NULL,
            option_b        VARCHAR(255)    NOT NULL,
            lock_time       TIMESTAMPTZ     NOT NULL,
            winning_option  CHAR(1),
            scheduled_date  DATE            NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_questions_winning_option CHECK (
                winning_option IS NULL OR winning_option IN ('A', 'B')
            )
        );
    """)
    op.execute("CREATE INDEX idx_questions_date_lock ON questions (scheduled_date, lock_time);")
    op.execute("""
        CREATE TRIGGER trg_questions_updated_at
            BEFORE UPDATE ON questions
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    # A decided outcome is final: settled tickets were paid against it.
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_questions_outcome_immutable()
        RETURNS TRIGGER AS $$
        BEGIN
            IF OLD.winning_option IS NOT NULL
               AND NEW.winning_option IS DISTINCT FROM OLD.winning_option THEN
                RAISE EXCEPTION 'winning_option of question % is already set', OLD.id;
            END IF;
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    op.execute("""
        CREATE TRIGGER trg_questions_outcome_immutable
            BEFORE UPDATE ON questions
            FOR EACH ROW EXECUTE FUNCTION fn_questions_outcome_immutable();
    """)
    op.execute("COMMENT ON TABLE questions IS 'Daily A/B props — outcome is write-once';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS questions CASCADE;")
    op.execute("DROP FUNCTION IF EXISTS fn_questions_outcome_immutable();")

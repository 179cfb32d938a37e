"""003: create tickets and ticket_legs tables

Revision ID: 003
Revises: 002
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE tickets (
            id              VARCHAR(64)     PRIMARY KEY,
            user_id         VARCHAR(64)     NOT NULL REFERENCES profiles (id),
            wager           INT             NOT NULL,
            status          VARCHAR(20)     NOT NULL DEFAULT 'OPEN',
            version         BIGINT          NOT NULL DEFAULT 0,
            points_awarded  BIGINT          NOT NULL DEFAULT 0,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            settled_at      TIMESTAMPTZ,
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_tickets_wager_gte_1 CHECK (wager >= 1),
            CONSTRAINT ck_tickets_points_gte_0 CHECK (points_awarded >= 0),
            CONSTRAINT ck_tickets_status CHECK (
                status IN ('OPEN', 'SETTLED_WON', 'SETTLED_LOST', 'VOIDED')
            ),
            CONSTRAINT ck_tickets_settled_at CHECK (
                (status = 'OPEN') = (settled_at IS NULL)
            )
        );
    """)
    op.execute("CREATE INDEX idx_tickets_user_time ON tickets (user_id, created_at DESC);")
    op.execute("CREATE INDEX idx_tickets_status_time ON tickets (status, created_at);")
    op.execute("""
        CREATE TRIGGER trg_tickets_updated_at
            BEFORE UPDATE ON tickets
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)

    op.execute("""
        CREATE TABLE ticket_legs (
            ticket_id       VARCHAR(64)     NOT NULL REFERENCES tickets (id) ON DELETE CASCADE,
            position        SMALLINT        NOT NULL,
            question_id     VARCHAR(64)     NOT NULL REFERENCES questions (id),
            selected_option CHAR(1)         NOT NULL,
            PRIMARY KEY (ticket_id, question_id),
            CONSTRAINT uq_ticket_legs_position UNIQUE (ticket_id, position),
            CONSTRAINT ck_ticket_legs_option CHECK (selected_option IN ('A', 'B'))
        );
    """)
    op.execute("CREATE INDEX idx_ticket_legs_question ON ticket_legs (question_id);")
    op.execute("COMMENT ON TABLE tickets IS 'Parlay tickets — status flips out of OPEN exactly once';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS ticket_legs CASCADE;")
    op.execute("DROP TABLE IF EXISTS tickets CASCADE;")

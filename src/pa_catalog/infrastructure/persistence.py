"""QuestionRepository — concrete implementation of QuestionRepositoryProtocol.

All queries use raw text() SQL (no ORM) and are read-only.
"""

from collections.abc import Iterable
from datetime import date

from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pa_catalog.domain.models import Question

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_COLUMNS = """
    id, category, subject, prompt, option_a, option_b,
    lock_time, winning_option, scheduled_date
"""

_GET_QUESTION_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM questions
    WHERE id = :question_id
""")

_GET_QUESTIONS_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM questions
    WHERE id IN :question_ids
""").bindparams(bindparam("question_ids", expanding=True))

_LIST_FOR_DATE_SQL = text(f"""
    SELECT {_COLUMNS}
    FROM questions
    WHERE scheduled_date = :scheduled_date
    ORDER BY lock_time ASC, id ASC
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_question(row: object) -> Question:
    return Question(
        id=row.id,  # type: ignore[attr-defined]
        category=row.category,  # type: ignore[attr-defined]
        subject=row.subject,  # type: ignore[attr-defined]
        prompt=row.prompt,  # type: ignore[attr-defined]
        option_a=row.option_a,  # type: ignore[attr-defined]
        option_b=row.option_b,  # type: ignore[attr-defined]
        lock_time=row.lock_time,  # type: ignore[attr-defined]
        winning_option=row.winning_option,  # type: ignore[attr-defined]
        scheduled_date=row.scheduled_date,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class QuestionRepository:
    """Concrete repository — read-only SQL queries."""

    async def get_question(
        self, db: AsyncSession, question_id: str
    ) -> Question | None:
        result = await db.execute(_GET_QUESTION_SQL, {"question_id": question_id})
        row = result.fetchone()
        return _row_to_question(row) if row else None

    async def get_questions(
        self, db: AsyncSession, question_ids: Iterable[str]
    ) -> dict[str, Question]:
        ids = list(dict.fromkeys(question_ids))
        if not ids:
            return {}
        result = await db.execute(_GET_QUESTIONS_SQL, {"question_ids": ids})
        return {q.id: q for q in (_row_to_question(row) for row in result.fetchall())}

    async def list_questions_for_date(
        self, db: AsyncSession, scheduled_date: date
    ) -> list[Question]:
        result = await db.execute(_LIST_FOR_DATE_SQL, {"scheduled_date": scheduled_date})
        return [_row_to_question(row) for row in result.fetchall()]

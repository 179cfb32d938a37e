"""Repository Protocol for the question catalog.

The catalog is read-only to this service: questions and their outcomes are
written by the content pipeline.
"""

from collections.abc import Iterable
from datetime import date
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pa_catalog.domain.models import Question


class QuestionRepositoryProtocol(Protocol):
    async def get_question(
        self, db: AsyncSession, question_id: str
    ) -> Question | None: ...

    async def get_questions(
        self, db: AsyncSession, question_ids: Iterable[str]
    ) -> dict[str, Question]: ...

    async def list_questions_for_date(
        self, db: AsyncSession, scheduled_date: date
    ) -> list[Question]: ...

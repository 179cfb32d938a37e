"""CatalogApplicationService — read-only views of the daily question board."""

from collections.abc import Callable
from datetime import date, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pa_catalog.application.schemas import BoardResponse, QuestionItem
from src.pa_catalog.domain.repository import QuestionRepositoryProtocol
from src.pa_catalog.infrastructure.persistence import QuestionRepository
from src.pa_common.datetime_utils import local_today, utc_now
from src.pa_common.errors import QuestionNotFoundError


class CatalogApplicationService:
    def __init__(
        self,
        repo: QuestionRepositoryProtocol | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._repo: QuestionRepositoryProtocol = repo or QuestionRepository()
        self._clock = clock

    async def list_board(
        self, db: AsyncSession, scheduled_date: date | None = None
    ) -> BoardResponse:
        now = self._clock()
        day = scheduled_date or local_today(now, settings.LOCAL_TIMEZONE)
        questions = await self._repo.list_questions_for_date(db, day)
        return BoardResponse(
            scheduled_date=day,
            items=[QuestionItem.from_domain(q, now) for q in questions],
        )

    async def get_question(self, db: AsyncSession, question_id: str) -> QuestionItem:
        question = await self._repo.get_question(db, question_id)
        if question is None:
            raise QuestionNotFoundError(question_id)
        return QuestionItem.from_domain(question, self._clock())

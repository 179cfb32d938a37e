"""Pydantic schemas for pa_catalog API."""

from datetime import date, datetime

from pydantic import BaseModel

from src.pa_catalog.domain.models import Question


class QuestionItem(BaseModel):
    id: str
    category: str | None
    subject: str | None
    prompt: str
    option_a: str
    option_b: str
    lock_time: datetime
    winning_option: str | None
    scheduled_date: date
    is_locked: bool
    is_live: bool

    @classmethod
    def from_domain(cls, q: Question, now: datetime) -> "QuestionItem":
        return cls(
            id=q.id,
            category=q.category,
            subject=q.subject,
            prompt=q.prompt,
            option_a=q.option_a,
            option_b=q.option_b,
            lock_time=q.lock_time,
            winning_option=q.winning_option,
            scheduled_date=q.scheduled_date,
            is_locked=q.is_locked(now),
            is_live=q.is_live(now),
        )


class BoardResponse(BaseModel):
    scheduled_date: date
    items: list[QuestionItem]

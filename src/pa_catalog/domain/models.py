"""Domain models for pa_catalog — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import date, datetime


@dataclass
class Question:
    id: str
    category: str | None
    subject: str | None           # who/what the prop is about, display only
    prompt: str
    option_a: str
    option_b: str
    lock_time: datetime
    winning_option: str | None    # "A" | "B" | None while undecided
    scheduled_date: date

    @property
    def is_decided(self) -> bool:
        return self.winning_option is not None

    def is_locked(self, now: datetime) -> bool:
        return now >= self.lock_time

    def is_live(self, now: datetime) -> bool:
        """Locked for selection but not yet decided."""
        return self.is_locked(now) and not self.is_decided

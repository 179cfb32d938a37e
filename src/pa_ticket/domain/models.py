"""Domain models for pa_ticket — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

from src.pa_common.enums import TERMINAL_STATUSES, TicketStatus


@dataclass(frozen=True)
class Leg:
    question_id: str
    selected_option: str    # "A" | "B"


@dataclass
class Ticket:
    id: str
    user_id: str
    legs: list[Leg]               # submission order, immutable after creation
    wager: int
    status: str                   # TicketStatus value; READY is never stored
    version: int                  # bumped by every status transition
    created_at: datetime
    settled_at: datetime | None = None
    points_awarded: int = 0

    @property
    def leg_count(self) -> int:
        return len(self.legs)

    @property
    def question_ids(self) -> list[str]:
        return [leg.question_id for leg in self.legs]

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATUSES


@dataclass(frozen=True)
class SettlementOutcome:
    """Read-time fold over a ticket's questions. Never persisted."""

    all_settled: bool
    all_correct: bool


@dataclass(frozen=True)
class ClaimDecision:
    ticket_id: str
    target_status: TicketStatus
    won: bool
    points: int
    tokens_returned: int

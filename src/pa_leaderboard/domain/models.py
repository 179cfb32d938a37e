"""Domain models for pa_leaderboard — pure dataclasses."""

from dataclasses import dataclass, field
from datetime import datetime

from src.pa_ticket.domain.models import Leg


@dataclass(frozen=True)
class Standing:
    position: int          # 1-based
    user_id: str
    username: str
    total_points: int


@dataclass(frozen=True)
class SettledTicketSummary:
    ticket_id: str
    won: bool
    leg_count: int
    wager: int
    payout: int            # 0 for lost tickets
    settled_at: datetime | None
    legs: list[Leg] = field(default_factory=list)


@dataclass
class PlayerStats:
    user_id: str
    username: str
    wins: int = 0
    losses: int = 0
    total_tickets: int = 0
    win_rate: int = 0      # integer percent
    total_points_won: int = 0
    tickets: list[SettledTicketSummary] = field(default_factory=list)
    has_more: bool = False  # more tickets match than were returned

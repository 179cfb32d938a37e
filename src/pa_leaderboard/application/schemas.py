"""Pydantic schemas for pa_leaderboard API."""

from collections.abc import Mapping
from datetime import datetime

from pydantic import BaseModel

from src.pa_catalog.domain.models import Question
from src.pa_common.enums import LeaderboardWindow
from src.pa_leaderboard.domain.models import PlayerStats, SettledTicketSummary, Standing
from src.pa_ticket.application.schemas import LegItem


class StandingItem(BaseModel):
    position: int
    user_id: str
    username: str
    total_points: int

    @classmethod
    def from_domain(cls, s: Standing) -> "StandingItem":
        return cls(
            position=s.position,
            user_id=s.user_id,
            username=s.username,
            total_points=s.total_points,
        )


class LeaderboardResponse(BaseModel):
    window: LeaderboardWindow
    window_start: datetime
    generated_at: datetime
    items: list[StandingItem]


class SettledTicketItem(BaseModel):
    ticket_id: str
    won: bool
    leg_count: int
    wager: int
    payout: int
    settled_at: datetime | None
    legs: list[LegItem]

    @classmethod
    def from_domain(
        cls, s: SettledTicketSummary, questions: Mapping[str, Question]
    ) -> "SettledTicketItem":
        return cls(
            ticket_id=s.ticket_id,
            won=s.won,
            leg_count=s.leg_count,
            wager=s.wager,
            payout=s.payout,
            settled_at=s.settled_at,
            legs=[LegItem.from_domain(leg, questions.get(leg.question_id)) for leg in s.legs],
        )


class PlayerStatsResponse(BaseModel):
    user_id: str
    username: str
    wins: int
    losses: int
    total_tickets: int
    win_rate: int
    total_points_won: int
    tickets: list[SettledTicketItem]
    has_more: bool

    @classmethod
    def from_domain(
        cls, stats: PlayerStats, questions: Mapping[str, Question]
    ) -> "PlayerStatsResponse":
        return cls(
            user_id=stats.user_id,
            username=stats.username,
            wins=stats.wins,
            losses=stats.losses,
            total_tickets=stats.total_tickets,
            win_rate=stats.win_rate,
            total_points_won=stats.total_points_won,
            tickets=[SettledTicketItem.from_domain(s, questions) for s in stats.tickets],
            has_more=stats.has_more,
        )

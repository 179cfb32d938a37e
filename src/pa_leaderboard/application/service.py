"""LeaderboardApplicationService — read-only standings and player stats.

Every call reloads the roster and the claimed tickets; nothing is cached.
"""

from collections.abc import Callable
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pa_account.domain.models import ANONYMOUS_USERNAME
from src.pa_account.domain.repository import AccountRepositoryProtocol
from src.pa_account.infrastructure.persistence import AccountRepository
from src.pa_catalog.domain.repository import QuestionRepositoryProtocol
from src.pa_catalog.infrastructure.persistence import QuestionRepository
from src.pa_common.datetime_utils import utc_now
from src.pa_common.enums import LeaderboardWindow, TicketStatus
from src.pa_common.errors import UserNotFoundError
from src.pa_leaderboard.application.schemas import (
    LeaderboardResponse,
    PlayerStatsResponse,
    StandingItem,
)
from src.pa_leaderboard.domain.aggregator import (
    RECENT_TICKETS,
    compute_player_stats,
    rank_standings,
)
from src.pa_leaderboard.domain.models import Standing
from src.pa_leaderboard.domain.windows import window_start
from src.pa_ticket.domain.repository import TicketRepositoryProtocol
from src.pa_ticket.infrastructure.persistence import TicketRepository

_SETTLED_STATUSES = [TicketStatus.SETTLED_WON.value, TicketStatus.SETTLED_LOST.value]


class LeaderboardApplicationService:
    def __init__(
        self,
        ticket_repo: TicketRepositoryProtocol | None = None,
        account_repo: AccountRepositoryProtocol | None = None,
        question_repo: QuestionRepositoryProtocol | None = None,
        clock: Callable[[], datetime] = utc_now,
        tz_name: str | None = None,
    ) -> None:
        self._tickets: TicketRepositoryProtocol = ticket_repo or TicketRepository()
        self._accounts: AccountRepositoryProtocol = account_repo or AccountRepository()
        self._questions: QuestionRepositoryProtocol = question_repo or QuestionRepository()
        self._clock = clock
        self._tz_name = tz_name or settings.LOCAL_TIMEZONE

    async def rank(
        self, db: AsyncSession, since: datetime, until: datetime | None = None
    ) -> list[Standing]:
        """Standings over claimed tickets created in [since, until]."""
        until = until or self._clock()
        roster = await self._accounts.list_users(db)
        tickets = await self._tickets.list_claimed_tickets(db, since, until)
        return list(rank_standings(roster, tickets))

    async def leaderboard(
        self, db: AsyncSession, window: LeaderboardWindow = LeaderboardWindow.DAILY
    ) -> LeaderboardResponse:
        now = self._clock()
        start = window_start(window, now, self._tz_name)
        standings = await self.rank(db, start, now)
        return LeaderboardResponse(
            window=window,
            window_start=start,
            generated_at=now,
            items=[StandingItem.from_domain(s) for s in standings],
        )

    async def player_stats(
        self,
        db: AsyncSession,
        user_id: str,
        won: bool | None = None,
        show_all: bool = False,
    ) -> PlayerStatsResponse:
        """Settled record of one player.

        ``won`` restricts the ticket list to wins or losses; the counters are
        unaffected. Only the newest RECENT_TICKETS are listed unless
        ``show_all`` is set.
        """
        profile = await self._accounts.get_profile(db, user_id)
        if profile is None:
            raise UserNotFoundError(user_id)
        tickets = await self._tickets.list_tickets_by_user(db, user_id, _SETTLED_STATUSES)
        stats = compute_player_stats(
            user_id,
            profile.username or ANONYMOUS_USERNAME,
            tickets,
            won=won,
            limit=None if show_all else RECENT_TICKETS,
        )
        questions = await self._questions.get_questions(
            db, [leg.question_id for t in stats.tickets for leg in t.legs]
        )
        return PlayerStatsResponse.from_domain(stats, questions)

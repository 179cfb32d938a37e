"""TicketApplicationService — the ticket ledger and claim coordinator.

This is the only writer of ticket status and of profile balances. Every
mutating operation is one database transaction:

    try:
        ... reads, checks, conditional UPDATEs ...
        await db.commit()
    except Exception:
        await db.rollback()
        raise

so a failure at any step leaves tokens, points and ticket status untouched.

Exactly-once settlement rests on TicketRepository.transition_status: claim and
cancel both move the ticket out of OPEN with a version-checked conditional
UPDATE, and only the caller whose UPDATE matched a row goes on to touch the
balance. Losers re-read the ticket and report AlreadyClaimed / AlreadyVoided.
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime
from typing import NoReturn

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pa_account.domain.repository import AccountRepositoryProtocol
from src.pa_account.infrastructure.persistence import AccountRepository
from src.pa_catalog.domain.repository import QuestionRepositoryProtocol
from src.pa_catalog.infrastructure.persistence import QuestionRepository
from src.pa_common.datetime_utils import utc_now
from src.pa_common.enums import (
    TERMINAL_STATUSES,
    LedgerEntryType,
    TicketState,
    TicketStatus,
    TicketView,
)
from src.pa_common.errors import (
    AlreadyClaimedError,
    AlreadyVoidedError,
    AppError,
    EmptySelectionError,
    InsufficientTokensError,
    NotOwnerError,
    TicketNotFoundError,
    UserNotFoundError,
    WagerOutOfRangeError,
)
from src.pa_common.id_generator import generate_ticket_id
from src.pa_ticket.application.schemas import (
    CancelResponse,
    ClaimAllResponse,
    ClaimFailure,
    ClaimResponse,
    CreateTicketResponse,
    QuoteResponse,
    TicketItem,
    TicketListResponse,
)
from src.pa_ticket.domain.models import Leg, Ticket
from src.pa_ticket.domain.payout import calc_payout
from src.pa_ticket.domain.repository import TicketRepositoryProtocol
from src.pa_ticket.domain.state_machine import (
    decide_claim,
    derive_state,
    ensure_cancellable,
    ensure_selectable,
    validate_selection,
)
from src.pa_ticket.infrastructure.persistence import TicketRepository

logger = logging.getLogger(__name__)

_REF_TYPE = "TICKET"

_VIEW_STATUSES: dict[TicketView, list[str] | None] = {
    TicketView.OPEN: [TicketStatus.OPEN.value],
    TicketView.SETTLED: sorted(TicketStatus(s).value for s in TERMINAL_STATUSES),
    TicketView.ALL: None,
}


class TicketApplicationService:
    def __init__(
        self,
        ticket_repo: TicketRepositoryProtocol | None = None,
        account_repo: AccountRepositoryProtocol | None = None,
        question_repo: QuestionRepositoryProtocol | None = None,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = generate_ticket_id,
        min_wager: int | None = None,
        max_wager: int | None = None,
    ) -> None:
        self._tickets: TicketRepositoryProtocol = ticket_repo or TicketRepository()
        self._accounts: AccountRepositoryProtocol = account_repo or AccountRepository()
        self._questions: QuestionRepositoryProtocol = question_repo or QuestionRepository()
        self._clock = clock
        self._new_id = id_factory
        self._min_wager = settings.MIN_WAGER if min_wager is None else min_wager
        self._max_wager = settings.MAX_WAGER if max_wager is None else max_wager

    # ------------------------------------------------------------------
    # create
    # ------------------------------------------------------------------

    async def create_ticket(
        self,
        db: AsyncSession,
        user_id: str,
        legs: Sequence[Leg],
        wager: int,
    ) -> CreateTicketResponse:
        validate_selection(legs, wager, self._min_wager, self._max_wager)
        try:
            now = self._clock()
            questions = await self._questions.get_questions(
                db, [leg.question_id for leg in legs]
            )
            ensure_selectable(legs, questions, now)

            profile = await self._accounts.get_profile(db, user_id)
            if profile is None:
                raise UserNotFoundError(user_id)
            if profile.tokens < wager:
                raise InsufficientTokensError(wager, profile.tokens)

            ticket = await self._tickets.create_ticket(
                db,
                Ticket(
                    id=self._new_id(),
                    user_id=user_id,
                    legs=list(legs),
                    wager=wager,
                    status=TicketStatus.OPEN,
                    version=0,
                    created_at=now,
                ),
            )
            # adjust_balance re-checks tokens + delta >= 0 in the UPDATE itself.
            profile, _ = await self._accounts.adjust_balance(
                db,
                user_id,
                token_delta=-wager,
                point_delta=0,
                entry_type=LedgerEntryType.TICKET_STAKE.value,
                ref_type=_REF_TYPE,
                ref_id=ticket.id,
                description=f"Stake for {ticket.leg_count}-leg ticket",
            )

            # Commit-time re-check: a question may have locked while we wrote.
            ensure_selectable(legs, questions, self._clock())
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Ticket created: id=%s user=%s legs=%d wager=%d",
            ticket.id, user_id, ticket.leg_count, wager,
        )
        return CreateTicketResponse(
            ticket=TicketItem.from_domain(ticket, TicketState.OPEN, questions),
            tokens_after=profile.tokens,
        )

    # ------------------------------------------------------------------
    # claim / cancel
    # ------------------------------------------------------------------

    async def _get_owned_ticket(
        self, db: AsyncSession, user_id: str, ticket_id: str
    ) -> Ticket:
        ticket = await self._tickets.get_ticket(db, ticket_id)
        if ticket is None:
            raise TicketNotFoundError(ticket_id)
        if ticket.user_id != user_id:
            raise NotOwnerError(ticket_id)
        return ticket

    async def _raise_lost_race(self, db: AsyncSession, ticket_id: str) -> NoReturn:
        current = await self._tickets.get_ticket(db, ticket_id)
        logger.warning(
            "Settlement race lost: ticket=%s now=%s",
            ticket_id, current.status if current else None,
        )
        if current is not None and current.status == TicketStatus.VOIDED:
            raise AlreadyVoidedError(ticket_id)
        raise AlreadyClaimedError(ticket_id)

    async def claim(self, db: AsyncSession, user_id: str, ticket_id: str) -> ClaimResponse:
        """Settle a READY ticket: tokens back always, points only on a win."""
        try:
            ticket = await self._get_owned_ticket(db, user_id, ticket_id)
            questions = await self._questions.get_questions(db, ticket.question_ids)
            decision = decide_claim(ticket, questions)

            settled = await self._tickets.transition_status(
                db,
                ticket.id,
                expected_version=ticket.version,
                new_status=decision.target_status.value,
                points_awarded=decision.points,
                settled_at=self._clock(),
            )
            if settled is None:
                await self._raise_lost_race(db, ticket.id)

            profile, _ = await self._accounts.adjust_balance(
                db,
                user_id,
                token_delta=decision.tokens_returned,
                point_delta=decision.points,
                entry_type=LedgerEntryType.TICKET_SETTLEMENT.value,
                ref_type=_REF_TYPE,
                ref_id=ticket.id,
                description="Ticket won" if decision.won else "Ticket lost",
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Ticket claimed: id=%s user=%s won=%s points=%d",
            ticket.id, user_id, decision.won, decision.points,
        )
        return ClaimResponse(
            ticket_id=ticket.id,
            won=decision.won,
            payout_points=decision.points,
            tokens_returned=decision.tokens_returned,
            tokens_after=profile.tokens,
            points_after=profile.points,
        )

    async def claim_all(self, db: AsyncSession, user_id: str) -> ClaimAllResponse:
        """Claim every READY ticket of the user, one transaction per ticket.

        Not atomic as a batch: a failing ticket is reported and the rest still
        get claimed.
        """
        open_tickets = await self._tickets.list_tickets_by_user(
            db, user_id, [TicketStatus.OPEN.value]
        )
        questions = await self._questions.get_questions(
            db, [qid for t in open_tickets for qid in t.question_ids]
        )
        ready = sorted(
            (t for t in open_tickets if derive_state(t, questions) == TicketState.READY),
            key=lambda t: (t.created_at, t.id),
        )

        claims: list[ClaimResponse] = []
        failures: list[ClaimFailure] = []
        for ticket in ready:
            try:
                claims.append(await self.claim(db, user_id, ticket.id))
            except AppError as exc:
                logger.warning("claim_all: ticket=%s failed: %s", ticket.id, exc.message)
                failures.append(
                    ClaimFailure(ticket_id=ticket.id, code=exc.code, message=exc.message)
                )

        return ClaimAllResponse(
            succeeded=len(claims),
            failed=len(failures),
            claims=claims,
            failures=failures,
        )

    async def cancel(self, db: AsyncSession, user_id: str, ticket_id: str) -> CancelResponse:
        """Void an OPEN or READY ticket and return its stake."""
        try:
            ticket = await self._get_owned_ticket(db, user_id, ticket_id)
            ensure_cancellable(ticket)

            voided = await self._tickets.transition_status(
                db,
                ticket.id,
                expected_version=ticket.version,
                new_status=TicketStatus.VOIDED.value,
                points_awarded=0,
                settled_at=self._clock(),
            )
            if voided is None:
                await self._raise_lost_race(db, ticket.id)

            profile, _ = await self._accounts.adjust_balance(
                db,
                user_id,
                token_delta=ticket.wager,
                point_delta=0,
                entry_type=LedgerEntryType.TICKET_VOID_REFUND.value,
                ref_type=_REF_TYPE,
                ref_id=ticket.id,
                description="Ticket voided",
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("Ticket voided: id=%s user=%s refund=%d", ticket.id, user_id, ticket.wager)
        return CancelResponse(
            ticket_id=ticket.id,
            tokens_returned=ticket.wager,
            tokens_after=profile.tokens,
        )

    # ------------------------------------------------------------------
    # read-only
    # ------------------------------------------------------------------

    async def list_tickets(
        self, db: AsyncSession, user_id: str, view: TicketView = TicketView.OPEN
    ) -> TicketListResponse:
        tickets = await self._tickets.list_tickets_by_user(db, user_id, _VIEW_STATUSES[view])
        questions = await self._questions.get_questions(
            db, [qid for t in tickets for qid in t.question_ids]
        )
        items = [TicketItem.from_domain(t, derive_state(t, questions), questions) for t in tickets]
        return TicketListResponse(
            items=items,
            ready_to_claim=sum(1 for item in items if item.state == TicketState.READY),
        )

    def quote(self, leg_count: int, wager: int) -> QuoteResponse:
        if leg_count < 1:
            raise EmptySelectionError()
        if not (self._min_wager <= wager <= self._max_wager):
            raise WagerOutOfRangeError(wager, self._min_wager, self._max_wager)
        return QuoteResponse(
            leg_count=leg_count,
            wager=wager,
            potential_payout=calc_payout(leg_count, wager),
        )

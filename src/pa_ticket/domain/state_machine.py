"""Ticket state machine.

Persisted status is one of OPEN / SETTLED_WON / SETTLED_LOST / VOIDED. The
state a caller sees is derived on every read:

    OPEN ──(last question decided)──▶ READY ──claim──▶ SETTLED_WON | SETTLED_LOST
      │                                 │
      └───────────cancel────────────────┴──────────▶ VOIDED

OPEN → READY is never written anywhere; it is recomputed from the catalog.
Terminal states are only reached through the ledger service, which guards the
write with a conditional UPDATE (see TicketRepository.transition_status).
"""

from collections.abc import Mapping, Sequence
from datetime import datetime

from src.pa_catalog.domain.models import Question
from src.pa_common.enums import Option, TicketState, TicketStatus
from src.pa_common.errors import (
    AlreadyClaimedError,
    AlreadyVoidedError,
    DuplicateLegError,
    EmptySelectionError,
    InvalidSelectionError,
    InvalidStateError,
    MarketClosedError,
    QuestionNotFoundError,
    WagerOutOfRangeError,
)
from src.pa_ticket.domain.models import ClaimDecision, Leg, SettlementOutcome, Ticket
from src.pa_ticket.domain.payout import calc_payout

_VALID_OPTIONS = frozenset(o.value for o in Option)


def validate_selection(
    legs: Sequence[Leg], wager: int, min_wager: int, max_wager: int
) -> None:
    """Shape checks that need no storage access."""
    if not legs:
        raise EmptySelectionError()
    seen: set[str] = set()
    for leg in legs:
        if leg.selected_option not in _VALID_OPTIONS:
            raise InvalidSelectionError(leg.selected_option)
        if leg.question_id in seen:
            raise DuplicateLegError(leg.question_id)
        seen.add(leg.question_id)
    if not (min_wager <= wager <= max_wager):
        raise WagerOutOfRangeError(wager, min_wager, max_wager)


def ensure_selectable(
    legs: Sequence[Leg], questions: Mapping[str, Question], now: datetime
) -> None:
    """Every referenced question must exist, be unlocked and undecided at `now`."""
    for leg in legs:
        question = questions.get(leg.question_id)
        if question is None:
            raise QuestionNotFoundError(leg.question_id)
        if question.is_locked(now) or question.is_decided:
            raise MarketClosedError(leg.question_id)


def evaluate_outcome(
    legs: Sequence[Leg], questions: Mapping[str, Question]
) -> SettlementOutcome:
    for leg in legs:
        if leg.question_id not in questions:
            raise QuestionNotFoundError(leg.question_id)
    all_settled = all(questions[leg.question_id].is_decided for leg in legs)
    all_correct = all_settled and all(
        questions[leg.question_id].winning_option == leg.selected_option for leg in legs
    )
    return SettlementOutcome(all_settled=all_settled, all_correct=all_correct)


def derive_state(ticket: Ticket, questions: Mapping[str, Question]) -> TicketState:
    if ticket.status != TicketStatus.OPEN:
        return TicketState(ticket.status)
    outcome = evaluate_outcome(ticket.legs, questions)
    return TicketState.READY if outcome.all_settled else TicketState.OPEN


def _raise_if_terminal(ticket: Ticket) -> None:
    if ticket.status == TicketStatus.VOIDED:
        raise AlreadyVoidedError(ticket.id)
    if ticket.is_terminal:
        raise AlreadyClaimedError(ticket.id)


def decide_claim(ticket: Ticket, questions: Mapping[str, Question]) -> ClaimDecision:
    """Work out the READY → SETTLED_* transition and its balance effect.

    Tokens come back whether the ticket won or lost; points only on a win.
    """
    _raise_if_terminal(ticket)
    outcome = evaluate_outcome(ticket.legs, questions)
    if not outcome.all_settled:
        raise InvalidStateError(ticket.id, TicketState.OPEN.value, TicketState.READY.value)
    won = outcome.all_correct
    return ClaimDecision(
        ticket_id=ticket.id,
        target_status=TicketStatus.SETTLED_WON if won else TicketStatus.SETTLED_LOST,
        won=won,
        points=calc_payout(ticket.leg_count, ticket.wager) if won else 0,
        tokens_returned=ticket.wager,
    )


def ensure_cancellable(ticket: Ticket) -> None:
    """OPEN and READY tickets may be voided; terminal ones may not."""
    _raise_if_terminal(ticket)

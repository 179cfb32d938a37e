"""Pydantic schemas for pa_ticket API.

Request models are deliberately loose (no min_length on legs, no bounds on
wager): the ledger service owns those rules and reports them as typed
AppErrors instead of generic 422 validation payloads.
"""

from collections.abc import Mapping
from datetime import datetime

from pydantic import BaseModel, Field

from src.pa_catalog.domain.models import Question
from src.pa_common.enums import TicketState, TicketStatus
from src.pa_ticket.domain.models import Leg, Ticket
from src.pa_ticket.domain.payout import calc_payout

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class LegRequest(BaseModel):
    question_id: str
    selected_option: str = Field(..., description="'A' or 'B'")

    def to_domain(self) -> Leg:
        return Leg(question_id=self.question_id, selected_option=self.selected_option)


class CreateTicketRequest(BaseModel):
    legs: list[LegRequest]
    wager: int = 1


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class LegItem(BaseModel):
    question_id: str
    selected_option: str
    prompt: str | None
    subject: str | None
    selected_label: str | None
    winning_option: str | None
    is_correct: bool | None   # None while the question is undecided

    @classmethod
    def from_domain(cls, leg: Leg, question: Question | None) -> "LegItem":
        if question is None:
            return cls(
                question_id=leg.question_id,
                selected_option=leg.selected_option,
                prompt=None,
                subject=None,
                selected_label=None,
                winning_option=None,
                is_correct=None,
            )
        label = question.option_a if leg.selected_option == "A" else question.option_b
        return cls(
            question_id=leg.question_id,
            selected_option=leg.selected_option,
            prompt=question.prompt,
            subject=question.subject,
            selected_label=label,
            winning_option=question.winning_option,
            is_correct=(
                question.winning_option == leg.selected_option
                if question.is_decided
                else None
            ),
        )


class TicketItem(BaseModel):
    id: str
    status: str
    state: TicketState
    leg_count: int
    wager: int
    potential_payout: int
    points_awarded: int
    created_at: datetime
    settled_at: datetime | None
    legs: list[LegItem]

    @classmethod
    def from_domain(
        cls, ticket: Ticket, state: TicketState, questions: Mapping[str, Question]
    ) -> "TicketItem":
        return cls(
            id=ticket.id,
            status=TicketStatus(ticket.status).value,
            state=state,
            leg_count=ticket.leg_count,
            wager=ticket.wager,
            potential_payout=calc_payout(ticket.leg_count, ticket.wager),
            points_awarded=ticket.points_awarded,
            created_at=ticket.created_at,
            settled_at=ticket.settled_at,
            legs=[LegItem.from_domain(leg, questions.get(leg.question_id)) for leg in ticket.legs],
        )


class CreateTicketResponse(BaseModel):
    ticket: TicketItem
    tokens_after: int


class TicketListResponse(BaseModel):
    items: list[TicketItem]
    ready_to_claim: int


class ClaimResponse(BaseModel):
    ticket_id: str
    won: bool
    payout_points: int
    tokens_returned: int
    tokens_after: int
    points_after: int


class ClaimFailure(BaseModel):
    ticket_id: str
    code: int
    message: str


class ClaimAllResponse(BaseModel):
    succeeded: int
    failed: int
    claims: list[ClaimResponse]
    failures: list[ClaimFailure]


class CancelResponse(BaseModel):
    ticket_id: str
    tokens_returned: int
    tokens_after: int


class QuoteResponse(BaseModel):
    leg_count: int
    wager: int
    potential_payout: int

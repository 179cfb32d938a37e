"""pa_ticket REST endpoints.

POST /tickets                     — commit selections + wager (rate limited)
GET  /tickets?view=               — ticket history with derived state
GET  /tickets/quote               — potential payout preview
POST /tickets/claim-all           — claim every READY ticket (rate limited)
POST /tickets/{ticket_id}/claim   — claim one ticket (rate limited)
POST /tickets/{ticket_id}/cancel  — void one ticket (rate limited)
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pa_common.database import get_db_session
from src.pa_common.enums import TicketView
from src.pa_common.response import ApiResponse, respond
from src.pa_gateway.auth.dependencies import get_current_user_id
from src.pa_gateway.middleware.rate_limit import ticket_write_limiter
from src.pa_ticket.application.schemas import CreateTicketRequest
from src.pa_ticket.application.service import TicketApplicationService

router = APIRouter(prefix="/tickets", tags=["tickets"])

_service = TicketApplicationService()


@router.post("", status_code=201, dependencies=[Depends(ticket_write_limiter)])
async def create_ticket(
    body: CreateTicketRequest,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.create_ticket(
        db, user_id, [leg.to_domain() for leg in body.legs], body.wager
    )
    return respond(request, result)


@router.get("")
async def list_tickets(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    view: TicketView = Query(TicketView.OPEN, description="open | settled | all"),
) -> ApiResponse:
    result = await _service.list_tickets(db, user_id, view)
    return respond(request, result)


@router.get("/quote")
async def quote(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    legs: int = Query(..., description="Number of legs"),
    wager: int = Query(1, description="Wager multiplier"),
) -> ApiResponse:
    return respond(request, _service.quote(legs, wager))


@router.post("/claim-all", dependencies=[Depends(ticket_write_limiter)])
async def claim_all(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.claim_all(db, user_id)
    return respond(request, result)


@router.post("/{ticket_id}/claim", dependencies=[Depends(ticket_write_limiter)])
async def claim_ticket(
    ticket_id: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.claim(db, user_id, ticket_id)
    return respond(request, result)


@router.post("/{ticket_id}/cancel", dependencies=[Depends(ticket_write_limiter)])
async def cancel_ticket(
    ticket_id: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.cancel(db, user_id, ticket_id)
    return respond(request, result)

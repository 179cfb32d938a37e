"""pa_catalog REST endpoints.

GET /questions                  — the day's board ordered by lock time
GET /questions/{question_id}    — single question
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pa_catalog.application.service import CatalogApplicationService
from src.pa_common.database import get_db_session
from src.pa_common.response import ApiResponse, respond
from src.pa_gateway.auth.dependencies import get_current_user_id

router = APIRouter(prefix="/questions", tags=["questions"])

_service = CatalogApplicationService()


@router.get("")
async def list_board(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    scheduled_date: date | None = Query(
        None, alias="date", description="YYYY-MM-DD. Default: today."
    ),
) -> ApiResponse:
    result = await _service.list_board(db, scheduled_date)
    return respond(request, result)


@router.get("/{question_id}")
async def get_question(
    question_id: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_question(db, question_id)
    return respond(request, result)

"""pa_account REST API — balance and ledger, both require a bearer token."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pa_account.application.service import AccountApplicationService
from src.pa_common.database import get_db_session
from src.pa_common.response import ApiResponse, respond
from src.pa_gateway.auth.dependencies import get_current_user_id

router = APIRouter(prefix="/account", tags=["account"])

_service = AccountApplicationService()


@router.get("/balance")
async def get_balance(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_balance(db, user_id)
    return respond(request, data)


@router.get("/ledger")
async def list_ledger(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
) -> ApiResponse:
    data = await _service.list_ledger(db, user_id, cursor, limit)
    return respond(request, data)

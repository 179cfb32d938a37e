"""pa_leaderboard REST endpoints.

GET /leaderboard?window=daily|weekly|monthly       — ranked standings
GET /leaderboard/players/{user_id}?won=&show_all=  — one player's settled record
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pa_common.database import get_db_session
from src.pa_common.enums import LeaderboardWindow
from src.pa_common.response import ApiResponse, respond
from src.pa_gateway.auth.dependencies import get_current_user_id
from src.pa_leaderboard.application.service import LeaderboardApplicationService

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])

_service = LeaderboardApplicationService()


@router.get("")
async def get_leaderboard(
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    window: LeaderboardWindow = Query(LeaderboardWindow.DAILY),
) -> ApiResponse:
    result = await _service.leaderboard(db, window)
    return respond(request, result)


@router.get("/players/{player_id}")
async def get_player_stats(
    player_id: str,
    request: Request,
    user_id: Annotated[str, Depends(get_current_user_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    won: bool | None = Query(None),
    show_all: bool = Query(False),
) -> ApiResponse:
    result = await _service.player_stats(db, player_id, won=won, show_all=show_all)
    return respond(request, result)

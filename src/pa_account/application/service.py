"""AccountApplicationService — read-only balance and ledger views.

Balance mutations are owned by the ticket ledger service; nothing here writes.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.pa_account.application.schemas import (
    BalanceResponse,
    LedgerEntryItem,
    LedgerResponse,
    cursor_decode,
    cursor_encode,
)
from src.pa_account.domain.repository import AccountRepositoryProtocol
from src.pa_account.infrastructure.persistence import AccountRepository
from src.pa_common.errors import UserNotFoundError


class AccountApplicationService:
    def __init__(self, repo: AccountRepositoryProtocol | None = None) -> None:
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()

    async def get_balance(self, db: AsyncSession, user_id: str) -> BalanceResponse:
        profile = await self._repo.get_profile(db, user_id)
        if profile is None:
            raise UserNotFoundError(user_id)
        return BalanceResponse(
            user_id=profile.id,
            username=profile.username,
            tokens=profile.tokens,
            points=profile.points,
        )

    async def list_ledger(
        self,
        db: AsyncSession,
        user_id: str,
        cursor: str | None,
        limit: int,
    ) -> LedgerResponse:
        cursor_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without a COUNT(*) query
        entries = await self._repo.list_ledger_entries(db, user_id, cursor_id, limit + 1)
        has_more = len(entries) > limit
        page = entries[:limit]

        items = [
            LedgerEntryItem(
                id=e.id,
                entry_type=e.entry_type,
                token_amount=e.token_amount,
                point_amount=e.point_amount,
                tokens_after=e.tokens_after,
                points_after=e.points_after,
                reference_type=e.reference_type,
                reference_id=e.reference_id,
                description=e.description,
                created_at=e.created_at.isoformat() if e.created_at else "",
            )
            for e in page
        ]

        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return LedgerResponse(items=items, next_cursor=next_cursor, has_more=has_more)

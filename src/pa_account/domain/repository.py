"""Repository Protocol — dependency inversion for testability.

Unit tests inject a fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pa_account.domain.models import LedgerEntry, Profile, RosterEntry


class AccountRepositoryProtocol(Protocol):
    async def get_profile(
        self, db: AsyncSession, user_id: str
    ) -> Profile | None: ...

    async def adjust_balance(
        self,
        db: AsyncSession,
        user_id: str,
        token_delta: int,
        point_delta: int,
        entry_type: str,
        ref_type: str,
        ref_id: str,
        description: str,
    ) -> tuple[Profile, LedgerEntry]:
        """All-or-nothing balance change plus its ledger entry.

        Raises InsufficientTokensError if tokens would go negative and
        UserNotFoundError if the profile does not exist.
        """
        ...

    async def list_users(self, db: AsyncSession) -> list[RosterEntry]: ...

    async def list_ledger_entries(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
    ) -> list[LedgerEntry]: ...

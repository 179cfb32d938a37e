"""AccountRepository — concrete implementation of AccountRepositoryProtocol.

Balance changes are a single conditional PostgreSQL UPDATE ... RETURNING.
A result of 0 rows means the profile is missing or tokens would go negative.

Transaction ownership: the CALLER (application service) commits or rolls back.
"""

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pa_account.domain.models import (
    ANONYMOUS_USERNAME,
    LedgerEntry,
    Profile,
    RosterEntry,
)
from src.pa_account.infrastructure.db_models import ProfileORM
from src.pa_common.errors import InsufficientTokensError, InternalError, UserNotFoundError


# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_GET_PROFILE_SQL = text("""
    SELECT id, username, tokens, points, version, created_at, updated_at
    FROM profiles
    WHERE id = :user_id
""")

_ADJUST_BALANCE_SQL = text("""
    UPDATE profiles
    SET tokens = tokens + :token_delta,
        points = points + :point_delta,
        version = version + 1,
        updated_at = NOW()
    WHERE id = :user_id AND tokens + :token_delta >= 0
    RETURNING id, username, tokens, points, version, created_at, updated_at
""")

_INSERT_LEDGER_SQL = text("""
    INSERT INTO ledger_entries
        (user_id, entry_type, token_amount, point_amount,
         tokens_after, points_after,
         reference_type, reference_id, description)
    VALUES
        (:user_id, :entry_type, :token_amount, :point_amount,
         :tokens_after, :points_after,
         :reference_type, :reference_id, :description)
    RETURNING id, user_id, entry_type, token_amount, point_amount,
              tokens_after, points_after,
              reference_type, reference_id, description, created_at
""")

_LIST_LEDGER_SQL = text("""
    SELECT id, user_id, entry_type, token_amount, point_amount,
           tokens_after, points_after,
           reference_type, reference_id, description, created_at
    FROM ledger_entries
    WHERE user_id = :user_id
      AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < CAST(:cursor_id AS BIGINT))
    ORDER BY id DESC
    LIMIT :limit
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_profile(row: object) -> Profile:
    return Profile(
        id=row.id,  # type: ignore[attr-defined]
        username=row.username,  # type: ignore[attr-defined]
        tokens=row.tokens,  # type: ignore[attr-defined]
        points=row.points,  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_ledger(row: object) -> LedgerEntry:
    return LedgerEntry(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        entry_type=row.entry_type,  # type: ignore[attr-defined]
        token_amount=row.token_amount,  # type: ignore[attr-defined]
        point_amount=row.point_amount,  # type: ignore[attr-defined]
        tokens_after=row.tokens_after,  # type: ignore[attr-defined]
        points_after=row.points_after,  # type: ignore[attr-defined]
        reference_type=row.reference_type,  # type: ignore[attr-defined]
        reference_id=row.reference_id,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class AccountRepository:
    """Concrete repository — all mutations atomic at the SQL level."""

    async def get_profile(self, db: AsyncSession, user_id: str) -> Profile | None:
        result = await db.execute(_GET_PROFILE_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_profile(row) if row else None

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
        result = await db.execute(
            _ADJUST_BALANCE_SQL,
            {"user_id": user_id, "token_delta": token_delta, "point_delta": point_delta},
        )
        row = result.fetchone()
        if row is None:
            current = await self.get_profile(db, user_id)
            if current is None:
                raise UserNotFoundError(user_id)
            raise InsufficientTokensError(-token_delta, current.tokens)
        profile = _row_to_profile(row)

        ledger_result = await db.execute(
            _INSERT_LEDGER_SQL,
            {
                "user_id": user_id,
                "entry_type": entry_type,
                "token_amount": token_delta,
                "point_amount": point_delta,
                "tokens_after": profile.tokens,
                "points_after": profile.points,
                "reference_type": ref_type,
                "reference_id": ref_id,
                "description": description,
            },
        )
        ledger_row = ledger_result.fetchone()
        if ledger_row is None:
            raise InternalError("Ledger insert returned no rows")
        return profile, _row_to_ledger(ledger_row)

    async def list_users(self, db: AsyncSession) -> list[RosterEntry]:
        result = await db.execute(
            select(ProfileORM.id, ProfileORM.username).order_by(
                ProfileORM.created_at, ProfileORM.id
            )
        )
        return [
            RosterEntry(user_id=row.id, username=row.username or ANONYMOUS_USERNAME)
            for row in result.fetchall()
        ]

    async def list_ledger_entries(
        self,
        db: AsyncSession,
        user_id: str,
        cursor_id: int | None,
        limit: int,
    ) -> list[LedgerEntry]:
        result = await db.execute(
            _LIST_LEDGER_SQL,
            {"user_id": user_id, "cursor_id": cursor_id, "limit": limit},
        )
        return [_row_to_ledger(row) for row in result.fetchall()]

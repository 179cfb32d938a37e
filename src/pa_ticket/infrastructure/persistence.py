"""TicketRepository — concrete implementation of TicketRepositoryProtocol.

Tickets live in `tickets`, their legs in `ticket_legs` (ordered by position).
Status changes go through one conditional UPDATE guarded by status AND version;
under READ COMMITTED a concurrent claim/cancel blocks on the row lock and then
matches zero rows, which is how exactly-once settlement is enforced.

Transaction ownership: the CALLER (application service) commits or rolls back.
"""

from collections import defaultdict
from collections.abc import Sequence
from datetime import datetime
from enum import Enum

from sqlalchemy import bindparam, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pa_common.enums import TERMINAL_STATUSES, TicketStatus
from src.pa_common.errors import InternalError
from src.pa_ticket.domain.models import Leg, Ticket

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_TICKET_COLUMNS = """
    id, user_id, wager, status, version, points_awarded, created_at, settled_at
"""

_INSERT_TICKET_SQL = text(f"""
    INSERT INTO tickets (id, user_id, wager, status, version, points_awarded, created_at)
    VALUES (:id, :user_id, :wager, :status, :version, 0, :created_at)
    RETURNING {_TICKET_COLUMNS}
""")

_INSERT_LEG_SQL = text("""
    INSERT INTO ticket_legs (ticket_id, position, question_id, selected_option)
    VALUES (:ticket_id, :position, :question_id, :selected_option)
""")

_GET_TICKET_SQL = text(f"""
    SELECT {_TICKET_COLUMNS}
    FROM tickets
    WHERE id = :ticket_id
""")

_GET_LEGS_SQL = text("""
    SELECT ticket_id, question_id, selected_option
    FROM ticket_legs
    WHERE ticket_id IN :ticket_ids
    ORDER BY ticket_id, position
""").bindparams(bindparam("ticket_ids", expanding=True))

_LIST_BY_USER_SQL = text(f"""
    SELECT {_TICKET_COLUMNS}
    FROM tickets
    WHERE user_id = :user_id
    ORDER BY created_at DESC, id DESC
""")

_LIST_BY_USER_STATUS_SQL = text(f"""
    SELECT {_TICKET_COLUMNS}
    FROM tickets
    WHERE user_id = :user_id AND status IN :statuses
    ORDER BY created_at DESC, id DESC
""").bindparams(bindparam("statuses", expanding=True))

_TRANSITION_SQL = text(f"""
    UPDATE tickets
    SET status = :new_status,
        version = version + 1,
        points_awarded = :points_awarded,
        settled_at = :settled_at,
        updated_at = NOW()
    WHERE id = :ticket_id
      AND status = :open_status
      AND version = :expected_version
    RETURNING {_TICKET_COLUMNS}
""")

_LIST_CLAIMED_SQL = text(f"""
    SELECT {_TICKET_COLUMNS}
    FROM tickets
    WHERE status IN :statuses
      AND created_at >= :since
      AND created_at <= :until
    ORDER BY created_at ASC, id ASC
""").bindparams(bindparam("statuses", expanding=True))

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _status_value(status: str) -> str:
    return status.value if isinstance(status, Enum) else status


def _row_to_ticket(row: object, legs: list[Leg]) -> Ticket:
    return Ticket(
        id=row.id,  # type: ignore[attr-defined]
        user_id=row.user_id,  # type: ignore[attr-defined]
        legs=legs,
        wager=row.wager,  # type: ignore[attr-defined]
        status=row.status,  # type: ignore[attr-defined]
        version=row.version,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        settled_at=row.settled_at,  # type: ignore[attr-defined]
        points_awarded=row.points_awarded,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class TicketRepository:
    async def _load_legs(
        self, db: AsyncSession, ticket_ids: list[str]
    ) -> dict[str, list[Leg]]:
        if not ticket_ids:
            return {}
        result = await db.execute(_GET_LEGS_SQL, {"ticket_ids": ticket_ids})
        legs: dict[str, list[Leg]] = defaultdict(list)
        for row in result.fetchall():
            legs[row.ticket_id].append(
                Leg(question_id=row.question_id, selected_option=row.selected_option)
            )
        return legs

    async def _assemble(self, db: AsyncSession, rows: Sequence[object]) -> list[Ticket]:
        legs = await self._load_legs(db, [row.id for row in rows])  # type: ignore[attr-defined]
        return [_row_to_ticket(row, legs.get(row.id, [])) for row in rows]  # type: ignore[attr-defined]

    async def create_ticket(self, db: AsyncSession, ticket: Ticket) -> Ticket:
        result = await db.execute(
            _INSERT_TICKET_SQL,
            {
                "id": ticket.id,
                "user_id": ticket.user_id,
                "wager": ticket.wager,
                "status": _status_value(ticket.status),
                "version": ticket.version,
                "created_at": ticket.created_at,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Ticket insert returned no rows")
        await db.execute(
            _INSERT_LEG_SQL,
            [
                {
                    "ticket_id": ticket.id,
                    "position": position,
                    "question_id": leg.question_id,
                    "selected_option": leg.selected_option,
                }
                for position, leg in enumerate(ticket.legs)
            ],
        )
        return _row_to_ticket(row, list(ticket.legs))

    async def get_ticket(self, db: AsyncSession, ticket_id: str) -> Ticket | None:
        result = await db.execute(_GET_TICKET_SQL, {"ticket_id": ticket_id})
        row = result.fetchone()
        if row is None:
            return None
        return (await self._assemble(db, [row]))[0]

    async def list_tickets_by_user(
        self,
        db: AsyncSession,
        user_id: str,
        statuses: Sequence[str] | None,
    ) -> list[Ticket]:
        if statuses is None:
            result = await db.execute(_LIST_BY_USER_SQL, {"user_id": user_id})
        elif not statuses:
            return []
        else:
            result = await db.execute(
                _LIST_BY_USER_STATUS_SQL,
                {"user_id": user_id, "statuses": [_status_value(s) for s in statuses]},
            )
        return await self._assemble(db, result.fetchall())

    async def transition_status(
        self,
        db: AsyncSession,
        ticket_id: str,
        expected_version: int,
        new_status: str,
        points_awarded: int,
        settled_at: datetime,
    ) -> Ticket | None:
        result = await db.execute(
            _TRANSITION_SQL,
            {
                "ticket_id": ticket_id,
                "expected_version": expected_version,
                "new_status": _status_value(new_status),
                "open_status": TicketStatus.OPEN.value,
                "points_awarded": points_awarded,
                "settled_at": settled_at,
            },
        )
        row = result.fetchone()
        if row is None:
            return None
        return (await self._assemble(db, [row]))[0]

    async def list_claimed_tickets(
        self, db: AsyncSession, since: datetime, until: datetime
    ) -> list[Ticket]:
        result = await db.execute(
            _LIST_CLAIMED_SQL,
            {
                "statuses": sorted(_status_value(s) for s in TERMINAL_STATUSES),
                "since": since,
                "until": until,
            },
        )
        return await self._assemble(db, result.fetchall())

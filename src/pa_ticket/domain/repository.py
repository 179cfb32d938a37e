"""TicketRepository Protocol — interface contract for the ticket store."""

from collections.abc import Sequence
from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pa_ticket.domain.models import Ticket


class TicketRepositoryProtocol(Protocol):
    async def create_ticket(self, db: AsyncSession, ticket: Ticket) -> Ticket: ...

    async def get_ticket(self, db: AsyncSession, ticket_id: str) -> Ticket | None: ...

    async def list_tickets_by_user(
        self,
        db: AsyncSession,
        user_id: str,
        statuses: Sequence[str] | None,
    ) -> list[Ticket]:
        """Newest first. statuses=None means every status."""
        ...

    async def transition_status(
        self,
        db: AsyncSession,
        ticket_id: str,
        expected_version: int,
        new_status: str,
        points_awarded: int,
        settled_at: datetime,
    ) -> Ticket | None:
        """Move an OPEN ticket at `expected_version` to `new_status`.

        Returns None when the ticket is no longer OPEN at that version, i.e.
        another claim or cancel got there first.
        """
        ...

    async def list_claimed_tickets(
        self, db: AsyncSession, since: datetime, until: datetime
    ) -> list[Ticket]:
        """Terminal tickets created within [since, until], oldest first."""
        ...

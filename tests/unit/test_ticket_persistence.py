# tests/unit/test_ticket_persistence.py
"""Unit tests for TicketRepository using MagicMock AsyncSession."""
from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.pa_common.enums import TicketStatus
from src.pa_ticket.domain.models import Leg, Ticket
from src.pa_ticket.infrastructure.persistence import TicketRepository

NOW = datetime(2026, 3, 14, 12, 0, tzinfo=UTC)


def _make_ticket_row(**kwargs):
    row = MagicMock()
    row.id = kwargs.get("id", "T1")
    row.user_id = kwargs.get("user_id", "u1")
    row.wager = kwargs.get("wager", 2)
    row.status = kwargs.get("status", "OPEN")
    row.version = kwargs.get("version", 0)
    row.points_awarded = kwargs.get("points_awarded", 0)
    row.created_at = kwargs.get("created_at", NOW)
    row.settled_at = kwargs.get("settled_at")
    return row


def _make_leg_row(ticket_id: str, question_id: str, option: str):
    row = MagicMock()
    row.ticket_id = ticket_id
    row.question_id = question_id
    row.selected_option = option
    return row


def _result(one=None, rows=None):
    result = MagicMock()
    result.fetchone.return_value = one
    result.fetchall.return_value = rows or []
    return result


@pytest.fixture
def db():
    return MagicMock()


class TestCreateTicket:
    async def test_inserts_ticket_then_legs_in_order(self, db):
        db.execute = AsyncMock(side_effect=[_result(one=_make_ticket_row()), _result()])
        ticket = Ticket(
            id="T1",
            user_id="u1",
            legs=[Leg("q2", "B"), Leg("q1", "A")],
            wager=2,
            status=TicketStatus.OPEN,
            version=0,
            created_at=NOW,
        )

        created = await TicketRepository().create_ticket(db, ticket)

        assert created.id == "T1"
        assert created.legs == [Leg("q2", "B"), Leg("q1", "A")]
        ticket_params = db.execute.call_args_list[0].args[1]
        assert ticket_params["status"] == "OPEN"
        leg_params = db.execute.call_args_list[1].args[1]
        assert [(p["position"], p["question_id"]) for p in leg_params] == [(0, "q2"), (1, "q1")]


class TestGetTicket:
    async def test_assembles_legs(self, db):
        db.execute = AsyncMock(side_effect=[
            _result(one=_make_ticket_row(id="T7")),
            _result(rows=[_make_leg_row("T7", "q1", "A"), _make_leg_row("T7", "q3", "B")]),
        ])

        ticket = await TicketRepository().get_ticket(db, "T7")

        assert ticket is not None
        assert ticket.question_ids == ["q1", "q3"]
        assert ticket.wager == 2

    async def test_returns_none_when_missing(self, db):
        db.execute = AsyncMock(return_value=_result(one=None))
        assert await TicketRepository().get_ticket(db, "nope") is None
        assert db.execute.await_count == 1


class TestListTicketsByUser:
    async def test_empty_status_filter_short_circuits(self, db):
        db.execute = AsyncMock()
        assert await TicketRepository().list_tickets_by_user(db, "u1", []) == []
        db.execute.assert_not_awaited()

    async def test_status_filter_passes_plain_values(self, db):
        db.execute = AsyncMock(side_effect=[
            _result(rows=[_make_ticket_row(id="T2"), _make_ticket_row(id="T1")]),
            _result(rows=[_make_leg_row("T1", "q1", "A"), _make_leg_row("T2", "q2", "B")]),
        ])

        tickets = await TicketRepository().list_tickets_by_user(
            db, "u1", [TicketStatus.OPEN]
        )

        assert [t.id for t in tickets] == ["T2", "T1"]
        assert tickets[0].legs == [Leg("q2", "B")]
        params = db.execute.call_args_list[0].args[1]
        assert params["statuses"] == ["OPEN"]

    async def test_no_filter(self, db):
        db.execute = AsyncMock(return_value=_result(rows=[]))
        assert await TicketRepository().list_tickets_by_user(db, "u1", None) == []
        params = db.execute.call_args_list[0].args[1]
        assert "statuses" not in params


class TestTransitionStatus:
    async def test_returns_updated_ticket(self, db):
        row = _make_ticket_row(status="SETTLED_WON", version=1, points_awarded=400)
        db.execute = AsyncMock(side_effect=[
            _result(one=row),
            _result(rows=[_make_leg_row("T1", "q1", "A")]),
        ])

        ticket = await TicketRepository().transition_status(
            db, "T1", expected_version=0, new_status=TicketStatus.SETTLED_WON,
            points_awarded=400, settled_at=NOW,
        )

        assert ticket is not None
        assert ticket.status == "SETTLED_WON"
        params = db.execute.call_args_list[0].args[1]
        assert params["new_status"] == "SETTLED_WON"
        assert params["open_status"] == "OPEN"
        assert params["expected_version"] == 0

    async def test_zero_rows_means_lost_race(self, db):
        db.execute = AsyncMock(return_value=_result(one=None))
        ticket = await TicketRepository().transition_status(
            db, "T1", expected_version=0, new_status="VOIDED",
            points_awarded=0, settled_at=NOW,
        )
        assert ticket is None


class TestListClaimedTickets:
    async def test_filters_terminal_statuses(self, db):
        db.execute = AsyncMock(return_value=_result(rows=[]))
        await TicketRepository().list_claimed_tickets(db, NOW, NOW)
        params = db.execute.call_args_list[0].args[1]
        assert params["statuses"] == ["SETTLED_LOST", "SETTLED_WON", "VOIDED"]
        assert params["since"] == NOW

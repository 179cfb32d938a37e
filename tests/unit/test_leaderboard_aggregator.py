"""Leaderboard folds — pure functions over roster and tickets."""

from datetime import timedelta

from src.pa_account.domain.models import RosterEntry
from src.pa_leaderboard.domain.aggregator import (
    compute_player_stats,
    rank_standings,
    ticket_points,
)
from src.pa_ticket.domain.models import Leg, Ticket
from tests.fakes import T0

ROSTER = [RosterEntry("alice", "alice"), RosterEntry("bob", "bob"), RosterEntry("carol", "carol")]


def _ticket(tid: str, user: str, status: str, legs: int = 1, wager: int = 1, age_min: int = 0) -> Ticket:
    return Ticket(
        id=tid,
        user_id=user,
        legs=[Leg(f"q{i}", "A") for i in range(legs)],
        wager=wager,
        status=status,
        version=1,
        created_at=T0 - timedelta(minutes=age_min),
        settled_at=T0,
    )


class TestTicketPoints:
    def test_won_counts_payout(self) -> None:
        assert ticket_points(_ticket("t", "alice", "SETTLED_WON", legs=3, wager=2)) == 800

    def test_lost_and_voided_count_zero(self) -> None:
        assert ticket_points(_ticket("t", "alice", "SETTLED_LOST", legs=3)) == 0
        assert ticket_points(_ticket("t", "alice", "VOIDED", legs=3)) == 0


class TestRankStandings:
    def test_sorted_by_points_desc(self) -> None:
        tickets = [
            _ticket("t1", "bob", "SETTLED_WON", legs=2),
            _ticket("t2", "carol", "SETTLED_WON", legs=3),
            _ticket("t3", "alice", "SETTLED_LOST", legs=5),
        ]
        standings = list(rank_standings(ROSTER, tickets))

        assert [(s.position, s.user_id, s.total_points) for s in standings] == [
            (1, "carol", 400),
            (2, "bob", 200),
            (3, "alice", 0),
        ]

    def test_ties_keep_roster_order(self) -> None:
        tickets = [
            _ticket("t1", "carol", "SETTLED_WON"),
            _ticket("t2", "alice", "SETTLED_WON"),
        ]
        standings = list(rank_standings(ROSTER, tickets))
        assert [s.user_id for s in standings] == ["alice", "carol", "bob"]

    def test_users_without_tickets_appear_with_zero(self) -> None:
        standings = list(rank_standings(ROSTER, []))
        assert [(s.user_id, s.total_points) for s in standings] == [
            ("alice", 0), ("bob", 0), ("carol", 0),
        ]

    def test_unknown_owner_ignored(self) -> None:
        standings = list(rank_standings(ROSTER, [_ticket("t1", "mallory", "SETTLED_WON", legs=4)]))
        assert all(s.total_points == 0 for s in standings)
        assert "mallory" not in {s.user_id for s in standings}

    def test_voided_contributes_nothing(self) -> None:
        standings = list(rank_standings(ROSTER, [_ticket("t1", "bob", "VOIDED", legs=5, wager=5)]))
        assert {s.user_id: s.total_points for s in standings}["bob"] == 0


class TestPlayerStats:
    def test_record(self) -> None:
        tickets = [
            _ticket("t1", "alice", "SETTLED_WON", legs=2, age_min=1),
            _ticket("t2", "alice", "SETTLED_LOST", age_min=2),
            _ticket("t3", "alice", "VOIDED", age_min=3),
            _ticket("t4", "alice", "SETTLED_WON", age_min=4),
        ]
        stats = compute_player_stats("alice", "alice", tickets)

        assert stats.wins == 2
        assert stats.losses == 1
        assert stats.total_tickets == 3
        assert stats.win_rate == 67
        assert stats.total_points_won == 300
        assert [r.ticket_id for r in stats.tickets] == ["t1", "t2", "t4"]
        assert stats.tickets[1].payout == 0
        assert stats.tickets[0].legs == [Leg("q0", "A"), Leg("q1", "A")]

    def test_no_tickets(self) -> None:
        stats = compute_player_stats("bob", "bob", [])
        assert stats.win_rate == 0
        assert stats.tickets == []
        assert stats.has_more is False

    def test_tickets_capped_at_five(self) -> None:
        tickets = [_ticket(f"t{i}", "alice", "SETTLED_LOST", age_min=i) for i in range(8)]
        stats = compute_player_stats("alice", "alice", tickets)
        assert len(stats.tickets) == 5
        assert stats.has_more is True
        assert stats.total_tickets == 8

    def test_no_limit(self) -> None:
        tickets = [_ticket(f"t{i}", "alice", "SETTLED_LOST", age_min=i) for i in range(8)]
        stats = compute_player_stats("alice", "alice", tickets, limit=None)
        assert len(stats.tickets) == 8
        assert stats.has_more is False

    def test_filter_by_outcome(self) -> None:
        tickets = [
            _ticket("w1", "alice", "SETTLED_WON", age_min=1),
            *[_ticket(f"l{i}", "alice", "SETTLED_LOST", age_min=2 + i) for i in range(6)],
            _ticket("v1", "alice", "VOIDED", age_min=9),
        ]
        losses = compute_player_stats("alice", "alice", tickets, won=False)
        wins = compute_player_stats("alice", "alice", tickets, won=True)

        assert [t.ticket_id for t in losses.tickets] == ["l0", "l1", "l2", "l3", "l4"]
        assert losses.has_more is True
        assert [t.ticket_id for t in wins.tickets] == ["w1"]
        assert wins.has_more is False
        assert (wins.wins, wins.losses, wins.total_tickets) == (1, 6, 7)

    def test_win_rate_rounds_half_up(self) -> None:
        tickets = [
            _ticket("t1", "alice", "SETTLED_WON"),
            *[_ticket(f"l{i}", "alice", "SETTLED_LOST") for i in range(7)],
        ]
        # 1/8 = 12.5%
        assert compute_player_stats("alice", "alice", tickets).win_rate == 13

"""Leaderboard aggregation — pure folds over claimed tickets.

Nothing here touches the database; the application service loads the roster
and the tickets and passes them in, so every call recomputes from the store.
"""

from collections.abc import Iterable, Iterator, Sequence

from src.pa_account.domain.models import RosterEntry
from src.pa_common.enums import TicketStatus
from src.pa_leaderboard.domain.models import PlayerStats, SettledTicketSummary, Standing
from src.pa_ticket.domain.models import Ticket
from src.pa_ticket.domain.payout import calc_payout

RECENT_TICKETS = 5


def ticket_points(ticket: Ticket) -> int:
    """Points a claimed ticket contributes: full payout if won, else 0."""
    if ticket.status != TicketStatus.SETTLED_WON:
        return 0
    return calc_payout(ticket.leg_count, ticket.wager)


def rank_standings(
    roster: Sequence[RosterEntry], tickets: Iterable[Ticket]
) -> Iterator[Standing]:
    """Yield standings by total points descending.

    Ties keep roster order (sorted() is stable). Tickets whose owner is not in
    the roster are ignored; roster users without tickets get 0.
    """
    totals = {entry.user_id: 0 for entry in roster}
    for ticket in tickets:
        if ticket.user_id in totals:
            totals[ticket.user_id] += ticket_points(ticket)

    ordered = sorted(roster, key=lambda entry: totals[entry.user_id], reverse=True)
    for position, entry in enumerate(ordered, start=1):
        yield Standing(
            position=position,
            user_id=entry.user_id,
            username=entry.username,
            total_points=totals[entry.user_id],
        )


def _summarize(ticket: Ticket) -> SettledTicketSummary:
    return SettledTicketSummary(
        ticket_id=ticket.id,
        won=ticket.status == TicketStatus.SETTLED_WON,
        leg_count=ticket.leg_count,
        wager=ticket.wager,
        payout=ticket_points(ticket),
        settled_at=ticket.settled_at,
        legs=list(ticket.legs),
    )


def compute_player_stats(
    user_id: str,
    username: str,
    tickets: Sequence[Ticket],
    won: bool | None = None,
    limit: int | None = RECENT_TICKETS,
) -> PlayerStats:
    """Win/loss record over settled tickets (newest first). Voided ones are skipped.

    The counters always cover every settled ticket. ``won`` narrows the
    returned ticket list to wins (True) or losses (False); ``limit=None``
    returns all of them.
    """
    settled = [
        t for t in tickets
        if t.status in (TicketStatus.SETTLED_WON, TicketStatus.SETTLED_LOST)
    ]
    wins = sum(1 for t in settled if t.status == TicketStatus.SETTLED_WON)
    total = len(settled)
    # round half up
    win_rate = (wins * 200 + total) // (2 * total) if total else 0

    listed = settled
    if won is not None:
        listed = [t for t in settled if (t.status == TicketStatus.SETTLED_WON) == won]
    shown = listed if limit is None else listed[:limit]

    return PlayerStats(
        user_id=user_id,
        username=username,
        wins=wins,
        losses=total - wins,
        total_tickets=total,
        win_rate=win_rate,
        total_points_won=sum(ticket_points(t) for t in settled),
        tickets=[_summarize(t) for t in shown],
        has_more=len(shown) < len(listed),
    )

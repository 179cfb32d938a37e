"""Global enums — stored values must match DB CHECK constraints exactly."""

from enum import Enum


class Option(str, Enum):
    A = "A"
    B = "B"


class TicketStatus(str, Enum):
    """Persisted ticket status. READY is never stored, see TicketState."""

    OPEN = "OPEN"
    SETTLED_WON = "SETTLED_WON"
    SETTLED_LOST = "SETTLED_LOST"
    VOIDED = "VOIDED"


class TicketState(str, Enum):
    """Derived at read time from TicketStatus plus the questions' outcomes."""

    OPEN = "OPEN"
    READY = "READY"
    SETTLED_WON = "SETTLED_WON"
    SETTLED_LOST = "SETTLED_LOST"
    VOIDED = "VOIDED"


TERMINAL_STATUSES: frozenset[str] = frozenset(
    {TicketStatus.SETTLED_WON, TicketStatus.SETTLED_LOST, TicketStatus.VOIDED}
)


class TicketView(str, Enum):
    """History filter: unclaimed, terminal, or everything."""

    OPEN = "open"
    SETTLED = "settled"
    ALL = "all"


class LedgerEntryType(str, Enum):
    TICKET_STAKE = "TICKET_STAKE"
    TICKET_SETTLEMENT = "TICKET_SETTLEMENT"
    TICKET_VOID_REFUND = "TICKET_VOID_REFUND"


class LeaderboardWindow(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"

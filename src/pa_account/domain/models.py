"""Domain models for pa_account — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

ANONYMOUS_USERNAME = "Anonymous"   # shown for profiles without a username


@dataclass
class Profile:
    id: str                  # user id, same as the bearer token's `sub`
    username: str | None
    tokens: int              # never negative (DB CHECK)
    points: int
    version: int
    created_at: datetime
    updated_at: datetime


@dataclass
class RosterEntry:
    user_id: str
    username: str


@dataclass
class LedgerEntry:
    id: int                          # BIGSERIAL
    user_id: str
    entry_type: str                  # LedgerEntryType value
    token_amount: int                # positive=credit negative=debit
    point_amount: int
    tokens_after: int
    points_after: int
    reference_type: str | None = None
    reference_id: str | None = None
    description: str | None = None
    created_at: datetime | None = None

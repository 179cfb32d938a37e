"""Leaderboard window boundaries."""

from datetime import datetime, timedelta

from src.pa_common.datetime_utils import local_midnight
from src.pa_common.enums import LeaderboardWindow

_TRAILING_DAYS = {
    LeaderboardWindow.WEEKLY: 7,
    LeaderboardWindow.MONTHLY: 30,
}


def window_start(window: LeaderboardWindow, now: datetime, tz_name: str) -> datetime:
    """Inclusive lower bound of `window` ending at `now`.

    daily is anchored to local midnight in `tz_name`; weekly and monthly are
    trailing spans and ignore the timezone.
    """
    if window == LeaderboardWindow.DAILY:
        return local_midnight(now, tz_name)
    return now - timedelta(days=_TRAILING_DAYS[LeaderboardWindow(window)])

"""Bucket timestamps by local calendar day for the activity histogram."""

from collections import Counter
from datetime import date, datetime, timedelta
from typing import Iterable


def local_day(timestamp: datetime) -> date:
    """Calendar day of a timestamp in the local timezone.

    Naive datetimes are taken to already be local time.
    """
    if timestamp.tzinfo is not None:
        timestamp = timestamp.astimezone()
    return timestamp.date()


def daily_histogram(
    timestamps: Iterable[datetime],
    days: int = 30,
    now: datetime | None = None,
) -> list[tuple[date, int]]:
    """Count timestamps per local day over the trailing ``days`` window.

    Returns exactly ``days`` (day, count) pairs ordered oldest → newest and
    ending today; days without activity are present with a count of 0.
    Timestamps outside the window are ignored.
    """
    if now is None:
        now = datetime.now()
    today = local_day(now)
    counts = Counter(local_day(ts) for ts in timestamps)

    return [
        (day, counts.get(day, 0))
        for day in (today - timedelta(days=offset) for offset in reversed(range(days)))
    ]

"""Timestamp helpers.

Timestamps are stored in the ``YYYY-MM-DDTHH:MM:SS.mmmZ`` form so that files
written here stay interchangeable with data produced by browser tooling.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

Clock = Callable[[], datetime]

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(dt: datetime) -> str:
    """Render an aware or naive-UTC datetime as an ISO-8601 millisecond string."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 string; returns None when it is not a timestamp."""
    if not isinstance(value, str) or not value:
        return None
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        dt = datetime.fromisoformat(text)
    except ValueError:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def next_timestamp(clock: Clock, after: str = "") -> str:
    """Return a timestamp from ``clock`` that sorts strictly after ``after``.

    If the clock has not moved past the previous value (coarse clocks, or two
    writes within the same millisecond) the previous value plus one
    millisecond is used instead.
    """
    now = clock()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    previous = parse_timestamp(after)
    if previous is not None:
        floor = previous.replace(microsecond=(previous.microsecond // 1000) * 1000)
        if now.replace(microsecond=(now.microsecond // 1000) * 1000) <= floor:
            try:
                now = floor + timedelta(milliseconds=1)
            except OverflowError:
                # Already at datetime.max; nothing later is representable.
                now = floor
    return format_timestamp(now)


def epoch_millis(dt: datetime) -> int:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return (dt - _EPOCH) // timedelta(milliseconds=1)

"""Timestamp helpers used when comparing scheduled times."""

from __future__ import annotations

from datetime import datetime, timezone


def timestamp_or_none(value: datetime | None) -> float | None:
    """Return the POSIX timestamp of value, or None when unset.

    Naive datetimes are treated as UTC so that a naive and an aware value for
    the same instant compare equal.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.timestamp()


def same_instant(left: datetime | None, right: datetime | None) -> bool:
    """Return True when both values denote the same instant or are both unset."""
    return timestamp_or_none(left) == timestamp_or_none(right)

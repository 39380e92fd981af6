"""Utilities for working with RFC3339 timestamps and UTC datetimes."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Optional

UTC = timezone.utc

_SECONDS_PER_DAY = 24 * 60 * 60


def parse_rfc3339(s: Optional[str]) -> Optional[datetime]:
    """Parse a RFC3339 string and return a timezone-aware UTC datetime."""

    if not s:
        return None

    value = s.strip()
    if not value:
        return None

    if value.endswith("Z"):
        value = value[:-1] + "+00:00"

    if "." in value:
        head, tail = value.split(".", 1)
        if "+" in tail:
            frac, tz = tail.split("+", 1)
            sign = "+"
        elif "-" in tail:
            frac, tz = tail.split("-", 1)
            sign = "-"
        else:
            frac, tz = tail, "00:00"
            sign = "+"
        frac = (frac + "000000")[:6]
        value = f"{head}.{frac}{sign}{tz}"
    try:
        dt = datetime.fromisoformat(value)
    except ValueError:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    else:
        dt = dt.astimezone(UTC)
    return dt


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def utc_now() -> datetime:
    return datetime.now(UTC)


def whole_days_between(start: datetime, end: datetime) -> int:
    """Whole days from ``start`` to ``end``, rounded towards minus infinity."""

    delta = ensure_utc(end) - ensure_utc(start)
    return math.floor(delta.total_seconds() / _SECONDS_PER_DAY)


__all__ = [
    "UTC",
    "ensure_utc",
    "parse_rfc3339",
    "utc_now",
    "whole_days_between",
]

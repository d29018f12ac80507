"""Pure helpers that turn timestamps and counts into display strings.

Durations follow the compact ``ms`` style used across Now tooling:
the largest unit whose threshold is reached wins, rounded half-up
(``"3d"``, ``"5h"``, ``"12m"``, ``"2s"``, ``"450ms"``).
"""

from __future__ import annotations

import math
from datetime import datetime

_SECOND_MS = 1000
_MINUTE_MS = _SECOND_MS * 60
_HOUR_MS = _MINUTE_MS * 60
_DAY_MS = _HOUR_MS * 24

UNKNOWN = "-"
"""Placeholder for a timestamp the API did not provide."""

_UNITS: tuple[tuple[int, str], ...] = (
    (_DAY_MS, "d"),
    (_HOUR_MS, "h"),
    (_MINUTE_MS, "m"),
    (_SECOND_MS, "s"),
)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def format_duration(milliseconds: float) -> str:
    """Render a millisecond span in compact form, e.g. ``"3d"``."""
    magnitude = abs(milliseconds)
    for unit_ms, suffix in _UNITS:
        if magnitude >= unit_ms:
            return f"{_round_half_up(milliseconds / unit_ms)}{suffix}"
    return f"{_round_half_up(milliseconds)}ms"


def format_elapsed(seconds: float) -> str:
    """Render a ``time.monotonic()`` difference in compact form."""
    return format_duration(seconds * 1000)


def _span_ms(later: datetime, earlier: datetime) -> float:
    return (later - earlier).total_seconds() * 1000


def format_age(created: datetime | None, now: datetime) -> str:
    """Render how long ago *created* was, e.g. ``"3d ago"``."""
    if created is None:
        return UNKNOWN
    return f"{format_duration(_span_ms(now, created))} ago"


def format_expiration(expiration: datetime | None, now: datetime) -> str:
    """Render ``"in 20d"`` for future expiry, ``"4d ago"`` once expired."""
    if expiration is None:
        return UNKNOWN
    diff = _span_ms(expiration, now)
    if diff < 0:
        return f"{format_duration(-diff)} ago"
    return f"in {format_duration(diff)}"


def pluralize(word: str, count: int) -> str:
    """Return ``"1 certificate"`` / ``"3 certificates"``."""
    suffix = "" if count == 1 else "s"
    return f"{count} {word}{suffix}"

"""Duration formatting helpers."""

import re
from datetime import timedelta
from typing import Optional

import humanize

_UNIT_SUFFIXES = {
    "second": "s",
    "minute": "m",
    "hour": "h",
    "day": "d",
    "month": "mo",
    "year": "y",
}

_LEADING_UNIT = re.compile(r"^(a|an|\d+)\s+(second|minute|hour|day|month|year)s?\b")


def format_seconds_short(seconds: Optional[int]) -> Optional[str]:
    """Short form of a seconds count like '3h' or '12m'.

    Only the largest unit is kept ("1 year, 2 months" -> "1y"). Returns None
    when the count is unknown or too large to express as a timedelta.
    """
    if seconds is None:
        return None
    if seconds <= 0:
        return "0m"

    try:
        phrase = humanize.naturaldelta(timedelta(seconds=seconds))
    except OverflowError:
        return None

    if phrase == "a moment":
        return "0s"

    match = _LEADING_UNIT.match(phrase)
    if match is None:
        return phrase
    count, unit = match.groups()
    if count in ("a", "an"):
        count = "1"
    return f"{count}{_UNIT_SUFFIXES[unit]}"


def format_delta_dh(seconds: int) -> str:
    """Split seconds into the two largest units: '2d 3h', '4h 12m' or '7m'."""
    mins = seconds // 60
    hours = mins // 60
    days = hours // 24

    if days > 0:
        return f"{days}d {hours % 24}h"
    elif hours > 0:
        return f"{hours}h {mins % 60}m"
    else:
        return f"{mins}m"

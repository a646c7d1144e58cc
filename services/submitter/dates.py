# services/submitter/dates.py
"""
Date reformatting for ``date`` fields.

Site configurations write patterns with moment-style tokens
(``YYYY-MM-DD HH:mm:ss``, ``M/D/YYYY h:mm A``, ``MMMM Do``); text inside
square brackets is copied literally.  The raw value is parsed as ISO-8601
first, then against a short list of common layouts, and rendered without
any timezone conversion: ``2024-03-05T00:00:00Z`` with ``YYYY-MM-DD`` gives
``2024-03-05`` regardless of the local zone.
"""

import re
from datetime import date, datetime
from typing import Any, Callable, Dict

_MONTHS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)
_WEEKDAYS = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


def _ordinal(n: int) -> str:
    if 11 <= n % 100 <= 13:
        return f"{n}th"
    suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def _hour12(dt: datetime) -> int:
    return dt.hour % 12 or 12


_TOKENS: Dict[str, Callable[[datetime], str]] = {
    "YYYY": lambda d: f"{d.year:04d}",
    "YY": lambda d: f"{d.year % 100:02d}",
    "MMMM": lambda d: _MONTHS[d.month - 1],
    "MMM": lambda d: _MONTHS[d.month - 1][:3],
    "MM": lambda d: f"{d.month:02d}",
    "M": lambda d: str(d.month),
    "Do": lambda d: _ordinal(d.day),
    "DD": lambda d: f"{d.day:02d}",
    "D": lambda d: str(d.day),
    "dddd": lambda d: _WEEKDAYS[d.weekday()],
    "ddd": lambda d: _WEEKDAYS[d.weekday()][:3],
    "HH": lambda d: f"{d.hour:02d}",
    "H": lambda d: str(d.hour),
    "hh": lambda d: f"{_hour12(d):02d}",
    "h": lambda d: str(_hour12(d)),
    "mm": lambda d: f"{d.minute:02d}",
    "m": lambda d: str(d.minute),
    "ss": lambda d: f"{d.second:02d}",
    "s": lambda d: str(d.second),
    "A": lambda d: "AM" if d.hour < 12 else "PM",
    "a": lambda d: "am" if d.hour < 12 else "pm",
}
# longest token first so "MMMM" never matches as four "M"s
_TOKEN_RE = re.compile(
    r"\[[^\]]*\]|" + "|".join(sorted(_TOKENS, key=len, reverse=True))
)

_FALLBACK_LAYOUTS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d",
    "%d/%m/%Y %H:%M:%S",
    "%d/%m/%Y",
    "%B %d %Y",
    "%B %d, %Y",
)


def render(dt: datetime, pattern: str) -> str:
    """Render ``dt`` with a moment-style ``pattern``."""

    def _sub(match: "re.Match[str]") -> str:
        token = match.group(0)
        if token.startswith("["):
            return token[1:-1]
        return _TOKENS[token](dt)

    return _TOKEN_RE.sub(_sub, pattern)


def parse_date(value: Any) -> datetime:
    """Parse a raw article value; raises ``ValueError`` if nothing fits."""
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = str(value).strip()
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass
    for layout in _FALLBACK_LAYOUTS:
        try:
            return datetime.strptime(text, layout)
        except ValueError:
            continue
    raise ValueError(f"Unrecognised date '{value}'")


def format_date(value: Any, pattern: str) -> str:
    return render(parse_date(value), pattern)

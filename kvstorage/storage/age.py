"""
Relative-date modifiers for ``KeyValueStore.prune``.

The prune cutoff is computed here and bound as a plain timestamp, so the SQL
never depends on SQLite's date functions. The accepted grammar mirrors
SQLite's date modifiers::

    [+|-]NNN[.NNN] days|hours|minutes|seconds     "-7 days", "-1.5 hours"
    [+|-]NNN[.NNN] months|years                   "-1 month", "-1.5 months"
    [+|-]HH:MM[:SS[.SSS]]                         "-01:30"

Units may be singular or plural and are case-insensitive. Month arithmetic
works like SQLite: the month field is shifted and an out-of-range day rolls
forward into the next month (Jan 31 + 1 month -> Mar 3 in a common year).
A fractional part adds 30 days per month or 365 days per year, as SQLite does.

Timestamps are stored as ``YYYY-MM-DD HH:MM:SS`` in local time, the same
text ``DATETIME('now', 'localtime')`` produces.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta
from typing import Callable, Union

from ..core.errors import InvalidAgeError

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_UNIT_RE = re.compile(
    r"^(?P<sign>[+-]?)(?P<amount>\d+(?:\.\d*)?|\.\d+)\s+"
    r"(?P<unit>day|hour|minute|second|month|year)s?$",
    re.IGNORECASE,
)
_CLOCK_RE = re.compile(
    r"^(?P<sign>[+-]?)(?P<hours>\d{1,2}):(?P<minutes>\d{2})"
    r"(?::(?P<seconds>\d{2}(?:\.\d+)?))?$"
)

Shift = Callable[[datetime], datetime]


def format_timestamp(moment: datetime) -> str:
    """Render *moment* in the on-disk ``mod`` format."""
    return moment.strftime(TIMESTAMP_FORMAT)


def parse_timestamp(text: str) -> datetime:
    """Parse a stored ``mod`` value back into a naive local datetime."""
    return datetime.fromisoformat(text)


def _shift_months(moment: datetime, months: int) -> datetime:
    total = moment.year * 12 + (moment.month - 1) + months
    year, month_index = divmod(total, 12)
    first = moment.replace(year=year, month=month_index + 1, day=1)
    return first + timedelta(days=moment.day - 1)


def parse_age(age: str) -> Shift:
    """
    Parse a modifier string into a function that shifts a datetime.

    Raises
    ------
    InvalidAgeError
        If *age* does not match the modifier grammar.
    """
    if not isinstance(age, str):
        raise InvalidAgeError(f"age must be a str, got {type(age).__name__!r}.")
    text = age.strip()

    match = _UNIT_RE.match(text)
    if match:
        amount = float(match["amount"])
        if match["sign"] == "-":
            amount = -amount
        unit = match["unit"].lower()

        if unit in ("month", "year"):
            # whole part shifts the calendar; the fraction is 30 days/month or 365 days/year
            whole = int(amount)
            months = whole * (12 if unit == "year" else 1)
            extra = timedelta(days=(amount - whole) * (365 if unit == "year" else 30))
            return lambda moment: _shift_months(moment, months) + extra

        delta = timedelta(**{f"{unit}s": amount})
        return lambda moment: moment + delta

    match = _CLOCK_RE.match(text)
    if match:
        delta = timedelta(
            hours=int(match["hours"]),
            minutes=int(match["minutes"]),
            seconds=float(match["seconds"] or 0),
        )
        if match["sign"] == "-":
            delta = -delta
        return lambda moment: moment + delta

    raise InvalidAgeError(
        f"Unrecognised age modifier '{age}'. "
        "Expected e.g. '-7 days', '-12 hours', '-1 month' or '-01:30'."
    )


def cutoff_for(age: Union[str, timedelta], now: datetime) -> datetime:
    """
    Return the prune cutoff for *age* relative to *now*.

    A string is a modifier applied to *now* (``"-1 day"`` -> one day ago).
    A ``timedelta`` is an age, so ``timedelta(days=1)`` also means one day ago.
    """
    if isinstance(age, timedelta):
        shift: Shift = lambda moment: moment - age  # noqa: E731
    else:
        shift = parse_age(age)
    try:
        return shift(now)
    except (OverflowError, ValueError) as exc:
        raise InvalidAgeError(f"Age '{age}' moves the cutoff out of range: {exc}") from exc

# Role: Deterministic free-text -> TIMEX parsing for the delivery date prompt.
# Keeps only the date parts the user actually said, so "March 22" stays ambiguous (no year)
# instead of silently picking one.

from __future__ import annotations

import calendar
import re
from datetime import date, datetime, timedelta
from typing import Optional

from dateutil import parser as dtp

import order_bot.config as config
from order_bot.utils.timex import is_definite

_RELATIVE_DAYS = (
    ("day after tomorrow", 2),
    ("tomorrow", 1),
    ("yesterday", -1),
    ("today", 0),
    ("tonight", 0),
)

_IN_N_RE = re.compile(r"\bin\s+(\d{1,3})\s+(day|days|week|weeks)\b")

_WEEKDAYS = [name.lower() for name in calendar.day_name]  # monday ... sunday
_WEEKDAY_RE = re.compile(r"\b(?:(next|this)\s+)?(" + "|".join(_WEEKDAYS) + r")\b")

# Two defaults that differ in every component: whatever matches across both parses came from the text.
# Both years are leap years and both months have 31 days, so "February 29" or "31" never fail on a default.
_DEFAULT_A = datetime(2000, 1, 1)
_DEFAULT_B = datetime(2004, 3, 3)


def _iso(d: date) -> str:
    return d.isoformat()


def _weekday_timex(qualifier: Optional[str], weekday_index: int, today: date) -> str:
    # "next tuesday" -> Tuesday of next week; "this tuesday" -> Tuesday of this week;
    # bare "tuesday" -> XXXX-WXX-2 (ambiguous, like an NLU service would return).
    monday = today - timedelta(days=today.weekday())
    if qualifier == "next":
        return _iso(monday + timedelta(days=7 + weekday_index))
    if qualifier == "this":
        return _iso(monday + timedelta(days=weekday_index))
    return f"XXXX-WXX-{weekday_index + 1}"


def _explicit_date_timex(text: str) -> Optional[str]:
    try:
        first = dtp.parse(text, fuzzy=True, default=_DEFAULT_A)
        second = dtp.parse(text, fuzzy=True, default=_DEFAULT_B)
    except (ValueError, OverflowError):
        return None

    has_year = first.year == second.year
    has_month = first.month == second.month
    has_day = first.day == second.day

    year = f"{first.year:04d}" if has_year else "XXXX"

    if has_month and has_day:
        return f"{year}-{first.month:02d}-{first.day:02d}"
    if has_month:
        return f"{year}-{first.month:02d}"
    if has_day:
        return f"{year}-XX-{first.day:02d}"
    if has_year:
        return year
    return None


def _relative_timex(low: str, today: date) -> Optional[str]:
    for phrase, offset in _RELATIVE_DAYS:
        if re.search(rf"\b{phrase}\b", low):
            return _iso(today + timedelta(days=offset))

    m = _IN_N_RE.search(low)
    if m:
        amount = int(m.group(1))
        days = amount * 7 if m.group(2).startswith("week") else amount
        return _iso(today + timedelta(days=days))
    return None


def parse_date_text(text: str, today: Optional[date] = None) -> Optional[str]:
    # 1) Explicit full date via dateutil wins ("March 22, 2020, not tomorrow" -> 2020-03-22)
    # 2) Relative words ("tomorrow", "in 3 days") -> definite date against today
    # 3) "next/this <weekday>" -> definite date, even with a stray time ("next tuesday at 5")
    # 4) Partial explicit date, else bare weekday -> ambiguous TIMEX
    # 5) Nothing date-like -> None (caller re-prompts)
    if not text or not text.strip():
        return None

    today = today or date.today()
    low = text.strip().lower()

    explicit = _explicit_date_timex(text)
    timex = explicit if explicit is not None and is_definite(explicit) else None

    if timex is None:
        timex = _relative_timex(low, today)

    weekday = _WEEKDAY_RE.search(low)
    if timex is None and weekday and weekday.group(1):
        timex = _weekday_timex(weekday.group(1), _WEEKDAYS.index(weekday.group(2)), today)

    if timex is None:
        timex = explicit
    if timex is None and weekday:
        timex = _weekday_timex(None, _WEEKDAYS.index(weekday.group(2)), today)

    if config.DEBUG:
        print("\n--- DATE PARSER ---")
        print("TEXT:", text)
        print("EXPLICIT:", explicit)
        print("TIMEX:", timex)
        print("-------------------\n")

    return timex

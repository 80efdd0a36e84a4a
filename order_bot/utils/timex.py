# Role: Deterministic TIMEX helpers. A TIMEX is a date string that may be partially specified
# ("XXXX-03-22" has no year, "2020-03" has no day). The order flow only accepts "definite" dates,
# and the final confirmation renders them as natural language ("tomorrow", "next Tuesday", "March 22, 2020").

from __future__ import annotations

import calendar
import re
from dataclasses import dataclass
from datetime import date, timedelta
from typing import FrozenSet, Optional

_DATE_RE = re.compile(r"^(\d{4}|XXXX)-(\d{2}|XX)-(\d{2}|XX)$")
_MONTH_RE = re.compile(r"^(\d{4}|XXXX)-(\d{2})$")
_YEAR_RE = re.compile(r"^(\d{4})$")
_WEEKDAY_RE = re.compile(r"^XXXX-WXX-([1-7])$")
_WEEK_RE = re.compile(r"^(\d{4})-W(\d{2})$")


def _int_or_none(token: str) -> Optional[int]:
    return None if token.startswith("X") else int(token)


@dataclass(frozen=True)
class TimexProperty:
    timex: str
    year: Optional[int] = None
    month: Optional[int] = None
    day_of_month: Optional[int] = None
    day_of_week: Optional[int] = None  # ISO: 1=Monday ... 7=Sunday
    week_of_year: Optional[int] = None

    @classmethod
    def parse(cls, timex: Optional[str]) -> "TimexProperty":
        # 1) Drop any time part ("2020-03-22T10" -> "2020-03-22")
        # 2) Match the supported date shapes; unknown shapes keep no components (and so no types)
        raw = (timex or "").strip()
        value = raw.split("T")[0] if raw and not raw.startswith("P") else raw

        m = _DATE_RE.match(value)
        if m:
            return cls(
                timex=raw,
                year=_int_or_none(m.group(1)),
                month=_int_or_none(m.group(2)),
                day_of_month=_int_or_none(m.group(3)),
            )

        m = _MONTH_RE.match(value)
        if m:
            return cls(timex=raw, year=_int_or_none(m.group(1)), month=int(m.group(2)))

        m = _YEAR_RE.match(value)
        if m:
            return cls(timex=raw, year=int(m.group(1)))

        m = _WEEKDAY_RE.match(value)
        if m:
            return cls(timex=raw, day_of_week=int(m.group(1)))

        m = _WEEK_RE.match(value)
        if m:
            return cls(timex=raw, year=int(m.group(1)), week_of_year=int(m.group(2)))

        return cls(timex=raw)

    @property
    def types(self) -> FrozenSet[str]:
        found = set()
        if (self.month is not None and self.day_of_month is not None) or self.day_of_week is not None:
            found.add("date")
        if self.to_date() is not None:
            found.add("definite")
        if self.year is not None and self.day_of_month is None and self.day_of_week is None:
            found.add("daterange")
        return frozenset(found)

    @property
    def is_definite(self) -> bool:
        return "definite" in self.types

    def to_date(self) -> Optional[date]:
        if self.year is None or self.month is None or self.day_of_month is None:
            return None
        try:
            return date(self.year, self.month, self.day_of_month)
        except ValueError:
            # e.g. "2021-02-30": three components but no such calendar day.
            return None

    def describe(self) -> str:
        month_name = calendar.month_name[self.month] if self.month and 1 <= self.month <= 12 else None

        if month_name and self.day_of_month is not None:
            if self.year is not None:
                return f"{month_name} {self.day_of_month}, {self.year}"
            return f"{month_name} {self.day_of_month}"

        if month_name:
            return f"{month_name} {self.year}" if self.year is not None else month_name

        if self.day_of_week is not None:
            return calendar.day_name[self.day_of_week - 1]

        if self.year is not None and self.week_of_year is None:
            return str(self.year)

        return self.timex

    def to_natural_language(self, reference: date) -> str:
        # 1) Definite dates close to the reference day get relative wording
        # 2) Everything else falls back to the absolute description
        target = self.to_date()
        if target is None:
            return self.describe()

        delta = (target - reference).days
        if delta == 0:
            return "today"
        if delta == 1:
            return "tomorrow"
        if delta == -1:
            return "yesterday"

        weekday = calendar.day_name[target.weekday()]
        ref_monday = reference - timedelta(days=reference.weekday())
        target_monday = target - timedelta(days=target.weekday())
        weeks_apart = (target_monday - ref_monday).days // 7

        if weeks_apart == 0:
            return f"this {weekday}"
        if weeks_apart == 1:
            return f"next {weekday}"
        if weeks_apart == -1:
            return f"last {weekday}"

        return self.describe()


def is_definite(timex: Optional[str]) -> bool:
    return bool(timex) and TimexProperty.parse(timex).is_definite


def is_ambiguous(timex: Optional[str]) -> bool:
    return not is_definite(timex)

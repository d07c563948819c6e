from __future__ import annotations

import datetime as dt
from dataclasses import dataclass


def _check_day(name: str, value: dt.date | None) -> None:
    if value is None:
        return
    if not isinstance(value, dt.date) or isinstance(value, dt.datetime):
        raise ValueError(f"date_range.{name} must be a date or None")


@dataclass(frozen=True, slots=True)
class DateRange:
    date_from: dt.date | None = None  # inclusif
    date_to: dt.date | None = None    # inclusif

    def __post_init__(self) -> None:
        _check_day("date_from", self.date_from)
        _check_day("date_to", self.date_to)

    @classmethod
    def all_time(cls) -> "DateRange":
        return cls()

    @property
    def is_unbounded(self) -> bool:
        return self.date_from is None and self.date_to is None

    def contains(self, day: dt.date) -> bool:
        if self.date_from is not None and day < self.date_from:
            return False
        if self.date_to is not None and day > self.date_to:
            return False
        return True

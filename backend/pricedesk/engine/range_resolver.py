from __future__ import annotations

import datetime as dt
import re
from enum import Enum

from pricedesk.domain.date_range import DateRange


class RangePreset(str, Enum):
    LAST_30_DAYS = "30d"
    LAST_90_DAYS = "90d"
    LAST_6_MONTHS = "6m"
    LAST_YEAR = "1y"
    ALL_TIME = "all"


DEFAULT_PRESET = RangePreset.LAST_90_DAYS

# day offsets back from today; "6m" is 182 days, not calendar months
PRESET_DAYS: dict[RangePreset, int] = {
    RangePreset.LAST_30_DAYS: 30,
    RangePreset.LAST_90_DAYS: 90,
    RangePreset.LAST_6_MONTHS: 182,
    RangePreset.LAST_YEAR: 365,
}

_DAY_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def utc_today() -> dt.date:
    return dt.datetime.now(dt.timezone.utc).date()


def parse_day(value: str | dt.date | None) -> dt.date | None:
    """
    "YYYY-MM-DD" -> date. None or blank -> None (side not supplied).
    """
    if value is None:
        return None
    if isinstance(value, dt.datetime):
        raise ValueError("expected a calendar date, got a datetime")
    if isinstance(value, dt.date):
        return value

    raw = value.strip()
    if not raw:
        return None
    if not _DAY_RE.match(raw):
        raise ValueError(f"invalid date {value!r}, expected YYYY-MM-DD")
    try:
        return dt.date.fromisoformat(raw)
    except ValueError as e:
        raise ValueError(f"invalid date {value!r}: {e}") from e


def preset_range(preset: RangePreset | str, *, today: dt.date | None = None) -> DateRange:
    p = RangePreset(preset)
    if p == RangePreset.ALL_TIME:
        return DateRange.all_time()

    today = today or utc_today()
    return DateRange(date_from=today - dt.timedelta(days=PRESET_DAYS[p]), date_to=today)


def resolve_range(
    preset: RangePreset | str,
    custom_from: str | dt.date | None = None,
    custom_to: str | dt.date | None = None,
    *,
    today: dt.date | None = None,
) -> DateRange:
    """
    Effective inclusive bounds for a preset, with custom dates overriding
    the preset per side: a custom `from` alone keeps the preset's `to`.
    """
    base = preset_range(preset, today=today)
    date_from = parse_day(custom_from)
    date_to = parse_day(custom_to)

    return DateRange(
        date_from=date_from if date_from is not None else base.date_from,
        date_to=date_to if date_to is not None else base.date_to,
    )

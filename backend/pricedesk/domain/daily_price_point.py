from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True, slots=True)
class DailyPricePoint:
    product_id: str
    day: dt.date        # UTC day
    samples: int
    min_price: Decimal
    avg_price: Decimal
    max_price: Decimal

    def __post_init__(self) -> None:
        if not self.product_id or not self.product_id.strip():
            raise ValueError("daily_price_point.product_id must be non-empty")
        if not isinstance(self.day, dt.date) or isinstance(self.day, dt.datetime):
            raise ValueError("daily_price_point.day must be a date")
        # a day without samples is left out of the series, never zero-filled
        if not isinstance(self.samples, int) or self.samples < 1:
            raise ValueError("daily_price_point.samples must be an integer >= 1")
        for name in ("min_price", "avg_price", "max_price"):
            if not isinstance(getattr(self, name), Decimal):
                raise ValueError(f"daily_price_point.{name} must be a Decimal")
        if not (self.min_price <= self.avg_price <= self.max_price):
            raise ValueError("daily_price_point requires min_price <= avg_price <= max_price")

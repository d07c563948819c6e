from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True, slots=True)
class ProductMeta:
    """
    Summary of a product over its full history (not range-filtered):
    the latest offer's fields plus the distinct supplier count.
    """
    sku: str | None = None
    supplier: str | None = None
    currency: str | None = None
    latest_price: Decimal | None = None
    latest_observed_at: dt.datetime | None = None
    supplier_count: int = 0

    def __post_init__(self) -> None:
        if not isinstance(self.supplier_count, int) or self.supplier_count < 0:
            raise ValueError("product_meta.supplier_count must be an integer >= 0")

    @classmethod
    def empty(cls) -> "ProductMeta":
        return cls()


@dataclass(frozen=True, slots=True)
class RangeStats:
    min_price: Decimal
    avg_price: Decimal  # mean of daily averages, not weighted by samples
    max_price: Decimal

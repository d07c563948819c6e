from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True, slots=True)
class Offer:
    """
    A supplier price quote as observed in the store.
    Read-only for this package: nothing here creates or mutates offers.
    """
    id: str
    supplier: str | None = None
    source_sku: str | None = None
    price: Decimal | None = None
    currency: str | None = None           # ex: "EUR", "USD"
    observed_at: dt.datetime | None = None  # UTC timestamp
    product_id: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.id, str) or not self.id.strip():
            raise ValueError("offer.id must be non-empty")
        if self.price is not None and not isinstance(self.price, Decimal):
            raise ValueError("offer.price must be a Decimal or None")
        if self.observed_at is not None:
            if not isinstance(self.observed_at, dt.datetime):
                raise ValueError("offer.observed_at must be a datetime or None")
            if self.observed_at.tzinfo is None:
                raise ValueError("offer.observed_at must be timezone-aware (UTC)")

    @property
    def observed_day(self) -> dt.date | None:
        if self.observed_at is None:
            return None
        return self.observed_at.astimezone(dt.timezone.utc).date()

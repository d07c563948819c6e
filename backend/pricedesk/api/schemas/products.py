from __future__ import annotations

import datetime as dt
from pydantic import BaseModel, Field


class DailyPricePointOut(BaseModel):
    day: dt.date
    samples: int = Field(ge=1)
    min_price: str
    avg_price: str
    max_price: str


class ProductMetaOut(BaseModel):
    sku: str | None
    supplier: str | None
    currency: str | None
    latest_price: str | None
    latest_observed_at: dt.datetime | None
    supplier_count: int = Field(ge=0)


class RangeStatsOut(BaseModel):
    min_price: str
    avg_price: str
    max_price: str


class ProductDetailOut(BaseModel):
    product_id: str
    date_from: dt.date | None
    date_to: dt.date | None
    series: list[DailyPricePointOut]
    meta: ProductMetaOut
    stats: RangeStatsOut | None

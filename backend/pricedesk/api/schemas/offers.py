from __future__ import annotations

import datetime as dt
from pydantic import BaseModel, Field


class OfferOut(BaseModel):
    id: str
    supplier: str | None
    source_sku: str | None
    price: str | None
    currency: str | None
    observed_at: dt.datetime | None
    product_id: str | None


class OfferPageOut(BaseModel):
    items: list[OfferOut]
    page: int = Field(ge=0)
    page_size: int
    sort_by: str
    sort_dir: str
    has_next: bool
    has_previous: bool
    total: int | None = Field(default=None, ge=0)

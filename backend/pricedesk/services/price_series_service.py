from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from pricedesk.domain.daily_price_point import DailyPricePoint
from pricedesk.domain.date_range import DateRange
from pricedesk.domain.offer import Offer
from pricedesk.domain.product_meta import ProductMeta, RangeStats
from pricedesk.engine.range_stats import compute_range_stats
from pricedesk.errors import OfferStoreError
from pricedesk.repositories.offer_repository import OfferRepository
from pricedesk.repositories.price_history_repository import PriceHistoryRepository
from pricedesk.settings import DEFAULT_SUPPLIER_SAMPLE_LIMIT


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProductDetail:
    product_id: str | None
    date_range: DateRange
    series: list[DailyPricePoint] = field(default_factory=list)
    meta: ProductMeta | None = None
    stats: RangeStats | None = None
    error: str | None = None


def build_meta(latest: Offer | None, suppliers: Iterable[str | None]) -> ProductMeta:
    distinct = {s for s in suppliers if s is not None}
    if latest is None:
        return ProductMeta(supplier_count=len(distinct))
    return ProductMeta(
        sku=latest.source_sku,
        supplier=latest.supplier,
        currency=latest.currency,
        latest_price=latest.price,
        latest_observed_at=latest.observed_at,
        supplier_count=len(distinct),
    )


def load_product_detail(
    *,
    product_id: str | None,
    date_range: DateRange,
    history_repo: PriceHistoryRepository,
    offer_repo: OfferRepository,
    supplier_sample_limit: int = DEFAULT_SUPPLIER_SAMPLE_LIMIT,
) -> ProductDetail:
    """
    Daily series (range-filtered) + meta (full history) + range stats.

    All or nothing: if any of the three reads fails, nothing but the error
    message is returned. A missing or unknown product is not an error, it
    just has no data yet.
    """
    if product_id is None or not product_id.strip():
        return ProductDetail(product_id=None, date_range=date_range, meta=ProductMeta.empty())

    try:
        series = history_repo.daily_series(product_id=product_id, date_range=date_range)
        latest = offer_repo.latest_for_product(product_id=product_id)
        # bounded scan: high-cardinality products may be undercounted
        suppliers = offer_repo.sample_suppliers(product_id=product_id, limit=supplier_sample_limit)
    except OfferStoreError as e:
        logger.exception("Failed to load product detail for %s: %s", product_id, e)
        return ProductDetail(product_id=product_id, date_range=date_range, error=str(e))

    return ProductDetail(
        product_id=product_id,
        date_range=date_range,
        series=series,
        meta=build_meta(latest, suppliers),
        stats=compute_range_stats(series),
    )

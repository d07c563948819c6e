from __future__ import annotations

from decimal import Decimal

from pricedesk.api.schemas.offers import OfferOut, OfferPageOut
from pricedesk.api.schemas.products import DailyPricePointOut, ProductDetailOut, ProductMetaOut, RangeStatsOut
from pricedesk.domain.daily_price_point import DailyPricePoint
from pricedesk.domain.offer import Offer
from pricedesk.domain.product_meta import ProductMeta, RangeStats
from pricedesk.services.offer_listing_service import OfferPage
from pricedesk.services.price_series_service import ProductDetail


def decimal_to_str(d: Decimal | None) -> str | None:
    # Decimal -> string sans zéros de fin ("15.0000000000" -> "15")
    if d is None:
        return None
    return format(d.normalize(), "f")


def offer_to_response(o: Offer) -> OfferOut:
    return OfferOut(
        id=o.id,
        supplier=o.supplier,
        source_sku=o.source_sku,
        price=decimal_to_str(o.price),
        currency=o.currency,
        observed_at=o.observed_at,
        product_id=o.product_id,  # verbatim: the client builds /product/{id}
    )


def offer_page_to_response(page: OfferPage) -> OfferPageOut:
    q = page.query
    return OfferPageOut(
        items=[offer_to_response(o) for o in page.rows],
        page=q.page,
        page_size=q.page_size,
        sort_by=q.sort_key,
        sort_dir="asc" if q.sort_asc else "desc",
        has_next=page.has_next,
        has_previous=page.has_previous,
        total=page.total,
    )


def point_to_response(p: DailyPricePoint) -> DailyPricePointOut:
    return DailyPricePointOut(
        day=p.day,
        samples=p.samples,
        min_price=decimal_to_str(p.min_price),
        avg_price=decimal_to_str(p.avg_price),
        max_price=decimal_to_str(p.max_price),
    )


def meta_to_response(m: ProductMeta) -> ProductMetaOut:
    return ProductMetaOut(
        sku=m.sku,
        supplier=m.supplier,
        currency=m.currency,
        latest_price=decimal_to_str(m.latest_price),
        latest_observed_at=m.latest_observed_at,
        supplier_count=m.supplier_count,
    )


def stats_to_response(s: RangeStats | None) -> RangeStatsOut | None:
    if s is None:
        return None
    return RangeStatsOut(
        min_price=decimal_to_str(s.min_price),
        avg_price=decimal_to_str(s.avg_price),
        max_price=decimal_to_str(s.max_price),
    )


def detail_to_response(product_id: str, d: ProductDetail) -> ProductDetailOut:
    return ProductDetailOut(
        product_id=product_id,
        date_from=d.date_range.date_from,
        date_to=d.date_range.date_to,
        series=[point_to_response(p) for p in d.series],
        meta=meta_to_response(d.meta or ProductMeta.empty()),
        stats=stats_to_response(d.stats),
    )

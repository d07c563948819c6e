from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Iterable

from pricedesk.domain.daily_price_point import DailyPricePoint
from pricedesk.domain.date_range import DateRange
from pricedesk.domain.offer import Offer


def aggregate_daily(
    offers: Iterable[Offer],
    *,
    product_id: str,
    date_range: DateRange | None = None,
) -> list[DailyPricePoint]:
    """
    Same rows as the store's v_price_history view, computed in memory:
    one point per UTC day with at least one priced offer, ascending by day.
    """
    buckets: dict[dt.date, list[Decimal]] = {}
    for o in offers:
        if o.product_id != product_id or o.price is None or o.observed_day is None:
            continue
        buckets.setdefault(o.observed_day, []).append(o.price)

    bounded = date_range is not None and not date_range.is_unbounded
    points: list[DailyPricePoint] = []
    for day in sorted(buckets):
        if bounded and not date_range.contains(day):
            continue
        prices = buckets[day]
        points.append(
            DailyPricePoint(
                product_id=product_id,
                day=day,
                samples=len(prices),
                min_price=min(prices),
                avg_price=sum(prices, Decimal("0")) / len(prices),
                max_price=max(prices),
            )
        )
    return points

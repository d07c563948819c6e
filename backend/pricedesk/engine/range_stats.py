from __future__ import annotations

from decimal import Decimal
from typing import Sequence

from pricedesk.domain.daily_price_point import DailyPricePoint
from pricedesk.domain.product_meta import RangeStats


def compute_range_stats(series: Sequence[DailyPricePoint]) -> RangeStats | None:
    """
    Min of daily mins, max of daily maxes, mean of daily averages.

    The average is a mean-of-means: every day weighs the same whatever its
    sample count, so it drifts from the offer-weighted mean when days are
    uneven. Kept as is on purpose.
    Empty series -> None (no stats, not zeros).
    """
    if not series:
        return None

    total = sum((p.avg_price for p in series), Decimal("0"))
    return RangeStats(
        min_price=min(p.min_price for p in series),
        avg_price=total / len(series),
        max_price=max(p.max_price for p in series),
    )

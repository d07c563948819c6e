from __future__ import annotations

from abc import ABC, abstractmethod

from pricedesk.domain.daily_price_point import DailyPricePoint
from pricedesk.domain.date_range import DateRange


class PriceHistoryRepository(ABC):
    @abstractmethod
    def daily_series(self, *, product_id: str, date_range: DateRange) -> list[DailyPricePoint]:
        """Daily points of the product within the inclusive range, ascending by day."""

from __future__ import annotations

from dataclasses import dataclass, field

from pricedesk.domain.daily_price_point import DailyPricePoint
from pricedesk.domain.date_range import DateRange
from pricedesk.domain.offer import Offer
from pricedesk.engine.daily_aggregation import aggregate_daily
from pricedesk.engine.offer_query import OfferQuery, apply_offer_query, matches_filters
from pricedesk.repositories.offer_repository import OfferRepository
from pricedesk.repositories.price_history_repository import PriceHistoryRepository


@dataclass
class InMemoryOfferRepository(OfferRepository, PriceHistoryRepository):
    """
    Offers + daily view held in memory.
    - Deterministic (same ordering rules as the SQL store)
    - Easy to seed in tests
    """
    _items: list[Offer] = field(default_factory=list)

    def add(self, offer: Offer) -> None:
        if any(o.id == offer.id for o in self._items):
            raise ValueError(f"Offer with id {offer.id} already exists")
        self._items.append(offer)

    def list_page(self, query: OfferQuery) -> list[Offer]:
        return apply_offer_query(self._items, query)

    def count(self, query: OfferQuery) -> int:
        return sum(1 for o in self._items if matches_filters(o, query))

    def latest_for_product(self, *, product_id: str) -> Offer | None:
        best: Offer | None = None
        for o in self._items:
            if o.product_id != product_id:
                continue
            if best is None or self._recency(o) > self._recency(best):
                best = o
        return best

    def sample_suppliers(self, *, product_id: str, limit: int) -> list[str]:
        if limit < 1:
            raise ValueError("limit must be >= 1")
        items = sorted(
            (o for o in self._items if o.product_id == product_id and o.supplier is not None),
            key=lambda o: o.id,
        )
        return [o.supplier for o in items[:limit]]

    def daily_series(self, *, product_id: str, date_range: DateRange) -> list[DailyPricePoint]:
        return aggregate_daily(self._items, product_id=product_id, date_range=date_range)

    @staticmethod
    def _recency(o: Offer) -> tuple:
        # offers without timestamp only win when nothing else is dated
        if o.observed_at is None:
            return (False, None, o.id)
        return (True, o.observed_at, o.id)

from __future__ import annotations

from abc import ABC, abstractmethod

from pricedesk.domain.offer import Offer
from pricedesk.engine.offer_query import OfferQuery


class OfferRepository(ABC):
    @abstractmethod
    def list_page(self, query: OfferQuery) -> list[Offer]:
        """At most `query.page_size` offers, rows [offset, offset + page_size - 1]."""

    @abstractmethod
    def count(self, query: OfferQuery) -> int:
        """Number of offers matching the query filters (sort and page ignored)."""

    @abstractmethod
    def latest_for_product(self, *, product_id: str) -> Offer | None: ...

    @abstractmethod
    def sample_suppliers(self, *, product_id: str, limit: int) -> list[str]:
        """Non-null supplier values of up to `limit` offers of the product (duplicates kept)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from pricedesk.domain.offer import Offer
from pricedesk.engine.offer_query import OfferQuery, has_next_page
from pricedesk.errors import OfferStoreError
from pricedesk.repositories.offer_repository import OfferRepository


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OfferPage:
    query: OfferQuery
    rows: list[Offer] = field(default_factory=list)
    has_next: bool = False
    total: int | None = None  # exact filtered count, only when asked for
    error: str | None = None

    @property
    def has_previous(self) -> bool:
        return self.query.has_previous


def load_offer_page(repo: OfferRepository, query: OfferQuery, *, include_total: bool = False) -> OfferPage:
    """
    One page of offers for the listing.
    On a store failure the page is empty and carries the message: rows from
    an earlier query are never reused.
    """
    try:
        rows = repo.list_page(query)
        total = repo.count(query) if include_total else None
    except OfferStoreError as e:
        logger.exception("Failed to load offers page %s: %s", query.page, e)
        return OfferPage(query=query, error=str(e))

    return OfferPage(
        query=query,
        rows=rows,
        has_next=has_next_page(len(rows), query.page_size),
        total=total,
    )

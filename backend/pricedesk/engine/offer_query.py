from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal, Sequence

from pricedesk.domain.offer import Offer


OfferSortKey = Literal["observed_at", "supplier", "source_sku", "price", "currency", "product_id"]

SORT_KEYS: tuple[str, ...] = ("observed_at", "supplier", "source_sku", "price", "currency", "product_id")
PAGE_SIZES: tuple[int, ...] = (25, 50, 100)
DEFAULT_PAGE_SIZE = 25


def _needle(text: str) -> str | None:
    s = text.strip()
    return s or None


@dataclass(frozen=True)
class OfferQuery:
    """
    Listing state for the offer table: filters, sort, page.

    Every transition returns a new query. Any change that reshapes the
    result set (sort key, direction, filters, page size) goes back to page 0.
    """
    supplier_filter: str = ""
    sku_filter: str = ""
    sort_key: OfferSortKey = "observed_at"
    sort_asc: bool = False  # newest first
    page: int = 0
    page_size: int = DEFAULT_PAGE_SIZE

    def __post_init__(self) -> None:
        if self.supplier_filter is None:
            object.__setattr__(self, "supplier_filter", "")
        if self.sku_filter is None:
            object.__setattr__(self, "sku_filter", "")
        if not isinstance(self.supplier_filter, str) or not isinstance(self.sku_filter, str):
            raise ValueError("offer_query filters must be strings")
        if self.sort_key not in SORT_KEYS:
            raise ValueError(f"offer_query.sort_key must be one of {', '.join(SORT_KEYS)}")
        if not isinstance(self.page, int) or isinstance(self.page, bool) or self.page < 0:
            raise ValueError("offer_query.page must be an integer >= 0")
        if self.page_size not in PAGE_SIZES:
            raise ValueError(f"offer_query.page_size must be one of {PAGE_SIZES}")

    # -------- filters --------
    @property
    def supplier_needle(self) -> str | None:
        return _needle(self.supplier_filter)

    @property
    def sku_needle(self) -> str | None:
        return _needle(self.sku_filter)

    @property
    def has_filter(self) -> bool:
        return self.supplier_needle is not None or self.sku_needle is not None

    # -------- pagination --------
    @property
    def offset(self) -> int:
        return self.page * self.page_size

    @property
    def row_range(self) -> tuple[int, int]:
        """Inclusive zero-based (first, last) row indexes of the page."""
        return self.offset, self.offset + self.page_size - 1

    @property
    def has_previous(self) -> bool:
        return self.page > 0

    # -------- transitions --------
    def toggle_sort(self, key: OfferSortKey) -> "OfferQuery":
        if key == self.sort_key:
            return replace(self, sort_asc=not self.sort_asc, page=0)
        return replace(self, sort_key=key, sort_asc=True, page=0)

    def with_filters(self, *, supplier: str | None = None, sku: str | None = None) -> "OfferQuery":
        return replace(self, supplier_filter=supplier or "", sku_filter=sku or "", page=0)

    def with_page_size(self, page_size: int) -> "OfferQuery":
        return replace(self, page_size=page_size, page=0)

    def next_page(self) -> "OfferQuery":
        return replace(self, page=self.page + 1)

    def previous_page(self) -> "OfferQuery":
        return replace(self, page=max(0, self.page - 1))


def has_next_page(returned_rows: int, page_size: int) -> bool:
    """
    Optimistic: a full page means more rows *may* exist.
    A result set of exactly `page_size` rows reports a next page that is
    empty; this is accepted (no extra count query).
    """
    return returned_rows == page_size


def matches_filters(offer: Offer, query: OfferQuery) -> bool:
    sup = query.supplier_needle
    sku = query.sku_needle
    if sup is None and sku is None:
        return True
    # OR, not AND: either column may match its own needle
    if sup is not None and offer.supplier is not None and sup.lower() in offer.supplier.lower():
        return True
    if sku is not None and offer.source_sku is not None and sku.lower() in offer.source_sku.lower():
        return True
    return False


def sort_offers(offers: Sequence[Offer], query: OfferQuery) -> list[Offer]:
    # nulls last en asc, first en desc (comme le store), puis id en tie-breaker
    def key(o: Offer):
        v = getattr(o, query.sort_key)
        return (v is None, v, o.id)

    return sorted(offers, key=key, reverse=not query.sort_asc)


def apply_offer_query(offers: Sequence[Offer], query: OfferQuery) -> list[Offer]:
    """Filter, sort and slice a list of offers in memory, one page."""
    out = [o for o in offers if matches_filters(o, query)]
    out = sort_offers(out, query)
    return out[query.offset:query.offset + query.page_size]

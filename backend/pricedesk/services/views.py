from __future__ import annotations

import asyncio
import datetime as dt
import logging

from pricedesk.domain.date_range import DateRange
from pricedesk.engine.offer_query import OfferQuery, OfferSortKey
from pricedesk.engine.range_resolver import DEFAULT_PRESET, RangePreset, resolve_range
from pricedesk.repositories.offer_repository import OfferRepository
from pricedesk.repositories.price_history_repository import PriceHistoryRepository
from pricedesk.services.load_guard import LoadGuard
from pricedesk.services.offer_listing_service import OfferPage, load_offer_page
from pricedesk.services.price_series_service import ProductDetail, load_product_detail
from pricedesk.settings import get_settings


logger = logging.getLogger(__name__)


class OfferListView:
    """
    State of the offer listing: the current query and the last page loaded.

    Transitions only change `query`; `refresh()` loads it. Loads run in a
    worker thread with a timeout and a superseded load never writes back.
    """

    def __init__(
        self,
        repo: OfferRepository,
        *,
        query: OfferQuery | None = None,
        include_total: bool = False,
        timeout_sec: float | None = None,
    ) -> None:
        self._repo = repo
        self._include_total = include_total
        # None -> PRICEDESK_QUERY_TIMEOUT_SEC
        self.timeout_sec = timeout_sec if timeout_sec is not None else get_settings().query_timeout_sec
        self._guard = LoadGuard()
        self.query = query or OfferQuery()
        self.page: OfferPage | None = None
        self.loading = False

    def toggle_sort(self, key: OfferSortKey) -> None:
        self.query = self.query.toggle_sort(key)

    def set_filters(self, *, supplier: str | None = None, sku: str | None = None) -> None:
        self.query = self.query.with_filters(supplier=supplier, sku=sku)

    def set_page_size(self, page_size: int) -> None:
        self.query = self.query.with_page_size(page_size)

    def next_page(self) -> None:
        self.query = self.query.next_page()

    def previous_page(self) -> None:
        self.query = self.query.previous_page()

    async def refresh(self) -> OfferPage | None:
        """Load the current query. Returns None when a newer load superseded this one."""
        token = self._guard.begin()
        query = self.query
        self.loading = True

        try:
            try:
                page = await asyncio.wait_for(
                    asyncio.to_thread(load_offer_page, self._repo, query, include_total=self._include_total),
                    timeout=self.timeout_sec,
                )
            except asyncio.TimeoutError:
                logger.warning("Offer listing timed out after %ss (page %s)", self.timeout_sec, query.page)
                page = OfferPage(query=query, error=f"offer listing timed out after {self.timeout_sec:g}s")

            if not self._guard.is_current(token):
                logger.debug("Discarding superseded offers load (token %s, current %s)", token, self._guard.current)
                return None

            self.page = page
            return page
        finally:
            # a newer load owns the flag
            if self._guard.is_current(token):
                self.loading = False


class ProductDetailView:
    """
    State of a product detail page: preset, custom dates, last detail loaded.
    Picking a preset always clears the custom dates.
    """

    def __init__(
        self,
        product_id: str | None,
        *,
        history_repo: PriceHistoryRepository,
        offer_repo: OfferRepository,
        preset: RangePreset | str = DEFAULT_PRESET,
        timeout_sec: float | None = None,
        supplier_sample_limit: int | None = None,
    ) -> None:
        self.product_id = product_id
        self._history_repo = history_repo
        self._offer_repo = offer_repo
        self._guard = LoadGuard()

        if timeout_sec is None or supplier_sample_limit is None:
            settings = get_settings()
            timeout_sec = timeout_sec if timeout_sec is not None else settings.query_timeout_sec
            if supplier_sample_limit is None:
                supplier_sample_limit = settings.supplier_sample_limit
        self.timeout_sec = timeout_sec
        self.supplier_sample_limit = supplier_sample_limit

        self.preset = RangePreset(preset)
        self.custom_from = ""
        self.custom_to = ""
        self.detail: ProductDetail | None = None
        self.loading = False

    def select_preset(self, preset: RangePreset | str) -> None:
        self.preset = RangePreset(preset)
        self.clear_custom_dates()

    def set_custom_from(self, value: str | None) -> None:
        self.custom_from = value or ""

    def set_custom_to(self, value: str | None) -> None:
        self.custom_to = value or ""

    def clear_custom_dates(self) -> None:
        self.custom_from = ""
        self.custom_to = ""

    def effective_range(self, *, today: dt.date | None = None) -> DateRange:
        return resolve_range(self.preset, self.custom_from, self.custom_to, today=today)

    async def refresh(self, *, today: dt.date | None = None) -> ProductDetail | None:
        token = self._guard.begin()
        self.loading = True

        try:
            detail = await self._load(today)

            if not self._guard.is_current(token):
                logger.debug("Discarding superseded detail load for %s (token %s)", self.product_id, token)
                return None

            self.detail = detail
            return detail
        finally:
            if self._guard.is_current(token):
                self.loading = False

    async def _load(self, today: dt.date | None) -> ProductDetail:
        try:
            date_range = self.effective_range(today=today)
        except ValueError as e:
            return ProductDetail(product_id=self.product_id, date_range=DateRange(), error=str(e))

        try:
            return await asyncio.wait_for(
                asyncio.to_thread(
                    load_product_detail,
                    product_id=self.product_id,
                    date_range=date_range,
                    history_repo=self._history_repo,
                    offer_repo=self._offer_repo,
                    supplier_sample_limit=self.supplier_sample_limit,
                ),
                timeout=self.timeout_sec,
            )
        except asyncio.TimeoutError:
            logger.warning("Product detail for %s timed out after %ss", self.product_id, self.timeout_sec)
            return ProductDetail(
                product_id=self.product_id,
                date_range=date_range,
                error=f"product detail timed out after {self.timeout_sec:g}s",
            )

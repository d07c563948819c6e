import asyncio
import datetime as dt
import threading
from decimal import Decimal

import pytest

from pricedesk.domain.offer import Offer
from pricedesk.engine.range_resolver import RangePreset
from pricedesk.repositories.in_memory_offer_repository import InMemoryOfferRepository
from pricedesk.services.load_guard import LoadGuard
from pricedesk.services.views import OfferListView, ProductDetailView

TODAY = dt.date(2026, 10, 19)


@pytest.fixture(autouse=True)
def settings_env(monkeypatch, tmp_path):
    monkeypatch.setenv("PRICEDESK_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("PRICEDESK_QUERY_TIMEOUT_SEC", raising=False)
    monkeypatch.delenv("PRICEDESK_SUPPLIER_SAMPLE_LIMIT", raising=False)


class GatedRepository(InMemoryOfferRepository):
    """First list_page call blocks until the gate opens; later calls go through."""

    def __init__(self, gate: threading.Event) -> None:
        super().__init__()
        self._gate = gate
        self._calls = 0
        self._lock = threading.Lock()

    def list_page(self, query):
        with self._lock:
            self._calls += 1
            first = self._calls == 1
        if first:
            self._gate.wait(timeout=5)
        return super().list_page(query)

    def daily_series(self, *, product_id, date_range):
        self._gate.wait(timeout=5)
        return super().daily_series(product_id=product_id, date_range=date_range)


def seed(repo: InMemoryOfferRepository) -> InMemoryOfferRepository:
    for i, supplier in enumerate(["acme", "globex", "acme", "initech"]):
        repo.add(
            Offer(
                id=f"o{i}",
                supplier=supplier,
                source_sku=f"SKU-{i}",
                price=Decimal(10 + i),
                currency="EUR",
                observed_at=dt.datetime(2026, 10, 1 + i, 12, 0, tzinfo=dt.timezone.utc),
                product_id="P",
            )
        )
    return repo


def test_load_guard_tokens():
    g = LoadGuard()
    t1 = g.begin()
    t2 = g.begin()
    assert not g.is_current(t1)
    assert g.is_current(t2)


def test_list_view_transitions_reset_page():
    view = OfferListView(InMemoryOfferRepository())
    view.next_page()
    view.next_page()
    assert view.query.page == 2
    view.toggle_sort("price")
    assert (view.query.sort_key, view.query.sort_asc, view.query.page) == ("price", True, 0)
    view.next_page()
    view.set_filters(supplier="acme")
    assert view.query.page == 0
    view.next_page()
    view.set_page_size(50)
    assert view.query.page == 0
    view.previous_page()
    assert view.query.page == 0


def test_list_view_refresh_stores_page():
    view = OfferListView(seed(InMemoryOfferRepository()), include_total=True)
    page = asyncio.run(view.refresh())
    assert page is view.page
    assert [o.id for o in page.rows] == ["o3", "o2", "o1", "o0"]
    assert page.total == 4
    assert view.loading is False


def test_stale_listing_response_does_not_overwrite_newer_one():
    async def scenario():
        gate = threading.Event()
        view = OfferListView(seed(GatedRepository(gate)))
        try:
            slow = asyncio.create_task(view.refresh())
            await asyncio.sleep(0.05)  # slow load is now blocked in its thread

            view.set_filters(supplier="globex")
            fresh = await view.refresh()
        finally:
            gate.set()
        stale = await slow
        return view, fresh, stale

    view, fresh, stale = asyncio.run(scenario())
    assert stale is None
    assert view.page is fresh
    assert [o.id for o in view.page.rows] == ["o1"]


def test_listing_timeout_is_a_recoverable_error():
    async def scenario():
        gate = threading.Event()
        view = OfferListView(seed(GatedRepository(gate)), timeout_sec=0.05)
        try:
            return await view.refresh()
        finally:
            gate.set()

    page = asyncio.run(scenario())
    assert page.rows == []
    assert "timed out" in page.error


def test_selecting_a_preset_clears_custom_dates():
    view = ProductDetailView("P", history_repo=InMemoryOfferRepository(), offer_repo=InMemoryOfferRepository())
    assert view.preset == RangePreset.LAST_90_DAYS

    view.set_custom_from("2026-01-01")
    view.set_custom_to("2026-02-01")
    r = view.effective_range(today=TODAY)
    assert (r.date_from, r.date_to) == (dt.date(2026, 1, 1), dt.date(2026, 2, 1))

    view.select_preset("30d")
    assert (view.custom_from, view.custom_to) == ("", "")
    r = view.effective_range(today=TODAY)
    assert (r.date_from, r.date_to) == (dt.date(2026, 9, 19), TODAY)


def test_detail_view_refresh():
    repo = seed(InMemoryOfferRepository())
    view = ProductDetailView("P", history_repo=repo, offer_repo=repo, preset="all")
    detail = asyncio.run(view.refresh(today=TODAY))
    assert detail is view.detail
    assert len(detail.series) == 4
    assert detail.meta.supplier_count == 3
    assert detail.stats.min_price == Decimal("10")


def test_detail_view_invalid_custom_date_is_reported():
    repo = seed(InMemoryOfferRepository())
    view = ProductDetailView("P", history_repo=repo, offer_repo=repo)
    view.set_custom_from("19/10/2026")
    detail = asyncio.run(view.refresh(today=TODAY))
    assert detail.error is not None
    assert detail.series == []


def test_stale_detail_response_is_discarded():
    async def scenario():
        gate = threading.Event()
        slow_repo = seed(GatedRepository(gate))
        view = ProductDetailView("P", history_repo=slow_repo, offer_repo=slow_repo, preset="all")
        try:
            slow = asyncio.create_task(view.refresh(today=TODAY))
            await asyncio.sleep(0.05)
            # switch to a repo that answers at once for the newer load
            fast = seed(InMemoryOfferRepository())
            view._history_repo = fast
            view._offer_repo = fast
            view.select_preset("30d")
            fresh = await view.refresh(today=TODAY)
        finally:
            gate.set()
        stale = await slow
        return view, fresh, stale

    view, fresh, stale = asyncio.run(scenario())
    assert stale is None
    assert view.detail is fresh
    assert fresh.date_range.date_from == dt.date(2026, 9, 19)


class ExplodingRepository(InMemoryOfferRepository):
    def list_page(self, query):
        raise RuntimeError("driver bug")

    def daily_series(self, *, product_id, date_range):
        raise RuntimeError("driver bug")


def test_views_take_timeout_and_sample_limit_from_settings(monkeypatch):
    monkeypatch.setenv("PRICEDESK_QUERY_TIMEOUT_SEC", "2.5")
    monkeypatch.setenv("PRICEDESK_SUPPLIER_SAMPLE_LIMIT", "3")
    repo = InMemoryOfferRepository()

    assert OfferListView(repo).timeout_sec == 2.5
    detail_view = ProductDetailView("P", history_repo=repo, offer_repo=repo)
    assert detail_view.timeout_sec == 2.5
    assert detail_view.supplier_sample_limit == 3

    # explicit arguments win
    assert OfferListView(repo, timeout_sec=0.5).timeout_sec == 0.5


def test_sample_limit_from_settings_caps_supplier_count(monkeypatch):
    monkeypatch.setenv("PRICEDESK_SUPPLIER_SAMPLE_LIMIT", "2")
    repo = seed(InMemoryOfferRepository())
    view = ProductDetailView("P", history_repo=repo, offer_repo=repo, preset="all")
    detail = asyncio.run(view.refresh(today=TODAY))
    # o0 acme, o1 globex: initech (o3) is past the sample
    assert detail.meta.supplier_count == 2


def test_unexpected_error_propagates_and_clears_loading():
    list_view = OfferListView(ExplodingRepository())
    with pytest.raises(RuntimeError):
        asyncio.run(list_view.refresh())
    assert list_view.loading is False
    assert list_view.page is None

    repo = ExplodingRepository()
    detail_view = ProductDetailView("P", history_repo=repo, offer_repo=repo)
    with pytest.raises(RuntimeError):
        asyncio.run(detail_view.refresh(today=TODAY))
    assert detail_view.loading is False

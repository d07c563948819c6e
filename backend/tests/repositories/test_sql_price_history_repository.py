import datetime as dt
from decimal import Decimal

import pytest

from pricedesk.domain.date_range import DateRange
from pricedesk.errors import OfferStoreError
from pricedesk.repositories.sql_offer_repository import OfferRow
from pricedesk.repositories.sql_price_history_repository import SqlPriceHistoryRepository

UTC = dt.timezone.utc


def obs(id: str, price: str | None, at: dt.datetime | None, product_id: str | None = "P") -> OfferRow:
    return OfferRow(
        id=id,
        supplier="s",
        source_sku="K",
        price=None if price is None else Decimal(price),
        currency="EUR",
        observed_at=at,
        product_id=product_id,
    )


def at(day: int, hour: int = 12) -> dt.datetime:
    return dt.datetime(2026, 2, day, hour, 0, tzinfo=UTC)


@pytest.fixture
def repo(session_factory):
    return SqlPriceHistoryRepository(session_factory=session_factory)


@pytest.fixture
def seeded(session_factory):
    with session_factory() as s:
        s.add_all(
            [
                obs("a", "10", at(5, 8)),
                obs("b", "20", at(5, 20)),
                obs("c", "12", at(7)),
                obs("d", "14", at(9)),
                obs("e", None, at(9)),          # no price: not aggregated
                obs("f", "99", None),           # no timestamp: not aggregated
                obs("g", "1", at(5), product_id="Q"),
            ]
        )
        s.commit()


def test_same_day_offers_collapse_into_one_point(repo, seeded):
    series = repo.daily_series(product_id="P", date_range=DateRange())
    first = series[0]
    assert first.day == dt.date(2026, 2, 5)
    assert first.samples == 2
    assert first.min_price == Decimal("10")
    assert first.max_price == Decimal("20")
    assert first.avg_price == Decimal("15")


def test_series_is_ascending_without_gap_filling(repo, seeded):
    series = repo.daily_series(product_id="P", date_range=DateRange())
    assert [p.day for p in series] == [dt.date(2026, 2, 5), dt.date(2026, 2, 7), dt.date(2026, 2, 9)]
    assert series[-1].samples == 1


def test_bounds_are_inclusive_and_optional(repo, seeded):
    r = DateRange(date_from=dt.date(2026, 2, 7), date_to=dt.date(2026, 2, 9))
    assert [p.day.day for p in repo.daily_series(product_id="P", date_range=r)] == [7, 9]

    only_to = DateRange(date_to=dt.date(2026, 2, 7))
    assert [p.day.day for p in repo.daily_series(product_id="P", date_range=only_to)] == [5, 7]

    only_from = DateRange(date_from=dt.date(2026, 2, 8))
    assert [p.day.day for p in repo.daily_series(product_id="P", date_range=only_from)] == [9]


def test_unknown_product_has_empty_series(repo, seeded):
    assert repo.daily_series(product_id="nope", date_range=DateRange()) == []


def test_view_failure_is_wrapped(broken_session_factory):
    repo = SqlPriceHistoryRepository(session_factory=broken_session_factory)
    with pytest.raises(OfferStoreError):
        repo.daily_series(product_id="P", date_range=DateRange())


def test_day_bucket_follows_utc_not_the_offer_offset(repo, session_factory):
    plus_two = dt.timezone(dt.timedelta(hours=2))
    with session_factory() as s:
        s.add_all(
            [
                obs("x", "10", dt.datetime(2026, 1, 2, 1, 0, tzinfo=plus_two), product_id="TZ"),
                obs("y", "20", dt.datetime(2026, 1, 2, 3, 0, tzinfo=plus_two), product_id="TZ"),
            ]
        )
        s.commit()

    series = repo.daily_series(product_id="TZ", date_range=DateRange())
    assert [(p.day, p.samples) for p in series] == [(dt.date(2026, 1, 1), 1), (dt.date(2026, 1, 2), 1)]
    assert series[0].min_price == Decimal("10")

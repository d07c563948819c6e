from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Callable

from sqlalchemy import Column, Date, Integer, MetaData, Numeric, String, Table, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from pricedesk.db import PRICE_HISTORY_VIEW, init_db, new_session
from pricedesk.domain.daily_price_point import DailyPricePoint
from pricedesk.domain.date_range import DateRange
from pricedesk.errors import OfferStoreError
from pricedesk.repositories.price_history_repository import PriceHistoryRepository


# The view is owned by the store (see db.price_history_view_sql); it lives in
# its own MetaData so create_all never tries to create it as a table.
_view_metadata = MetaData()

price_history_view = Table(
    PRICE_HISTORY_VIEW,
    _view_metadata,
    Column("product_id", String(64)),
    Column("day", Date),
    Column("samples", Integer),
    Column("min_price", Numeric(24, 10)),
    Column("avg_price", Numeric(24, 10)),
    Column("max_price", Numeric(24, 10)),
)


class SqlPriceHistoryRepository(PriceHistoryRepository):
    def __init__(self, *, session_factory: Callable[[], Session] | None = None) -> None:
        if session_factory is None:
            init_db()
            session_factory = new_session
        self._session = session_factory

    def daily_series(self, *, product_id: str, date_range: DateRange) -> list[DailyPricePoint]:
        v = price_history_view.c
        stmt = select(price_history_view).where(v.product_id == product_id)
        if date_range.date_from is not None:
            stmt = stmt.where(v.day >= date_range.date_from)
        if date_range.date_to is not None:
            stmt = stmt.where(v.day <= date_range.date_to)
        stmt = stmt.order_by(v.day.asc())

        try:
            with self._session() as s:
                rows = s.execute(stmt).all()
        except SQLAlchemyError as e:
            cause = getattr(e, "orig", None) or e
            raise OfferStoreError(f"price history query failed: {cause}") from e

        return [self._to_domain(r) for r in rows]

    @staticmethod
    def _to_domain(r) -> DailyPricePoint:
        day = r.day
        if isinstance(day, dt.datetime):
            day = day.date()
        return DailyPricePoint(
            product_id=r.product_id,
            day=day,
            samples=int(r.samples),
            min_price=Decimal(r.min_price),
            avg_price=Decimal(r.avg_price),
            max_price=Decimal(r.max_price),
        )

from __future__ import annotations

import datetime as dt
from decimal import Decimal
from typing import Callable

from sqlalchemy import Numeric, Select, String, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Mapped, Session, mapped_column

from pricedesk.db import OFFERS_TABLE, init_db, new_session
from pricedesk.db_base import Base, UtcDateTime
from pricedesk.domain.offer import Offer
from pricedesk.engine.offer_query import OfferQuery
from pricedesk.errors import OfferStoreError
from pricedesk.repositories.offer_repository import OfferRepository


class OfferRow(Base):
    __tablename__ = OFFERS_TABLE

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    supplier: Mapped[str | None] = mapped_column(String(256), index=True, nullable=True)
    source_sku: Mapped[str | None] = mapped_column(String(128), index=True, nullable=True)
    price: Mapped[Decimal | None] = mapped_column(Numeric(24, 10), nullable=True)
    currency: Mapped[str | None] = mapped_column(String(8), nullable=True)
    observed_at: Mapped[dt.datetime | None] = mapped_column(UtcDateTime(), index=True, nullable=True)
    product_id: Mapped[str | None] = mapped_column(String(64), index=True, nullable=True)


_SORT_COLUMNS = {
    "observed_at": OfferRow.observed_at,
    "supplier": OfferRow.supplier,
    "source_sku": OfferRow.source_sku,
    "price": OfferRow.price,
    "currency": OfferRow.currency,
    "product_id": OfferRow.product_id,
}


def offer_filter_clause(query: OfferQuery):
    """OR of the non-blank needles, or None when there is nothing to filter on."""
    clauses = []
    if query.supplier_needle is not None:
        clauses.append(OfferRow.supplier.icontains(query.supplier_needle, autoescape=True))
    if query.sku_needle is not None:
        clauses.append(OfferRow.source_sku.icontains(query.sku_needle, autoescape=True))
    if not clauses:
        return None
    return or_(*clauses)


def build_offer_select(query: OfferQuery) -> Select:
    stmt = select(OfferRow)

    clause = offer_filter_clause(query)
    if clause is not None:
        stmt = stmt.where(clause)

    # NULLs placed explicitly so SQLite and Postgres return the same order
    col = _SORT_COLUMNS[query.sort_key]
    if query.sort_asc:
        stmt = stmt.order_by(col.asc().nulls_last(), OfferRow.id.asc())
    else:
        stmt = stmt.order_by(col.desc().nulls_first(), OfferRow.id.desc())

    first, last = query.row_range
    return stmt.offset(first).limit(last - first + 1)


def _store_error(e: SQLAlchemyError) -> OfferStoreError:
    cause = getattr(e, "orig", None) or e
    return OfferStoreError(f"offer store query failed: {cause}")


class SqlOfferRepository(OfferRepository):
    def __init__(self, *, session_factory: Callable[[], Session] | None = None) -> None:
        if session_factory is None:
            # ensure tables/view exist on the configured DB
            init_db()
            session_factory = new_session
        self._session = session_factory

    def list_page(self, query: OfferQuery) -> list[Offer]:
        stmt = build_offer_select(query)
        try:
            with self._session() as s:
                rows = s.execute(stmt).scalars().all()
        except SQLAlchemyError as e:
            raise _store_error(e) from e

        return [self._to_domain(r) for r in rows]

    def count(self, query: OfferQuery) -> int:
        stmt = select(func.count()).select_from(OfferRow)
        clause = offer_filter_clause(query)
        if clause is not None:
            stmt = stmt.where(clause)

        try:
            with self._session() as s:
                return int(s.execute(stmt).scalar_one())
        except SQLAlchemyError as e:
            raise _store_error(e) from e

    def latest_for_product(self, *, product_id: str) -> Offer | None:
        # ties on observed_at: whichever id sorts last wins
        stmt = (
            select(OfferRow)
            .where(OfferRow.product_id == product_id)
            .order_by(OfferRow.observed_at.desc().nulls_last(), OfferRow.id.desc())
            .limit(1)
        )
        try:
            with self._session() as s:
                row = s.execute(stmt).scalars().first()
        except SQLAlchemyError as e:
            raise _store_error(e) from e

        return None if row is None else self._to_domain(row)

    def sample_suppliers(self, *, product_id: str, limit: int) -> list[str]:
        if limit < 1:
            raise ValueError("limit must be >= 1")

        stmt = (
            select(OfferRow.supplier)
            .where(OfferRow.product_id == product_id)
            .where(OfferRow.supplier.is_not(None))
            .order_by(OfferRow.id)
            .limit(limit)
        )
        try:
            with self._session() as s:
                return list(s.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            raise _store_error(e) from e

    @staticmethod
    def _to_domain(r: OfferRow) -> Offer:
        return Offer(
            id=r.id,
            supplier=r.supplier,
            source_sku=r.source_sku,
            price=None if r.price is None else Decimal(r.price),
            currency=r.currency,
            observed_at=r.observed_at,  # UTC, see UtcDateTime
            product_id=r.product_id,
        )

from __future__ import annotations

from functools import lru_cache

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from pricedesk.settings import get_settings


OFFERS_TABLE = "supplier_offers"
PRICE_HISTORY_VIEW = "v_price_history"

# Daily aggregate view over offers: one row per (product_id, UTC day).
# Offers without product, price or timestamp never contribute to a day.
_PRICE_HISTORY_VIEW_SQL = {
    "sqlite": f"""
CREATE VIEW {PRICE_HISTORY_VIEW} AS
SELECT
    product_id,
    date(observed_at) AS day,
    COUNT(*) AS samples,
    MIN(price) AS min_price,
    AVG(price) AS avg_price,
    MAX(price) AS max_price
FROM {OFFERS_TABLE}
WHERE product_id IS NOT NULL
  AND price IS NOT NULL
  AND observed_at IS NOT NULL
GROUP BY product_id, date(observed_at)
""",
    "postgresql": f"""
CREATE OR REPLACE VIEW {PRICE_HISTORY_VIEW} AS
SELECT
    product_id,
    (observed_at AT TIME ZONE 'UTC')::date AS day,
    COUNT(*)::integer AS samples,
    MIN(price) AS min_price,
    AVG(price) AS avg_price,
    MAX(price) AS max_price
FROM {OFFERS_TABLE}
WHERE product_id IS NOT NULL
  AND price IS NOT NULL
  AND observed_at IS NOT NULL
GROUP BY product_id, (observed_at AT TIME ZONE 'UTC')::date
""",
}


def _default_sqlite_url() -> str:
    # fallback dev: backend/data/pricedesk.db
    settings = get_settings()
    db_path = settings.data_dir / "pricedesk.db"
    return f"sqlite:///{db_path.as_posix()}"


def get_database_url() -> str:
    url = get_settings().database_url
    if url:
        return url
    return _default_sqlite_url()


@lru_cache
def get_engine() -> Engine:
    url = get_database_url()

    # sqlite needs check_same_thread for FastAPI sync access
    connect_args = {}
    if url.startswith("sqlite:///"):
        connect_args = {"check_same_thread": False}

    return create_engine(url, future=True, connect_args=connect_args)


@lru_cache
def get_session_factory() -> sessionmaker[Session]:
    return sessionmaker(bind=get_engine(), autoflush=False, autocommit=False, future=True)


def new_session() -> Session:
    return get_session_factory()()


def price_history_view_sql(dialect_name: str) -> str:
    try:
        return _PRICE_HISTORY_VIEW_SQL[dialect_name]
    except KeyError:
        raise ValueError(f"no {PRICE_HISTORY_VIEW} definition for dialect '{dialect_name}'") from None


def ensure_price_history_view(engine: Engine) -> None:
    if PRICE_HISTORY_VIEW in inspect(engine).get_view_names():
        return
    sql = price_history_view_sql(engine.dialect.name)
    with engine.begin() as conn:
        conn.execute(text(sql))


def init_db(engine: Engine | None = None) -> None:
    # import here to avoid circular imports
    from pricedesk.repositories.sql_offer_repository import Base  # noqa

    engine = engine or get_engine()
    Base.metadata.create_all(engine)
    ensure_price_history_view(engine)

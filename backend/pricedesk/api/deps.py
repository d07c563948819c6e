from __future__ import annotations

from functools import lru_cache

from pricedesk.repositories.sql_offer_repository import SqlOfferRepository
from pricedesk.repositories.sql_price_history_repository import SqlPriceHistoryRepository
from pricedesk.settings import Settings, get_settings


@lru_cache
def get_app_settings() -> Settings:
    return get_settings()


@lru_cache
def get_offer_repo() -> SqlOfferRepository:
    return SqlOfferRepository()


@lru_cache
def get_price_history_repo() -> SqlPriceHistoryRepository:
    return SqlPriceHistoryRepository()

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from pricedesk.api.deps import get_app_settings, get_offer_repo, get_price_history_repo
from pricedesk.api.mappers.offer_mapper import detail_to_response
from pricedesk.api.schemas.products import ProductDetailOut
from pricedesk.engine.range_resolver import DEFAULT_PRESET, RangePreset, resolve_range
from pricedesk.repositories.offer_repository import OfferRepository
from pricedesk.repositories.price_history_repository import PriceHistoryRepository
from pricedesk.services.price_series_service import load_product_detail
from pricedesk.settings import Settings


router = APIRouter(prefix="/products", tags=["products"])


@router.get("/{product_id}", response_model=ProductDetailOut)
def product_detail(
    product_id: str,
    preset: RangePreset = Query(default=DEFAULT_PRESET),
    date_from: str | None = Query(default=None, description="YYYY-MM-DD, overrides the preset start"),
    date_to: str | None = Query(default=None, description="YYYY-MM-DD, overrides the preset end"),
    offer_repo: OfferRepository = Depends(get_offer_repo),
    history_repo: PriceHistoryRepository = Depends(get_price_history_repo),
    settings: Settings = Depends(get_app_settings),
) -> ProductDetailOut:
    try:
        date_range = resolve_range(preset, date_from, date_to)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    detail = load_product_detail(
        product_id=product_id,
        date_range=date_range,
        history_repo=history_repo,
        offer_repo=offer_repo,
        supplier_sample_limit=settings.supplier_sample_limit,
    )
    if detail.error is not None:
        raise HTTPException(status_code=503, detail=detail.error)

    return detail_to_response(product_id, detail)

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from pricedesk.api.deps import get_offer_repo
from pricedesk.api.mappers.offer_mapper import offer_page_to_response
from pricedesk.api.schemas.offers import OfferPageOut
from pricedesk.engine.offer_query import DEFAULT_PAGE_SIZE, OfferQuery
from pricedesk.repositories.offer_repository import OfferRepository
from pricedesk.services.offer_listing_service import load_offer_page


router = APIRouter(prefix="/offers", tags=["offers"])


@router.get("", response_model=OfferPageOut)
def list_offers(
    supplier: str | None = Query(default=None, description="case-insensitive substring, OR-ed with sku"),
    sku: str | None = Query(default=None, description="case-insensitive substring, OR-ed with supplier"),
    sort_by: str = Query(
        default="observed_at",
        pattern="^(observed_at|supplier|source_sku|price|currency|product_id)$",
    ),
    sort_dir: str = Query(default="desc", pattern="^(asc|desc)$"),
    page: int = Query(default=0, ge=0),
    page_size: int = Query(default=DEFAULT_PAGE_SIZE, description="one of 25, 50, 100"),
    with_total: bool = Query(default=False),
    repo: OfferRepository = Depends(get_offer_repo),
) -> OfferPageOut:
    try:
        query = OfferQuery(
            supplier_filter=supplier or "",
            sku_filter=sku or "",
            sort_key=sort_by,  # type: ignore[arg-type]
            sort_asc=(sort_dir == "asc"),
            page=page,
            page_size=page_size,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    result = load_offer_page(repo, query, include_total=with_total)
    if result.error is not None:
        raise HTTPException(status_code=503, detail=result.error)

    return offer_page_to_response(result)

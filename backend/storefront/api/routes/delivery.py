from fastapi import APIRouter, Query

from storefront.domain.delivery import list_regions, quote, regions_by_area

router = APIRouter()


@router.get("/regions")
async def get_regions():
    """Delivery fee table, flat and grouped by area."""
    return {"regions": list_regions(), "areas": regions_by_area()}


@router.get("/quote")
async def get_quote(
    region: str = Query(..., min_length=1),
    subtotal: float = Query(0, ge=0),
):
    return quote(region, subtotal)

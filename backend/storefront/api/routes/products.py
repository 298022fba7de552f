"""Product catalog routes. Reads are public, writes need an admin."""

from typing import Any

from fastapi import APIRouter, Body, Depends, Query

from storefront.api.deps import get_event_tracker, get_product_repository
from storefront.core.auth import Identity, require_admin
from storefront.domain.events import EventType
from storefront.services.event_tracker import EventTracker
from storefront.services.repositories import ProductRepository

router = APIRouter()


@router.get("")
async def list_products(
    store: str | None = Query(None, description="Store filter, e.g. main or lingerie"),
    products: ProductRepository = Depends(get_product_repository),
    tracker: EventTracker = Depends(get_event_tracker),
):
    """List products, optionally for one store. Counts as a page view."""
    items = await products.list_for_store(store)
    await tracker.record(EventType.PAGE_VIEW, {"page": "products", "store": store})
    return {"products": items}


@router.get("/{product_id}")
async def get_product(
    product_id: str,
    products: ProductRepository = Depends(get_product_repository),
):
    """Single product. Counts as a product view."""
    product = await products.view(product_id)
    return {"product": product}


@router.post("")
async def upsert_product(
    product: dict[str, Any] = Body(...),
    products: ProductRepository = Depends(get_product_repository),
    _: Identity = Depends(require_admin),
):
    """Create or replace a product."""
    product_id = await products.upsert(product)
    return {"success": True, "id": product_id}


@router.delete("/{product_id}")
async def delete_product(
    product_id: str,
    products: ProductRepository = Depends(get_product_repository),
    _: Identity = Depends(require_admin),
):
    await products.remove(product_id)
    return {"success": True}

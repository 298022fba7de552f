from typing import Any

from fastapi import APIRouter, Body, Depends

from storefront.api.deps import get_category_repository
from storefront.core.auth import Identity, require_admin
from storefront.services.repositories import CategoryRepository

router = APIRouter()


@router.get("/{store}")
async def get_categories(
    store: str,
    categories: CategoryRepository = Depends(get_category_repository),
):
    return {"categories": await categories.get(store)}


@router.post("/{store}")
async def replace_categories(
    store: str,
    body: dict[str, Any] = Body(...),
    categories: CategoryRepository = Depends(get_category_repository),
    _: Identity = Depends(require_admin),
):
    """Replace the store's category list wholesale."""
    saved = await categories.replace(store, body.get("categories"))
    return {"success": True, "categories": saved}

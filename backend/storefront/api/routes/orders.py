"""Order routes.

Customers place orders without an account; listing and status changes are
admin-only. Orders are never deleted.
"""

from typing import Any

from fastapi import APIRouter, Body, Depends

from storefront.api.deps import get_order_repository
from storefront.core.auth import Identity, require_admin
from storefront.core.config import get_settings
from storefront.domain.checkout import build_checkout_message, build_checkout_url
from storefront.services.repositories import OrderRepository

router = APIRouter()


@router.post("")
async def create_order(
    order: dict[str, Any] = Body(...),
    orders: OrderRepository = Depends(get_order_repository),
):
    """Place an order. Returns a WhatsApp confirmation link when one is configured."""
    record = await orders.create(order)

    response: dict[str, Any] = {"success": True, "orderId": record["id"]}
    settings = get_settings()
    if settings.whatsapp_number:
        message = build_checkout_message(
            record,
            store_name=settings.store_name,
            currency=settings.currency,
            payment_instructions=settings.payment_instructions,
        )
        response["checkoutUrl"] = build_checkout_url(settings.whatsapp_number, message)
    return response


@router.get("")
async def list_orders(
    orders: OrderRepository = Depends(get_order_repository),
    _: Identity = Depends(require_admin),
):
    return {"orders": await orders.list()}


@router.patch("/{order_id}")
async def update_order(
    order_id: str,
    updates: dict[str, Any] = Body(...),
    orders: OrderRepository = Depends(get_order_repository),
    _: Identity = Depends(require_admin),
):
    """Merge fields (usually ``status``) into an order. Any status may follow any other."""
    merged = await orders.patch(order_id, updates)
    return {"success": True, "order": merged}

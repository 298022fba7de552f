"""Order confirmation over WhatsApp.

Orders are confirmed by the customer messaging the shop: we render the order
as a chat message and hand back a ``wa.me`` deep link carrying it.
"""

import html
from typing import Any
from urllib.parse import quote


def _amount(value: Any) -> str:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return str(value)
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:,.2f}"


def _text(order: dict, field: str, fallback: str) -> str:
    # Stored free text is HTML-escaped; the chat message wants it readable
    value = order.get(field)
    if value is None or value == "":
        return fallback
    return html.unescape(str(value))


def build_checkout_message(
    order: dict[str, Any],
    store_name: str,
    currency: str = "KSh",
    payment_instructions: str = "",
) -> str:
    lines = [f"🛍️ *New Order from {store_name}*", ""]

    items = order.get("items")
    for item in items if isinstance(items, list) else ():
        if not isinstance(item, dict):
            continue
        quantity = item.get("quantity") or 1
        name = html.unescape(str(item.get("name", item.get("id", "Item"))))
        lines.append(f"📦 *{name}* x{quantity} @ {currency} {_amount(item.get('price', 0))}")

    delivery_fee = order.get("deliveryFee")
    if delivery_fee is not None:
        fee = "FREE" if delivery_fee == 0 else _amount(delivery_fee)
        lines.append(f"🚚 *Delivery Fee:* {currency} {fee}")
    lines.append(f"💳 *Total:* {currency} {_amount(order.get('total', 0))}")

    lines += [
        "",
        "👤 *Customer Details:*",
        f"• Name: {_text(order, 'customerName', 'Not provided')}",
        f"• Phone: {_text(order, 'phone', 'Not provided')}",
        f"• Email: {_text(order, 'email', 'Not provided')}",
        f"• Location: {_text(order, 'location', 'Not provided')}",
        "",
        "📝 *Additional Notes:*",
        _text(order, "notes", "None"),
    ]

    if payment_instructions:
        lines += ["", f"💳 *Payment:* {payment_instructions}"]

    if order.get("id"):
        lines += ["", f"Ref: {order['id']}"]

    return "\n".join(lines).strip()


def build_checkout_url(whatsapp_number: str, message: str) -> str:
    digits = "".join(ch for ch in whatsapp_number if ch.isdigit())
    return f"https://wa.me/{digits}?text={quote(message, safe='')}"

"""End-to-end order flow: public checkout, admin review, dashboard rollup."""

from unittest.mock import patch

import pytest

from storefront.core.config import get_settings

pytestmark = pytest.mark.integration

ORDER = {
    "customerName": "Jane",
    "phone": "+254700000000",
    "total": 5000,
    "location": "Karen",
    "deliveryFee": 500,
    "items": [{"id": "products:main:1", "name": "Silk Robe", "price": 2250, "quantity": 2}],
}


def test_order_placed_shows_up_for_admin_and_in_dashboard(api_client, admin_headers):
    created = api_client.post("/api/orders", json=ORDER)

    assert created.status_code == 200
    body = created.json()
    assert body["success"] is True
    assert body["orderId"].startswith("orders:")

    listed = api_client.get("/api/orders", headers=admin_headers)
    assert listed.status_code == 200
    [order] = listed.json()["orders"]
    assert order["id"] == body["orderId"]
    assert order["status"] == "pending"
    assert order["customerName"] == "Jane"

    dashboard = api_client.get("/api/analytics/dashboard", headers=admin_headers).json()
    assert dashboard["today"]["orders"] == 1
    assert dashboard["today"]["revenue"] == 5000
    assert dashboard["pendingOrders"] == 1
    assert dashboard["summary"]["totalRevenue"] == 5000


def test_customer_cannot_choose_status(api_client, admin_headers):
    api_client.post("/api/orders", json={**ORDER, "status": "completed"})

    [order] = api_client.get("/api/orders", headers=admin_headers).json()["orders"]

    assert order["status"] == "pending"


def test_missing_phone_is_400_naming_field(api_client):
    response = api_client.post("/api/orders", json={**ORDER, "phone": ""})

    assert response.status_code == 400
    assert response.json()["error"] == "Missing required field: phone"


def test_admin_updates_status(api_client, admin_headers):
    order_id = api_client.post("/api/orders", json=ORDER).json()["orderId"]

    response = api_client.patch(f"/api/orders/{order_id}", json={"status": "shipped"}, headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["order"]["status"] == "shipped"
    [order] = api_client.get("/api/orders", headers=admin_headers).json()["orders"]
    assert order["status"] == "shipped"


def test_updating_unknown_order_is_404(api_client, admin_headers):
    response = api_client.patch("/api/orders/orders:1", json={"status": "shipped"}, headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["error"] == "Order not found"


def test_invalid_status_is_400(api_client, admin_headers):
    order_id = api_client.post("/api/orders", json=ORDER).json()["orderId"]

    response = api_client.patch(f"/api/orders/{order_id}", json={"status": "lost"}, headers=admin_headers)

    assert response.status_code == 400


def test_two_orders_in_same_millisecond_both_stored(api_client, admin_headers):
    first = api_client.post("/api/orders", json=ORDER).json()["orderId"]
    second = api_client.post("/api/orders", json={**ORDER, "customerName": "John"}).json()["orderId"]

    assert first != second
    assert len(api_client.get("/api/orders", headers=admin_headers).json()["orders"]) == 2


def test_checkout_url_returned_when_whatsapp_configured(api_client):
    settings = get_settings().model_copy(update={"whatsapp_number": "254112327141", "store_name": "Sensual Kenya"})

    with patch("storefront.api.routes.orders.get_settings", return_value=settings):
        body = api_client.post("/api/orders", json=ORDER).json()

    assert body["checkoutUrl"].startswith("https://wa.me/254112327141?text=")
    assert "Jane" in body["checkoutUrl"]


def test_no_checkout_url_without_whatsapp_number(api_client):
    settings = get_settings().model_copy(update={"whatsapp_number": ""})

    with patch("storefront.api.routes.orders.get_settings", return_value=settings):
        body = api_client.post("/api/orders", json=ORDER).json()

    assert "checkoutUrl" not in body


def _post_raw(client, body: str, **kwargs):
    # Python's json module accepts NaN/Infinity literals, so clients can send them
    return client.post("/api/orders", content=body, headers={"Content-Type": "application/json"}, **kwargs)


@pytest.mark.parametrize("total", ["NaN", "Infinity", "-Infinity", "1e400"])
def test_non_finite_total_is_rejected_and_admin_views_keep_working(api_client, admin_headers, total):
    response = _post_raw(api_client, f'{{"customerName": "A", "phone": "1", "total": {total}}}')

    assert response.status_code == 400
    assert "total" in response.json()["error"]

    assert api_client.get("/api/orders", headers=admin_headers).json() == {"orders": []}
    assert api_client.get("/api/export/orders", headers=admin_headers).status_code == 200
    report = api_client.get("/api/analytics/sales-report", headers=admin_headers).json()
    assert report["totalSales"] == 0


def test_infinite_item_quantity_is_rejected(api_client, admin_headers):
    response = api_client.post(
        "/api/orders",
        json={**ORDER, "items": [{"id": "p1", "price": 10, "quantity": "inf"}]},
    )

    assert response.status_code == 400
    assert api_client.get("/api/analytics/sales-report", headers=admin_headers).status_code == 200


@pytest.mark.parametrize("items", [["shoe"], 5, "abc"])
def test_malformed_items_rejected_before_anything_is_stored(api_client, admin_headers, items):
    settings = get_settings().model_copy(update={"whatsapp_number": "254112327141"})

    with patch("storefront.api.routes.orders.get_settings", return_value=settings):
        response = api_client.post("/api/orders", json={**ORDER, "items": items})

    assert response.status_code == 400
    assert api_client.get("/api/orders", headers=admin_headers).json() == {"orders": []}


@pytest.mark.parametrize("status", [["shipped"], {"value": "shipped"}])
def test_non_string_status_is_400(api_client, admin_headers, status):
    order_id = api_client.post("/api/orders", json=ORDER).json()["orderId"]

    response = api_client.patch(f"/api/orders/{order_id}", json={"status": status}, headers=admin_headers)

    assert response.status_code == 400
    [order] = api_client.get("/api/orders", headers=admin_headers).json()["orders"]
    assert order["status"] == "pending"


def test_non_finite_total_in_update_is_400(api_client, admin_headers):
    order_id = api_client.post("/api/orders", json=ORDER).json()["orderId"]

    response = api_client.patch(
        f"/api/orders/{order_id}",
        content='{"total": NaN}',
        headers={**admin_headers, "Content-Type": "application/json"},
    )

    assert response.status_code == 400
    assert api_client.get("/api/orders", headers=admin_headers).status_code == 200

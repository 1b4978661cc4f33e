from __future__ import annotations

from storefront.domain.cart.store import CartStore


def _fill_address(client):
    resp = client.put(
        "/checkout/address",
        json={"name": "Ada", "street": "1 Way", "city": "London", "state": "LDN", "zip_code": "N1"},
    )
    assert resp.status_code == 200
    return resp.json()


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok"}


def test_catalog_query_params_run_full_pipeline(client):
    resp = client.get(
        "/catalog/products",
        params={"q": "smart", "category": "Smart Home Devices", "max_price": 2500, "sort": "price_asc"},
    )
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["count"] == 1
    assert [p["id"] for p in payload["products"]] == ["sh-2"]


def test_catalog_lookup_and_listing_endpoints(client):
    assert client.get("/catalog/products/tv-1").json()["name"] == "Vivid 55"
    assert client.get("/catalog/products/missing").status_code == 404
    assert [p["id"] for p in client.get("/catalog/featured").json()["products"]] == ["lap-1", "ph-1"]
    assert "Laptops" in client.get("/catalog/categories").json()["categories"]


def test_cart_mutations_and_pricing(client, sql_slots):
    resp = client.post("/cart/items", json={"product_id": "sh-2"})
    assert resp.status_code == 200
    resp = client.post("/cart/items", json={"product_id": "sh-2"})
    cart = resp.json()
    assert len(cart["lines"]) == 1
    assert cart["lines"][0]["quantity"] == 2
    assert cart["item_count"] == 2
    assert cart["pricing"] == {
        "subtotal": 3998,
        "shipping_fee": 999,
        "total": 4997,
        "free_shipping": False,
        "amount_to_free_shipping": 1002,
    }

    line_id = cart["lines"][0]["line_id"]
    cart = client.put(f"/cart/items/{line_id}", json={"quantity": 3}).json()
    assert cart["pricing"]["shipping_fee"] == 0
    assert CartStore(sql_slots).subtotal_quantity() == 3

    cart = client.put(f"/cart/items/{line_id}", json={"quantity": 0}).json()
    assert cart["lines"] == []


def test_cart_errors_are_mapped(client):
    assert client.post("/cart/items", json={"product_id": "missing"}).status_code == 404
    resp = client.post("/cart/items", json={"product_id": "tv-1", "quantity": 0})
    assert resp.status_code == 422
    assert resp.json()["error"] == "invalid_quantity"
    assert client.delete("/cart/items/unknown").status_code == 200


def test_checkout_rejects_incomplete_address(client):
    client.put("/checkout/address", json={"name": "Ada"})
    resp = client.post("/checkout/advance")
    assert resp.status_code == 409
    body = resp.json()
    assert body["error"] == "step_invalid"
    assert body["missing_fields"] == ["street", "city", "state", "zip_code"]
    assert client.get("/checkout").json()["step"] == "address"


def test_checkout_retreat_from_first_step(client):
    resp = client.post("/checkout/retreat")
    assert resp.status_code == 409
    assert resp.json()["error"] == "no_previous_step"


def test_full_checkout_flow_places_order_and_clears_cart(client):
    client.post("/cart/items", json={"product_id": "tv-1"})
    _fill_address(client)
    assert client.post("/checkout/advance").json()["step"] == "payment"
    client.put("/checkout/payment", json={"method": "PayPal"})
    summary = client.post("/checkout/advance").json()
    assert summary["step"] == "summary"
    assert summary["payment_method"] == "PayPal"

    resp = client.post("/checkout/place")
    assert resp.status_code == 200
    order = resp.json()["order"]
    assert order["total"] == 49999
    assert order["status"] == "placed"
    assert order["order_id"].startswith("WB")
    assert resp.json()["estimated_delivery"].endswith("Z")

    assert client.get("/cart").json()["lines"] == []
    assert client.get("/checkout").json()["step"] == "placed"

    again = client.post("/checkout/place").json()["order"]
    assert again["order_id"] == order["order_id"]

    assert client.post("/checkout/reset").json()["step"] == "address"


def test_address_preset_endpoint(client):
    resp = client.post("/checkout/address/preset/home")
    assert resp.json()["address"]["city"] == "Anytown"
    assert resp.json()["can_advance"] is True
    assert client.post("/checkout/address/preset/nowhere").status_code == 404


def test_place_order_with_empty_cart_is_conflict(client):
    client.post("/checkout/address/preset/demo")
    client.post("/checkout/advance")
    client.post("/checkout/advance")
    resp = client.post("/checkout/place")
    assert resp.status_code == 409
    assert resp.json()["error"] == "step_invalid"

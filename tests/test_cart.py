from main import cart_to_order_items


def test_save_cart_upserts_single_document(client, mongo, cart_item):
    first = client.post("/api/cart", json={"user_id": "jane@printshop.io", "items": [cart_item]})
    assert first.status_code == 200

    cart_item["sizes"] = [{"size": "XL", "quantity": 2}]
    second = client.post("/api/cart", json={"user_id": "jane@printshop.io", "items": [cart_item]})
    assert second.status_code == 200

    assert mongo["cart"].count_documents({"user_id": "jane@printshop.io"}) == 1
    assert first.json()["data"]["cart_id"] == second.json()["data"]["cart_id"]
    stored = mongo["cart"].find_one({"user_id": "jane@printshop.io"})
    assert stored["items"][0]["sizes"] == [{"size": "XL", "quantity": 2}]
    assert stored["created_at"] <= stored["updated_at"]


def test_get_cart_returns_items_or_empty(client, cart_item):
    empty = client.get("/api/cart", params={"user_id": "nobody@printshop.io"})
    assert empty.status_code == 200
    assert empty.json()["data"]["items"] == []

    client.post("/api/cart", json={"user_id": "jane@printshop.io", "items": [cart_item]})
    resp = client.get("/api/cart", params={"user_id": "jane@printshop.io"})
    assert resp.json()["data"]["items"][0]["name"] == "Classic Tee"


def test_get_cart_requires_user_id(client):
    resp = client.get("/api/cart")
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "User ID is required"}


def test_cart_rejects_invalid_items(client, cart_item):
    cart_item["sizes"] = [{"size": "S", "quantity": 0}]
    resp = client.post("/api/cart", json={"user_id": "jane@printshop.io", "items": [cart_item]})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Validation error"


def test_clear_cart(client, mongo, cart_item):
    client.post("/api/cart", json={"user_id": "jane@printshop.io", "items": [cart_item]})
    resp = client.delete("/api/cart", params={"user_id": "jane@printshop.io"})
    assert resp.status_code == 200
    assert mongo["cart"].count_documents({}) == 0


def test_cart_to_order_items_splits_sizes(cart_item):
    lines = cart_to_order_items([cart_item])
    assert [(l.size, l.quantity) for l in lines] == [("S", 1), ("L", 3)]
    assert all(l.price == 19.95 and l.color == "white" for l in lines)


def test_cart_to_order_items_defaults_color(cart_item):
    cart_item.pop("color")
    assert cart_to_order_items([cart_item])[0].color == "#000000"


def test_checkout_creates_order_and_clears_cart(client, mongo, cart_item, shipping):
    client.post("/api/cart", json={"user_id": "jane@printshop.io", "items": [cart_item]})

    resp = client.post("/api/checkout", json={"user_id": "jane@printshop.io", **shipping})
    assert resp.status_code == 201
    order = resp.json()["data"]
    assert order["status"] == "pending"
    assert order["customer_email"] == "jane@printshop.io"
    assert len(order["items"]) == 2
    assert mongo["order"].count_documents({}) == 1
    assert mongo["cart"].count_documents({}) == 0


def test_checkout_with_empty_cart(client, mongo, shipping):
    resp = client.post("/api/checkout", json={"user_id": "jane@printshop.io", **shipping})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Cart is empty"
    assert mongo["order"].count_documents({}) == 0


def test_cart_lookup_with_mixed_case_email(client, mongo, cart_item):
    client.post("/api/cart", json={"user_id": "Jane@PrintShop.IO", "items": [cart_item]})

    resp = client.get("/api/cart", params={"user_id": "Jane@PrintShop.IO"})
    assert len(resp.json()["data"]["items"]) == 1

    client.delete("/api/cart", params={"user_id": "Jane@PrintShop.IO"})
    assert mongo["cart"].count_documents({}) == 0


def test_get_cart_rejects_malformed_user_id(client):
    resp = client.get("/api/cart", params={"user_id": "not-an-email"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Invalid email"

from decimal import Decimal


def _stock(client, headers, item_id):
    resp = client.get(f"/inventory/{item_id}", headers=headers)
    assert resp.status_code == 200
    return resp.json()["totalQuantity"]


def test_create_order_computes_total_and_number(client, make_item, make_order):
    a = make_item("Patila", quantity=10, price="50")
    b = make_item("Tapeli", quantity=5, price="30")

    order = make_order(
        [
            {"item": a["id"], "quantity": 2, "rate": 50},
            {"item": b["id"], "quantity": 1, "rate": 30},
        ],
        totalAmount=130,
    )

    assert order["orderNumber"] == "ORD0001"
    assert order["status"] == "upcoming"
    assert Decimal(order["totalAmount"]) == Decimal("130")
    assert Decimal(order["paidAmount"]) == Decimal("0")
    assert Decimal(order["balanceDue"]) == Decimal("130")
    assert order["createdBy"]["name"] == "Ramesh"
    assert [line["itemName"] for line in order["items"]] == ["Patila", "Tapeli"]
    assert [Decimal(line["lineTotal"]) for line in order["items"]] == [
        Decimal("100"),
        Decimal("30"),
    ]

    second = make_order([{"item": a["id"], "quantity": 1}])
    assert second["orderNumber"] == "ORD0002"


def test_rate_defaults_to_catalog_price(make_item, make_order):
    item = make_item(price="75.50")
    order = make_order([{"item": item["id"], "quantity": 2}])
    assert Decimal(order["items"][0]["rate"]) == Decimal("75.50")
    assert Decimal(order["totalAmount"]) == Decimal("151.00")


def test_client_total_must_match(client, make_item, order_body, worker_headers, admin_headers):
    item = make_item(quantity=10, price="50")
    body = order_body([{"item": item["id"], "quantity": 2, "rate": 50}], totalAmount=99)

    resp = client.post("/orders", json=body, headers=worker_headers)

    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "totalAmount"
    assert _stock(client, admin_headers, item["id"]) == 10


def test_client_total_within_tolerance(make_item, make_order):
    item = make_item(quantity=10, price="33.33")
    order = make_order([{"item": item["id"], "quantity": 3}], totalAmount=100.00)
    assert Decimal(order["totalAmount"]) == Decimal("99.99")


def test_order_reserves_stock(client, make_item, make_order, admin_headers):
    item = make_item(quantity=10)
    make_order([{"item": item["id"], "quantity": 4}])
    assert _stock(client, admin_headers, item["id"]) == 6


def test_insufficient_stock_rolls_back_whole_order(
    client, make_item, order_body, worker_headers, admin_headers
):
    plenty = make_item("Thali", quantity=100)
    scarce = make_item("Kadai", quantity=3)
    body = order_body(
        [
            {"item": plenty["id"], "quantity": 10},
            {"item": scarce["id"], "quantity": 5},
        ]
    )

    resp = client.post("/orders", json=body, headers=worker_headers)

    assert resp.status_code == 400
    assert "Insufficient stock for Kadai" in resp.json()["detail"]
    assert _stock(client, admin_headers, plenty["id"]) == 100
    assert _stock(client, admin_headers, scarce["id"]) == 3
    assert client.get("/orders", headers=worker_headers).json() == []


def test_unknown_item_is_404(client, order_body, worker_headers):
    resp = client.post("/orders", json=order_body([{"item": 404, "quantity": 1}]), headers=worker_headers)
    assert resp.status_code == 404


def test_validation_errors_are_400_with_fields(client, make_item, order_body, worker_headers):
    item = make_item()
    line = {"item": item["id"], "quantity": 1}

    missing = order_body([line])
    del missing["customerName"]
    resp = client.post("/orders", json=missing, headers=worker_headers)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Validation error"
    assert "customerName" in [e["field"] for e in resp.json()["errors"]]

    resp = client.post("/orders", json=order_body([]), headers=worker_headers)
    assert resp.status_code == 400

    resp = client.post(
        "/orders", json=order_body([{"item": item["id"], "quantity": 0}]), headers=worker_headers
    )
    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "items.0.quantity"

    resp = client.post(
        "/orders",
        json=order_body([{"item": item["id"], "quantity": 1, "rate": -1}]),
        headers=worker_headers,
    )
    assert resp.status_code == 400

    resp = client.post(
        "/orders",
        json=order_body([line], eventDate="2026-11-20", returnDate="2026-11-19"),
        headers=worker_headers,
    )
    assert resp.status_code == 400

    resp = client.post("/orders", json=order_body([line], status="completed"), headers=worker_headers)
    assert resp.status_code == 400


def test_opening_payment_cannot_exceed_total(client, make_item, order_body, worker_headers):
    item = make_item(price="50")
    body = order_body([{"item": item["id"], "quantity": 1}], paidAmount=60)
    resp = client.post("/orders", json=body, headers=worker_headers)
    assert resp.status_code == 400


def test_lines_are_snapshots(client, make_item, make_order, admin_headers, worker_headers):
    item = make_item("Patila", price="50")
    order = make_order([{"item": item["id"], "quantity": 2, "rate": 45}])

    resp = client.put(
        f"/inventory/{item['id']}",
        json={"name": "Big Patila", "price": 80},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["name"] == "Big Patila"

    fetched = client.get(f"/orders/{order['id']}", headers=worker_headers).json()
    line = fetched["items"][0]
    assert line["itemName"] == "Patila"
    assert Decimal(line["rate"]) == Decimal("45")
    assert line["quantity"] == 2
    assert line["item"] == item["id"]


def test_status_moves_forward_and_completion_releases_stock(
    client, make_item, make_order, worker_headers, admin_headers
):
    item = make_item(quantity=10)
    order = make_order([{"item": item["id"], "quantity": 4}])
    url = f"/orders/{order['id']}/status"

    resp = client.put(url, json={"status": "pending"}, headers=worker_headers)
    assert resp.status_code == 200
    assert resp.json()["status"] == "pending"
    assert _stock(client, admin_headers, item["id"]) == 6

    resp = client.put(url, json={"status": "completed"}, headers=worker_headers)
    assert resp.status_code == 200
    assert resp.json()["status"] == "completed"
    assert _stock(client, admin_headers, item["id"]) == 10

    # repeated completion must not release twice
    resp = client.put(url, json={"status": "completed"}, headers=worker_headers)
    assert resp.status_code == 200
    assert _stock(client, admin_headers, item["id"]) == 10


def test_completed_orders_are_final(client, make_item, make_order, worker_headers):
    item = make_item()
    order = make_order([{"item": item["id"], "quantity": 1}])
    url = f"/orders/{order['id']}/status"

    assert client.put(url, json={"status": "completed"}, headers=worker_headers).status_code == 200

    for status in ("upcoming", "pending"):
        resp = client.put(url, json={"status": status}, headers=worker_headers)
        assert resp.status_code == 400

    fetched = client.get(f"/orders/{order['id']}", headers=worker_headers).json()
    assert fetched["status"] == "completed"


def test_backward_move_rejected(client, make_item, make_order, worker_headers):
    item = make_item()
    order = make_order([{"item": item["id"], "quantity": 1}])
    url = f"/orders/{order['id']}/status"

    client.put(url, json={"status": "pending"}, headers=worker_headers)
    resp = client.put(url, json={"status": "upcoming"}, headers=worker_headers)
    assert resp.status_code == 400


def test_repeating_status_changes_nothing(client, make_item, make_order, worker_headers):
    item = make_item(price="50")
    order = make_order([{"item": item["id"], "quantity": 2}], paidAmount=20)
    url = f"/orders/{order['id']}/status"

    first = client.put(url, json={"status": "pending"}, headers=worker_headers).json()
    second = client.put(url, json={"status": "pending"}, headers=worker_headers).json()

    assert second["status"] == "pending"
    assert second["paidAmount"] == first["paidAmount"] == order["paidAmount"]
    assert second["items"] == first["items"] == order["items"]


def test_unknown_status_and_order(client, make_item, make_order, worker_headers):
    item = make_item()
    order = make_order([{"item": item["id"], "quantity": 1}])

    resp = client.put(f"/orders/{order['id']}/status", json={"status": "cancelled"}, headers=worker_headers)
    assert resp.status_code == 400

    resp = client.put("/orders/999/status", json={"status": "pending"}, headers=worker_headers)
    assert resp.status_code == 404
    assert client.get("/orders/999", headers=worker_headers).status_code == 404


def test_list_orders_filters_by_status(client, make_item, make_order, worker_headers):
    item = make_item(quantity=10)
    first = make_order([{"item": item["id"], "quantity": 1}])
    second = make_order([{"item": item["id"], "quantity": 1}])
    client.put(f"/orders/{first['id']}/status", json={"status": "pending"}, headers=worker_headers)

    everything = client.get("/orders", headers=worker_headers).json()
    assert [o["orderNumber"] for o in everything] == ["ORD0002", "ORD0001"]

    pending = client.get("/orders", params={"status": "pending"}, headers=worker_headers).json()
    assert [o["id"] for o in pending] == [first["id"]]

    upcoming = client.get("/orders", params={"status": "upcoming"}, headers=worker_headers).json()
    assert [o["id"] for o in upcoming] == [second["id"]]

    resp = client.get("/orders", params={"status": "lost"}, headers=worker_headers)
    assert resp.status_code == 400


def test_update_order_details(client, make_item, make_order, worker_headers):
    item = make_item()
    order = make_order([{"item": item["id"], "quantity": 1}])
    url = f"/orders/{order['id']}"

    resp = client.put(url, json={"phone": "9898989898", "returnDate": "2026-11-25"}, headers=worker_headers)
    assert resp.status_code == 200
    assert resp.json()["phone"] == "9898989898"
    assert resp.json()["returnDate"] == "2026-11-25"
    assert resp.json()["orderNumber"] == order["orderNumber"]

    resp = client.put(url, json={"returnDate": "2026-11-01"}, headers=worker_headers)
    assert resp.status_code == 400

    resp = client.put(url, json={"totalAmount": 1}, headers=worker_headers)
    assert resp.status_code == 400

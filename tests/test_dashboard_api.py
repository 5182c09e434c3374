from decimal import Decimal


def test_summary(client, make_item, make_order, worker_headers):
    item = make_item(quantity=20, price="50")
    make_order([{"item": item["id"], "quantity": 1}])
    pending = make_order([{"item": item["id"], "quantity": 2}], paidAmount=40)
    done = make_order([{"item": item["id"], "quantity": 3}])

    client.put(f"/orders/{pending['id']}/status", json={"status": "pending"}, headers=worker_headers)
    client.put(f"/orders/{done['id']}/status", json={"status": "completed"}, headers=worker_headers)

    summary = client.get("/dashboard/summary", headers=worker_headers).json()

    assert summary["totalOrders"] == 3
    assert summary["upcomingOrders"] == 1
    assert summary["pendingOrders"] == 1
    assert summary["completedOrders"] == 1
    assert summary["inventoryItems"] == 1
    assert Decimal(summary["totalBilled"]) == Decimal("300")
    assert Decimal(summary["totalCollected"]) == Decimal("40")
    assert Decimal(summary["outstanding"]) == Decimal("260")


def test_empty_summary(client, worker_headers):
    summary = client.get("/dashboard/summary", headers=worker_headers).json()
    assert summary["totalOrders"] == 0
    assert Decimal(summary["outstanding"]) == Decimal("0")

from uuid import uuid4


def test_check_is_public(client, shop, make_item):
    item = make_item(shop["id"], name="Rice", in_stock=4, price=60)

    response = client.get(f"/api/inventory/items/{item['id']}")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "low_stock"
    assert body["is_low_stock"] is True
    assert body["shop"]["shop_name"] == shop["shop_name"]


def test_check_unknown_item(client):
    response = client.get(f"/api/inventory/items/{uuid4()}")
    assert response.status_code == 404


def test_update_stock_records_movement(client, admin_headers, shop, make_item):
    item = make_item(shop["id"], name="Rice", in_stock=4, price=60)

    response = client.put(
        f"/api/inventory/items/{item['id']}/stock",
        json={"new_stock": 40, "reason": "restock"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    assert response.json()["movement"]["old_stock"] == 4
    history = client.get(f"/api/inventory/movements?item_id={item['id']}", headers=admin_headers)
    assert [m["reason"] for m in history.json()] == ["restock"]


def test_update_stock_rejects_bad_quantity(client, admin_headers, shop, make_item):
    item = make_item(shop["id"], name="Rice", in_stock=4, price=60)

    response = client.put(
        f"/api/inventory/items/{item['id']}/stock", json={"new_stock": "lots"}, headers=admin_headers
    )

    assert response.status_code == 400
    assert response.json()["detail"][0]["code"] == "new_stock_invalid"


def test_stock_writes_are_admin_only(client, customer_headers, shop, make_item):
    item = make_item(shop["id"], name="Rice", in_stock=4, price=60)

    response = client.put(
        f"/api/inventory/items/{item['id']}/stock", json={"new_stock": 9}, headers=customer_headers
    )
    assert response.status_code == 403
    assert client.get("/api/inventory/summary", headers=customer_headers).status_code == 403


def test_bulk_update_reports_failures(client, admin_headers, shop, make_item):
    item = make_item(shop["id"], name="Rice", in_stock=4, price=60)

    response = client.post(
        "/api/inventory/bulk-update",
        json={"updates": [{"item_id": item["id"], "new_stock": 50}, {"item_id": "x", "new_stock": 1}]},
        headers=admin_headers,
    )

    assert response.status_code == 200
    body = response.json()
    assert body["total_processed"] == 2
    assert body["successful"][0]["item"]["in_stock"] == 50
    assert body["failed"][0]["errors"][0]["code"] == "item_id_invalid"


def test_bulk_update_requires_rows(client, admin_headers):
    response = client.post("/api/inventory/bulk-update", json={"updates": []}, headers=admin_headers)
    assert response.status_code == 400


def test_reports(client, admin_headers, shop, make_item):
    make_item(shop["id"], name="Rice", in_stock=3, price=60)
    make_item(shop["id"], name="Dal", in_stock=80, price=120)

    low = client.get("/api/inventory/low-stock", headers=admin_headers).json()
    restock = client.get(f"/api/inventory/restock?shop_id={shop['id']}", headers=admin_headers).json()
    summary = client.get("/api/inventory/summary", headers=admin_headers).json()

    assert [e["item"]["name"] for e in low] == ["Rice"]
    assert restock[0]["estimated_cost"] == 3000
    assert summary == {"tracked_items": 2, "in_stock": 1, "low_stock": 1, "out_of_stock": 0}


def test_back_in_stock_alert_flow(client, admin_headers, customer_headers, shop, make_item):
    item = make_item(shop["id"], name="Atta", in_stock=2, price=45)
    client.put(f"/api/inventory/items/{item['id']}/stock", json={"new_stock": 0}, headers=admin_headers)

    tracked = client.post("/api/inventory/alerts", json={"item_id": item["id"]}, headers=customer_headers)
    assert tracked.status_code == 200
    assert tracked.json()["is_available"] is False

    restocked = client.put(
        f"/api/inventory/items/{item['id']}/stock", json={"new_stock": 20}, headers=admin_headers
    )
    assert restocked.json()["alerts_notified"] == 1

    mine = client.get("/api/inventory/alerts?status=notified", headers=customer_headers)
    assert [a["item_name"] for a in mine.json()] == ["Atta"]


def test_alerts_require_login(client, shop, make_item):
    item = make_item(shop["id"], name="Atta", in_stock=2, price=45)
    response = client.post("/api/inventory/alerts", json={"item_id": item["id"]})
    assert response.status_code == 401


def test_cancel_someone_elses_alert(client, admin_headers, customer_headers, other_headers, shop, make_item):
    item = make_item(shop["id"], name="Atta", in_stock=2, price=45)
    client.put(f"/api/inventory/items/{item['id']}/stock", json={"new_stock": 0}, headers=admin_headers)
    alert = client.post("/api/inventory/alerts", json={"item_id": item["id"]}, headers=customer_headers).json()

    response = client.delete(f"/api/inventory/alerts/{alert['alert']['id']}", headers=other_headers)
    assert response.status_code == 403

    response = client.delete(f"/api/inventory/alerts/{alert['alert']['id']}", headers=customer_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"


def test_alerts_bad_status(client, customer_headers):
    response = client.get("/api/inventory/alerts?status=pending", headers=customer_headers)
    assert response.status_code == 400

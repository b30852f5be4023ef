from uuid import uuid4


def test_create_item_normalizes_lists(client, shop, make_item):
    item = make_item(
        shop["id"],
        name="Red Rice",
        packs="1kg, 5kg",
        brand_name="Organic Sikkim",
        price_range="80-350",
        in_stock=12,
    )

    assert item["reference_id"] == "PRD-MAN-001"
    assert item["packs"] == ["1kg", "5kg"]
    assert item["price_range"] == [80.0, 350.0]

    response = client.get(f"/api/items/{item['id']}")
    assert response.status_code == 200
    assert response.json()["name"] == "Red Rice"


def test_create_item_bad_price_range(client, admin_headers, shop):
    response = client.post(
        f"/api/shops/{shop['id']}/items",
        json={"type": "product", "name": "Rice", "price_range": "300-100"},
        headers=admin_headers,
    )
    assert response.status_code == 400
    assert response.json()["detail"][0]["code"] == "price_range_order"


def test_create_item_unknown_shop(client, admin_headers):
    response = client.post(
        f"/api/shops/{uuid4()}/items", json={"type": "product", "name": "Rice"}, headers=admin_headers
    )
    assert response.status_code == 404


def test_list_and_search_in_shop(client, shop, make_item):
    make_item(shop["id"], name="Red Rice", category="Grains")
    make_item(shop["id"], type="service", name="Home Delivery")

    listed = client.get(f"/api/shops/{shop['id']}/items", params={"type": "product"}).json()
    assert listed["count"] == 1

    found = client.get(f"/api/shops/{shop['id']}/items/search", params={"q": "rice"}).json()
    assert [i["name"] for i in found["items"]] == ["Red Rice"]


def test_search_across_shops(client, make_shop, make_item):
    alpha = make_shop()
    beta = make_shop(shop_name="Beta Store")
    make_item(alpha["id"], name="Red Rice")
    make_item(beta["id"], name="Rice Flour")

    body = client.get("/api/items/search", params={"q": "rice"}).json()

    assert body["count"] == 2
    assert body["shop_count"] == 2


def test_bulk_create_reports_failed_rows(client, admin_headers, shop):
    response = client.post(
        f"/api/shops/{shop['id']}/items/bulk",
        json={
            "items": [
                {"type": "product", "name": "Rice", "in_stock": 5, "price": 60},
                {"type": "product", "name": "Dal"},
                {"type": "service", "name": "Delivery"},
            ]
        },
        headers=admin_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["count"] == 2
    assert body["failed"][0]["row"] == 2
    assert {e["code"] for e in body["failed"][0]["errors"]} == {"in_stock_required", "price_required"}


def test_bulk_create_skips_malformed_rows(client, admin_headers, shop):
    response = client.post(
        f"/api/shops/{shop['id']}/items/bulk",
        json={
            "items": [
                {"type": "menu", "name": "Momo", "price": 80},
                {"type": "menu", "name": "Tea", "category": 5},
                {"type": "menu", "name": "Thukpa", "price": "n/a"},
                {
                    "type": "product",
                    "name": "Atta",
                    "in_stock": 3,
                    "price_range": "30-50",
                    "companies": [{"company_name": "Tata", "variations": [{"size": "1kg", "price": "n/a"}]}],
                },
            ]
        },
        headers=admin_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["count"] == 1
    assert [f["row"] for f in body["failed"]] == [2, 3, 4]
    assert body["failed"][0]["errors"][0]["code"] == "category_invalid"
    assert body["failed"][1]["errors"][0]["code"] == "price_invalid"
    assert body["failed"][2]["errors"][0]["field"] == "companies"


def test_update_item_rejects_null_flag(client, admin_headers, shop, make_item):
    item = make_item(shop["id"], name="Rice")

    response = client.patch(f"/api/items/{item['id']}", json={"is_popular": None}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["detail"][0]["code"] == "is_popular_invalid"


def test_update_and_delete_item(client, admin_headers, shop, make_item):
    item = make_item(shop["id"], name="Rice")

    response = client.patch(f"/api/items/{item['id']}", json={"price": 55}, headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["price"] == 55

    assert client.delete(f"/api/items/{item['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/items/{item['id']}").status_code == 404
    assert client.delete(f"/api/items/{item['id']}", headers=admin_headers).status_code == 404


def test_customer_cannot_modify_items(client, customer_headers, shop):
    response = client.post(
        f"/api/shops/{shop['id']}/items", json={"type": "product", "name": "Rice"}, headers=customer_headers
    )
    assert response.status_code == 403

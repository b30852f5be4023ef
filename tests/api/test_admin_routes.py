"""
Admin dashboard, banners and the admin request budgets.
"""

# --- Analytics ---


def test_dashboard_totals(client, admin_headers, customer_headers, shop, make_item):
    make_item(shop["id"], name="Red Rice")
    client.post(
        "/api/bookings",
        json={
            "shop_id": shop["id"],
            "shop_name": shop["shop_name"],
            "items": [{"name": "Red Rice", "quantity": 3, "unit": "kg"}],
        },
        headers=customer_headers,
    )

    response = client.get("/api/admin/analytics/dashboard", params={"days": 7}, headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["totals"]["shops"] == 1
    assert body["totals"]["items"] == 1
    assert body["totals"]["bookings"] == 1
    assert len(body["daily_stats"]) == 7
    assert body["daily_stats"][-1]["day"] == "2025-11-01"
    assert body["top_shops"][0]["total_bookings"] == 1
    assert body["top_booked_items"][0]["item_name"] == "Red Rice"
    assert body["top_booked_items"][0]["booked_quantity"] == 3
    assert body["recent_activity"][0]["kind"] == "booking"


def test_dashboard_is_admin_only(client, customer_headers):
    response = client.get("/api/admin/analytics/dashboard", headers=customer_headers)
    assert response.status_code == 403


# --- Banners ---


def test_banner_lifecycle(client, admin_headers):
    created = client.post(
        "/api/banners", json={"name": "Winter Sale", "position": "navbar", "priority": 3}, headers=admin_headers
    )
    assert created.status_code == 201
    banner = created.json()
    assert banner["is_active"] is False
    assert client.get("/api/banners/active").json() == []

    toggled = client.post(f"/api/banners/{banner['id']}/toggle", headers=admin_headers).json()
    assert toggled["is_active"] is True

    active = client.get("/api/banners/active", params={"position": "navbar"}).json()
    assert [b["name"] for b in active] == ["Winter Sale"]
    assert client.get("/api/banners/active", params={"position": "hero"}).json() == []

    response = client.patch(f"/api/banners/{banner['id']}", json={"priority": 9}, headers=admin_headers)
    assert response.json()["priority"] == 9

    assert client.delete(f"/api/banners/{banner['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/banners/{banner['id']}", headers=admin_headers).status_code == 404


def test_banner_validation(client, admin_headers):
    response = client.post("/api/banners", json={"name": "  "}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["detail"][0]["code"] == "name_required"


# --- Rate limits ---


def test_admin_budget_exhausted(client, admin_headers, admin_user, limiter, rules):
    for _ in range(rules.rate_limits.admin.max_requests):
        assert limiter.check_admin(str(admin_user.id))

    response = client.post("/api/banners", json={"name": "Sale"}, headers=admin_headers)

    assert response.status_code == 429


def test_heavy_budget_is_separate(client, admin_headers, admin_user, limiter, rules, shop):
    for _ in range(rules.rate_limits.admin_heavy.max_requests):
        assert limiter.check_admin_heavy(str(admin_user.id))

    bulk = client.post(
        f"/api/shops/{shop['id']}/items/bulk",
        json={"items": [{"type": "service", "name": "Delivery"}]},
        headers=admin_headers,
    )
    assert bulk.status_code == 429

    single = client.post(
        f"/api/shops/{shop['id']}/items", json={"type": "service", "name": "Delivery"}, headers=admin_headers
    )
    assert single.status_code == 201


def test_reads_do_not_consume_budget(client, admin_headers, admin_user, limiter, rules):
    for _ in range(rules.rate_limits.admin.max_requests):
        assert limiter.check_admin(str(admin_user.id))

    assert client.get("/api/banners", headers=admin_headers).status_code == 200
    assert client.get("/api/festivals", headers=admin_headers).status_code == 200


def test_festival_listing_leaves_budget_untouched(client, admin_headers, admin_user, limiter, rules):
    for _ in range(rules.rate_limits.admin.max_requests - 1):
        assert limiter.check_admin(str(admin_user.id))

    for _ in range(3):
        assert client.get("/api/festivals", headers=admin_headers).status_code == 200

    response = client.post("/api/banners", json={"name": "Sale"}, headers=admin_headers)
    assert response.status_code == 201


def test_festival_listing_is_admin_only(client, customer_headers):
    assert client.get("/api/festivals", headers=customer_headers).status_code == 403

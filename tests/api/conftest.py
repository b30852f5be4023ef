import pytest

SHOP_PAYLOAD = {
    "shop_name": "Alpha Store",
    "owner_name": "Karma",
    "type": "Grocery",
    "district": "Mangan",
    "address": "Main Road, Mangan",
    "phone": "9800011111",
    "opening_time": "08:00",
    "closing_time": "20:00",
    "location": {"lat": 27.5, "lng": 88.53},
}


@pytest.fixture
def make_shop(client, admin_headers):
    """Create a shop through the API; keyword arguments override the payload."""

    def _make(**overrides) -> dict:
        response = client.post("/api/shops", json={**SHOP_PAYLOAD, **overrides}, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def shop(make_shop) -> dict:
    return make_shop()


@pytest.fixture
def make_item(client, admin_headers):
    def _make(shop_id: str, **fields) -> dict:
        payload = {"type": "product", **fields}
        response = client.post(f"/api/shops/{shop_id}/items", json=payload, headers=admin_headers)
        assert response.status_code == 201, response.text
        return response.json()

    return _make


@pytest.fixture
def shop_payload() -> dict:
    return dict(SHOP_PAYLOAD)

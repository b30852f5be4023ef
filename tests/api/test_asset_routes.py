from uuid import uuid4


def _upload(client, headers, filename="diwali.png", content=b"\x89PNG data", mime="image/png", **form):
    data = {"type": "banner", **form}
    return client.post(
        "/api/assets",
        files={"file": (filename, content, mime)},
        data=data,
        headers=headers,
    )


def test_upload_and_download(client, admin_headers):
    response = _upload(client, admin_headers, tags="lamp, gold", layout_position="hero")

    assert response.status_code == 201
    asset = response.json()
    assert asset["tags"] == ["lamp", "gold"]
    assert asset["mime_type"] == "image/png"

    file_response = client.get(f"/api/assets/{asset['id']}/file")
    assert file_response.status_code == 200
    assert file_response.content == b"\x89PNG data"
    assert file_response.headers["content-type"] == "image/png"


def test_upload_rejects_mime_type(client, admin_headers):
    response = _upload(client, admin_headers, filename="notes.txt", content=b"hi", mime="text/plain")
    assert response.status_code == 400
    assert response.json()["detail"][0]["code"] == "mime_type_not_allowed"


def test_search_and_stats(client, admin_headers):
    _upload(client, admin_headers)
    _upload(client, admin_headers, filename="song.mp3", mime="audio/mpeg", type="audio")

    body = client.get("/api/assets", params={"type": "banner"}, headers=admin_headers).json()
    assert body["total"] == 1

    stats = client.get("/api/assets/stats", headers=admin_headers).json()
    assert stats["total_assets"] == 2
    assert stats["by_type"] == {"banner": 1, "audio": 1}


def test_delete_in_use_conflicts(client, admin_headers):
    festival = client.post(
        "/api/festivals",
        json={
            "name": "diwali",
            "display_name": "Diwali",
            "start_date": "2025-10-30",
            "end_date": "2025-11-05",
        },
        headers=admin_headers,
    ).json()
    asset = _upload(client, admin_headers).json()

    linked = client.post(f"/api/assets/{asset['id']}/festivals/{festival['id']}", headers=admin_headers)
    assert linked.json()["festival_ids"] == [festival["id"]]

    response = client.delete(f"/api/assets/{asset['id']}", headers=admin_headers)
    assert response.status_code == 409
    assert response.json()["detail"][0]["code"] == "asset_in_use"

    client.delete(f"/api/assets/{asset['id']}/festivals/{festival['id']}", headers=admin_headers)
    assert client.delete(f"/api/assets/{asset['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/api/assets/{asset['id']}/file").status_code == 404


def test_festival_banners(client, admin_headers):
    hero = _upload(client, admin_headers, layout_position="hero").json()
    background = _upload(client, admin_headers, filename="bg.png", layout_position="background").json()
    festival = client.post(
        "/api/festivals",
        json={
            "name": "diwali",
            "display_name": "Diwali",
            "start_date": "2025-10-30",
            "end_date": "2025-11-05",
            "asset_ids": [hero["id"], background["id"]],
        },
        headers=admin_headers,
    ).json()

    banners = client.get(f"/api/festivals/{festival['id']}/banners").json()

    assert banners["top"]["id"] == hero["id"]
    assert banners["center"]["id"] == background["id"]
    assert len(client.get(f"/api/festivals/{festival['id']}/assets").json()) == 2


def test_update_asset(client, admin_headers):
    asset = _upload(client, admin_headers).json()

    response = client.patch(
        f"/api/assets/{asset['id']}", json={"description": "Hero lamp"}, headers=admin_headers
    )

    assert response.status_code == 200
    assert response.json()["description"] == "Hero lamp"


def test_assets_are_admin_only(client, customer_headers):
    assert _upload(client, customer_headers).status_code == 403
    assert client.get("/api/assets", headers=customer_headers).status_code == 403


def test_link_to_unknown_festival(client, admin_headers):
    asset = _upload(client, admin_headers).json()

    response = client.post(f"/api/assets/{asset['id']}/festivals/{uuid4()}", headers=admin_headers)

    assert response.status_code == 404
    assert response.json()["detail"][0]["code"] == "festival_not_found"


def test_upload_with_unknown_festival(client, admin_headers):
    response = _upload(client, admin_headers, festival_ids=str(uuid4()))

    assert response.status_code == 400
    assert response.json()["detail"][0]["code"] == "festival_ids_invalid"


def test_deleting_festival_frees_uploaded_asset(client, admin_headers):
    festival = client.post(
        "/api/festivals",
        json={
            "name": "losar",
            "display_name": "Losar",
            "start_date": "2026-02-17",
            "end_date": "2026-02-19",
        },
        headers=admin_headers,
    ).json()
    asset = _upload(client, admin_headers, festival_ids=festival["id"]).json()
    assert asset["usage_count"] == 1

    assert client.delete(f"/api/festivals/{festival['id']}", headers=admin_headers).status_code == 200

    assert client.delete(f"/api/assets/{asset['id']}", headers=admin_headers).status_code == 200


def test_update_asset_rejects_null_name(client, admin_headers):
    asset = _upload(client, admin_headers).json()

    response = client.patch(f"/api/assets/{asset['id']}", json={"name": None}, headers=admin_headers)

    assert response.status_code == 400
    assert response.json()["detail"][0]["code"] == "name_required"

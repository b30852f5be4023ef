from uuid import uuid4

# --- Reviews ---


def test_submit_review_updates_shop(client, customer_headers, other_headers, shop):
    response = client.post(
        f"/api/shops/{shop['id']}/reviews", json={"rating": 5, "comment": "Great"}, headers=customer_headers
    )
    assert response.status_code == 201
    assert response.json()["user_name"] == "Sita"

    client.post(f"/api/shops/{shop['id']}/reviews", json={"rating": 2}, headers=other_headers)

    updated = client.get(f"/api/shops/{shop['id']}").json()["shop"]
    assert updated["average_rating"] == 3.5
    assert updated["total_reviews"] == 2

    reviews = client.get(f"/api/shops/{shop['id']}/reviews").json()
    assert reviews["total"] == 2
    assert reviews["summary"]["distribution"]["5"] == 1


def test_review_validation(client, customer_headers, shop):
    response = client.post(f"/api/shops/{shop['id']}/reviews", json={"rating": 7}, headers=customer_headers)
    assert response.status_code == 400
    assert response.json()["detail"][0]["code"] == "rating_out_of_range"

    response = client.post(f"/api/shops/{uuid4()}/reviews", json={"rating": 4}, headers=customer_headers)
    assert response.status_code == 404


def test_only_author_deletes_review(client, customer_headers, other_headers, shop):
    review = client.post(
        f"/api/shops/{shop['id']}/reviews", json={"rating": 4}, headers=customer_headers
    ).json()

    assert client.delete(f"/api/reviews/{review['id']}", headers=other_headers).status_code == 403
    assert client.delete(f"/api/reviews/{review['id']}", headers=customer_headers).status_code == 200
    assert client.get(f"/api/shops/{shop['id']}/reviews/mine", headers=customer_headers).json() is None


def test_helpful_and_my_stats(client, customer_headers, other_headers, shop):
    review = client.post(
        f"/api/shops/{shop['id']}/reviews", json={"rating": 4}, headers=customer_headers
    ).json()

    response = client.post(f"/api/reviews/{review['id']}/helpful", headers=other_headers)
    assert response.json()["helpful_count"] == 1

    stats = client.get("/api/reviews/mine/stats", headers=customer_headers).json()
    assert stats == {
        "total_reviews": 1,
        "average_rating_given": 4.0,
        "total_bookings": 0,
        "shops_visited": 1,
    }
    assert len(client.get("/api/reviews/mine", headers=customer_headers).json()) == 1


# --- Feedback ---


def test_anonymous_feedback(client):
    response = client.post(
        "/api/feedback",
        json={
            "type": "bug",
            "category": "search",
            "subject": "Search broken",
            "message": "Nothing comes back for momo",
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["user_name"] == "Anonymous"
    assert body["priority"] == "high"
    assert body["user_id"] is None


def test_signed_in_feedback_and_admin_triage(client, customer_headers, customer_user, admin_headers):
    created = client.post(
        "/api/feedback",
        json={
            "type": "suggestion",
            "category": "ui",
            "subject": "Dark mode",
            "message": "Please add a dark theme",
            "rating": 4,
        },
        headers=customer_headers,
    ).json()
    assert created["user_id"] == str(customer_user.id)
    assert created["priority"] == "low"

    assert len(client.get("/api/feedback/mine", headers=customer_headers).json()) == 1
    assert client.get("/api/feedback", headers=customer_headers).status_code == 403

    response = client.patch(
        f"/api/feedback/{created['id']}",
        json={"status": "resolved", "admin_notes": "Shipped"},
        headers=admin_headers,
    )
    assert response.json()["status"] == "resolved"

    stats = client.get("/api/feedback/stats", headers=admin_headers).json()
    assert stats["total"] == 1
    assert stats["by_status"] == {"resolved": 1}
    assert stats["average_rating"] == 4.0


def test_feedback_validation(client):
    response = client.post(
        "/api/feedback",
        json={"type": "rant", "category": "x", "subject": "Hi", "message": "short"},
    )
    assert response.status_code == 400

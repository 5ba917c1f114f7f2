from marketplace import db
from marketplace.models.subscription import Subscription

PLAN = {
    "plan": "Premium",
    "amount": "249.00",
    "start_date": "2025-01-01T00:00:00",
    "end_date": "2025-12-31T23:59:59",
    "status": "active",
}


class TestSubscriptions:

    def test_create_subscription(self, client, admin_headers):
        response = client.post("/api/subscription/", headers=admin_headers, json=PLAN)

        assert response.status_code == 201
        subscription = response.json["subscription"]
        assert subscription["plan"] == "Premium"
        assert subscription["amount"] == 249.0
        assert subscription["status"] == "active"
        assert subscription["start_date"] == "2025-01-01T00:00:00"

    def test_end_date_before_start(self, client, admin_headers):
        response = client.post(
            "/api/subscription/",
            headers=admin_headers,
            json={**PLAN, "end_date": "2024-06-01T00:00:00"},
        )

        assert response.status_code == 400
        assert "end_date" in response.json["messages"]

    def test_invalid_status(self, client, admin_headers):
        response = client.post(
            "/api/subscription/", headers=admin_headers, json={**PLAN, "status": "paused"}
        )

        assert response.status_code == 400
        assert "status" in response.json["messages"]

    def test_create_requires_admin(self, client, owner_headers):
        response = client.post("/api/subscription/", headers=owner_headers, json=PLAN)

        assert response.status_code == 403

    def test_list_and_get(self, client, owner_headers, subscription, vendor):
        listed = client.get("/api/subscription/", headers=owner_headers)
        assert [s["plan"] for s in listed.json["subscriptions"]] == ["Basic"]

        fetched = client.get(f"/api/subscription/{subscription.id}", headers=owner_headers)
        assert fetched.status_code == 200
        assert fetched.json["subscription"]["vendors"][0]["name"] == "Tech Store"

    def test_get_missing(self, client, owner_headers):
        assert client.get("/api/subscription/999", headers=owner_headers).status_code == 404

    def test_details_statistics(self, client, admin_headers, subscription, vendor):
        response = client.get(f"/api/subscription/{subscription.id}/details", headers=admin_headers)

        assert response.status_code == 200
        assert response.json["subscription"]["statistics"] == {
            "totalVendors": 1,
            "activeVendors": 1,
            "approvedVendors": 1,
            "totalRevenue": 99.99,
        }

    def test_update_subscription(self, client, admin_headers, subscription):
        response = client.put(
            f"/api/subscription/{subscription.id}",
            headers=admin_headers,
            json={**PLAN, "status": "inactive"},
        )

        assert response.status_code == 200
        assert response.json["subscription"]["plan"] == "Premium"
        assert response.json["subscription"]["status"] == "inactive"

    def test_update_missing(self, client, admin_headers):
        response = client.put("/api/subscription/999", headers=admin_headers, json=PLAN)

        assert response.status_code == 404

    def test_delete_subscription(self, client, admin_headers, subscription):
        subscription_id = subscription.id

        response = client.delete(f"/api/subscription/{subscription_id}", headers=admin_headers)

        assert response.status_code == 200
        assert db.session.get(Subscription, subscription_id) is None

    def test_delete_subscription_in_use(self, client, admin_headers, subscription, vendor):
        response = client.delete(f"/api/subscription/{subscription.id}", headers=admin_headers)

        assert response.status_code == 409
        assert "1 vendor(s)" in response.json["error"]

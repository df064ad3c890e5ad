from uuid import uuid4

from fastapi.testclient import TestClient

from tests.conftest import TestDataFactory, assert_response_error


def raise_low_stock_alert(client: TestClient, admin_headers: dict, blood_type: str = "O-"):
    client.put(
        f"/api/inventory/{blood_type}", json={"unitsAvailable": 1}, headers=admin_headers
    )


def raise_emergency(client: TestClient):
    client.post(
        "/api/requests", data=TestDataFactory.create_request_form(is_emergency=True)
    )


class TestNotificationAudience:
    def test_admin_sees_admin_alerts_and_broadcasts(
        self, client: TestClient, admin_auth_headers
    ):
        raise_low_stock_alert(client, admin_auth_headers)
        raise_emergency(client)

        body = client.get("/api/notifications", headers=admin_auth_headers).json()

        assert {n["type"] for n in body["notifications"]} == {
            "low_stock",
            "emergency_request",
        }
        assert body["pagination"] == {"current": 1, "total": 1, "count": 2}

    def test_user_does_not_see_admin_alerts(
        self, client: TestClient, admin_auth_headers, auth_headers
    ):
        raise_low_stock_alert(client, admin_auth_headers)
        raise_emergency(client)

        notifications = client.get(
            "/api/notifications", headers=auth_headers
        ).json()["notifications"]

        assert [n["type"] for n in notifications] == ["emergency_request"]

    def test_newest_first_with_pagination(self, client: TestClient, admin_auth_headers):
        for blood_type in ("A+", "A-", "B+"):
            raise_low_stock_alert(client, admin_auth_headers, blood_type)

        body = client.get(
            "/api/notifications",
            params={"page": 1, "limit": 2},
            headers=admin_auth_headers,
        ).json()

        assert body["pagination"] == {"current": 1, "total": 3, "count": 2}
        # Each upsert re-checks every low record, so the latest check comes first
        assert body["notifications"][0]["title"].startswith("Low Stock Alert")


class TestMarkRead:
    def test_mark_read(self, client: TestClient, auth_headers):
        raise_emergency(client)
        notification = client.get("/api/notifications", headers=auth_headers).json()[
            "notifications"
        ][0]
        assert notification["isRead"] is False

        response = client.put(
            f"/api/notifications/{notification['id']}/read", headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["isRead"] is True

    def test_mark_read_is_idempotent(self, client: TestClient, auth_headers):
        raise_emergency(client)
        notification_id = client.get(
            "/api/notifications", headers=auth_headers
        ).json()["notifications"][0]["id"]

        client.put(f"/api/notifications/{notification_id}/read", headers=auth_headers)
        response = client.put(
            f"/api/notifications/{notification_id}/read", headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["isRead"] is True

    def test_unknown_notification(self, client: TestClient, auth_headers):
        response = client.put(f"/api/notifications/{uuid4()}/read", headers=auth_headers)

        assert_response_error(response, 404, "Notification not found")

    def test_malformed_notification_id(self, client: TestClient, auth_headers):
        response = client.put("/api/notifications/12345/read", headers=auth_headers)

        assert_response_error(response, 404, "Notification not found")

    def test_mark_read_requires_token(self, client: TestClient):
        response = client.put(f"/api/notifications/{uuid4()}/read")

        assert_response_error(response, 401, "Access token required")

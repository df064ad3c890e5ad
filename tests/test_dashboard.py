from fastapi.testclient import TestClient

from tests.conftest import TestDataFactory, assert_response_error


def submit(client: TestClient, **kwargs) -> str:
    response = client.post(
        "/api/requests", data=TestDataFactory.create_request_form(**kwargs)
    )
    return response.json()["request"]["id"]


class TestDashboardStats:
    def test_empty_system(self, client: TestClient, admin_auth_headers):
        response = client.get("/api/dashboard/stats", headers=admin_auth_headers)

        assert response.status_code == 200
        assert response.json() == {
            "totalDonors": 0,
            "totalRequests": 0,
            "pendingRequests": 0,
            "emergencyRequests": 0,
            "lowStockCount": 0,
            "inventoryStats": [],
        }

    def test_counts(self, client: TestClient, admin_auth_headers):
        client.post("/api/donors/register", json=TestDataFactory.create_donor_data("O+"))
        client.post("/api/donors/register", json=TestDataFactory.create_donor_data("A+"))
        client.put(
            "/api/inventory/O+", json={"unitsAvailable": 40}, headers=admin_auth_headers
        )

        submit(client)
        approved_emergency = submit(client, is_emergency=True)
        rejected_emergency = submit(client, is_emergency=True)
        for request_id, new_status in (
            (approved_emergency, "approved"),
            (rejected_emergency, "rejected"),
        ):
            client.put(
                f"/api/requests/{request_id}/status",
                json={"status": new_status},
                headers=admin_auth_headers,
            )

        stats = client.get("/api/dashboard/stats", headers=admin_auth_headers).json()

        assert stats["totalDonors"] == 2
        assert stats["totalRequests"] == 3
        assert stats["pendingRequests"] == 1
        # Only emergencies still awaiting blood are counted
        assert stats["emergencyRequests"] == 1
        # A+ was created by the donor registration with zero units
        assert stats["lowStockCount"] == 1
        assert stats["inventoryStats"] == [
            {"bloodType": "A+", "unitsAvailable": 0, "donorCount": 1},
            {"bloodType": "O+", "unitsAvailable": 40, "donorCount": 1},
        ]

    def test_requires_admin(self, client: TestClient, auth_headers):
        response = client.get("/api/dashboard/stats", headers=auth_headers)

        assert_response_error(response, 403, "Admin access required")

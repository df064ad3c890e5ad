"""
Donor registration, listing and blood type lookups.
"""

from fastapi.testclient import TestClient

from tests.conftest import TestDataFactory, assert_response_error, assert_validation_error


def donor_count(client: TestClient, blood_type: str):
    for record in client.get("/api/inventory").json():
        if record["bloodType"] == blood_type:
            return record["donorCount"]
    return None


class TestDonorRegistration:
    def test_register_donor_success(self, client: TestClient):
        donor_data = TestDataFactory.create_donor_data("B-")

        response = client.post("/api/donors/register", json=donor_data)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Donor registered successfully"
        donor = body["donor"]
        assert donor["rollNumber"] == donor_data["rollNumber"]
        assert donor["bloodGroup"] == "B-"
        assert donor["isAvailable"] is True
        assert donor["donationHistory"] == []
        assert donor["lastDonationDate"] is None

    def test_first_donor_creates_inventory_record(self, client: TestClient):
        assert donor_count(client, "O+") is None

        client.post("/api/donors/register", json=TestDataFactory.create_donor_data("O+"))

        assert donor_count(client, "O+") == 1

    def test_each_donor_increments_count(self, client: TestClient, admin_auth_headers):
        client.post("/api/inventory/initialize", headers=admin_auth_headers)

        for _ in range(3):
            client.post(
                "/api/donors/register", json=TestDataFactory.create_donor_data("A-")
            )

        assert donor_count(client, "A-") == 3
        assert donor_count(client, "A+") == 0

    def test_duplicate_roll_number_rejected(self, client: TestClient):
        donor_data = TestDataFactory.create_donor_data(roll_number="CS1001")
        client.post("/api/donors/register", json=donor_data)

        response = client.post("/api/donors/register", json=donor_data)

        assert_response_error(
            response, 400, "Donor with this roll number already exists"
        )
        assert donor_count(client, donor_data["bloodGroup"]) == 1

    def test_invalid_blood_group_rejected(self, client: TestClient):
        donor_data = TestDataFactory.create_donor_data("Z+")

        response = client.post("/api/donors/register", json=donor_data)

        assert_validation_error(response, "bloodGroup")

    def test_overlong_name_rejected(self, client: TestClient):
        donor_data = TestDataFactory.create_donor_data()
        donor_data["name"] = "A" * 101

        response = client.post("/api/donors/register", json=donor_data)

        assert_validation_error(response, "name")
        assert donor_count(client, donor_data["bloodGroup"]) is None

    def test_missing_fields_rejected(self, client: TestClient):
        response = client.post("/api/donors/register", json={"name": "Ama"})

        data = assert_validation_error(response)
        missing = {error["field"] for error in data["error"]}
        assert {"branch", "rollNumber", "bloodGroup", "contactInfo"} <= missing


class TestDonorListing:
    def test_list_donors_paginates(self, client: TestClient):
        for _ in range(12):
            client.post("/api/donors/register", json=TestDataFactory.create_donor_data())

        response = client.get("/api/donors", params={"page": 2, "limit": 5})

        assert response.status_code == 200
        body = response.json()
        assert len(body["donors"]) == 5
        assert body["pagination"] == {
            "current": 2,
            "total": 3,
            "count": 5,
            "totalDonors": 12,
        }

    def test_list_donors_newest_first(self, client: TestClient):
        first = TestDataFactory.create_donor_data(roll_number="FIRST")
        second = TestDataFactory.create_donor_data(roll_number="SECOND")
        client.post("/api/donors/register", json=first)
        client.post("/api/donors/register", json=second)

        donors = client.get("/api/donors").json()["donors"]

        assert [d["rollNumber"] for d in donors] == ["SECOND", "FIRST"]

    def test_list_donors_empty(self, client: TestClient):
        body = client.get("/api/donors").json()

        assert body["donors"] == []
        assert body["pagination"]["total"] == 0
        assert body["pagination"]["totalDonors"] == 0

    def test_limit_above_maximum_rejected(self, client: TestClient):
        response = client.get("/api/donors", params={"limit": 500})

        assert_validation_error(response, "limit")

    def test_huge_page_rejected(self, client: TestClient):
        response = client.get("/api/donors", params={"page": "10000000000000000000"})

        assert_validation_error(response, "page")

    def test_list_by_blood_type(self, client: TestClient):
        client.post("/api/donors/register", json=TestDataFactory.create_donor_data("AB+"))
        client.post("/api/donors/register", json=TestDataFactory.create_donor_data("AB+"))
        client.post("/api/donors/register", json=TestDataFactory.create_donor_data("O-"))

        response = client.get("/api/donors/blood-type/AB+")

        assert response.status_code == 200
        donors = response.json()
        assert len(donors) == 2
        assert all(d["bloodGroup"] == "AB+" for d in donors)

    def test_list_by_invalid_blood_type(self, client: TestClient):
        response = client.get("/api/donors/blood-type/XY")

        assert_validation_error(response)

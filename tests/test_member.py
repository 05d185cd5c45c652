import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="class")
def company_id(company_factory):
    return company_factory("Acme Health")


class TestMemberEndpoints:
    def test_create_and_read_member(self, test_app: TestClient, token, company_id):
        response = test_app.post(
            "/members",
            json={
                "first_name": "Ada",
                "last_name": "Lovelace",
                "member_type": "spouse",
                "date_of_birth": "1990-12-10",
                "company_id": company_id,
            },
            headers={"x-token": token},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "Member created"
        member = body["data"]
        assert member["status"] == "active"
        assert member["member_type"] == "spouse"

        response = test_app.get(
            f"/members/{member['id']}", headers={"x-token": token}
        )
        assert response.status_code == 200
        assert response.json()["data"]["last_name"] == "Lovelace"

    def test_update_member_status(self, test_app: TestClient, token, member_factory):
        member_id = member_factory()
        response = test_app.patch(
            f"/members/{member_id}",
            json={"status": "suspended"},
            headers={"x-token": token},
        )
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "suspended"

    def test_filter_members(
        self, test_app: TestClient, token, member_factory, company_id
    ):
        member_factory(company_id, first_name="Filterable", last_name="Person")
        response = test_app.get(
            "/members",
            params={"name": "filterable", "company_id": company_id},
            headers={"x-token": token},
        )
        assert response.status_code == 200
        page = response.json()["data"]
        assert page["total"] == 1
        assert page["items"][0]["first_name"] == "Filterable"

    def test_coverage_window_validated(self, test_app: TestClient, token):
        response = test_app.post(
            "/members",
            json={
                "first_name": "Bad",
                "last_name": "Window",
                "date_of_birth": "1970-01-01",
                "coverage_start": "2024-06-01",
                "coverage_end": "2024-01-01",
            },
            headers={"x-token": token},
        )
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error_code"] == 1400
        assert body["details"]

    def test_missing_field_reports_details(self, test_app: TestClient, token):
        response = test_app.post(
            "/members", json={"first_name": "Only"}, headers={"x-token": token}
        )
        assert response.status_code == 400
        fields = {tuple(d["loc"]) for d in response.json()["details"]}
        assert ("body", "last_name") in fields
        assert ("body", "date_of_birth") in fields

    def test_member_not_found(self, test_app: TestClient, token):
        response = test_app.get("/members/99999", headers={"x-token": token})
        assert response.status_code == 404
        body = response.json()
        assert body["success"] is False
        assert body["error_code"] == 1404
        assert "Member id=99999" in body["error"]

    def test_missing_token(self, test_app: TestClient):
        response = test_app.get("/members")
        assert response.status_code == 403
        assert response.json()["error_code"] == 3002

    def test_invalid_token(self, test_app: TestClient):
        response = test_app.get("/members", headers={"x-token": "nope"})
        assert response.status_code == 403
        assert response.json()["error_code"] == 3001


class TestCompanyEndpoints:
    def test_create_and_read_company(self, test_app: TestClient, token):
        response = test_app.post(
            "/companies", json={"name": "Globex"}, headers={"x-token": token}
        )
        assert response.status_code == 200
        company_id = response.json()["data"]["id"]

        response = test_app.get(f"/companies/{company_id}", headers={"x-token": token})
        assert response.status_code == 200
        assert response.json()["data"]["name"] == "Globex"

    def test_company_not_found(self, test_app: TestClient, token):
        response = test_app.get("/companies/4242", headers={"x-token": token})
        assert response.status_code == 404

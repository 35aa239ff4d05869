"""Integration tests for company user endpoints and seat enforcement."""
import pytest

from tests.utils import licensed_tenant


@pytest.mark.integration
class TestCompanyUserEndpoints:

    def test_seat_limit_reached(self, client, db_session):
        licensed_tenant(db_session, seat_limit=2)

        for email in ("one@acme.com", "two@acme.com"):
            response = client.post("/api/v1/company/users", json={"domain": "acme.com", "email": email})
            assert response.status_code == 201

        response = client.post("/api/v1/company/users", json={"domain": "acme.com", "email": "three@acme.com"})
        assert response.status_code == 409
        assert response.json() == {
            "detail": "Seat limit reached (2/2). Please contact super admin.",
            "code": "SEAT_LIMIT_REACHED",
            "seat_limit": 2,
            "used_seats": 2,
        }

    def test_tenant_without_license(self, client):
        response = client.post("/api/v1/company/users", json={"domain": "acme.com", "email": "one@acme.com"})
        assert response.status_code == 403
        assert response.json()["code"] == "domain_not_verified"

    def test_crud(self, client, db_session):
        licensed_tenant(db_session)
        created = client.post("/api/v1/company/users",
                              json={"domain": "acme.com", "email": "Jo@acme.com", "name": "Jo"}).json()
        assert created["email"] == "jo@acme.com"

        listed = client.get("/api/v1/company/users", params={"domain": "acme.com"}).json()
        assert [user["email"] for user in listed] == ["jo@acme.com"]

        updated = client.patch(f"/api/v1/company/users/{created['id']}", json={"role": "admin"}).json()
        assert updated["role"] == "admin"

        assert client.delete(f"/api/v1/company/users/{created['id']}").status_code == 200
        assert client.delete(f"/api/v1/company/users/{created['id']}").status_code == 404

    def test_list_requires_domain(self, client):
        response = client.get("/api/v1/company/users")
        assert response.status_code == 400
        assert response.json()["code"] == "validation_error"

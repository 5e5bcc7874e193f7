"""Tests for token issuance and the bearer/role checks."""

from datetime import datetime, timedelta, timezone

import jwt

from auth import create_token, decode_token
from config import settings
from conftest import EMPLOYEE_EMAIL, HR_EMAIL, bearer


class TestTokens:
    def test_issue_token_carries_claims_and_24h_expiry(self, client):
        response = client.post("/jwt", json={"email": HR_EMAIL, "name": "Hana"})
        assert response.status_code == 200

        claims = decode_token(response.json()["token"])
        assert claims["email"] == HR_EMAIL
        assert claims["name"] == "Hana"
        remaining = claims["exp"] - datetime.now(timezone.utc).timestamp()
        assert timedelta(hours=23, minutes=59).total_seconds() < remaining <= timedelta(hours=24).total_seconds()

    def test_client_supplied_expiry_is_overridden(self):
        token = create_token({"email": HR_EMAIL, "exp": 1})
        assert decode_token(token)["exp"] > datetime.now(timezone.utc).timestamp()


class TestBearerCheck:
    def test_missing_header_is_unauthorized(self, client):
        response = client.get("/users")
        assert response.status_code == 401
        assert response.json()["message"] == "Unauthorized access"

    def test_bad_signature_is_unauthorized(self, client):
        forged = jwt.encode({"email": HR_EMAIL}, "not-the-secret", algorithm="HS256")
        response = client.get("/users", headers={"Authorization": f"Bearer {forged}"})
        assert response.status_code == 401

    def test_expired_token_is_unauthorized(self, client):
        expired = jwt.encode(
            {"email": HR_EMAIL, "exp": datetime.now(timezone.utc) - timedelta(minutes=1)},
            settings.ACCESS_TOKEN_SECRET,
            algorithm=settings.TOKEN_ALGORITHM,
        )
        response = client.get("/users", headers={"Authorization": f"Bearer {expired}"})
        assert response.status_code == 401

    def test_valid_token_passes(self, client, manager_headers):
        response = client.get("/users", headers=manager_headers)
        assert response.status_code == 200
        assert [u["email"] for u in response.json()] == [HR_EMAIL]


class TestManagerRole:
    def test_employee_is_forbidden(self, client, employee_headers):
        response = client.post("/add-employee", json=[], headers=employee_headers)
        assert response.status_code == 403
        assert response.json()["message"] == "Forbidden access"

    def test_unknown_user_fails_closed(self, client):
        response = client.delete("/assets/64b7f0c2a1b2c3d4e5f60718", headers=bearer("ghost@acme.com"))
        assert response.status_code == 403

    def test_role_is_read_on_every_call(self, client, mock_db, manager_headers, make_asset):
        asset = make_asset()
        mock_db.users.update_one({"email": HR_EMAIL}, {"$set": {"role": "employee"}})
        response = client.delete(f"/assets/{asset['_id']}", headers=manager_headers)
        assert response.status_code == 403

    def test_role_lookup(self, client, manager_headers, employee_headers):
        manager = client.get(f"/users/role/{HR_EMAIL}", headers=manager_headers).json()
        employee = client.get(f"/users/role/{EMPLOYEE_EMAIL}", headers=manager_headers).json()
        assert manager == {"role": "hr-manager", "isHrManager": True}
        assert employee == {"role": "employee", "isHrManager": False}

"""
Auth System Unit & Integration Tests

Tests cover:
  - Password hashing (bcrypt)
  - JWT token generation / verification / expiry
  - Auth API: login, refresh, logout, me
  - Principal re-resolution from the current user row
"""

import jwt as pyjwt
import pytest

from producthub.models import db
from producthub.services.jwt_service import decode_access_token, generate_access_token
from producthub.utils.crypto import hash_password, verify_password

DEFAULT_PASSWORD = "password123"


# ═══════════════════════════════════════════════════════════════
# PASSWORD HASHING
# ═══════════════════════════════════════════════════════════════

class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = hash_password("s3cret-pw")
        assert hashed.startswith("$2b$12$")
        assert verify_password("s3cret-pw", hashed)
        assert not verify_password("wrong", hashed)

    def test_same_password_hashes_differ(self):
        assert hash_password("abc123") != hash_password("abc123")

    @pytest.mark.parametrize("stored", ["", None, "plaintext", "pbkdf2:sha256:1$x$y"])
    def test_malformed_hash_never_verifies(self, stored):
        assert verify_password("anything", stored) is False


# ═══════════════════════════════════════════════════════════════
# JWT
# ═══════════════════════════════════════════════════════════════

class TestJWT:
    def test_token_carries_identity_claims(self, admin):
        payload = decode_access_token(generate_access_token(admin))
        assert payload["sub"] == admin.id
        assert payload["email"] == "admin@example.com"
        assert payload["organization_id"] == admin.organization_id
        assert payload["is_superadmin"] is True
        assert payload["is_global_superadmin"] is False
        assert payload["type"] == "access"

    def test_expired_token_rejected(self, app, member, monkeypatch):
        monkeypatch.setitem(app.config, "JWT_ACCESS_EXPIRES", -10)
        token = generate_access_token(member)
        with pytest.raises(pyjwt.ExpiredSignatureError):
            decode_access_token(token)

    def test_token_signed_with_other_key_rejected(self, member):
        forged = pyjwt.encode(
            {"sub": str(member.id), "type": "access"},
            "some-other-secret-key-that-is-long-enough", algorithm="HS256",
        )
        with pytest.raises(pyjwt.InvalidTokenError):
            decode_access_token(forged)


# ═══════════════════════════════════════════════════════════════
# LOGIN / REFRESH / LOGOUT / ME
# ═══════════════════════════════════════════════════════════════

class TestLogin:
    def test_login_success(self, client, member):
        res = client.post("/api/auth/login", json={
            "email": "member@example.com", "password": DEFAULT_PASSWORD,
        })
        assert res.status_code == 200
        data = res.get_json()
        assert data["token_type"] == "Bearer"
        assert data["expires_in"] == 86400
        assert data["user"]["email"] == "member@example.com"
        assert "password_hash" not in data["user"]
        assert decode_access_token(data["access_token"])["sub"] == member.id

    def test_login_email_is_case_insensitive(self, client, member):
        res = client.post("/api/auth/login", json={
            "email": "  Member@Example.COM ", "password": DEFAULT_PASSWORD,
        })
        assert res.status_code == 200

    def test_wrong_password_and_unknown_email_look_identical(self, client, member):
        wrong_pw = client.post("/api/auth/login", json={
            "email": "member@example.com", "password": "nope-nope",
        })
        unknown = client.post("/api/auth/login", json={
            "email": "ghost@example.com", "password": DEFAULT_PASSWORD,
        })
        assert wrong_pw.status_code == unknown.status_code == 401
        assert wrong_pw.get_json() == unknown.get_json()
        assert wrong_pw.get_json()["code"] == "ERR_UNAUTHENTICATED"

    def test_missing_credentials(self, client):
        res = client.post("/api/auth/login", json={"email": "member@example.com"})
        assert res.status_code == 400

    def test_non_object_body(self, client):
        res = client.post("/api/auth/login", json=["member@example.com"])
        assert res.status_code == 400

    def test_non_json_body_rejected(self, client):
        res = client.post("/api/auth/login", data="email=x", content_type="text/plain")
        assert res.status_code == 415


class TestSessionEndpoints:
    def test_me_requires_token(self, client):
        res = client.get("/api/auth/me")
        assert res.status_code == 401
        assert res.get_json()["code"] == "ERR_UNAUTHENTICATED"

    def test_me_returns_user_and_organization(self, client, member, auth_headers):
        res = client.get("/api/auth/me", headers=auth_headers(member))
        assert res.status_code == 200
        data = res.get_json()
        assert data["user"]["id"] == member.id
        assert data["organization"]["name"] == "Acme"

    def test_garbage_token_is_unauthenticated(self, client):
        res = client.get("/api/auth/me", headers={"Authorization": "Bearer not.a.token"})
        assert res.status_code == 401

    def test_refresh_reflects_current_user_row(self, client, member, auth_headers):
        headers = auth_headers(member)
        member.is_superadmin = True
        db.session.commit()

        res = client.post("/api/auth/refresh", headers=headers)
        assert res.status_code == 200
        claims = decode_access_token(res.get_json()["access_token"])
        assert claims["is_superadmin"] is True

    def test_logout(self, client):
        res = client.post("/api/auth/logout")
        assert res.status_code == 200

    def test_token_of_deleted_user_is_unauthenticated(self, client, member, auth_headers):
        headers = auth_headers(member)
        db.session.delete(member)
        db.session.commit()

        res = client.get("/api/auth/me", headers=headers)
        assert res.status_code == 401


class TestStaleClaims:
    def test_demoted_admin_loses_access_before_token_expiry(self, client, admin, auth_headers):
        headers = auth_headers(admin)
        assert client.get("/api/admin/users", headers=headers).status_code == 200

        admin.is_superadmin = False
        db.session.commit()

        res = client.get("/api/admin/users", headers=headers)
        assert res.status_code == 403
        assert res.get_json()["code"] == "ERR_FORBIDDEN"

    def test_promoted_user_gains_access_with_old_token(self, client, member, auth_headers):
        headers = auth_headers(member)
        member.is_superadmin = True
        db.session.commit()

        assert client.get("/api/admin/users", headers=headers).status_code == 200

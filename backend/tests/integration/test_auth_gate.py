from __future__ import annotations

import pytest

from tests.helpers.auth import bearer, expired_token, issue_token

BOOKS = "/api/books"


class TestAccessTokenValidation:
    def test_missing_token_is_401(self, client, session):
        resp = client.get(BOOKS)
        assert resp.status_code == 401
        assert resp.get_json() == {"error": "Authentication required"}

    def test_valid_token_passes(self, client, member_headers):
        assert client.get(BOOKS, headers=member_headers).status_code == 200

    def test_tampered_token_is_401(self, client, member):
        """
        GIVEN a valid token whose payload was altered
        WHEN  it is presented
        THEN  signature validation fails with 401
        """
        header, payload, signature = issue_token(member).split(".")
        tampered = ".".join([header, payload[:-2] + ("A" if payload[-2] != "A" else "B") + payload[-1], signature])

        resp = client.get(BOOKS, headers=bearer(tampered))

        assert resp.status_code == 401

    def test_foreign_signature_is_401(self, client, member):
        import jwt as pyjwt

        forged = pyjwt.encode(
            {"sub": member.username, "uid": str(member.id), "role": "admin", "type": "access"},
            "some-other-secret",
            algorithm="HS256",
        )
        assert client.get(BOOKS, headers=bearer(forged)).status_code == 401

    def test_expired_token_is_401(self, client, member):
        resp = client.get(BOOKS, headers=bearer(expired_token(member)))
        assert resp.status_code == 401
        assert resp.get_json() == {"error": "Access token has expired"}

    @pytest.mark.parametrize("claim,value", [("JWT_DECODE_AUDIENCE", "elsewhere"), ("JWT_DECODE_ISSUER", "someone")])
    def test_wrong_audience_or_issuer_is_401(self, app, client, member, monkeypatch, claim, value):
        token = issue_token(member)
        monkeypatch.setitem(app.config, claim, value)
        assert client.get(BOOKS, headers=bearer(token)).status_code == 401


class TestPublicRoutes:
    def test_health_needs_no_token(self, client, session):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.get_json()["status"] == "ok"

    def test_login_reachable_without_token(self, client, session):
        resp = client.post("/api/auth/login", json={"username": "ghost", "password": "x"})
        assert resp.status_code == 401
        assert resp.get_json() == {"error": "Invalid username or password"}

    def test_unknown_route_is_404_json(self, client, session):
        resp = client.get("/api/nope")
        assert resp.status_code == 404
        assert resp.get_json() == {"error": "Route '/api/nope' not found"}


class TestPolicyTable:
    def test_user_cannot_create_author(self, client, member_headers):
        resp = client.post("/api/authors", json={}, headers=member_headers)
        assert resp.status_code == 403
        assert resp.get_json() == {"error": "You do not have permission to perform this action"}

    def test_user_cannot_list_users(self, client, member_headers):
        assert client.get("/api/users", headers=member_headers).status_code == 403

    def test_admin_can_list_users(self, client, admin_headers):
        assert client.get("/api/users", headers=admin_headers).status_code == 200

    def test_request_id_is_echoed(self, client, session):
        resp = client.get("/api/health", headers={"X-Request-ID": "req-123"})
        assert resp.headers["X-Request-ID"] == "req-123"

"""Tests for the auth module: token creation, validation, and dev mode bypass."""

from contextforge.core.auth import ANONYMOUS_USER_ID
from contextforge.core.token_factory import create_token, decode_token


class TestTokenFactory:

    def test_create_and_decode(self):
        token = create_token("agent", "test-secret", role="service")
        payload = decode_token(token, "test-secret")
        assert payload is not None
        assert payload.sub == "agent"
        assert payload.role == "service"

    def test_default_role_is_user(self):
        payload = decode_token(create_token("agent", "secret"), "secret")
        assert payload.role == "user"

    def test_wrong_secret_returns_none(self):
        token = create_token("agent", "correct-secret")
        assert decode_token(token, "wrong-secret") is None

    def test_expired_token_returns_none(self):
        token = create_token("agent", "secret", expires_hours=-1)
        assert decode_token(token, "secret") is None

    def test_malformed_token_returns_none(self):
        assert decode_token("not.a.token", "secret") is None
        assert decode_token("", "secret") is None

    def test_unsupported_algorithm_returns_none(self):
        token = create_token("agent", "secret")
        assert decode_token(token, "secret", algorithm="RS256") is None


class TestAuthDisabledMode:
    """When AUTH_ENABLED=false (default), requests act as the anonymous owner."""

    def test_create_without_token_succeeds(self, client):
        resp = client.post("/api/folders", json={"name": "No Auth"})
        assert resp.status_code == 201
        assert resp.json()["owner_id"] == ANONYMOUS_USER_ID

    def test_delete_without_token_succeeds(self, client):
        folder_id = client.post("/api/folders", json={"name": "To Delete"}).json()["id"]
        assert client.delete(f"/api/folders/{folder_id}").status_code == 200

# Tests for the /auth onboarding routes.
# Created: 2026-10-18

from urllib.parse import parse_qs, urlsplit

from tunebridge.errors import SpotifyAPIError


def _issue_state(client) -> str:
    resp = client.get("/auth/login-auto", follow_redirects=False)
    return parse_qs(urlsplit(resp.headers["location"]).query)["state"][0]


class TestLogin:
    def test_login_page_shows_url(self, client):
        resp = client.get("/auth/login")
        assert resp.status_code == 200
        assert "text/html" in resp.headers["content-type"]
        assert "https://accounts.spotify.com/authorize?" in resp.text
        assert "client-123" in resp.text
        assert "http://127.0.0.1:3000/auth/callback" in resp.text

    def test_login_auto_redirects(self, client):
        resp = client.get("/auth/login-auto", follow_redirects=False)
        assert resp.status_code == 302

        location = resp.headers["location"]
        assert location.startswith("https://accounts.spotify.com/authorize?")
        params = parse_qs(urlsplit(location).query)
        assert params["response_type"] == ["code"]
        assert params["client_id"] == ["client-123"]
        assert len(params["state"][0]) >= 16


class TestCallback:
    def test_success_shows_tokens(self, client, fake_api):
        state = _issue_state(client)
        resp = client.get("/auth/callback", params={"code": "abc", "state": state})

        assert resp.status_code == 200
        assert "refresh-from-code" in resp.text
        assert "access-from-code" in resp.text
        assert "SPOTIFY_REFRESH_TOKEN" in resp.text
        assert fake_api.calls == [("exchange", "abc")]

    def test_error_param(self, client, fake_api):
        resp = client.get(
            "/auth/callback",
            params={"error": "access_denied", "error_description": "The user denied access"},
        )
        assert resp.status_code == 400
        assert "access_denied" in resp.text
        assert "The user denied access" in resp.text
        assert fake_api.count("exchange") == 0

    def test_error_without_description(self, client, fake_api):
        resp = client.get("/auth/callback", params={"error": "invalid_scope"})
        assert resp.status_code == 400
        assert "invalid_scope" in resp.text
        assert "No description provided" in resp.text

    def test_missing_code(self, client, fake_api):
        resp = client.get("/auth/callback", params={"state": "abcdefghijklmnop"})
        assert resp.status_code == 400
        assert "Missing Authorization Code" in resp.text
        assert "abcdefghijklmnop" in resp.text
        assert fake_api.count("exchange") == 0

    def test_no_params(self, client, fake_api):
        resp = client.get("/auth/callback")
        assert resp.status_code == 400
        assert fake_api.count("exchange") == 0

    def test_forged_state(self, client, fake_api):
        _issue_state(client)
        resp = client.get("/auth/callback", params={"code": "abc", "state": "X" * 16})
        assert resp.status_code == 400
        assert "Invalid Authorization State" in resp.text
        assert fake_api.count("exchange") == 0

    def test_exchange_failure(self, client, fake_api):
        fake_api.errors["exchange"] = SpotifyAPIError("invalid_client", status=401)
        state = _issue_state(client)

        resp = client.get("/auth/callback", params={"code": "abc", "state": state})
        assert resp.status_code == 500
        assert "Token Exchange Failed" in resp.text
        assert "invalid_client" in resp.text

    def test_params_are_escaped(self, client):
        resp = client.get("/auth/callback", params={"error": "<script>alert(1)</script>"})
        assert resp.status_code == 400
        assert "<script>" not in resp.text


class TestRefreshToken:
    def test_missing_param(self, client, fake_api):
        resp = client.get("/auth/refresh_token")
        assert resp.status_code == 400
        assert "Missing refresh_token parameter" in resp.text
        assert fake_api.calls == []

    def test_performs_refresh(self, client, fake_api):
        resp = client.get("/auth/refresh_token", params={"refresh_token": "some-long-refresh-token"})
        assert resp.status_code == 200
        assert "access-1" in resp.text
        assert "some-long-refresh-token" not in resp.text
        assert fake_api.calls == [("refresh", "some-long-refresh-token")]

    def test_refresh_failure(self, client, fake_api):
        fake_api.errors["refresh"] = SpotifyAPIError("invalid_grant", status=400)
        resp = client.get("/auth/refresh_token", params={"refresh_token": "revoked"})
        assert resp.status_code == 500
        assert "Token Refresh Failed" in resp.text


class TestDiagnostics:
    def test_reports_configuration(self, client):
        resp = client.get("/auth/test")
        assert resp.status_code == 200
        assert "Server is running correctly" in resp.text
        assert "SPOTIFY_CLIENT_ID" in resp.text
        assert "Missing" not in resp.text
        assert "http://127.0.0.1:3000/auth/callback" in resp.text
        # secrets are never echoed
        assert "secret-456" not in resp.text

from datetime import timedelta
from urllib.parse import parse_qs, urlparse

import pytest

from soon_auth.infrastructure.dependency_injection.auth_dependencies import get_auth_facade
from soon_auth.utils.clock import utcnow

FEDERATED = "soon-federated-session"


class TestStartOAuth:
    @pytest.mark.asyncio
    async def test_redirects_to_provider(self, async_client):
        response = await async_client.get("/api/v1/auth/oauth/github?flow=sign-up")

        assert response.status_code == 302
        location = urlparse(response.headers["location"])
        query = parse_qs(location.query)
        assert location.path.endswith("/oauth2/github")
        assert query["success"] == ["http://test/oauth"]
        assert query["failure"] == ["http://test/sign-up?error=oauth_failed"]

    @pytest.mark.asyncio
    async def test_unknown_provider(self, async_client):
        response = await async_client.get("/api/v1/auth/oauth/myspace")

        assert response.status_code == 400
        assert response.json()["error"] == "invalid_input"


class TestCallback:
    @pytest.mark.asyncio
    async def test_successful_login_sets_federated_cookie(self, async_client, identity_provider):
        identity_provider.add_user("gh-1", "fed@example.com", "Fed")
        secret = identity_provider.grant_secret("gh-1")

        response = await async_client.get(
            f"/oauth?userId=gh-1&secret={secret}", headers={"Referer": "https://github.com/"}
        )

        assert response.status_code == 302
        assert response.headers["location"] == "http://test/oauth-complete"
        assert "no-store" in response.headers["cache-control"]
        assert FEDERATED in response.cookies

        me = await async_client.get(
            "/api/v1/auth/me", headers={"Cookie": f"{FEDERATED}={response.cookies[FEDERATED]}"}
        )
        assert me.status_code == 200
        assert me.json()["federated"] is True

    @pytest.mark.asyncio
    async def test_missing_parameters(self, async_client):
        response = await async_client.get("/oauth?userId=gh-1")

        assert response.status_code == 302
        assert response.headers["location"] == "http://test/sign-in?error=oauth_incomplete"

    @pytest.mark.asyncio
    async def test_replay_fails(self, async_client, identity_provider):
        identity_provider.add_user("gh-1", "fed@example.com")
        secret = identity_provider.grant_secret("gh-1")
        await async_client.get(f"/oauth?userId=gh-1&secret={secret}")

        response = await async_client.get(f"/oauth?userId=gh-1&secret={secret}")

        assert response.headers["location"] == "http://test/sign-in?error=oauth_session_failed"

    @pytest.mark.asyncio
    async def test_registration_disabled(self, app, async_client, closed_facade, identity_provider):
        app.dependency_overrides[get_auth_facade] = lambda: closed_facade
        identity_provider.add_user("gh-2", "new@example.com", created_at=utcnow() - timedelta(seconds=30))
        secret = identity_provider.grant_secret("gh-2")

        response = await async_client.get(f"/oauth?userId=gh-2&secret={secret}")

        assert response.headers["location"] == "http://test/sign-in?error=registration_disabled"
        assert FEDERATED not in response.cookies
        assert "gh-2" not in identity_provider.users

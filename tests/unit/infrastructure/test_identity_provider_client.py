import json
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from soon_auth.core.exceptions import (
    ExchangeFailedError,
    IdentityProviderError,
    ProviderUnavailableError,
)
from soon_auth.domain.value_objects.provider import OAuthProvider
from soon_auth.infrastructure.services.identity_provider import ManagedIdentityProviderClient

ENDPOINT = "https://idp.test/v1"

SESSION = {
    "$id": "sess-1",
    "userId": "user-1",
    "secret": "provider-secret",
    "$createdAt": "2024-05-01T10:00:00.000+00:00",
    "expire": "2025-05-01T10:00:00.000+00:00",
}
USER = {"$id": "user-1", "email": "jane@example.com", "name": "Jane", "$createdAt": "2024-05-01T09:58:00.000+00:00"}


def make_client(handler):
    return ManagedIdentityProviderClient(
        ENDPOINT, "project-1", "api-key", transport=httpx.MockTransport(handler)
    )


class TestExchange:
    @pytest.mark.asyncio
    async def test_exchange_posts_secret_with_admin_key(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json=SESSION)

        client = make_client(handler)
        session = await client.exchange_secret("user-1", "one-time")
        await client.aclose()

        [request] = seen
        assert request.method == "POST"
        assert request.url.path == "/v1/account/sessions/token"
        assert request.headers["X-Appwrite-Project"] == "project-1"
        assert request.headers["X-Appwrite-Key"] == "api-key"
        assert json.loads(request.content) == {"userId": "user-1", "secret": "one-time"}
        assert (session.id, session.user_id, session.secret) == ("sess-1", "user-1", "provider-secret")

    @pytest.mark.asyncio
    async def test_refused_exchange_is_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(401, json={"message": "Invalid token passed in the request."})

        client = make_client(handler)
        with pytest.raises(ExchangeFailedError) as exc_info:
            await client.exchange_secret("user-1", "replayed")

        assert exc_info.value.status_code == 401
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_server_error_is_unavailability(self):
        client = make_client(lambda request: httpx.Response(503))

        with pytest.raises(ProviderUnavailableError):
            await client.exchange_secret("user-1", "secret")


class TestReads:
    @pytest.mark.asyncio
    async def test_get_user(self):
        client = make_client(lambda request: httpx.Response(200, json=USER))

        user = await client.get_user("user-1")

        assert user.email == "jane@example.com"
        assert user.created_at.minute == 58

    @pytest.mark.asyncio
    async def test_reads_retry_transient_failures(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            if len(attempts) < 3:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json=USER)

        client = make_client(handler)

        assert (await client.get_user("user-1")).id == "user-1"
        assert len(attempts) == 3

    @pytest.mark.asyncio
    async def test_reads_give_up_after_three_attempts(self):
        attempts = []

        def handler(request):
            attempts.append(request)
            return httpx.Response(500)

        client = make_client(handler)

        with pytest.raises(ProviderUnavailableError):
            await client.get_user("user-1")
        assert len(attempts) == 3

    @pytest.mark.asyncio
    async def test_get_account_uses_session_secret(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=USER)

        client = make_client(handler)
        await client.get_account("provider-secret")

        assert seen[0].url.path == "/v1/account"
        assert seen[0].headers["X-Appwrite-Session"] == "provider-secret"
        assert "X-Appwrite-Key" not in seen[0].headers

    @pytest.mark.asyncio
    async def test_client_errors_carry_status_and_message(self):
        client = make_client(lambda request: httpx.Response(401, json={"message": "Unauthorized"}))

        with pytest.raises(IdentityProviderError) as exc_info:
            await client.get_account("expired")

        assert exc_info.value.status_code == 401
        assert exc_info.value.message == "Unauthorized"
        assert not isinstance(exc_info.value, ProviderUnavailableError)


class TestDeletes:
    @pytest.mark.asyncio
    async def test_delete_endpoints(self):
        seen = []

        def handler(request):
            seen.append((request.method, request.url.path))
            return httpx.Response(204)

        client = make_client(handler)
        await client.delete_session("user-1", "sess-1")
        await client.delete_user("user-1")
        await client.delete_current_session("provider-secret")

        assert seen == [
            ("DELETE", "/v1/users/user-1/sessions/sess-1"),
            ("DELETE", "/v1/users/user-1"),
            ("DELETE", "/v1/account/sessions/current"),
        ]


def test_authorization_url():
    client = make_client(lambda request: httpx.Response(200))

    url = client.authorization_url(
        OAuthProvider.GITHUB, "https://soon.test/oauth", "https://soon.test/sign-in?error=oauth_failed"
    )

    parsed = urlparse(url)
    query = parse_qs(parsed.query)
    assert f"{parsed.scheme}://{parsed.netloc}{parsed.path}" == f"{ENDPOINT}/account/tokens/oauth2/github"
    assert query == {
        "project": ["project-1"],
        "success": ["https://soon.test/oauth"],
        "failure": ["https://soon.test/sign-in?error=oauth_failed"],
    }

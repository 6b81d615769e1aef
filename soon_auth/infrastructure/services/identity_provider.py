"""HTTP client for the managed identity provider (Appwrite-compatible REST API).

Admin calls authenticate with the project API key; calls made on behalf of a
user authenticate with that user's provider session secret instead.

Error translation:
    - transport errors and 5xx answers raise `ProviderUnavailableError`,
    - a refused session exchange raises `ExchangeFailedError`,
    - any other 4xx raises `IdentityProviderError` carrying the status code.

Only idempotent reads are retried (tenacity, three attempts). The secret
exchange is never retried because the provider consumes the secret on the
first attempt.
"""

from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx
from structlog import get_logger
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from soon_auth.core.exceptions import (
    ExchangeFailedError,
    IdentityProviderError,
    ProviderUnavailableError,
)
from soon_auth.domain.interfaces.identity_provider import IIdentityProvider
from soon_auth.domain.value_objects.provider import OAuthProvider, ProviderSession, ProviderUser

logger = get_logger(__name__)

retry_reads = retry(
    stop=stop_after_attempt(3),
    wait=wait_fixed(0.2),
    retry=retry_if_exception_type(ProviderUnavailableError),
    reraise=True,
)


class ManagedIdentityProviderClient(IIdentityProvider):
    """Async httpx client for the identity provider.

    Args:
        endpoint: API root, e.g. ``https://cloud.appwrite.io/v1``.
        project_id: Provider project id, sent on every request.
        api_key: Admin API key.
        timeout: Per-request timeout in seconds.
        transport: Optional httpx transport (tests pass ``httpx.MockTransport``).
    """

    def __init__(
        self,
        endpoint: str,
        project_id: str,
        api_key: str,
        timeout: float = 5.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._endpoint = endpoint.rstrip("/")
        self._project_id = project_id
        self._admin_headers = {"X-Appwrite-Key": api_key}
        self._client = httpx.AsyncClient(
            base_url=self._endpoint,
            timeout=timeout,
            transport=transport,
            headers={"X-Appwrite-Project": project_id},
        )

    async def _request(
        self,
        method: str,
        path: str,
        *,
        headers: Dict[str, str],
        json: Optional[Dict[str, Any]] = None,
    ) -> Optional[Dict[str, Any]]:
        try:
            response = await self._client.request(method, path, headers=headers, json=json)
        except httpx.TransportError as e:
            await logger.awarning(
                "identity_provider_transport_error",
                method=method,
                path=path,
                error_type=type(e).__name__,
            )
            raise ProviderUnavailableError() from e

        if response.status_code >= 500:
            await logger.awarning(
                "identity_provider_server_error",
                method=method,
                path=path,
                status_code=response.status_code,
            )
            raise ProviderUnavailableError(status_code=response.status_code)
        if response.status_code >= 400:
            raise IdentityProviderError(
                _error_message(response),
                status_code=response.status_code,
            )
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    async def exchange_secret(self, user_id: str, secret: str) -> ProviderSession:
        try:
            payload = await self._request(
                "POST",
                "/account/sessions/token",
                headers=self._admin_headers,
                json={"userId": user_id, "secret": secret},
            )
        except ProviderUnavailableError:
            raise
        except IdentityProviderError as e:
            raise ExchangeFailedError(status_code=e.status_code) from e
        return ProviderSession.model_validate(payload)

    @retry_reads
    async def get_user(self, user_id: str) -> ProviderUser:
        payload = await self._request("GET", f"/users/{user_id}", headers=self._admin_headers)
        return ProviderUser.model_validate(payload)

    async def delete_session(self, user_id: str, session_id: str) -> None:
        await self._request(
            "DELETE", f"/users/{user_id}/sessions/{session_id}", headers=self._admin_headers
        )

    async def delete_user(self, user_id: str) -> None:
        await self._request("DELETE", f"/users/{user_id}", headers=self._admin_headers)

    @retry_reads
    async def get_account(self, session_secret: str) -> ProviderUser:
        payload = await self._request(
            "GET", "/account", headers={"X-Appwrite-Session": session_secret}
        )
        return ProviderUser.model_validate(payload)

    async def delete_current_session(self, session_secret: str) -> None:
        await self._request(
            "DELETE", "/account/sessions/current", headers={"X-Appwrite-Session": session_secret}
        )

    def authorization_url(self, provider: OAuthProvider, success_url: str, failure_url: str) -> str:
        query = urlencode(
            {"project": self._project_id, "success": success_url, "failure": failure_url}
        )
        return f"{self._endpoint}/account/tokens/oauth2/{provider.value}?{query}"

    async def aclose(self) -> None:
        await self._client.aclose()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"Identity provider returned {response.status_code}"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return f"Identity provider returned {response.status_code}"

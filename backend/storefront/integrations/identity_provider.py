"""Identity provider integration (GoTrue-compatible auth REST API).

Every call goes to the provider; nothing is cached here, so revoked sessions
and role changes take effect on the next request.
"""

import httpx
import structlog

from storefront.core.config import get_settings
from storefront.core.exceptions import IdentityExistsError, UpstreamError, ValidationError

logger = structlog.get_logger(__name__)

_ALREADY_REGISTERED_MARKERS = ("already registered", "already been registered", "email_exists")


class IdentityProvider:
    """Client for the hosted auth service."""

    def __init__(
        self,
        base_url: str | None = None,
        anon_key: str | None = None,
        service_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.base_url = (base_url if base_url is not None else settings.auth_url).rstrip("/")
        self.anon_key = anon_key if anon_key is not None else settings.auth_anon_key
        self.service_key = service_key if service_key is not None else settings.auth_service_key
        self.timeout = timeout if timeout is not None else settings.auth_timeout_seconds
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        )

    async def get_user(self, access_token: str) -> dict | None:
        """Resolve an access token to the provider's user record.

        Returns None when the provider rejects the token (invalid, expired,
        revoked). Raises UpstreamError when the provider itself is failing.
        """
        if not self.base_url:
            raise UpstreamError("Identity provider is not configured")

        try:
            async with self._client() as client:
                response = await client.get(
                    "/auth/v1/user",
                    headers={
                        "apikey": self.anon_key,
                        "Authorization": f"Bearer {access_token}",
                    },
                )
        except httpx.HTTPError as exc:
            logger.error("identity_provider_unreachable", error=str(exc), error_type=type(exc).__name__)
            raise UpstreamError("Identity provider unavailable") from exc

        if response.status_code in (400, 401, 403, 404):
            return None
        if response.status_code >= 500:
            logger.error("identity_provider_error", status_code=response.status_code)
            raise UpstreamError("Identity provider unavailable")

        return response.json()

    async def create_user(self, email: str, password: str, user_metadata: dict) -> dict:
        """Create a confirmed user through the admin API."""
        if not self.base_url or not self.service_key:
            raise UpstreamError("Identity provider is not configured")

        try:
            async with self._client() as client:
                response = await client.post(
                    "/auth/v1/admin/users",
                    headers={
                        "apikey": self.service_key,
                        "Authorization": f"Bearer {self.service_key}",
                    },
                    json={
                        "email": email,
                        "password": password,
                        "user_metadata": user_metadata,
                        # No mail server configured; confirm on creation
                        "email_confirm": True,
                    },
                )
        except httpx.HTTPError as exc:
            logger.error("identity_provider_unreachable", error=str(exc), error_type=type(exc).__name__)
            raise UpstreamError("Identity provider unavailable") from exc

        if response.status_code >= 500:
            logger.error("identity_provider_error", status_code=response.status_code)
            raise UpstreamError("Identity provider unavailable")

        if response.status_code >= 400:
            message = _error_message(response)
            if any(marker in message.lower() for marker in _ALREADY_REGISTERED_MARKERS):
                raise IdentityExistsError(message)
            raise ValidationError(message)

        return response.json()


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"Identity provider returned {response.status_code}"
    if isinstance(body, dict):
        for field in ("msg", "message", "error_description", "error_code", "error"):
            if body.get(field):
                return str(body[field])
    return f"Identity provider returned {response.status_code}"

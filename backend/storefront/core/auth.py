"""Bearer-token access control for FastAPI.

Identity is resolved per request by the external identity provider; the
gate itself holds no state.
"""

from dataclasses import dataclass
from enum import Enum

import structlog
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from storefront.core.clock import Clock, get_clock, isoformat_z, utc_now
from storefront.core.config import get_settings
from storefront.core.exceptions import AuthenticationError, AuthorizationError
from storefront.core.logging import AUDIT_LOGGER_NAME
from storefront.integrations.identity_provider import IdentityProvider

_bearer_scheme = HTTPBearer(auto_error=False)

audit_logger = structlog.get_logger(AUDIT_LOGGER_NAME)

AUTHENTICATION_REQUIRED = "Authentication required"
ADMIN_REQUIRED = "Forbidden: Admin privileges required"


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class Identity:
    """Principal behind a bearer token."""

    subject_id: str
    email: str | None
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


@dataclass(frozen=True)
class Authorized:
    identity: Identity


@dataclass(frozen=True)
class Denied:
    reason: str
    status_code: int


def identity_from_user(user: dict, role_metadata_key: str = "user_metadata") -> Identity | None:
    """Map a provider user record onto an Identity. Anything but "admin" is a plain user."""
    subject_id = user.get("id")
    if not subject_id:
        return None
    metadata = user.get(role_metadata_key) or {}
    role = Role.ADMIN if metadata.get("role") == Role.ADMIN.value else Role.USER
    return Identity(subject_id=subject_id, email=user.get("email"), role=role)


class AccessGate:
    """Resolves bearer tokens and enforces the admin role."""

    def __init__(
        self,
        provider: IdentityProvider,
        clock: Clock = utc_now,
        role_metadata_key: str | None = None,
    ):
        self.provider = provider
        self.clock = clock
        self.role_metadata_key = role_metadata_key or get_settings().role_metadata_key

    async def authenticate(self, token: str | None) -> Identity | None:
        """Fail-soft resolution: None for a missing, invalid or expired token.

        Provider outages still raise UpstreamError.
        """
        if not token:
            return None
        user = await self.provider.get_user(token)
        if user is None:
            return None
        return identity_from_user(user, self.role_metadata_key)

    async def require_admin(self, token: str | None) -> Authorized | Denied:
        identity = await self.authenticate(token)
        if identity is None:
            return Denied(reason=AUTHENTICATION_REQUIRED, status_code=401)

        if not identity.is_admin:
            audit_logger.warning(
                "admin_access_denied",
                email=identity.email,
                subject_id=identity.subject_id,
                timestamp=isoformat_z(self.clock()),
            )
            return Denied(reason=ADMIN_REQUIRED, status_code=403)

        return Authorized(identity=identity)


def get_identity_provider() -> IdentityProvider:
    return IdentityProvider()


def get_access_gate(
    provider: IdentityProvider = Depends(get_identity_provider),
    clock: Clock = Depends(get_clock),
) -> AccessGate:
    return AccessGate(provider, clock=clock)


def _token(credentials: HTTPAuthorizationCredentials | None) -> str | None:
    return credentials.credentials if credentials is not None else None


async def get_current_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    gate: AccessGate = Depends(get_access_gate),
) -> Identity | None:
    """FastAPI dependency for routes where anonymous access is allowed."""
    identity = await gate.authenticate(_token(credentials))
    if identity is not None:
        request.state.user_id = identity.subject_id
    return identity


async def require_identity(identity: Identity | None = Depends(get_current_identity)) -> Identity:
    """FastAPI dependency that requires any signed-in identity (401 otherwise)."""
    if identity is None:
        raise AuthenticationError(AUTHENTICATION_REQUIRED)
    return identity


async def require_admin(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer_scheme),
    gate: AccessGate = Depends(get_access_gate),
) -> Identity:
    """FastAPI dependency that requires the admin role.

    401 when no identity resolves, 403 when it resolves to a non-admin.

    Usage::

        @router.post("/products")
        async def upsert(admin: Identity = Depends(require_admin)):
            ...
    """
    decision = await gate.require_admin(_token(credentials))
    if isinstance(decision, Denied):
        if decision.status_code == 401:
            raise AuthenticationError(decision.reason)
        raise AuthorizationError(decision.reason)

    request.state.user_id = decision.identity.subject_id
    return decision.identity

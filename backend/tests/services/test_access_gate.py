"""Tests for AccessGate: 401 vs 403 decisions and the denial audit trail."""

from unittest.mock import patch

import pytest

from storefront.core.auth import AccessGate, Authorized, Denied, Identity, Role, identity_from_user

pytestmark = pytest.mark.unit


@pytest.fixture
def gate(identity_provider, clock):
    return AccessGate(identity_provider, clock=clock, role_metadata_key="user_metadata")


async def test_missing_token_is_denied_401_without_provider_call(gate, identity_provider):
    decision = await gate.require_admin(None)

    assert decision == Denied(reason="Authentication required", status_code=401)
    assert identity_provider.lookups == 0


async def test_unknown_token_is_denied_401(gate):
    decision = await gate.require_admin("forged")

    assert isinstance(decision, Denied)
    assert decision.status_code == 401


async def test_non_admin_is_denied_403_and_audited(gate):
    with patch("storefront.core.auth.audit_logger") as audit:
        decision = await gate.require_admin("user-token")

    assert decision == Denied(reason="Forbidden: Admin privileges required", status_code=403)
    audit.warning.assert_called_once_with(
        "admin_access_denied",
        email="jane@example.com",
        subject_id="user-001",
        timestamp="2030-06-15T10:30:00.000Z",
    )


async def test_admin_is_authorized(gate):
    with patch("storefront.core.auth.audit_logger") as audit:
        decision = await gate.require_admin("admin-token")

    audit.warning.assert_not_called()

    assert decision == Authorized(
        identity=Identity(subject_id="admin-001", email="admin@example.com", role=Role.ADMIN)
    )


async def test_every_check_asks_the_provider(gate, identity_provider):
    await gate.require_admin("admin-token")
    await gate.require_admin("admin-token")

    assert identity_provider.lookups == 2


async def test_role_change_takes_effect_immediately(gate, identity_provider):
    assert isinstance(await gate.require_admin("user-token"), Denied)

    identity_provider.sessions["user-token"] = {
        "id": "user-001",
        "email": "jane@example.com",
        "user_metadata": {"role": "admin"},
    }

    assert isinstance(await gate.require_admin("user-token"), Authorized)


async def test_authenticate_resolves_plain_user(gate):
    identity = await gate.authenticate("user-token")

    assert identity.role is Role.USER
    assert not identity.is_admin


def test_identity_from_user_reads_configured_metadata_key():
    user = {"id": "u1", "user_metadata": {"role": "admin"}, "app_metadata": {"role": "user"}}

    assert identity_from_user(user, "user_metadata").is_admin
    assert not identity_from_user(user, "app_metadata").is_admin


@pytest.mark.parametrize("metadata", [None, {}, {"role": "Admin"}, {"role": "superuser"}])
def test_anything_but_admin_is_a_user(metadata):
    identity = identity_from_user({"id": "u1", "user_metadata": metadata})

    assert identity.role is Role.USER


def test_user_without_id_has_no_identity():
    assert identity_from_user({"email": "x@example.com"}) is None

"""End-to-end authorization scenarios: catalog, roles, grants, evaluation."""
from __future__ import annotations

import pytest

from scope_authz import AuthorizationEngine
from scope_authz.grants import UserPermissionGrant


@pytest.fixture()
def engine(catalog_dict: dict[str, object], roles_dict: dict[str, object]) -> AuthorizationEngine:
    return AuthorizationEngine.from_dicts(catalog_dict, roles_dict)


class TestAdminScenario:
    def test_admin_permissions(self, engine: AuthorizationEngine) -> None:
        engine.store.assign_role("admin-user", "ADMIN")
        snapshot = engine.store.snapshot("admin-user")
        assert engine.has_permission(snapshot, "api:iam:users:read") is True
        assert engine.has_permission(snapshot, "api:iam:users:99:write") is True
        assert engine.has_permission(snapshot, "api:iam:users:99:read") is False
        assert engine.has_permission(snapshot, "api:iam:roles:create") is False


class TestParameterizedRole:
    def test_user_sees_only_own_records(self, engine: AuthorizationEngine) -> None:
        engine.store.assign_role("u-42", "USER", {"targetUser": "42"})
        snapshot = engine.store.snapshot("u-42")
        assert engine.has_permission(snapshot, "api:iam:users:42:read") is True
        assert engine.has_permission(snapshot, "api:iam:users:42:write") is True
        assert engine.has_permission(snapshot, "api:iam:users:43:read") is False
        assert engine.has_permission(snapshot, "api:portfolio:42:accounts:a-1:close") is True
        assert engine.has_permission(snapshot, "api:portfolio:43:accounts:a-1:read") is False

    def test_missing_value_grants_nothing(self, engine: AuthorizationEngine) -> None:
        engine.store.assign_role("u-x", "USER")
        snapshot = engine.store.snapshot("u-x")
        assert engine.effective_permissions(snapshot) == []
        assert engine.has_permission(snapshot, "api:iam:users:42:read") is False


class TestDirectGrants:
    def test_direct_deny_overrides_role_allow(self, engine: AuthorizationEngine) -> None:
        engine.store.assign_role("ops", "KEY_ADMIN")
        engine.store.grant("ops", UserPermissionGrant.deny("api:auth:apikeys:revoke"))
        snapshot = engine.store.snapshot("ops")
        assert engine.has_permission(snapshot, "api:auth:apikeys:list") is True
        assert engine.has_permission(snapshot, "api:auth:apikeys:revoke") is False

    def test_revoking_the_deny_restores_access(self, engine: AuthorizationEngine) -> None:
        engine.store.assign_role("ops", "KEY_ADMIN")
        engine.store.grant("ops", UserPermissionGrant.deny("api:auth:apikeys:revoke"))
        engine.store.revoke("ops", "api:auth:apikeys:revoke")
        assert engine.has_permission(engine.store.snapshot("ops"), "api:auth:apikeys:revoke")

    def test_direct_allow_without_roles(self, engine: AuthorizationEngine) -> None:
        engine.store.grant("guest", UserPermissionGrant.allow("api:iam:roles:read"))
        snapshot = engine.store.snapshot("guest")
        assert engine.has_permission(snapshot, "api:iam:roles:read") is True
        assert engine.has_permission(snapshot, "api:iam:roles:create") is False


class TestClaimsRoundTrip:
    def test_claims_evaluate_like_directives(self, engine: AuthorizationEngine) -> None:
        engine.store.assign_role("u-42", "USER", {"targetUser": "42"})
        snapshot = engine.store.snapshot("u-42")
        claims = engine.scope_claims(snapshot)
        for target in ("api:iam:users:42:read", "api:iam:users:1:read", "api:portfolio:42:x"):
            assert engine.has_permission(claims, target) == engine.has_permission(snapshot, target)

    def test_resolution_is_idempotent(self, engine: AuthorizationEngine) -> None:
        engine.store.assign_role("admin-user", "ADMIN")
        snapshot = engine.store.snapshot("admin-user")
        assert engine.effective_permissions(snapshot) == engine.effective_permissions(snapshot)

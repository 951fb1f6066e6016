"""Tests for EffectivePermissionResolver."""
from __future__ import annotations

import logging

import pytest

from scope_authz.catalog import PermissionCatalog
from scope_authz.evaluation import EffectivePermissionResolver
from scope_authz.grants import InMemoryAuthorizationStore, UserPermissionGrant
from scope_authz.roles import RoleRegistry, UserRoleAssignment
from scope_authz.scopes import ScopeDirective


@pytest.fixture()
def resolver(catalog: PermissionCatalog, roles: RoleRegistry) -> EffectivePermissionResolver:
    return EffectivePermissionResolver(catalog, roles)


def _strings(directives: list[ScopeDirective]) -> list[str]:
    return [str(d) for d in directives]


class TestResolve:
    def test_empty(self, resolver: EffectivePermissionResolver) -> None:
        assert resolver.resolve() == []

    def test_roles_then_grants(self, resolver: EffectivePermissionResolver) -> None:
        directives = resolver.resolve(
            [UserRoleAssignment("KEY_ADMIN")],
            [UserPermissionGrant.deny("api:auth:apikeys:revoke")],
        )
        assert _strings(directives) == [
            "allow:api:auth:apikeys:list",
            "allow:api:auth:apikeys:revoke",
            "deny:api:auth:apikeys:revoke",
        ]

    def test_assignment_order_preserved(self, resolver: EffectivePermissionResolver) -> None:
        directives = resolver.resolve(
            [
                UserRoleAssignment("USER", {"targetUser": "7"}),
                UserRoleAssignment("ADMIN"),
            ]
        )
        assert _strings(directives) == [
            "allow:api:iam:users:7:read",
            "allow:api:iam:users:7:write",
            "allow:api:portfolio:7:**",
            "allow:api:iam:users:read",
            "allow:api:iam:users:*:write",
        ]

    def test_duplicates_kept(self, resolver: EffectivePermissionResolver) -> None:
        directives = resolver.resolve(
            [UserRoleAssignment("KEY_ADMIN"), UserRoleAssignment("KEY_ADMIN")]
        )
        assert len(directives) == 4

    def test_accepts_raw_directives_as_grants(
        self, resolver: EffectivePermissionResolver
    ) -> None:
        directives = resolver.resolve(grants=[ScopeDirective.allow("api:iam:roles:read")])
        assert _strings(directives) == ["allow:api:iam:roles:read"]


class TestResolveDetailed:
    def test_unknown_role_ignored(
        self, resolver: EffectivePermissionResolver, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.WARNING, logger="scope_authz.evaluation.resolver"):
            result = resolver.resolve_detailed([UserRoleAssignment("GHOST")])
        assert result.directives == ()
        assert result.unknown_roles == ("GHOST",)
        assert "GHOST" in caplog.text

    def test_skipped_templates_reported(self, resolver: EffectivePermissionResolver) -> None:
        result = resolver.resolve_detailed(
            [UserRoleAssignment("USER"), UserRoleAssignment("KEY_ADMIN")]
        )
        assert len(result.skipped) == 3
        assert {s.role_code for s in result.skipped} == {"USER"}
        assert len(result.directives) == 2


class TestResolveSnapshot:
    def test_snapshot(self, resolver: EffectivePermissionResolver, roles: RoleRegistry) -> None:
        store = InMemoryAuthorizationStore(roles)
        store.assign_role("u-1", "ADMIN")
        store.grant("u-1", UserPermissionGrant.allow("api:iam:roles:read"))
        directives = resolver.resolve_snapshot(store.snapshot("u-1"))
        assert _strings(directives)[-1] == "allow:api:iam:roles:read"
        assert len(directives) == 3

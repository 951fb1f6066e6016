"""Tests for RoleDefinition, RoleRegistry and UserRoleAssignment."""
from __future__ import annotations

import pytest

from scope_authz.errors import PermissionConfigError, UnknownRoleError
from scope_authz.roles import (
    RoleDefinition,
    RoleRegistry,
    ScopeTemplate,
    UserRoleAssignment,
)


def _template(raw: str) -> ScopeTemplate:
    return ScopeTemplate.parse(raw)


class TestRoleDefinition:
    def test_code_upper_cased_and_trimmed(self) -> None:
        role = RoleDefinition(code=" admin ", name="Administrator")
        assert role.code == "ADMIN"

    def test_id_defaults_to_code(self) -> None:
        assert RoleDefinition(code="admin", name="Admin").id == "ADMIN"

    def test_explicit_id_kept(self) -> None:
        assert RoleDefinition(code="admin", name="Admin", id="r-1").id == "r-1"

    def test_template_parameters_inferred(self) -> None:
        role = RoleDefinition(
            code="user",
            name="User",
            scope_templates=(
                _template("allow:api:users:{targetUser}:read"),
                _template("allow:api:tenants:{tenant}:**"),
            ),
        )
        assert role.template_parameters == ("targetUser", "tenant")
        assert role.requires_parameters is True

    def test_explicit_parameters_may_exceed_references(self) -> None:
        role = RoleDefinition(code="x", name="X", template_parameters=("a", "b"))
        assert role.template_parameters == ("a", "b")

    def test_undeclared_placeholder_raises(self) -> None:
        with pytest.raises(PermissionConfigError, match="targetUser"):
            RoleDefinition(
                code="user",
                name="User",
                scope_templates=(_template("allow:api:users:{targetUser}:read"),),
                template_parameters=("tenant",),
            )

    def test_blank_code_raises(self) -> None:
        with pytest.raises(PermissionConfigError):
            RoleDefinition(code="  ", name="Nobody")

    def test_blank_name_raises(self) -> None:
        with pytest.raises(PermissionConfigError):
            RoleDefinition(code="x", name="")

    def test_templates_kept_in_order(self) -> None:
        templates = (_template("allow:b"), _template("allow:a"))
        role = RoleDefinition(code="x", name="X", scope_templates=templates)
        assert [str(t) for t in role.scope_templates] == ["allow:b", "allow:a"]


class TestRoleRegistry:
    @pytest.fixture()
    def registry(self) -> RoleRegistry:
        return RoleRegistry(
            [
                RoleDefinition(code="admin", name="Admin"),
                RoleDefinition(code="user", name="User", id="role-user"),
            ]
        )

    def test_get_by_code_case_insensitive(self, registry: RoleRegistry) -> None:
        role = registry.get("Admin")
        assert role is not None and role.code == "ADMIN"

    def test_get_by_id(self, registry: RoleRegistry) -> None:
        role = registry.get("role-user")
        assert role is not None and role.code == "USER"

    def test_get_unknown_is_none(self, registry: RoleRegistry) -> None:
        assert registry.get("auditor") is None
        assert registry.get("") is None

    def test_require_unknown_raises(self, registry: RoleRegistry) -> None:
        with pytest.raises(UnknownRoleError) as exc_info:
            registry.require("auditor")
        assert exc_info.value.role == "auditor"

    def test_codes_and_len(self, registry: RoleRegistry) -> None:
        assert registry.codes == ["ADMIN", "USER"]
        assert len(registry) == 2
        assert "user" in registry

    def test_duplicate_code_raises(self) -> None:
        with pytest.raises(PermissionConfigError, match="ADMIN"):
            RoleRegistry(
                [RoleDefinition(code="admin", name="A"), RoleDefinition(code="ADMIN", name="B")]
            )

    def test_duplicate_id_raises(self) -> None:
        with pytest.raises(PermissionConfigError, match="same"):
            RoleRegistry(
                [
                    RoleDefinition(code="a", name="A", id="same"),
                    RoleDefinition(code="b", name="B", id="same"),
                ]
            )


class TestUserRoleAssignment:
    def test_values_normalised(self) -> None:
        assignment = UserRoleAssignment("USER", {" targetUser ": " 42 ", "": "x"})  # type: ignore[arg-type]
        assert assignment.values == {"targetUser": "42"}

    def test_equality_ignores_order(self) -> None:
        first = UserRoleAssignment("USER", {"a": "1", "b": "2"})  # type: ignore[arg-type]
        second = UserRoleAssignment("USER", {"b": "2", "a": "1"})  # type: ignore[arg-type]
        assert first == second
        assert hash(first) == hash(second)

    def test_none_values_dropped(self) -> None:
        assignment = UserRoleAssignment("USER", {"a": None})  # type: ignore[arg-type]
        assert assignment.parameter_values == ()

    def test_missing_parameters(self) -> None:
        role = RoleDefinition(
            code="user",
            name="User",
            scope_templates=(_template("allow:api:users:{targetUser}:{tenant}"),),
        )
        assignment = UserRoleAssignment("USER", {"tenant": "t1", "targetUser": ""})  # type: ignore[arg-type]
        assert assignment.missing_parameters(role) == ("targetUser",)

"""Tests for PermissionRequirement and ParameterBinding."""
from __future__ import annotations

import pytest

from scope_authz.catalog import PermissionCatalog
from scope_authz.enforcement import (
    ParameterBinding,
    ParameterSource,
    PermissionRequirement,
    requirements,
)
from scope_authz.errors import MissingParameterError, UnknownPermissionError


class TestParameterBinding:
    def test_defaults_to_route_by_name(self) -> None:
        binding = ParameterBinding("userId")
        assert binding.source is ParameterSource.ROUTE
        assert binding.resolve({"userId": "7"}, {}, None) == "7"

    def test_claims(self) -> None:
        binding = ParameterBinding("userId", "claims", "sub")
        assert binding.resolve({}, {"sub": "u-1"}, None) == "u-1"

    def test_body_dotted_key(self) -> None:
        binding = ParameterBinding("accountId", ParameterSource.BODY, "account.id")
        assert binding.resolve({}, {}, {"account": {"id": "a-9"}}) == "a-9"
        assert binding.resolve({}, {}, {"account": "flat"}) is None
        assert binding.resolve({}, {}, None) is None

    def test_literal(self) -> None:
        binding = ParameterBinding("userId", ParameterSource.LITERAL, "me")
        assert binding.resolve({}, {}, None) == "me"

    def test_unknown_source(self) -> None:
        with pytest.raises(ValueError):
            ParameterBinding("userId", "header")  # type: ignore[arg-type]


class TestPermissionRequirement:
    def test_route_values_used_by_name(self, catalog: PermissionCatalog) -> None:
        requirement = PermissionRequirement("api:iam:users:{userId}:write")
        assert requirement.build_target(catalog, {"userId": "42"}) == "api:iam:users:42:write"

    def test_shorthand_bindings(self, catalog: PermissionCatalog) -> None:
        requirement = PermissionRequirement.of(
            "api:portfolio:{userId}:accounts:{accountId}:close",
            userId=("claims", "sub"),
            accountId=("body", "account.id"),
        )
        target = requirement.build_target(
            catalog, claims={"sub": "u-1"}, body={"account": {"id": "A-2"}}
        )
        assert target == "api:portfolio:u-1:accounts:A-2:close"

    def test_binding_overrides_route_value(self, catalog: PermissionCatalog) -> None:
        requirement = PermissionRequirement.of("api:iam:users:{userId}:read", userId=("route", "id"))
        target = requirement.build_target(catalog, {"id": "5", "userId": "ignored"})
        assert target == "api:iam:users:5:read"

    def test_missing_parameter(self, catalog: PermissionCatalog) -> None:
        with pytest.raises(MissingParameterError):
            PermissionRequirement("api:iam:users:{userId}:read").build_target(catalog)

    def test_unknown_permission(self, catalog: PermissionCatalog) -> None:
        with pytest.raises(UnknownPermissionError):
            PermissionRequirement("api:billing:read").build_target(catalog)

    def test_requirements_coerces_strings(self) -> None:
        items = requirements(["api:iam:users:read", PermissionRequirement("api:iam:roles:read")])
        assert [item.permission for item in items] == ["api:iam:users:read", "api:iam:roles:read"]

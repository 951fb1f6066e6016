"""Tests for PermissionCatalog lookup, matching and projections."""
from __future__ import annotations

import pytest

from scope_authz.catalog import PermissionCatalog, node, rleaf, wleaf
from scope_authz.errors import (
    MissingParameterError,
    PermissionConfigError,
    UnknownPermissionError,
)


class TestCatalogLookup:
    def test_get_exact_path(self, catalog: PermissionCatalog) -> None:
        permission = catalog.get("api:iam:users:read")
        assert permission is not None
        assert permission.identifier == "read"

    def test_get_templated_path(self, catalog: PermissionCatalog) -> None:
        permission = catalog.get("api:iam:users:{userId}:write")
        assert permission is not None
        assert permission.parameter_hierarchy == ("userId",)

    def test_get_is_case_insensitive_for_literals(self, catalog: PermissionCatalog) -> None:
        assert catalog.get("API:IAM:Users:Read") is catalog.get("api:iam:users:read")

    def test_get_canonicalises_whitespace(self, catalog: PermissionCatalog) -> None:
        assert catalog.get(" api : iam :: users : read ") is not None

    def test_get_unknown_returns_none(self, catalog: PermissionCatalog) -> None:
        assert catalog.get("api:iam:groups") is None

    def test_get_malformed_returns_none(self, catalog: PermissionCatalog) -> None:
        assert catalog.get("::") is None

    def test_require_unknown_raises(self, catalog: PermissionCatalog) -> None:
        with pytest.raises(UnknownPermissionError, match="api:nope"):
            catalog.require("api:nope")

    def test_contains(self, catalog: PermissionCatalog) -> None:
        assert "api:auth:apikeys:revoke" in catalog
        assert "api:auth:apikeys:rotate" not in catalog

    def test_find_by_identifier_chain(self, catalog: PermissionCatalog) -> None:
        permission = catalog.find("api", "portfolio", "accounts", "read")
        assert permission is not None
        assert permission.path == "api:portfolio:{userId}:accounts:{accountId}:read"

    def test_find_missing_returns_none(self, catalog: PermissionCatalog) -> None:
        assert catalog.find("api", "billing") is None

    def test_len_counts_every_node(self, catalog: PermissionCatalog) -> None:
        assert len(catalog) == len(list(catalog.traverse()))


class TestCatalogMatch:
    def test_concrete_identifier_binds_placeholder(self, catalog: PermissionCatalog) -> None:
        match = catalog.match("api:iam:users:42:write")
        assert match is not None
        assert match.permission.path == "api:iam:users:{userId}:write"
        assert dict(match.bindings) == {"userId": "42"}

    def test_literal_wins_over_placeholder(self, catalog: PermissionCatalog) -> None:
        match = catalog.match("api:iam:users:read")
        assert match is not None
        assert match.permission.path == "api:iam:users:read"

    def test_wildcard_in_parameter_position(self, catalog: PermissionCatalog) -> None:
        match = catalog.match("api:iam:users:*:write")
        assert match is not None
        assert dict(match.bindings) == {"userId": "*"}

    def test_no_match_returns_none(self, catalog: PermissionCatalog) -> None:
        assert catalog.match("api:iam:groups:read") is None

    def test_covered_by_wildcard_pattern(self, catalog: PermissionCatalog) -> None:
        paths = {p.path for p in catalog.covered_by("api:auth:**")}
        assert paths == {
            "api:auth",
            "api:auth:apikeys",
            "api:auth:apikeys:list",
            "api:auth:apikeys:revoke",
        }

    def test_covered_by_nothing(self, catalog: PermissionCatalog) -> None:
        assert catalog.covered_by("billing:**") == []


class TestCatalogBuildPath:
    def test_build_path_by_templated_path(self, catalog: PermissionCatalog) -> None:
        path = catalog.build_path(
            "api:portfolio:{userId}:accounts:{accountId}:close",
            {"userId": "u1", "accountId": "a9"},
        )
        assert path == "api:portfolio:u1:accounts:a9:close"

    def test_build_path_missing_parameter(self, catalog: PermissionCatalog) -> None:
        with pytest.raises(MissingParameterError):
            catalog.build_path("api:iam:users:{userId}:write", {})

    def test_build_path_unknown_permission(self, catalog: PermissionCatalog) -> None:
        with pytest.raises(UnknownPermissionError):
            catalog.build_path("api:nope", {})


class TestCatalogProjections:
    def test_read_leaf_paths(self, catalog: PermissionCatalog) -> None:
        assert "api:iam:users:read" in catalog.read_leaf_paths()
        assert "api:iam:users:{userId}:write" not in catalog.read_leaf_paths()

    def test_write_leaf_paths(self, catalog: PermissionCatalog) -> None:
        assert catalog.write_leaf_paths() >= {
            "api:iam:users:{userId}:write",
            "api:auth:apikeys:revoke",
        }

    def test_assignable_paths_sorted(self, catalog: PermissionCatalog) -> None:
        paths = catalog.assignable_paths()
        assert paths == sorted(paths)
        assert "api:iam" not in paths

    def test_to_listing_roots(self, catalog: PermissionCatalog) -> None:
        listing = catalog.to_listing()
        assert [entry["path"] for entry in listing] == ["api"]


class TestCatalogInvariants:
    def test_duplicate_path_raises(self) -> None:
        with pytest.raises(PermissionConfigError, match="Duplicate"):
            PermissionCatalog([node("api", "", rleaf("read")), node("api")])

    def test_duplicate_sibling_raises(self) -> None:
        with pytest.raises(PermissionConfigError):
            PermissionCatalog([node("api", "", rleaf("read"), wleaf("READ"))])

    def test_repeated_parameter_along_chain_raises(self) -> None:
        tree = node("api", "", node("{userId}", "", node("x", parameters=["userId"])))
        with pytest.raises(PermissionConfigError, match="userId"):
            PermissionCatalog([tree])

    def test_same_parameter_on_separate_branches_ok(self) -> None:
        catalog = PermissionCatalog(
            [node("api", "", node("a", parameters=["id"]), node("b", parameters=["id"]))]
        )
        assert "api:a:{id}" in catalog and "api:b:{id}" in catalog

    def test_from_definitions(self) -> None:
        catalog = PermissionCatalog.from_definitions(
            [{"identifier": "api", "children": [{"identifier": "ping", "access": "read"}]}]
        )
        assert catalog.require("api:ping").is_read

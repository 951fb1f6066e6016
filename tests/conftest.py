"""Shared fixtures: a small permission catalog and role set."""
from __future__ import annotations

import copy
import pathlib

import pytest
import yaml

from scope_authz.catalog import CatalogLoader, PermissionCatalog
from scope_authz.roles import RoleLoader, RoleRegistry

_CATALOG: dict[str, object] = {
    "version": "1.0",
    "permissions": [
        {
            "identifier": "api",
            "description": "API operations",
            "children": [
                {
                    "identifier": "iam",
                    "description": "Identity and access management",
                    "children": [
                        {
                            "identifier": "users",
                            "description": "User administration",
                            "children": [
                                {"identifier": "read", "description": "List users", "access": "read"},
                                {
                                    "identifier": "{userId}",
                                    "description": "A single user",
                                    "children": [
                                        {"identifier": "read", "access": "read"},
                                        {"identifier": "write", "access": "write"},
                                    ],
                                },
                            ],
                        },
                        {
                            "identifier": "roles",
                            "children": [
                                {"identifier": "read", "access": "read"},
                                {"identifier": "create", "access": "write"},
                            ],
                        },
                    ],
                },
                {
                    "identifier": "auth",
                    "children": [
                        {
                            "identifier": "apikeys",
                            "children": [
                                {"identifier": "list", "access": "read"},
                                {"identifier": "revoke", "access": "write"},
                            ],
                        }
                    ],
                },
                {
                    "identifier": "portfolio",
                    "parameters": ["userId"],
                    "children": [
                        {
                            "identifier": "accounts",
                            "parameters": ["accountId"],
                            "children": [
                                {"identifier": "read", "access": "read"},
                                {"identifier": "close", "access": "write"},
                            ],
                        }
                    ],
                },
            ],
        }
    ],
}

_ROLES: dict[str, object] = {
    "version": "1.0",
    "roles": [
        {
            "code": "admin",
            "name": "Administrator",
            "system": True,
            "scopes": [
                "allow:api:iam:users:read",
                "allow:api:iam:users:*:write",
            ],
        },
        {
            "code": "USER",
            "name": "User",
            "template_parameters": ["targetUser"],
            "scopes": [
                "allow:api:iam:users:{targetUser}:read",
                {
                    "type": "allow",
                    "permission": "api:iam:users:{userId}:write",
                    "bindings": {"userId": "{targetUser}"},
                },
                "allow:api:portfolio:{targetUser}:**",
            ],
        },
        {
            "code": "KEY_ADMIN",
            "name": "API key administrator",
            "scopes": [
                "allow:api:auth:apikeys:list",
                "allow:api:auth:apikeys:revoke",
            ],
        },
    ],
}


@pytest.fixture()
def catalog_dict() -> dict[str, object]:
    return copy.deepcopy(_CATALOG)


@pytest.fixture()
def roles_dict() -> dict[str, object]:
    return copy.deepcopy(_ROLES)


@pytest.fixture()
def catalog(catalog_dict: dict[str, object]) -> PermissionCatalog:
    return CatalogLoader().load_from_dict(catalog_dict)


@pytest.fixture()
def roles(catalog: PermissionCatalog, roles_dict: dict[str, object]) -> RoleRegistry:
    return RoleLoader(catalog).load_from_dict(roles_dict)


@pytest.fixture()
def catalog_file(tmp_path: pathlib.Path, catalog_dict: dict[str, object]) -> pathlib.Path:
    path = tmp_path / "permissions.yaml"
    path.write_text(yaml.safe_dump(catalog_dict, sort_keys=False), encoding="utf-8")
    return path


@pytest.fixture()
def roles_file(tmp_path: pathlib.Path, roles_dict: dict[str, object]) -> pathlib.Path:
    path = tmp_path / "roles.yaml"
    path.write_text(yaml.safe_dump(roles_dict, sort_keys=False), encoding="utf-8")
    return path

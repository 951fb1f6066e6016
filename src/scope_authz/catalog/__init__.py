"""Permission catalog: the static tree of colon-delimited permission identifiers.

Example
-------
::

    from scope_authz.catalog import CatalogLoader

    catalog = CatalogLoader().load("permissions.yaml")
    node = catalog.require("api:iam:users:{userId}:write")
    node.build_path({"userId": "42"})  # 'api:iam:users:42:write'
"""
from __future__ import annotations

from scope_authz.catalog.builder import node, node_from_dict, rleaf, wleaf
from scope_authz.catalog.catalog import CatalogMatch, PermissionCatalog
from scope_authz.catalog.identifiers import (
    MULTI_WILDCARD,
    WILDCARD,
    is_placeholder,
    parse_identifier,
    placeholder_name,
    split_identifier,
)
from scope_authz.catalog.loader import CatalogLoader
from scope_authz.catalog.permission import Permission, PermissionAccess

__all__ = [
    # Model
    "Permission",
    "PermissionAccess",
    "PermissionCatalog",
    "CatalogMatch",
    # Identifiers
    "MULTI_WILDCARD",
    "WILDCARD",
    "is_placeholder",
    "parse_identifier",
    "placeholder_name",
    "split_identifier",
    # Builders / loading
    "CatalogLoader",
    "node",
    "node_from_dict",
    "rleaf",
    "wleaf",
]

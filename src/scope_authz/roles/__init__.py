"""Role definitions as parameterised templates over the permission catalog.

Example
-------
::

    from scope_authz.roles import RoleLoader, UserRoleAssignment, resolve_role

    roles = RoleLoader(catalog).load("roles.yaml")
    admin = roles.require("ADMIN")
    resolve_role(admin, UserRoleAssignment(admin.id), catalog).directives
"""
from __future__ import annotations

from scope_authz.roles.assignment import UserRoleAssignment, normalize_parameter_values
from scope_authz.roles.definition import RoleDefinition, RoleRegistry
from scope_authz.roles.loader import RoleLoader
from scope_authz.roles.resolution import (
    RoleResolution,
    SkippedTemplate,
    expand_role,
    resolve_role,
)
from scope_authz.roles.template import ScopeTemplate

__all__ = [
    "RoleDefinition",
    "RoleLoader",
    "RoleRegistry",
    "RoleResolution",
    "ScopeTemplate",
    "SkippedTemplate",
    "UserRoleAssignment",
    "expand_role",
    "normalize_parameter_values",
    "resolve_role",
]

"""Enforcement boundary: requirements, request contexts and the authorizer."""
from __future__ import annotations

from scope_authz.enforcement.authorizer import RequestAuthorizer, RequestContext
from scope_authz.enforcement.requirement import (
    ParameterBinding,
    ParameterSource,
    PermissionRequirement,
    requirements,
)

__all__ = [
    "ParameterBinding",
    "ParameterSource",
    "PermissionRequirement",
    "RequestAuthorizer",
    "RequestContext",
    "requirements",
]

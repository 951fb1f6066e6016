"""scope-authz: hierarchical scope-based permission authorization.

Public API
----------
The stable public surface is everything exported from this module.
Anything inside submodules not re-exported here is considered private
and may change without notice.

Example
-------
>>> import scope_authz as authz
>>> authz.__version__
'0.1.0'
>>> authz.has_permission(["allow:api:iam:*", "deny:api:iam:users"], "api:iam:users")
False
>>> authz.has_permission(["allow:api:**"], "api:iam:users:5f3:read")
True
"""
from __future__ import annotations

__version__: str = "0.1.0"

from scope_authz.convenience import AuthorizationEngine

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
from scope_authz.errors import (
    AccessDeniedError,
    AuthorizationError,
    MalformedIdentifierError,
    MissingParameterError,
    PermissionConfigError,
    UnknownDirectiveTypeError,
    UnknownPermissionError,
    UnknownRoleError,
)

# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------
from scope_authz.catalog import (
    CatalogLoader,
    CatalogMatch,
    Permission,
    PermissionAccess,
    PermissionCatalog,
    node,
    parse_identifier,
    rleaf,
    wleaf,
)

# ---------------------------------------------------------------------------
# Scopes
# ---------------------------------------------------------------------------
from scope_authz.scopes import (
    DirectiveType,
    ScopeDirective,
    match_specificity,
    matches,
    parse_scopes,
    serialize_scopes,
)

# ---------------------------------------------------------------------------
# Roles
# ---------------------------------------------------------------------------
from scope_authz.roles import (
    RoleDefinition,
    RoleLoader,
    RoleRegistry,
    RoleResolution,
    ScopeTemplate,
    SkippedTemplate,
    UserRoleAssignment,
    resolve_role,
)

# ---------------------------------------------------------------------------
# Grants
# ---------------------------------------------------------------------------
from scope_authz.grants import (
    GrantPermissionRequest,
    InMemoryAuthorizationStore,
    RevokePermissionRequest,
    UserAuthorizationSnapshot,
    UserPermissionGrant,
)

# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------
from scope_authz.evaluation import (
    Decision,
    DenyOverrides,
    DirectiveMatch,
    EffectivePermissionResolver,
    MostSpecificWins,
    PrecedenceStrategy,
    ResolutionResult,
    ScopeEvaluator,
    get_strategy,
    has_all_permissions,
    has_any_permission,
    has_permission,
)

# ---------------------------------------------------------------------------
# Enforcement
# ---------------------------------------------------------------------------
from scope_authz.enforcement import (
    ParameterBinding,
    ParameterSource,
    PermissionRequirement,
    RequestAuthorizer,
    RequestContext,
)

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
from scope_authz.config import AuthorizationConfig, ConfigLoader, build_engine

__all__ = [
    "__version__",
    # Convenience
    "AuthorizationEngine",
    # Errors
    "AccessDeniedError",
    "AuthorizationError",
    "MalformedIdentifierError",
    "MissingParameterError",
    "PermissionConfigError",
    "UnknownDirectiveTypeError",
    "UnknownPermissionError",
    "UnknownRoleError",
    # Catalog
    "CatalogLoader",
    "CatalogMatch",
    "Permission",
    "PermissionAccess",
    "PermissionCatalog",
    "node",
    "parse_identifier",
    "rleaf",
    "wleaf",
    # Scopes
    "DirectiveType",
    "ScopeDirective",
    "match_specificity",
    "matches",
    "parse_scopes",
    "serialize_scopes",
    # Roles
    "RoleDefinition",
    "RoleLoader",
    "RoleRegistry",
    "RoleResolution",
    "ScopeTemplate",
    "SkippedTemplate",
    "UserRoleAssignment",
    "resolve_role",
    # Grants
    "GrantPermissionRequest",
    "InMemoryAuthorizationStore",
    "RevokePermissionRequest",
    "UserAuthorizationSnapshot",
    "UserPermissionGrant",
    # Evaluation
    "Decision",
    "DenyOverrides",
    "DirectiveMatch",
    "EffectivePermissionResolver",
    "MostSpecificWins",
    "PrecedenceStrategy",
    "ResolutionResult",
    "ScopeEvaluator",
    "get_strategy",
    "has_all_permissions",
    "has_any_permission",
    "has_permission",
    # Enforcement
    "ParameterBinding",
    "ParameterSource",
    "PermissionRequirement",
    "RequestAuthorizer",
    "RequestContext",
    # Configuration
    "AuthorizationConfig",
    "ConfigLoader",
    "build_engine",
]

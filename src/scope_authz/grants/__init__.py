"""Direct per-user grants, their API payloads and an in-memory store."""
from __future__ import annotations

from scope_authz.grants.grant import UserPermissionGrant
from scope_authz.grants.requests import GrantPermissionRequest, RevokePermissionRequest
from scope_authz.grants.store import InMemoryAuthorizationStore, UserAuthorizationSnapshot

__all__ = [
    "GrantPermissionRequest",
    "InMemoryAuthorizationStore",
    "RevokePermissionRequest",
    "UserAuthorizationSnapshot",
    "UserPermissionGrant",
]

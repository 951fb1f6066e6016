"""Administrative API payloads for granting and revoking direct permissions.

Payloads arrive as camelCase JSON::

    {"userId": "u-1", "permissionIdentifier": "api:auth:apikeys:revoke",
     "isAllow": false, "description": "Suspended"}

Example
-------
>>> req = GrantPermissionRequest.model_validate(
...     {"userId": "u-1", "permissionIdentifier": "API:Auth:ApiKeys:Revoke", "isAllow": False}
... )
>>> req.permission_identifier
'api:auth:apikeys:revoke'
"""
from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from scope_authz.grants.grant import UserPermissionGrant
from scope_authz.scopes.directive import DirectiveType, canonicalize_pattern


class _RequestBase(BaseModel):
    model_config = {"populate_by_name": True, "frozen": True}

    user_id: str = Field(alias="userId", min_length=1)
    permission_identifier: str = Field(alias="permissionIdentifier")

    @field_validator("user_id")
    @classmethod
    def strip_user_id(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("userId cannot be blank")
        return value

    @field_validator("permission_identifier")
    @classmethod
    def canonical_identifier(cls, value: str) -> str:
        return canonicalize_pattern(value)


class GrantPermissionRequest(_RequestBase):
    """Grant a direct allow or deny to a user."""

    is_allow: bool = Field(default=True, alias="isAllow")
    description: str = Field(default="")

    @property
    def directive_type(self) -> DirectiveType:
        return DirectiveType.ALLOW if self.is_allow else DirectiveType.DENY

    def to_grant(self, granted_by: str | None = None) -> UserPermissionGrant:
        return UserPermissionGrant(
            self.directive_type,
            self.permission_identifier,
            self.description,
            granted_by,
        )


class RevokePermissionRequest(_RequestBase):
    """Remove a user's direct grant on an identifier."""

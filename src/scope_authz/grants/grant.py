"""Direct per-user permission grants.

A grant is a user-specific allow or deny directive on a concrete
identifier, independent of any role. Grants are immutable values:
revocation removes a grant instead of mutating it.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone

from scope_authz.catalog.permission import Permission
from scope_authz.scopes.directive import (
    DirectiveType,
    ScopeDirective,
    canonicalize_pattern,
    coerce_directive_type,
)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class UserPermissionGrant:
    """A direct allow/deny grant on a concrete permission identifier.

    Two grants are equal when their type and canonical identifier match;
    the audit fields do not take part in equality.

    Attributes
    ----------
    type:
        Allow or deny.
    identifier:
        Concrete permission identifier; may end in ``*`` or ``**``.
    description:
        Free-text reason for the grant.
    granted_by:
        Who issued the grant.
    granted_at:
        UTC timestamp; defaults to now.

    Raises
    ------
    MalformedIdentifierError
        If the identifier is empty or still contains a placeholder.
    """

    type: DirectiveType
    identifier: str
    description: str = field(default="", compare=False)
    granted_by: str | None = field(default=None, compare=False)
    granted_at: datetime = field(default_factory=_utc_now, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", coerce_directive_type(self.type))
        object.__setattr__(self, "identifier", canonicalize_pattern(self.identifier))
        object.__setattr__(self, "description", (self.description or "").strip())

    @classmethod
    def allow(
        cls, identifier: str, description: str = "", granted_by: str | None = None
    ) -> UserPermissionGrant:
        return cls(DirectiveType.ALLOW, identifier, description, granted_by)

    @classmethod
    def deny(
        cls, identifier: str, description: str = "", granted_by: str | None = None
    ) -> UserPermissionGrant:
        return cls(DirectiveType.DENY, identifier, description, granted_by)

    @classmethod
    def from_permission(
        cls,
        directive_type: DirectiveType | str,
        permission: Permission,
        parameter_values: Mapping[str, object] | None = None,
        description: str = "",
        granted_by: str | None = None,
    ) -> UserPermissionGrant:
        """Grant on ``permission`` with its placeholders filled in.

        Raises
        ------
        MissingParameterError
            If a required parameter value is absent. Grants must always be
            concrete, so this is never skipped.
        """
        path = permission.build_path(parameter_values)
        return cls(coerce_directive_type(directive_type), path, description, granted_by)

    @property
    def is_allow(self) -> bool:
        return self.type is DirectiveType.ALLOW

    def to_directive(self) -> ScopeDirective:
        return ScopeDirective(self.type, self.identifier)

    def __str__(self) -> str:
        return str(self.to_directive())

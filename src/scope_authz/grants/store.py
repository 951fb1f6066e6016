"""Thread-safe in-memory store of role assignments and direct grants.

Stands in for the identity store that owns per-user authorization state.
The engine never reads from the store directly: callers take a
:meth:`InMemoryAuthorizationStore.snapshot` and hand it to the resolver.

Example
-------
>>> store = InMemoryAuthorizationStore(roles)
>>> assignment = store.assign_role("u-1", "ADMIN")
>>> store.grant("u-1", UserPermissionGrant.deny("api:auth:apikeys:revoke"))
True
>>> snapshot = store.snapshot("u-1")
"""
from __future__ import annotations

import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass, field

from scope_authz.errors import MissingParameterError
from scope_authz.grants.grant import UserPermissionGrant
from scope_authz.grants.requests import GrantPermissionRequest, RevokePermissionRequest
from scope_authz.roles.assignment import UserRoleAssignment
from scope_authz.roles.definition import RoleRegistry
from scope_authz.scopes.directive import canonicalize_pattern

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UserAuthorizationSnapshot:
    """Point-in-time, read-only view of one user's authorization state."""

    user_id: str
    assignments: tuple[UserRoleAssignment, ...] = ()
    grants: tuple[UserPermissionGrant, ...] = ()


@dataclass
class _UserRecord:
    assignments: dict[str, UserRoleAssignment] = field(default_factory=dict)
    grants: list[UserPermissionGrant] = field(default_factory=list)


class InMemoryAuthorizationStore:
    """Per-user role assignments and direct grants behind a lock.

    Parameters
    ----------
    roles:
        Registry used to validate role codes on assignment.
    strict:
        When ``True``, assigning a role without values for all of its
        template parameters raises instead of logging a warning.
    """

    def __init__(self, roles: RoleRegistry, strict: bool = False) -> None:
        self._roles = roles
        self._strict = strict
        self._users: dict[str, _UserRecord] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Role assignments
    # ------------------------------------------------------------------

    def assign_role(
        self,
        user_id: str,
        role: str,
        parameter_values: Mapping[str, object] | None = None,
        strict: bool | None = None,
    ) -> UserRoleAssignment:
        """Assign ``role`` (code or id) to a user, replacing any earlier values.

        Raises
        ------
        UnknownRoleError
            If the role is not registered.
        MissingParameterError
            In strict mode, when template parameters lack values.
        MalformedIdentifierError
            If a parameter value is a wildcard or spans several segments.
        """
        definition = self._roles.require(role)
        assignment = UserRoleAssignment(definition.id, parameter_values)  # type: ignore[arg-type]
        missing = assignment.missing_parameters(definition)
        if missing:
            if self._strict if strict is None else strict:
                raise MissingParameterError(missing, definition.code)
            logger.warning(
                "Role %s assigned to user %s without parameter(s) %s; "
                "templates using them will be skipped",
                definition.code,
                user_id,
                list(missing),
            )
        with self._lock:
            self._users.setdefault(user_id, _UserRecord()).assignments[definition.id] = assignment
        logger.debug("Assigned role %s to user %s", definition.code, user_id)
        return assignment

    def remove_role(self, user_id: str, role: str) -> bool:
        """Remove a role assignment. Returns ``False`` if it was not assigned."""
        definition = self._roles.require(role)
        with self._lock:
            record = self._users.get(user_id)
            if record is None or definition.id not in record.assignments:
                return False
            del record.assignments[definition.id]
        logger.debug("Removed role %s from user %s", definition.code, user_id)
        return True

    # ------------------------------------------------------------------
    # Direct grants
    # ------------------------------------------------------------------

    def grant(
        self,
        user_id_or_request: str | GrantPermissionRequest,
        grant: UserPermissionGrant | None = None,
        granted_by: str | None = None,
    ) -> bool:
        """Add a direct grant.

        Accepts either ``(user_id, grant)`` or a :class:`GrantPermissionRequest`.
        Returns ``False`` when an equal grant (same type and identifier) is
        already present.
        """
        if isinstance(user_id_or_request, GrantPermissionRequest):
            user_id = user_id_or_request.user_id
            grant = user_id_or_request.to_grant(granted_by)
        else:
            user_id = user_id_or_request
        if grant is None:
            raise TypeError("grant() requires a UserPermissionGrant or a GrantPermissionRequest")

        with self._lock:
            record = self._users.setdefault(user_id, _UserRecord())
            if grant in record.grants:
                return False
            record.grants.append(grant)
        logger.info("Granted %s to user %s", grant, user_id)
        return True

    def revoke(
        self,
        user_id_or_request: str | RevokePermissionRequest,
        identifier: str | None = None,
    ) -> bool:
        """Remove every direct grant (allow or deny) on an identifier.

        Returns ``True`` if anything was removed.
        """
        if isinstance(user_id_or_request, RevokePermissionRequest):
            user_id = user_id_or_request.user_id
            canonical = user_id_or_request.permission_identifier
        else:
            user_id = user_id_or_request
            canonical = canonicalize_pattern(identifier)

        with self._lock:
            record = self._users.get(user_id)
            if record is None:
                return False
            kept = [g for g in record.grants if g.identifier != canonical]
            removed = len(kept) != len(record.grants)
            record.grants = kept
        if removed:
            logger.info("Revoked direct grants on %s from user %s", canonical, user_id)
        return removed

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------

    def snapshot(self, user_id: str) -> UserAuthorizationSnapshot:
        """Return the user's current assignments and grants (empty if unknown)."""
        with self._lock:
            record = self._users.get(user_id)
            if record is None:
                return UserAuthorizationSnapshot(user_id)
            return UserAuthorizationSnapshot(
                user_id,
                tuple(record.assignments.values()),
                tuple(record.grants),
            )

    def users(self) -> list[str]:
        with self._lock:
            return sorted(self._users)

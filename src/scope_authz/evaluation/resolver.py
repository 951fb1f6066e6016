"""Effective permission resolution.

Combines a user's role assignments and direct grants into one ordered list
of concrete scope directives: role-derived directives first (per
assignment, in template order), then the direct grants. Duplicates are
kept; the evaluator treats the list as a set.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from scope_authz.catalog.catalog import PermissionCatalog
from scope_authz.grants.grant import UserPermissionGrant
from scope_authz.grants.store import UserAuthorizationSnapshot
from scope_authz.roles.assignment import UserRoleAssignment
from scope_authz.roles.definition import RoleRegistry
from scope_authz.roles.resolution import SkippedTemplate, resolve_role
from scope_authz.scopes.directive import ScopeDirective

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionResult:
    """Effective directives plus resolution diagnostics.

    Attributes
    ----------
    directives:
        Effective directives, role-derived first, then direct grants.
    skipped:
        Role templates left out because they could not be expanded.
    unknown_roles:
        Assigned role ids that are not in the registry.
    """

    directives: tuple[ScopeDirective, ...] = ()
    skipped: tuple[SkippedTemplate, ...] = ()
    unknown_roles: tuple[str, ...] = ()


class EffectivePermissionResolver:
    """Resolves role assignments and direct grants into effective directives.

    Parameters
    ----------
    catalog:
        The permission catalog.
    roles:
        The role registry.
    """

    def __init__(self, catalog: PermissionCatalog, roles: RoleRegistry) -> None:
        self._catalog = catalog
        self._roles = roles

    @property
    def catalog(self) -> PermissionCatalog:
        return self._catalog

    @property
    def roles(self) -> RoleRegistry:
        return self._roles

    def resolve(
        self,
        assignments: Iterable[UserRoleAssignment] = (),
        grants: Iterable[UserPermissionGrant | ScopeDirective] = (),
    ) -> list[ScopeDirective]:
        """Return the effective directive list for one caller."""
        return list(self.resolve_detailed(assignments, grants).directives)

    def resolve_detailed(
        self,
        assignments: Iterable[UserRoleAssignment] = (),
        grants: Iterable[UserPermissionGrant | ScopeDirective] = (),
    ) -> ResolutionResult:
        directives: list[ScopeDirective] = []
        skipped: list[SkippedTemplate] = []
        unknown: list[str] = []

        for assignment in assignments or ():
            role = self._roles.get(assignment.role_id)
            if role is None:
                logger.warning("Ignoring assignment of unknown role %r", assignment.role_id)
                unknown.append(assignment.role_id)
                continue
            resolution = resolve_role(role, assignment, self._catalog)
            directives.extend(resolution.directives)
            skipped.extend(resolution.skipped)

        for grant in grants or ():
            directives.append(
                grant if isinstance(grant, ScopeDirective) else grant.to_directive()
            )

        return ResolutionResult(tuple(directives), tuple(skipped), tuple(unknown))

    def resolve_snapshot(self, snapshot: UserAuthorizationSnapshot) -> list[ScopeDirective]:
        return self.resolve(snapshot.assignments, snapshot.grants)

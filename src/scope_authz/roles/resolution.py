"""Role template resolution.

Expands a role's scope templates with the concrete values from a user's
role assignment. A template that cannot be expanded is skipped and
reported; the remaining templates of the role still apply.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from scope_authz.errors import MalformedIdentifierError, MissingParameterError
from scope_authz.roles.assignment import UserRoleAssignment, normalize_parameter_values
from scope_authz.roles.definition import RoleDefinition
from scope_authz.roles.template import ScopeTemplate
from scope_authz.scopes.directive import ScopeDirective

if TYPE_CHECKING:
    from scope_authz.catalog.catalog import PermissionCatalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkippedTemplate:
    """A scope template left out of a role's resolution.

    Attributes
    ----------
    role_code:
        Code of the role the template belongs to.
    template:
        The template that was skipped.
    missing:
        Placeholder names with no value; empty when the template was
        skipped for a malformed value.
    reason:
        Human-readable explanation.
    """

    role_code: str
    template: ScopeTemplate
    missing: tuple[str, ...] = ()
    reason: str = ""


@dataclass(frozen=True)
class RoleResolution:
    """Directives produced by one role assignment plus any skipped templates."""

    directives: tuple[ScopeDirective, ...] = ()
    skipped: tuple[SkippedTemplate, ...] = ()

    @property
    def complete(self) -> bool:
        return not self.skipped


def resolve_role(
    role: RoleDefinition,
    assignment: UserRoleAssignment | Mapping[str, object] | None = None,
    catalog: PermissionCatalog | None = None,
) -> RoleResolution:
    """Expand every scope template of ``role`` with the assignment's values.

    Parameters
    ----------
    role:
        The role definition.
    assignment:
        The user's assignment of ``role``, or a plain mapping of parameter
        values.
    catalog:
        Catalog used to build concrete node paths. Without it, templates
        are expanded by direct segment substitution.

    Returns
    -------
    RoleResolution
        Directives in template order, and the templates that were skipped.
    """
    if isinstance(assignment, UserRoleAssignment):
        values = assignment.values
    else:
        values = dict(normalize_parameter_values(assignment))  # type: ignore[arg-type]

    directives: list[ScopeDirective] = []
    skipped: list[SkippedTemplate] = []
    for template in role.scope_templates:
        try:
            directives.append(template.expand(values, catalog))
        except MissingParameterError as exc:
            logger.warning(
                "Skipping scope template '%s' of role %s: missing parameter(s) %s",
                template,
                role.code,
                list(exc.parameters),
            )
            skipped.append(
                SkippedTemplate(role.code, template, exc.parameters, str(exc))
            )
        except MalformedIdentifierError as exc:
            logger.warning(
                "Skipping scope template '%s' of role %s: %s",
                template,
                role.code,
                exc.reason,
            )
            skipped.append(SkippedTemplate(role.code, template, (), str(exc)))
    return RoleResolution(tuple(directives), tuple(skipped))


def expand_role(
    role: RoleDefinition,
    assignment: UserRoleAssignment | Mapping[str, object] | None = None,
    catalog: PermissionCatalog | None = None,
) -> list[ScopeDirective]:
    """Return only the directives of :func:`resolve_role`."""
    return list(resolve_role(role, assignment, catalog).directives)

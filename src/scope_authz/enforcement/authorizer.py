"""Request authorization at the enforcement boundary.

The authorizer knows nothing about transports. It takes a declarative
:class:`~scope_authz.enforcement.requirement.PermissionRequirement` and a
:class:`RequestContext` built by the web layer, builds the concrete target
path and asks the evaluator. Anything that prevents building the target
(unknown permission, missing or malformed parameter) denies.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from scope_authz.catalog.catalog import PermissionCatalog
from scope_authz.errors import AccessDeniedError, AuthorizationError
from scope_authz.evaluation.evaluator import Decision, ScopeEvaluator
from scope_authz.enforcement.requirement import PermissionRequirement, requirements
from scope_authz.scopes.claims import parse_scopes
from scope_authz.scopes.directive import ScopeDirective

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestContext:
    """What the web layer knows about one request.

    Attributes
    ----------
    directives:
        The caller's effective directives, either freshly resolved or
        parsed from token scope claims.
    route_values:
        Route/path parameters.
    claims:
        Identity claims of the caller (e.g. ``{"sub": "u-1"}``).
    body:
        Parsed request body, if any.
    """

    directives: tuple[ScopeDirective, ...] = ()
    route_values: Mapping[str, object] = field(default_factory=dict)
    claims: Mapping[str, object] = field(default_factory=dict)
    body: Mapping[str, object] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "directives", tuple(self.directives))

    @classmethod
    def from_scope_claims(
        cls,
        scopes: Iterable[object],
        route_values: Mapping[str, object] | None = None,
        claims: Mapping[str, object] | None = None,
        body: Mapping[str, object] | None = None,
    ) -> RequestContext:
        """Build a context from a token's serialised scope claims."""
        return cls(
            tuple(parse_scopes(scopes)),
            route_values or {},
            claims or {},
            body,
        )


class RequestAuthorizer:
    """Turns permission requirements into allow/deny decisions.

    Parameters
    ----------
    catalog:
        Catalog used to build concrete target paths.
    evaluator:
        Evaluator to decide with; defaults to most-specific-wins.
    """

    def __init__(
        self, catalog: PermissionCatalog, evaluator: ScopeEvaluator | None = None
    ) -> None:
        self._catalog = catalog
        self._evaluator = evaluator or ScopeEvaluator()

    def authorize(
        self, requirement: PermissionRequirement | str, context: RequestContext
    ) -> Decision:
        """Decide one requirement. Never raises."""
        if isinstance(requirement, str):
            requirement = PermissionRequirement(requirement)
        try:
            target = requirement.build_target(
                self._catalog, context.route_values, context.claims, context.body
            )
        except AuthorizationError as exc:
            logger.warning(
                "Denied %s: cannot build target path (%s)", requirement.permission, exc
            )
            return Decision(False, requirement.permission, reason=str(exc))
        return self._evaluator.explain(context.directives, target)

    def authorize_any(
        self,
        required: Iterable[PermissionRequirement | str],
        context: RequestContext,
    ) -> bool:
        return any(self.authorize(r, context).allowed for r in requirements(required))

    def authorize_all(
        self,
        required: Iterable[PermissionRequirement | str],
        context: RequestContext,
    ) -> bool:
        items = requirements(required)
        return bool(items) and all(self.authorize(r, context).allowed for r in items)

    def enforce(
        self, requirement: PermissionRequirement | str, context: RequestContext
    ) -> Decision:
        """Like :meth:`authorize`, but raise on deny.

        Raises
        ------
        AccessDeniedError
            If the decision is deny.
        """
        decision = self.authorize(requirement, context)
        if not decision:
            raise AccessDeniedError(decision.target, decision.reason)
        return decision

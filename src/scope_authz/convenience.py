"""Convenience API for scope-authz: 3-line quickstart.

Example
-------
::

    from scope_authz import AuthorizationEngine
    engine = AuthorizationEngine.from_files("permissions.yaml", "roles.yaml")
    engine.store.assign_role("u-1", "ADMIN")
    print(engine.check(engine.store.snapshot("u-1"), "api:iam:users:read").allowed)

"""
from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from scope_authz.catalog.catalog import PermissionCatalog
from scope_authz.catalog.loader import CatalogLoader
from scope_authz.enforcement.authorizer import RequestAuthorizer
from scope_authz.evaluation.evaluator import Decision, DirectiveInput, ScopeEvaluator
from scope_authz.evaluation.resolver import EffectivePermissionResolver
from scope_authz.evaluation.strategies import PrecedenceStrategy, get_strategy
from scope_authz.grants.grant import UserPermissionGrant
from scope_authz.grants.store import InMemoryAuthorizationStore, UserAuthorizationSnapshot
from scope_authz.roles.assignment import UserRoleAssignment
from scope_authz.roles.definition import RoleRegistry
from scope_authz.roles.loader import RoleLoader
from scope_authz.scopes.claims import serialize_scopes
from scope_authz.scopes.directive import ScopeDirective

Subject = UserAuthorizationSnapshot | Iterable[DirectiveInput]


class AuthorizationEngine:
    """Catalog, roles, resolver, evaluator and an in-memory store in one object.

    Parameters
    ----------
    catalog:
        The permission catalog.
    roles:
        Role registry; empty when omitted.
    strategy:
        Precedence strategy or its name; defaults to most-specific-wins.
    strict_assignments:
        Passed to the store: reject role assignments with missing parameters.

    Example
    -------
    ::

        engine = AuthorizationEngine.from_dicts(catalog_dict, roles_dict)
        directives = engine.effective_permissions([UserRoleAssignment("ADMIN")])
        engine.has_permission(directives, "api:iam:users:99:write")  # True
    """

    def __init__(
        self,
        catalog: PermissionCatalog,
        roles: RoleRegistry | None = None,
        strategy: PrecedenceStrategy | str | None = None,
        strict_assignments: bool = False,
    ) -> None:
        if strategy is None or isinstance(strategy, str):
            strategy = get_strategy(strategy)
        self._catalog = catalog
        self._roles = roles if roles is not None else RoleRegistry()
        self._resolver = EffectivePermissionResolver(catalog, self._roles)
        self._evaluator = ScopeEvaluator(strategy)
        self._authorizer = RequestAuthorizer(catalog, self._evaluator)
        self._store = InMemoryAuthorizationStore(self._roles, strict=strict_assignments)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_files(
        cls,
        catalog_path: str | Path,
        roles_path: str | Path | None = None,
        strategy: PrecedenceStrategy | str | None = None,
    ) -> AuthorizationEngine:
        catalog = CatalogLoader().load(catalog_path)
        roles = RoleLoader(catalog).load(roles_path) if roles_path is not None else None
        return cls(catalog, roles, strategy)

    @classmethod
    def from_dicts(
        cls,
        catalog: dict[str, object],
        roles: dict[str, object] | None = None,
        strategy: PrecedenceStrategy | str | None = None,
    ) -> AuthorizationEngine:
        permission_catalog = CatalogLoader().load_from_dict(catalog)
        registry = (
            RoleLoader(permission_catalog).load_from_dict(roles) if roles is not None else None
        )
        return cls(permission_catalog, registry, strategy)

    @classmethod
    def from_config(cls, config_path: str | Path) -> AuthorizationEngine:
        from scope_authz.config import ConfigLoader, build_engine

        return build_engine(ConfigLoader().load(Path(config_path)))

    # ------------------------------------------------------------------
    # Components
    # ------------------------------------------------------------------

    @property
    def catalog(self) -> PermissionCatalog:
        return self._catalog

    @property
    def roles(self) -> RoleRegistry:
        return self._roles

    @property
    def resolver(self) -> EffectivePermissionResolver:
        return self._resolver

    @property
    def evaluator(self) -> ScopeEvaluator:
        return self._evaluator

    @property
    def authorizer(self) -> RequestAuthorizer:
        return self._authorizer

    @property
    def store(self) -> InMemoryAuthorizationStore:
        return self._store

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def effective_permissions(
        self,
        assignments: UserAuthorizationSnapshot | Iterable[UserRoleAssignment] = (),
        grants: Iterable[UserPermissionGrant | ScopeDirective] = (),
    ) -> list[ScopeDirective]:
        """Resolve a store snapshot, or assignments plus grants, to directives."""
        if isinstance(assignments, UserAuthorizationSnapshot):
            return self._resolver.resolve_snapshot(assignments)
        return self._resolver.resolve(assignments, grants)

    def scope_claims(
        self,
        assignments: UserAuthorizationSnapshot | Iterable[UserRoleAssignment] = (),
        grants: Iterable[UserPermissionGrant | ScopeDirective] = (),
    ) -> list[str]:
        """Effective directives serialised for an authentication token."""
        return serialize_scopes(self.effective_permissions(assignments, grants))

    def check(self, subject: Subject, target: str) -> Decision:
        """Explain the decision for ``target``.

        ``subject`` is a store snapshot or an already resolved directive
        list (objects or strings).
        """
        return self._evaluator.explain(self._directives(subject), target)

    def has_permission(self, subject: Subject, target: str) -> bool:
        return self.check(subject, target).allowed

    def has_any_permission(self, subject: Subject, paths: Iterable[str]) -> bool:
        return self._evaluator.has_any_permission(self._directives(subject), paths)

    def has_all_permissions(self, subject: Subject, paths: Iterable[str]) -> bool:
        return self._evaluator.has_all_permissions(self._directives(subject), paths)

    def _directives(self, subject: Subject) -> Iterable[DirectiveInput]:
        if isinstance(subject, UserAuthorizationSnapshot):
            return self._resolver.resolve_snapshot(subject)
        return subject

    def __repr__(self) -> str:
        return (
            f"AuthorizationEngine(permissions={len(self._catalog)}, "
            f"roles={len(self._roles)}, strategy={self._evaluator.strategy.name!r})"
        )

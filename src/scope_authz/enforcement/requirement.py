"""Declarative permission requirements for request handlers.

A handler declares the templated permission it needs and where each of
that permission's parameters comes from::

    requirement = PermissionRequirement(
        "api:iam:users:{userId}:write",
        [ParameterBinding("userId", ParameterSource.ROUTE, "id")],
    )
    requirement.build_target(catalog, route_values={"id": "42"})
    # 'api:iam:users:42:write'

Parameters without an explicit binding are read from the route values
under their own name.
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum

from scope_authz.catalog.catalog import PermissionCatalog
from scope_authz.catalog.identifiers import parse_identifier


class ParameterSource(str, Enum):
    """Where a permission parameter value is read from."""

    ROUTE = "route"
    CLAIMS = "claims"
    BODY = "body"
    LITERAL = "literal"


@dataclass(frozen=True)
class ParameterBinding:
    """Maps one permission parameter to a value in the request.

    Attributes
    ----------
    name:
        Parameter name on the permission node.
    source:
        Where the value comes from.
    key:
        Lookup key in the source; defaults to ``name``. For
        :attr:`ParameterSource.LITERAL` this is the value itself. Body keys
        may be dotted to reach nested mappings.
    """

    name: str
    source: ParameterSource = ParameterSource.ROUTE
    key: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "source", ParameterSource(self.source))

    @property
    def lookup_key(self) -> str:
        return self.key if self.key is not None else self.name

    def resolve(
        self,
        route_values: Mapping[str, object],
        claims: Mapping[str, object],
        body: Mapping[str, object] | None,
    ) -> object | None:
        if self.source is ParameterSource.LITERAL:
            return self.lookup_key
        if self.source is ParameterSource.ROUTE:
            return route_values.get(self.lookup_key)
        if self.source is ParameterSource.CLAIMS:
            return claims.get(self.lookup_key)
        return _dig(body, self.lookup_key)


@dataclass(frozen=True)
class PermissionRequirement:
    """A templated permission plus how to fill its parameters."""

    permission: str
    bindings: tuple[ParameterBinding, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "permission", parse_identifier(self.permission))
        object.__setattr__(self, "bindings", tuple(self.bindings))

    @classmethod
    def of(cls, permission: str, **sources: str | tuple[str, str]) -> PermissionRequirement:
        """Shorthand: ``of("api:x:{id}:read", id="route")`` or ``id=("body", "user.id")``."""
        bindings: list[ParameterBinding] = []
        for name, spec in sources.items():
            if isinstance(spec, tuple):
                source, key = spec
                bindings.append(ParameterBinding(name, ParameterSource(source), key))
            else:
                bindings.append(ParameterBinding(name, ParameterSource(spec)))
        return cls(permission, tuple(bindings))

    def parameter_values(
        self,
        route_values: Mapping[str, object] | None = None,
        claims: Mapping[str, object] | None = None,
        body: Mapping[str, object] | None = None,
    ) -> dict[str, object]:
        route_values = route_values or {}
        claims = claims or {}
        values: dict[str, object] = dict(route_values)
        for binding in self.bindings:
            values[binding.name] = binding.resolve(route_values, claims, body)
        return values

    def build_target(
        self,
        catalog: PermissionCatalog,
        route_values: Mapping[str, object] | None = None,
        claims: Mapping[str, object] | None = None,
        body: Mapping[str, object] | None = None,
    ) -> str:
        """Build the concrete path this request must be granted.

        Raises
        ------
        UnknownPermissionError
            If the permission is not in the catalog.
        MissingParameterError
            If a parameter has no value in the request.
        MalformedIdentifierError
            If a value is not a single segment.
        """
        node = catalog.require(self.permission)
        return node.build_path(self.parameter_values(route_values, claims, body))


def _dig(body: Mapping[str, object] | None, key: str) -> object | None:
    current: object | None = body
    for part in key.split("."):
        if not isinstance(current, Mapping):
            return None
        current = current.get(part)
    return current


def requirements(items: Iterable[PermissionRequirement | str]) -> list[PermissionRequirement]:
    """Coerce plain identifiers to requirements without explicit bindings."""
    return [
        item if isinstance(item, PermissionRequirement) else PermissionRequirement(item)
        for item in items
    ]

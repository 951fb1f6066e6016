"""Scope templates: directive blueprints with role-level placeholders.

A template names a permission and says how each of that permission's
parameters is filled. A binding value is either a literal (``"42"``,
``"*"``) or a role placeholder (``"{targetUser}"``) resolved from a user's
role assignment. Node parameters left unbound are filled from a role
placeholder of the same name.

The authoring shorthand writes the bindings inline::

    allow:api:iam:users:{targetUser}:read   # userId <- {targetUser}
    allow:api:iam:users:*:write             # userId <- "*"
    allow:api:**                            # wildcard pattern, no node

Example
-------
::

    template = ScopeTemplate.parse("allow:api:iam:users:{targetUser}:read", catalog)
    template.placeholders                                  # ('targetUser',)
    str(template.expand({"targetUser": "42"}, catalog))    # 'allow:api:iam:users:42:read'
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from scope_authz.catalog.identifiers import (
    MULTI_WILDCARD,
    SEPARATOR,
    WILDCARD,
    parse_identifier,
    placeholder_name,
    split_identifier,
)
from scope_authz.errors import (
    MalformedIdentifierError,
    MissingParameterError,
    PermissionConfigError,
    UnknownPermissionError,
)
from scope_authz.scopes.directive import (
    DirectiveType,
    ScopeDirective,
    coerce_directive_type,
)

if TYPE_CHECKING:
    from scope_authz.catalog.catalog import PermissionCatalog

_VALUE_PLACEHOLDER_RE = re.compile(r"\{([A-Za-z0-9_]+)\}")


@dataclass(frozen=True)
class ScopeTemplate:
    """A directive type, a permission identifier and its parameter bindings.

    Attributes
    ----------
    type:
        Allow or deny.
    permission:
        Templated catalog path (``api:iam:users:{userId}:read``) or a
        wildcard pattern (``api:iam:**``).
    bindings:
        ``(parameter, value template)`` pairs, sorted by parameter name.
    """

    type: DirectiveType
    permission: str
    bindings: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", coerce_directive_type(self.type))
        object.__setattr__(self, "permission", parse_identifier(self.permission))
        raw = self.bindings.items() if isinstance(self.bindings, Mapping) else self.bindings
        bindings: dict[str, str] = {}
        for key, value in raw:
            name = str(key).strip()
            if not name:
                raise PermissionConfigError(
                    f"Scope template '{self.permission}' has an empty binding name."
                )
            bindings[name] = str(value).strip()
        object.__setattr__(self, "bindings", tuple(sorted(bindings.items())))

    # ------------------------------------------------------------------
    # Authoring
    # ------------------------------------------------------------------

    @classmethod
    def parse(cls, raw: str, catalog: PermissionCatalog | None = None) -> ScopeTemplate:
        """Parse the ``"<allow|deny>:<identifier>"`` authoring shorthand."""
        if not isinstance(raw, str):
            raise MalformedIdentifierError(raw, "scope template must be a string")
        keyword, _, identifier = raw.strip().partition(SEPARATOR)
        return cls.create(keyword, identifier, None, catalog)

    @classmethod
    def create(
        cls,
        directive_type: DirectiveType | str,
        permission: str,
        bindings: Mapping[str, object] | None = None,
        catalog: PermissionCatalog | None = None,
    ) -> ScopeTemplate:
        """Build a template, resolving ``permission`` against ``catalog`` if given.

        With a catalog, an identifier that positionally matches a node is
        rewritten to the node's templated path, and the segments written in
        parameter positions become bindings (explicit ``bindings`` win).
        Identifiers matching no node must be wildcard patterns covering at
        least one node.

        Raises
        ------
        UnknownPermissionError
            If the catalog has no node the identifier can address.
        PermissionConfigError
            If a binding names a parameter the node does not have.
        """
        explicit = {str(k).strip(): str(v) for k, v in (bindings or {}).items()}
        identifier = parse_identifier(permission)
        directive_type = coerce_directive_type(directive_type)
        if catalog is None:
            return cls(directive_type, identifier, tuple(explicit.items()))

        match = catalog.match(identifier)
        if match is not None:
            node = match.permission
            unknown = sorted(set(explicit) - set(node.parameter_hierarchy))
            if unknown:
                raise PermissionConfigError(
                    f"Scope template for '{node.path}' binds unknown parameter(s) {unknown}."
                )
            merged = {**match.bindings, **explicit}
            segments = split_identifier(node.path)
            for position, segment in enumerate(segments):
                name = placeholder_name(segment)
                if (
                    name is not None
                    and merged.get(name) == MULTI_WILDCARD
                    and position != len(segments) - 1
                ):
                    raise MalformedIdentifierError(
                        f"{node.path} ({name}={MULTI_WILDCARD})",
                        "multi-segment wildcard is only allowed as the final segment",
                    )
            return cls(directive_type, node.path, tuple(merged.items()))

        if not catalog.covered_by(identifier):
            raise UnknownPermissionError(identifier)
        return cls(directive_type, identifier, tuple(explicit.items()))

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def binding_map(self) -> dict[str, str]:
        return dict(self.bindings)

    @property
    def placeholders(self) -> tuple[str, ...]:
        """Role placeholder names this template needs, sorted."""
        bound = self.binding_map
        names: set[str] = set()
        for value in bound.values():
            names.update(_VALUE_PLACEHOLDER_RE.findall(value))
        for segment in split_identifier(self.permission):
            name = placeholder_name(segment)
            if name is not None and name not in bound:
                names.add(name)
        return tuple(sorted(names))

    @property
    def requires_parameters(self) -> bool:
        return bool(self.placeholders)

    # ------------------------------------------------------------------
    # Expansion
    # ------------------------------------------------------------------

    def expand(
        self,
        parameter_values: Mapping[str, object] | None = None,
        catalog: PermissionCatalog | None = None,
    ) -> ScopeDirective:
        """Instantiate this template with concrete role parameter values.

        Raises
        ------
        MissingParameterError
            If a role placeholder has no (non-blank) value.
        MalformedIdentifierError
            If a role value is a wildcard, or substitution yields an invalid
            concrete pattern.
        """
        values = {
            str(key): str(value).strip()
            for key, value in (parameter_values or {}).items()
            if value is not None and str(value).strip()
        }
        missing = [name for name in self.placeholders if name not in values]
        if missing:
            raise MissingParameterError(missing, self.permission)
        for name in self.placeholders:
            if WILDCARD in values[name]:
                raise MalformedIdentifierError(
                    values[name], f"value for parameter '{name}' must not be a wildcard"
                )

        def substitute(template: str) -> str:
            return _VALUE_PLACEHOLDER_RE.sub(lambda m: values[m.group(1)], template)

        resolved = {name: substitute(value) for name, value in self.bindings}
        node = catalog.get(self.permission) if catalog is not None else None

        if node is not None:
            node_values = {
                name: resolved.get(name, values.get(name))
                for name in node.parameter_hierarchy
            }
            path = node.build_path(node_values)
        else:
            segments: list[str] = []
            for segment in split_identifier(self.permission):
                name = placeholder_name(segment)
                if name is None:
                    segments.append(segment)
                    continue
                value = resolved[name] if name in resolved else values[name]
                if not value:
                    raise MissingParameterError([name], self.permission)
                if SEPARATOR in value:
                    raise MalformedIdentifierError(
                        value, f"value for parameter '{name}' must be a single segment"
                    )
                segments.append(value)
            path = SEPARATOR.join(segments)

        return ScopeDirective(self.type, path)

    def __str__(self) -> str:
        bound = self.binding_map
        segments = []
        for segment in split_identifier(self.permission):
            name = placeholder_name(segment)
            segments.append(bound.get(name, segment) if name is not None else segment)
        return f"{self.type.value}{SEPARATOR}{SEPARATOR.join(segments)}"

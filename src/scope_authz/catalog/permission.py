"""Permission catalog node.

A :class:`Permission` is one node of the permission tree. Its templated
``path`` is the colon-joined chain of segments from the root, where
parameter segments appear as ``{name}`` placeholders::

    api
    └── iam
        └── users
            ├── read                 -> api:iam:users:read
            └── {userId}
                └── write            -> api:iam:users:{userId}:write

A node contributes placeholders in two ways: its identifier may itself be a
placeholder (``{userId}`` above), or it may declare ``parameters`` which are
appended as placeholder segments right after its identifier (a node
``accounts`` with ``parameters=("accountId",)`` contributes
``accounts:{accountId}``).

Nodes are immutable once built. Children are attached to their parent when
the parent is constructed, so trees are built bottom-up (see
:mod:`scope_authz.catalog.builder`).
"""
from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property

from scope_authz.catalog.identifiers import (
    SEPARATOR,
    is_valid_parameter_name,
    placeholder_name,
)
from scope_authz.errors import (
    MalformedIdentifierError,
    MissingParameterError,
    PermissionConfigError,
)


class PermissionAccess(str, Enum):
    """Read/write classification of a node. Used for grouping, not evaluation."""

    READ = "read"
    WRITE = "write"
    UNSPECIFIED = "unspecified"


@dataclass(frozen=True, eq=False)
class Permission:
    """Immutable node of the permission catalog.

    Attributes
    ----------
    identifier:
        Local segment name (``"users"``) or a placeholder (``"{userId}"``).
    description:
        Human-readable description.
    children:
        Ordered child nodes.
    parameters:
        Placeholder names declared on this node, appended after the
        identifier in the templated path.
    access:
        Read/write classification.
    parent:
        Parent node, set when the parent is constructed.
    """

    identifier: str
    description: str = ""
    children: tuple[Permission, ...] = ()
    parameters: tuple[str, ...] = ()
    access: PermissionAccess = PermissionAccess.UNSPECIFIED
    parent: Permission | None = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.identifier, str) or not self.identifier.strip():
            raise MalformedIdentifierError(self.identifier, "node identifier is empty")
        identifier = self.identifier.strip()
        if SEPARATOR in identifier:
            raise MalformedIdentifierError(
                identifier, "node identifier must be a single segment"
            )

        parameters = tuple(str(name).strip() for name in self.parameters)
        for name in parameters:
            if not is_valid_parameter_name(name):
                raise PermissionConfigError(
                    f"Permission '{identifier}' declares invalid parameter name {name!r}."
                )

        object.__setattr__(self, "identifier", identifier)
        object.__setattr__(self, "parameters", parameters)
        object.__setattr__(self, "access", PermissionAccess(self.access))
        object.__setattr__(self, "children", tuple(self.children))

        for child in self.children:
            if child.parent is not None:
                raise PermissionConfigError(
                    f"Permission '{child.identifier}' is already attached to "
                    f"'{child.parent.identifier}'."
                )
            object.__setattr__(child, "parent", self)

    # ------------------------------------------------------------------
    # Derived properties
    # ------------------------------------------------------------------

    @property
    def local_segments(self) -> tuple[str, ...]:
        """Segments this node adds to its parent's path."""
        return (self.identifier, *(f"{{{name}}}" for name in self.parameters))

    @property
    def own_parameters(self) -> tuple[str, ...]:
        """Placeholder names introduced by this node itself."""
        name = placeholder_name(self.identifier)
        return ((name,) if name else ()) + self.parameters

    @cached_property
    def segments(self) -> tuple[str, ...]:
        prefix = self.parent.segments if self.parent is not None else ()
        return prefix + self.local_segments

    @cached_property
    def path(self) -> str:
        """Templated canonical path, e.g. ``api:iam:users:{userId}:write``."""
        return SEPARATOR.join(self.segments)

    @cached_property
    def parameter_hierarchy(self) -> tuple[str, ...]:
        """Placeholder names required by this node and its ancestors, root first."""
        inherited = self.parent.parameter_hierarchy if self.parent is not None else ()
        return inherited + self.own_parameters

    @property
    def is_read(self) -> bool:
        return self.access is PermissionAccess.READ

    @property
    def is_write(self) -> bool:
        return self.access is PermissionAccess.WRITE

    @property
    def is_leaf(self) -> bool:
        return not self.children

    @property
    def requires_parameters(self) -> bool:
        return bool(self.parameter_hierarchy)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def traverse(self) -> Iterator[Permission]:
        """Yield this node and all descendants, pre-order."""
        yield self
        for child in self.children:
            yield from child.traverse()

    def build_path(self, parameter_values: Mapping[str, object] | None = None) -> str:
        """Substitute placeholder values and return a concrete path.

        Parameters
        ----------
        parameter_values:
            Mapping of placeholder name to value. Values are stringified and
            trimmed. Wildcard values (``*``, ``**``) pass through unchanged.

        Returns
        -------
        str
            The concrete colon-delimited path.

        Raises
        ------
        MissingParameterError
            If any placeholder has no value or a blank one.
        MalformedIdentifierError
            If a value contains the segment separator.
        """
        values = parameter_values or {}
        resolved: list[str] = []
        missing: list[str] = []

        for segment in self.segments:
            name = placeholder_name(segment)
            if name is None:
                resolved.append(segment)
                continue
            raw = values.get(name)
            value = str(raw).strip() if raw is not None else ""
            if not value:
                missing.append(name)
                continue
            if SEPARATOR in value:
                raise MalformedIdentifierError(
                    value, f"value for parameter '{name}' must be a single segment"
                )
            resolved.append(value)

        if missing:
            raise MissingParameterError(missing, self.path)
        return SEPARATOR.join(resolved)

    def to_dict(self) -> dict[str, object]:
        """Return the read-only listing projection of this subtree."""
        return {
            "path": self.path,
            "identifier": self.identifier,
            "description": self.description,
            "parameters": list(self.parameter_hierarchy),
            "isRead": self.is_read,
            "isWrite": self.is_write,
            "children": [child.to_dict() for child in self.children],
        }

    def __repr__(self) -> str:
        return f"Permission(path={self.path!r})"

"""Process-wide permission catalog.

The catalog is built once at bootstrap from a set of root
:class:`~scope_authz.catalog.permission.Permission` nodes and is read-only
afterwards, so it can be shared freely between threads. It is passed to the
resolver and evaluator as an explicit dependency.

Example
-------
::

    from scope_authz.catalog import PermissionCatalog, node, rleaf, wleaf

    catalog = PermissionCatalog([
        node("api", "API operations",
            node("iam", "Identity management",
                node("users", "User administration",
                    rleaf("read", "List users"),
                    node("{userId}", "A single user",
                        wleaf("write", "Update the user"),
                    ),
                ),
            ),
        ),
    ])
    catalog.require("api:iam:users:{userId}:write").build_path({"userId": "42"})
    # 'api:iam:users:42:write'
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from scope_authz.catalog.identifiers import (
    MULTI_WILDCARD,
    WILDCARD,
    fold_key,
    fold_segment,
    placeholder_name,
    split_identifier,
)
from scope_authz.catalog.permission import Permission, PermissionAccess
from scope_authz.errors import (
    MalformedIdentifierError,
    PermissionConfigError,
    UnknownPermissionError,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogMatch:
    """A catalog node addressed by a query identifier.

    Attributes
    ----------
    permission:
        The matched node.
    bindings:
        Placeholder name -> query segment, for every placeholder segment of
        the node's templated path.
    literal_matches:
        Number of literal catalog segments the query agreed with.
    """

    permission: Permission
    bindings: Mapping[str, str] = field(default_factory=dict)
    literal_matches: int = 0


class PermissionCatalog:
    """Immutable, indexed permission tree.

    Parameters
    ----------
    roots:
        Root permission nodes. Each must be unattached.

    Raises
    ------
    PermissionConfigError
        If two nodes share a path, or a parameter name repeats along a
        root-to-leaf chain.
    """

    def __init__(self, roots: Iterable[Permission]) -> None:
        self._roots: tuple[Permission, ...] = tuple(roots)
        index: dict[str, Permission] = {}
        by_length: dict[int, list[Permission]] = {}

        for root in self._roots:
            if root.parent is not None:
                raise PermissionConfigError(
                    f"Catalog root '{root.identifier}' is attached to another node."
                )
            for permission in root.traverse():
                key = fold_key(permission.segments)
                if key in index:
                    raise PermissionConfigError(
                        f"Duplicate permission path '{permission.path}'."
                    )
                hierarchy = permission.parameter_hierarchy
                if len(set(hierarchy)) != len(hierarchy):
                    raise PermissionConfigError(
                        f"Permission '{permission.path}' repeats a parameter name "
                        f"along its ancestry: {list(hierarchy)}."
                    )
                index[key] = permission
                by_length.setdefault(len(permission.segments), []).append(permission)

        self._index: Mapping[str, Permission] = MappingProxyType(index)
        self._by_length: dict[int, tuple[Permission, ...]] = {
            length: tuple(nodes) for length, nodes in by_length.items()
        }
        logger.debug("Built permission catalog with %d nodes", len(index))

    @classmethod
    def from_definitions(
        cls, definitions: Iterable[Mapping[str, object]]
    ) -> PermissionCatalog:
        """Build a catalog from declarative node dictionaries.

        See :func:`scope_authz.catalog.builder.node_from_dict` for the schema.
        """
        from scope_authz.catalog.builder import node_from_dict

        return cls(node_from_dict(definition) for definition in definitions)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    @property
    def roots(self) -> tuple[Permission, ...]:
        return self._roots

    def get(self, path: str) -> Permission | None:
        """Return the node whose templated path equals ``path`` (case-insensitive)."""
        try:
            segments = split_identifier(path)
        except MalformedIdentifierError:
            return None
        return self._index.get(fold_key(segments))

    def require(self, path: str) -> Permission:
        """Like :meth:`get` but raise :class:`UnknownPermissionError` when absent."""
        permission = self.get(path)
        if permission is None:
            raise UnknownPermissionError(str(path))
        return permission

    def find(self, *identifiers: str) -> Permission | None:
        """Walk the tree by node identifiers, ignoring declared parameter segments.

        ``catalog.find("api", "portfolio", "accounts", "read")`` addresses
        ``api:portfolio:{userId}:accounts:{accountId}:read`` when the
        ``portfolio`` and ``accounts`` nodes declare those parameters.
        """
        candidates: Iterable[Permission] = self._roots
        current: Permission | None = None
        for identifier in identifiers:
            wanted = fold_segment(identifier.strip())
            current = next(
                (c for c in candidates if fold_segment(c.identifier) == wanted), None
            )
            if current is None:
                return None
            candidates = current.children
        return current

    def match(self, identifier: str) -> CatalogMatch | None:
        """Match a query identifier positionally against templated paths.

        Literal catalog segments must agree with the query (case-insensitive);
        placeholder segments bind whatever the query holds at that position
        (a concrete value, a wildcard, or another placeholder). When several
        nodes match, the one agreeing on the most literal segments wins.

        Returns
        -------
        CatalogMatch | None
            The best match, or ``None`` when no node fits.
        """
        try:
            query = split_identifier(identifier)
        except MalformedIdentifierError:
            return None

        best: CatalogMatch | None = None
        for permission in self._by_length.get(len(query), ()):
            bindings: dict[str, str] = {}
            literal_matches = 0
            for catalog_segment, query_segment in zip(permission.segments, query):
                name = placeholder_name(catalog_segment)
                if name is not None:
                    bindings[name] = query_segment
                    continue
                if catalog_segment.lower() != query_segment.lower():
                    break
                literal_matches += 1
            else:
                if best is None or literal_matches > best.literal_matches:
                    best = CatalogMatch(
                        permission=permission,
                        bindings=MappingProxyType(bindings),
                        literal_matches=literal_matches,
                    )
        return best

    def covered_by(self, pattern: str) -> list[Permission]:
        """Return nodes whose templated path a wildcard pattern can address.

        Placeholder segments in the catalog accept any pattern segment.
        """
        try:
            segments = split_identifier(pattern)
        except MalformedIdentifierError:
            return []
        return [p for p in self.traverse() if _covers(segments, p.segments)]

    def build_path(
        self,
        permission: Permission | str,
        parameter_values: Mapping[str, object] | None = None,
    ) -> str:
        """Build a concrete path for a node or a templated catalog path."""
        node = permission if isinstance(permission, Permission) else self.require(permission)
        return node.build_path(parameter_values)

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------

    def traverse(self) -> Iterator[Permission]:
        for root in self._roots:
            yield from root.traverse()

    def read_leaf_paths(self) -> frozenset[str]:
        return frozenset(
            p.path for p in self.traverse() if p.is_leaf and p.access is PermissionAccess.READ
        )

    def write_leaf_paths(self) -> frozenset[str]:
        return frozenset(
            p.path for p in self.traverse() if p.is_leaf and p.access is PermissionAccess.WRITE
        )

    def assignable_paths(self) -> list[str]:
        """Sorted templated paths of every node with a read/write classification."""
        return sorted(
            p.path for p in self.traverse() if p.access is not PermissionAccess.UNSPECIFIED
        )

    def to_listing(self) -> list[dict[str, object]]:
        return [root.to_dict() for root in self._roots]

    def __iter__(self) -> Iterator[Permission]:
        return self.traverse()

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, path: object) -> bool:
        return isinstance(path, str) and self.get(path) is not None

    def __repr__(self) -> str:
        return f"PermissionCatalog(roots={[r.identifier for r in self._roots]}, size={len(self)})"


def _covers(pattern: tuple[str, ...], segments: tuple[str, ...]) -> bool:
    for index, pattern_segment in enumerate(pattern):
        if pattern_segment == MULTI_WILDCARD and index == len(pattern) - 1:
            return True
        if index >= len(segments):
            return False
        target = segments[index]
        if pattern_segment == WILDCARD or placeholder_name(target) is not None:
            continue
        if placeholder_name(pattern_segment) is not None:
            return False
        if pattern_segment.lower() != target.lower():
            return False
    return len(pattern) == len(segments)

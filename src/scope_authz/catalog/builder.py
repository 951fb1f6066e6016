"""Declarative builders for permission trees.

Trees are written bottom-up as nested calls::

    node("api", "API operations",
        node("portfolio", "Portfolio APIs",
            node("accounts", "Trading accounts",
                rleaf("list", "List accounts"),
                wleaf("create", "Create an account"),
                parameters=["accountId"],
            ),
            parameters=["userId"],
        ),
    )

or as plain dictionaries (the same shape the YAML loader reads)::

    {
        "identifier": "accounts",
        "description": "Trading accounts",
        "parameters": ["accountId"],
        "children": [
            {"identifier": "list", "access": "read"},
            {"identifier": "create", "access": "write"},
        ],
    }
"""
from __future__ import annotations

from collections.abc import Iterable, Mapping

from scope_authz.catalog.permission import Permission, PermissionAccess
from scope_authz.errors import PermissionConfigError


def node(
    identifier: str,
    description: str = "",
    *children: Permission,
    parameters: Iterable[str] = (),
    access: PermissionAccess | str = PermissionAccess.UNSPECIFIED,
) -> Permission:
    """Build an interior (or unclassified) permission node."""
    return Permission(
        identifier=identifier,
        description=description,
        children=children,
        parameters=tuple(parameters),
        access=PermissionAccess(access),
    )


def rleaf(
    identifier: str, description: str = "", parameters: Iterable[str] = ()
) -> Permission:
    """Build a read leaf."""
    return node(identifier, description, parameters=parameters, access=PermissionAccess.READ)


def wleaf(
    identifier: str, description: str = "", parameters: Iterable[str] = ()
) -> Permission:
    """Build a write leaf."""
    return node(identifier, description, parameters=parameters, access=PermissionAccess.WRITE)


def node_from_dict(data: Mapping[str, object]) -> Permission:
    """Build a permission subtree from a nested dictionary.

    Parameters
    ----------
    data:
        Mapping with keys ``identifier`` (required), ``description``,
        ``access`` (``read`` / ``write``), ``parameters`` and ``children``.

    Raises
    ------
    PermissionConfigError
        If a node is not a mapping, lacks an identifier, or carries an
        unknown access value.
    """
    if not isinstance(data, Mapping):
        raise PermissionConfigError(
            f"Permission definition must be a mapping; got {type(data).__name__}."
        )

    identifier = str(data.get("identifier", data.get("id", ""))).strip()
    if not identifier:
        raise PermissionConfigError("Permission definition is missing 'identifier'.")

    access_raw = str(data.get("access", PermissionAccess.UNSPECIFIED.value)).lower()
    try:
        access = PermissionAccess(access_raw)
    except ValueError as exc:
        raise PermissionConfigError(
            f"Permission '{identifier}' has unknown access {access_raw!r}. "
            f"Known values: {[a.value for a in PermissionAccess]}."
        ) from exc

    raw_parameters = data.get("parameters") or []
    raw_children = data.get("children") or []
    if not isinstance(raw_parameters, list) or not isinstance(raw_children, list):
        raise PermissionConfigError(
            f"Permission '{identifier}': 'parameters' and 'children' must be lists."
        )

    return node(
        identifier,
        str(data.get("description", "")),
        *(node_from_dict(child) for child in raw_children),
        parameters=[str(p) for p in raw_parameters],
        access=access,
    )

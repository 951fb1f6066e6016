"""Per-user role assignments."""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from scope_authz.catalog.identifiers import is_concrete_value
from scope_authz.errors import MalformedIdentifierError
from scope_authz.roles.definition import RoleDefinition


def normalize_parameter_values(
    values: Mapping[str, object] | Iterable[tuple[str, object]] | None,
) -> tuple[tuple[str, str], ...]:
    """Trim keys and values, drop blank keys and ``None`` values, sort by key."""
    if values is None:
        return ()
    pairs = values.items() if isinstance(values, Mapping) else values
    normalized: dict[str, str] = {}
    for key, value in pairs:
        name = str(key).strip()
        if not name or value is None:
            continue
        normalized[name] = str(value).strip()
    return tuple(sorted(normalized.items()))


@dataclass(frozen=True)
class UserRoleAssignment:
    """Binds a user to a role plus concrete values for the role's placeholders.

    ``parameter_values`` accepts a mapping and is stored as a sorted tuple of
    pairs, so two assignments with the same values compare equal whatever
    order they were supplied in.

    Raises
    ------
    MalformedIdentifierError
        If a value is not a single concrete segment (it holds ``:`` or a
        ``*`` wildcard).
    """

    role_id: str
    parameter_values: tuple[tuple[str, str], ...] = ()

    def __post_init__(self) -> None:
        values = normalize_parameter_values(self.parameter_values)
        for name, value in values:
            if value and not is_concrete_value(value):
                raise MalformedIdentifierError(
                    value, f"value for parameter '{name}' must be a concrete segment"
                )
        object.__setattr__(self, "role_id", str(self.role_id).strip())
        object.__setattr__(self, "parameter_values", values)

    @property
    def values(self) -> dict[str, str]:
        return dict(self.parameter_values)

    def missing_parameters(self, role: RoleDefinition) -> tuple[str, ...]:
        """Role placeholders this assignment has no non-blank value for."""
        values = self.values
        return tuple(p for p in role.template_parameters if not values.get(p))

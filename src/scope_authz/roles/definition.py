"""Role definitions and the process-wide role registry.

A :class:`RoleDefinition` is a named, reusable bundle of
:class:`~scope_authz.roles.template.ScopeTemplate` objects plus the set of
role placeholders its templates need. Definitions are immutable and built
once at bootstrap, like the catalog.
"""
from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from scope_authz.errors import PermissionConfigError, UnknownRoleError
from scope_authz.roles.template import ScopeTemplate


@dataclass(frozen=True)
class RoleDefinition:
    """A named template over the permission catalog.

    Attributes
    ----------
    code:
        Unique, stable identifier. Trimmed and upper-cased.
    name:
        Display name.
    scope_templates:
        Ordered scope templates.
    description:
        Optional human-readable description.
    template_parameters:
        Placeholder names the role accepts. When ``None`` they are inferred
        from the templates.
    id:
        Identifier used by role assignments. Defaults to ``code``.
    is_system:
        Whether the role ships with the application.

    Raises
    ------
    PermissionConfigError
        If code or name is blank, or a template references a placeholder not
        declared in ``template_parameters``.
    """

    code: str
    name: str
    scope_templates: tuple[ScopeTemplate, ...] = ()
    description: str = ""
    template_parameters: tuple[str, ...] | None = None
    id: str | None = None
    is_system: bool = False

    def __post_init__(self) -> None:
        code = str(self.code or "").strip().upper()
        if not code:
            raise PermissionConfigError("Role code cannot be empty.")
        name = str(self.name or "").strip()
        if not name:
            raise PermissionConfigError(f"Role '{code}' must have a name.")

        templates = tuple(self.scope_templates)
        referenced = sorted({p for t in templates for p in t.placeholders})
        if self.template_parameters is None:
            declared = tuple(referenced)
        else:
            declared = tuple(
                dict.fromkeys(str(p).strip() for p in self.template_parameters if str(p).strip())
            )
            undeclared = [p for p in referenced if p not in declared]
            if undeclared:
                raise PermissionConfigError(
                    f"Role '{code}' references undeclared template parameter(s) {undeclared}."
                )

        object.__setattr__(self, "code", code)
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "scope_templates", templates)
        object.__setattr__(self, "description", str(self.description or "").strip())
        object.__setattr__(self, "template_parameters", declared)
        object.__setattr__(self, "id", str(self.id).strip() if self.id else code)

    @property
    def requires_parameters(self) -> bool:
        return bool(self.template_parameters)


class RoleRegistry:
    """Immutable lookup of role definitions by code (case-insensitive) or id.

    Parameters
    ----------
    roles:
        Role definitions. Codes and ids must be unique.
    """

    def __init__(self, roles: Iterable[RoleDefinition] = ()) -> None:
        self._roles: tuple[RoleDefinition, ...] = tuple(roles)
        by_code: dict[str, RoleDefinition] = {}
        by_id: dict[str, RoleDefinition] = {}
        for role in self._roles:
            if role.code in by_code:
                raise PermissionConfigError(f"Duplicate role code '{role.code}'.")
            if role.id in by_id:
                raise PermissionConfigError(f"Duplicate role id '{role.id}'.")
            by_code[role.code] = role
            by_id[role.id] = role
        self._by_code: Mapping[str, RoleDefinition] = MappingProxyType(by_code)
        self._by_id: Mapping[str, RoleDefinition] = MappingProxyType(by_id)

    def get(self, role: str) -> RoleDefinition | None:
        """Return the role with id ``role``, else the role with that code."""
        if not isinstance(role, str) or not role.strip():
            return None
        key = role.strip()
        return self._by_id.get(key) or self._by_code.get(key.upper())

    def require(self, role: str) -> RoleDefinition:
        definition = self.get(role)
        if definition is None:
            raise UnknownRoleError(str(role))
        return definition

    @property
    def codes(self) -> list[str]:
        return [role.code for role in self._roles]

    def __iter__(self) -> Iterator[RoleDefinition]:
        return iter(self._roles)

    def __len__(self) -> int:
        return len(self._roles)

    def __contains__(self, role: object) -> bool:
        return isinstance(role, str) and self.get(role) is not None

"""YAML loader for role definitions.

Schema
------
::

    version: "1.0"
    roles:
      - code: admin
        name: Administrator
        description: Full user administration
        system: true
        scopes:
          - "allow:api:iam:users:read"
          - "allow:api:iam:users:*:write"
      - code: self_service
        name: Self service
        template_parameters: [targetUser]
        scopes:
          - type: allow
            permission: "api:iam:users:{userId}:write"
            bindings:
              userId: "{targetUser}"

Scopes are written either in the ``"<allow|deny>:<identifier>"`` shorthand
or as a mapping with explicit bindings. When a catalog is supplied every
template is validated against it.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING

import yaml

from scope_authz.errors import AuthorizationError, PermissionConfigError
from scope_authz.roles.definition import RoleDefinition, RoleRegistry
from scope_authz.roles.template import ScopeTemplate

if TYPE_CHECKING:
    from scope_authz.catalog.catalog import PermissionCatalog

logger = logging.getLogger(__name__)

_SUPPORTED_VERSIONS: frozenset[str] = frozenset(["1.0", "1"])


class RoleLoader:
    """Loads a :class:`RoleRegistry` from YAML files, strings or dicts.

    Parameters
    ----------
    catalog:
        Catalog that scope templates are resolved and validated against.
    """

    def __init__(self, catalog: PermissionCatalog | None = None) -> None:
        self._catalog = catalog

    def load(self, config_path: str | Path) -> RoleRegistry:
        """Load role definitions from a YAML file.

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        PermissionConfigError
            If the YAML cannot be parsed or a role is invalid.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Role definitions not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as fh:
                raw: dict[str, object] = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise PermissionConfigError(
                f"Failed to parse YAML: {exc}", str(config_path)
            ) from exc

        return self._build_registry(raw, config_path=str(config_path))

    def load_from_yaml_string(
        self, yaml_string: str, config_path: str | None = None
    ) -> RoleRegistry:
        try:
            raw: dict[str, object] = yaml.safe_load(yaml_string) or {}
        except yaml.YAMLError as exc:
            raise PermissionConfigError(
                f"Failed to parse YAML string: {exc}", config_path
            ) from exc
        return self._build_registry(raw, config_path=config_path)

    def load_from_dict(
        self, config: dict[str, object], config_path: str | None = None
    ) -> RoleRegistry:
        return self._build_registry(config, config_path=config_path)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_registry(
        self, raw: dict[str, object], config_path: str | None = None
    ) -> RoleRegistry:
        if not isinstance(raw, dict):
            raise PermissionConfigError(
                "Role definitions must be a YAML mapping (dict).", config_path
            )
        roles_raw = raw.get("roles", [])
        if not isinstance(roles_raw, list):
            raise PermissionConfigError("'roles' must be a list.", config_path)

        version = str(raw.get("version", "1.0"))
        if version not in _SUPPORTED_VERSIONS:
            raise PermissionConfigError(
                f"Unsupported role definitions version {version!r}. "
                f"Supported: {sorted(_SUPPORTED_VERSIONS)}.",
                config_path,
            )

        try:
            registry = RoleRegistry(self._parse_role(entry) for entry in roles_raw)
        except PermissionConfigError as exc:
            if exc.config_path is None and config_path is not None:
                raise PermissionConfigError(str(exc), config_path) from exc
            raise
        except AuthorizationError as exc:
            raise PermissionConfigError(str(exc), config_path) from exc

        logger.info(
            "Loaded %d role definitions from %s", len(registry), config_path or "<dict>"
        )
        return registry

    def _parse_role(self, entry: object) -> RoleDefinition:
        if not isinstance(entry, Mapping):
            raise PermissionConfigError(f"Role definition must be a mapping, got {entry!r}.")

        code = str(entry.get("code", "")).strip()
        scopes = entry.get("scopes", [])
        if not isinstance(scopes, list):
            raise PermissionConfigError(f"Role '{code}': 'scopes' must be a list.")

        parameters = entry.get("template_parameters")
        if parameters is not None and not isinstance(parameters, list):
            raise PermissionConfigError(
                f"Role '{code}': 'template_parameters' must be a list."
            )

        try:
            templates = tuple(self._parse_scope(scope) for scope in scopes)
        except AuthorizationError as exc:
            raise PermissionConfigError(f"Role '{code}': {exc}") from exc

        return RoleDefinition(
            code=code,
            name=str(entry.get("name", "") or ""),
            scope_templates=templates,
            description=str(entry.get("description", "") or ""),
            template_parameters=tuple(parameters) if parameters is not None else None,
            id=entry.get("id"),  # type: ignore[arg-type]
            is_system=bool(entry.get("system", False)),
        )

    def _parse_scope(self, scope: object) -> ScopeTemplate:
        if isinstance(scope, str):
            return ScopeTemplate.parse(scope, self._catalog)
        if not isinstance(scope, Mapping):
            raise PermissionConfigError(
                f"Scope template must be a string or mapping, got {scope!r}."
            )
        bindings = scope.get("bindings") or {}
        if not isinstance(bindings, Mapping):
            raise PermissionConfigError("Scope template 'bindings' must be a mapping.")
        return ScopeTemplate.create(
            str(scope.get("type", "")).strip().lower(),
            str(scope.get("permission", "")),
            bindings,
            self._catalog,
        )

"""YAML loader for permission catalogs.

Schema
------
::

    version: "1.0"
    permissions:
      - identifier: api
        description: API operations
        children:
          - identifier: iam
            children:
              - identifier: users
                children:
                  - identifier: read
                    access: read
                  - identifier: "{userId}"
                    children:
                      - identifier: write
                        access: write

Example
-------
::

    catalog = CatalogLoader().load("permissions.yaml")
    catalog.require("api:iam:users:read")
"""
from __future__ import annotations

import logging
from pathlib import Path

import yaml

from scope_authz.catalog.builder import node_from_dict
from scope_authz.catalog.catalog import PermissionCatalog
from scope_authz.errors import AuthorizationError, PermissionConfigError

logger = logging.getLogger(__name__)

_SUPPORTED_VERSIONS: frozenset[str] = frozenset(["1.0", "1"])


class CatalogLoader:
    """Loads a :class:`PermissionCatalog` from YAML files, strings or dicts."""

    def load(self, config_path: str | Path) -> PermissionCatalog:
        """Load a catalog from a YAML file.

        Raises
        ------
        FileNotFoundError
            If the file does not exist.
        PermissionConfigError
            If the YAML cannot be parsed or the tree is invalid.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Permission catalog not found: {config_path}")

        try:
            with config_path.open("r", encoding="utf-8") as fh:
                raw: dict[str, object] = yaml.safe_load(fh) or {}
        except yaml.YAMLError as exc:
            raise PermissionConfigError(
                f"Failed to parse YAML: {exc}", str(config_path)
            ) from exc

        return self._build_catalog(raw, config_path=str(config_path))

    def load_from_yaml_string(
        self, yaml_string: str, config_path: str | None = None
    ) -> PermissionCatalog:
        try:
            raw: dict[str, object] = yaml.safe_load(yaml_string) or {}
        except yaml.YAMLError as exc:
            raise PermissionConfigError(
                f"Failed to parse YAML string: {exc}", config_path
            ) from exc
        return self._build_catalog(raw, config_path=config_path)

    def load_from_dict(
        self, config: dict[str, object], config_path: str | None = None
    ) -> PermissionCatalog:
        return self._build_catalog(config, config_path=config_path)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_catalog(
        self, raw: dict[str, object], config_path: str | None = None
    ) -> PermissionCatalog:
        if not isinstance(raw, dict):
            raise PermissionConfigError(
                "Permission catalog must be a YAML mapping (dict).", config_path
            )
        if not isinstance(raw.get("permissions"), list):
            raise PermissionConfigError(
                "Permission catalog must contain a 'permissions' list.", config_path
            )

        version = str(raw.get("version", "1.0"))
        if version not in _SUPPORTED_VERSIONS:
            raise PermissionConfigError(
                f"Unsupported catalog version {version!r}. "
                f"Supported: {sorted(_SUPPORTED_VERSIONS)}.",
                config_path,
            )

        try:
            catalog = PermissionCatalog(
                node_from_dict(definition) for definition in raw["permissions"]  # type: ignore[union-attr]
            )
        except PermissionConfigError as exc:
            if exc.config_path is None and config_path is not None:
                raise PermissionConfigError(str(exc), config_path) from exc
            raise
        except AuthorizationError as exc:
            raise PermissionConfigError(str(exc), config_path) from exc

        logger.info(
            "Loaded permission catalog with %d nodes from %s",
            len(catalog),
            config_path or "<dict>",
        )
        return catalog

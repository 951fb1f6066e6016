"""Authorization engine configuration with Pydantic v2 validation.

Loads and validates an ``authz.yaml`` file into a typed
:class:`AuthorizationConfig`. Relative catalog and role paths are resolved
against the directory of the config file.

Example
-------
::

    # authz.yaml
    version: "1"
    catalog_path: permissions.yaml
    roles_path: roles.yaml
    precedence: most_specific
    strict_assignments: false
    log_level: INFO

>>> config = ConfigLoader().load(Path("authz.yaml"))
>>> engine = build_engine(config)
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from scope_authz.errors import PermissionConfigError

if TYPE_CHECKING:
    from scope_authz.convenience import AuthorizationEngine

logger = logging.getLogger(__name__)


class AuthorizationConfig(BaseModel):
    """Top-level engine configuration schema.

    Every field is optional. Without a catalog path the engine starts with
    an empty catalog, which denies everything.
    """

    model_config = {"extra": "allow"}

    version: str = Field(default="1")
    catalog_path: Path | None = Field(default=None)
    roles_path: Path | None = Field(default=None)
    precedence: Literal["most_specific", "deny_overrides"] = Field(default="most_specific")
    strict_assignments: bool = Field(default=False)
    log_level: str = Field(default="WARNING")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if level not in valid:
            raise ValueError(f"Unknown log level '{value}'. Valid: {sorted(valid)}")
        return level


class ConfigLoader:
    """Loads and validates engine YAML configuration."""

    def load(self, config_path: Path) -> AuthorizationConfig:
        """Load and validate a config file.

        Raises
        ------
        FileNotFoundError:
            When the config file does not exist.
        PermissionConfigError:
            When the YAML is invalid or fails validation.
        """
        config_path = Path(config_path)
        if not config_path.exists():
            raise FileNotFoundError(f"Authorization config not found: {config_path}")

        with config_path.open("r", encoding="utf-8") as fh:
            text = fh.read()
        config = self.load_string(text, config_path=str(config_path))

        base = config_path.parent
        updates: dict[str, Path] = {}
        if config.catalog_path is not None and not config.catalog_path.is_absolute():
            updates["catalog_path"] = base / config.catalog_path
        if config.roles_path is not None and not config.roles_path.is_absolute():
            updates["roles_path"] = base / config.roles_path
        return config.model_copy(update=updates) if updates else config

    def load_string(
        self, yaml_content: str, config_path: str | None = None
    ) -> AuthorizationConfig:
        """Load and validate a YAML string directly."""
        try:
            raw = yaml.safe_load(yaml_content) or {}
        except yaml.YAMLError as exc:
            raise PermissionConfigError(f"Failed to parse YAML: {exc}", config_path) from exc
        if not isinstance(raw, dict):
            raise PermissionConfigError(
                "Authorization config must be a YAML mapping (dict).", config_path
            )
        try:
            return AuthorizationConfig.model_validate(raw)
        except ValidationError as exc:
            raise PermissionConfigError(str(exc), config_path) from exc

    def defaults(self) -> AuthorizationConfig:
        """Return a default configuration with all defaults applied."""
        return AuthorizationConfig()


def build_engine(config: AuthorizationConfig) -> AuthorizationEngine:
    """Wire catalog, roles, resolver and evaluator from ``config``.

    Also applies ``config.log_level`` to the ``scope_authz`` logger.
    """
    from scope_authz.catalog.catalog import PermissionCatalog
    from scope_authz.catalog.loader import CatalogLoader
    from scope_authz.convenience import AuthorizationEngine
    from scope_authz.evaluation.strategies import get_strategy
    from scope_authz.roles.definition import RoleRegistry
    from scope_authz.roles.loader import RoleLoader

    logging.getLogger("scope_authz").setLevel(config.log_level)
    catalog = (
        CatalogLoader().load(config.catalog_path)
        if config.catalog_path is not None
        else PermissionCatalog(())
    )
    roles = (
        RoleLoader(catalog).load(config.roles_path)
        if config.roles_path is not None
        else RoleRegistry()
    )
    logger.info(
        "Built authorization engine: %d permissions, %d roles, precedence=%s",
        len(catalog),
        len(roles),
        config.precedence,
    )
    return AuthorizationEngine(
        catalog,
        roles,
        strategy=get_strategy(config.precedence),
        strict_assignments=config.strict_assignments,
    )

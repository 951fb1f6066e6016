"""Error taxonomy for the scope authorization engine.

Every error raised by the engine derives from :class:`AuthorizationError`,
itself a ``ValueError`` so callers that already guard input validation with
``except ValueError`` keep working.

The evaluator never raises; these errors surface only at the boundaries
(parsing identifiers and directives, building concrete paths, loading
configuration, and explicit enforcement).
"""
from __future__ import annotations


class AuthorizationError(ValueError):
    """Base class for all scope authorization errors."""


class MalformedIdentifierError(AuthorizationError):
    """Raised when a permission identifier or pattern cannot be canonicalised.

    Attributes
    ----------
    identifier:
        The raw identifier that was rejected.
    """

    def __init__(self, identifier: object, reason: str = "identifier is empty") -> None:
        self.identifier = identifier
        self.reason = reason
        super().__init__(f"Malformed permission identifier {identifier!r}: {reason}.")


class MissingParameterError(AuthorizationError):
    """Raised when a templated path lacks values for required placeholders.

    Attributes
    ----------
    parameters:
        Names of the placeholders that had no usable value.
    path:
        The templated path that was being built.
    """

    def __init__(self, parameters: tuple[str, ...] | list[str], path: str) -> None:
        self.parameters = tuple(parameters)
        self.path = path
        super().__init__(
            f"Missing value for parameter(s) [{', '.join(self.parameters)}] "
            f"required by '{path}'."
        )


class UnknownDirectiveTypeError(AuthorizationError):
    """Raised when a directive token does not start with ``allow`` or ``deny``."""

    def __init__(self, token: str) -> None:
        self.token = token
        super().__init__(
            f"Unknown directive type {token!r}. Expected 'allow' or 'deny'."
        )


class UnknownPermissionError(AuthorizationError):
    """Raised when an identifier does not address a node in the catalog."""

    def __init__(self, identifier: str) -> None:
        self.identifier = identifier
        super().__init__(f"Permission '{identifier}' is not defined in the catalog.")


class UnknownRoleError(AuthorizationError):
    """Raised when a role code or id is not present in the role registry."""

    def __init__(self, role: str) -> None:
        self.role = role
        super().__init__(f"Role '{role}' is not defined.")


class PermissionConfigError(AuthorizationError):
    """Raised when a catalog, role or engine config is malformed or invalid.

    Attributes
    ----------
    config_path:
        The path to the config file that caused the error, if known.
    """

    def __init__(self, message: str, config_path: str | None = None) -> None:
        self.config_path = config_path
        prefix = f"[{config_path}] " if config_path else ""
        super().__init__(f"{prefix}{message}")


class AccessDeniedError(AuthorizationError):
    """Raised by the enforcement boundary when a request is not authorised.

    Attributes
    ----------
    permission:
        The concrete permission path that was checked (or the templated
        identifier when the concrete path could not be built).
    reason:
        Human-readable explanation of the decision.
    """

    def __init__(self, permission: str, reason: str) -> None:
        self.permission = permission
        self.reason = reason
        super().__init__(f"Access denied to '{permission}': {reason}")

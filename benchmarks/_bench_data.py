"""Shared fixture data for scope-authz benchmarks."""
from __future__ import annotations

from scope_authz import AuthorizationEngine

_MODULES: tuple[str, ...] = ("iam", "auth", "billing", "reports", "portfolio")
_RESOURCES: tuple[str, ...] = ("users", "roles", "apikeys", "invoices", "accounts")


def make_catalog(modules: int = len(_MODULES)) -> dict[str, object]:
    """A catalog of ``modules`` x 5 resources, each with list/read/write leaves."""
    children = []
    for module in _MODULES[:modules]:
        resources = []
        for resource in _RESOURCES:
            resources.append(
                {
                    "identifier": resource,
                    "children": [
                        {"identifier": "list", "access": "read"},
                        {
                            "identifier": "{id}",
                            "children": [
                                {"identifier": "read", "access": "read"},
                                {"identifier": "write", "access": "write"},
                            ],
                        },
                    ],
                }
            )
        children.append({"identifier": module, "children": resources})
    return {"version": "1.0", "permissions": [{"identifier": "api", "children": children}]}


def make_roles() -> dict[str, object]:
    return {
        "version": "1.0",
        "roles": [
            {"code": "ADMIN", "name": "Admin", "scopes": ["allow:api:**", "deny:api:billing:**"]},
            {
                "code": "OWNER",
                "name": "Owner",
                "template_parameters": ["owner"],
                "scopes": [
                    "allow:api:iam:users:{owner}:read",
                    "allow:api:iam:users:{owner}:write",
                    "allow:api:portfolio:accounts:{owner}:read",
                ],
            },
            {
                "code": "AUDITOR",
                "name": "Auditor",
                "scopes": [f"allow:api:{m}:*:list" for m in _MODULES],
            },
        ],
    }


def make_engine() -> AuthorizationEngine:
    return AuthorizationEngine.from_dicts(make_catalog(), make_roles())


__all__ = ["make_catalog", "make_engine", "make_roles"]

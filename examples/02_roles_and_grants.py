#!/usr/bin/env python3
"""Example: Parameterised roles and direct grants (scope-authz)

Shows how a role template is filled from assignment values, how a direct
deny grant overrides a role allow, and how effective permissions are
serialised as token scope claims.

Usage:
    python examples/02_roles_and_grants.py
"""
from __future__ import annotations

from pathlib import Path

from scope_authz import AuthorizationEngine, GrantPermissionRequest, UserPermissionGrant

_CONFIG = Path(__file__).parent / "config"


def main() -> None:
    engine = AuthorizationEngine.from_config(_CONFIG / "authz.yaml")
    store = engine.store

    # A parameterised role: the user may only touch their own records.
    store.assign_role("u-42", "USER", {"targetUser": "42"})
    snapshot = store.snapshot("u-42")
    print("Scope claims for u-42:")
    for claim in engine.scope_claims(snapshot):
        print(f"  {claim}")
    for target in ("api:iam:users:42:write", "api:iam:users:43:write"):
        print(f"  {target}: {engine.has_permission(snapshot, target)}")

    # A role without its parameter value grants nothing from its templates.
    store.assign_role("u-anon", "USER")
    print(f"\nu-anon claims: {engine.scope_claims(store.snapshot('u-anon'))}")

    # A direct deny grant beats a role allow at equal specificity.
    store.assign_role("ops", "KEY_ADMIN")
    store.grant(
        "ops",
        UserPermissionGrant.deny("api:auth:apikeys:revoke", "Suspended pending review", "security"),
    )
    ops = store.snapshot("ops")
    print("\nops after a direct deny:")
    print(f"  list:   {engine.has_permission(ops, 'api:auth:apikeys:list')}")
    print(f"  revoke: {engine.has_permission(ops, 'api:auth:apikeys:revoke')}")

    # Admin API payloads arrive as camelCase JSON.
    request = GrantPermissionRequest.model_validate(
        {"userId": "ops", "permissionIdentifier": "API:IAM:Roles:Read", "isAllow": True}
    )
    store.grant(request, granted_by="security")
    store.revoke("ops", "api:auth:apikeys:revoke")
    print(f"\nops claims after grant/revoke: {engine.scope_claims(store.snapshot('ops'))}")


if __name__ == "__main__":
    main()

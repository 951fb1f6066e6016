#!/usr/bin/env python3
"""Example: Quickstart (scope-authz)

Minimal working example: load a permission catalog and roles, assign a
role to a user and check a few permission paths.

Usage:
    python examples/01_quickstart.py

Requirements:
    pip install scope-authz
"""
from __future__ import annotations

from pathlib import Path

import scope_authz as authz

_CONFIG = Path(__file__).parent / "config"


def main() -> None:
    print(f"scope-authz version: {authz.__version__}")

    # Step 1: Build the engine from the YAML catalog and role definitions
    engine = authz.AuthorizationEngine.from_files(
        _CONFIG / "permissions.yaml", _CONFIG / "roles.yaml"
    )
    print(f"Engine ready: {engine!r}")

    # Step 2: Assign the ADMIN role
    engine.store.assign_role("alice", "ADMIN")
    snapshot = engine.store.snapshot("alice")

    # Step 3: Check permission paths
    targets = [
        "api:iam:users:read",
        "api:iam:users:99:write",
        "api:iam:roles:create",
    ]
    print("\nPermission checks for alice:")
    for target in targets:
        decision = engine.check(snapshot, target)
        icon = "ALLOW" if decision.allowed else "DENY"
        print(f"  [{icon}] {target}  ({decision.reason})")

    # Step 4: Directive lists can be evaluated without any catalog
    directives = ["allow:api:iam:*", "deny:api:iam:users"]
    print(f"\nhas_permission({directives}, 'api:iam:users') -> "
          f"{authz.has_permission(directives, 'api:iam:users')}")


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""Example: Request enforcement (scope-authz)

A request handler declares the templated permission it needs and where
each parameter comes from. The authorizer builds the concrete path from
the request and evaluates the caller's token scope claims against it.

Usage:
    python examples/03_enforcement.py
"""
from __future__ import annotations

from pathlib import Path

from scope_authz import (
    AccessDeniedError,
    AuthorizationEngine,
    PermissionRequirement,
    RequestContext,
)

_CONFIG = Path(__file__).parent / "config"

CLOSE_ACCOUNT = PermissionRequirement.of(
    "api:portfolio:{userId}:accounts:{accountId}:close",
    userId=("claims", "sub"),
    accountId="route",
)


def main() -> None:
    engine = AuthorizationEngine.from_files(
        _CONFIG / "permissions.yaml", _CONFIG / "roles.yaml"
    )
    engine.store.assign_role("42", "USER", {"targetUser": "42"})
    token_scopes = engine.scope_claims(engine.store.snapshot("42"))

    requests = [
        {"sub": "42", "accountId": "acc-1"},
        {"sub": "43", "accountId": "acc-1"},
    ]
    for request in requests:
        context = RequestContext.from_scope_claims(
            token_scopes,
            route_values={"accountId": request["accountId"]},
            claims={"sub": request["sub"]},
        )
        try:
            decision = engine.authorizer.enforce(CLOSE_ACCOUNT, context)
        except AccessDeniedError as exc:
            print(f"  403 {exc.permission}: {exc.reason}")
        else:
            print(f"  200 {decision.target}: {decision.reason}")


if __name__ == "__main__":
    main()

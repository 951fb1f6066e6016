"""Effective permission resolution and scope evaluation."""
from __future__ import annotations

from scope_authz.evaluation.evaluator import (
    Decision,
    ScopeEvaluator,
    has_all_permissions,
    has_any_permission,
    has_permission,
)
from scope_authz.evaluation.resolver import EffectivePermissionResolver, ResolutionResult
from scope_authz.evaluation.strategies import (
    DenyOverrides,
    DirectiveMatch,
    MostSpecificWins,
    PrecedenceStrategy,
    get_strategy,
    strategy_names,
)

__all__ = [
    "Decision",
    "DenyOverrides",
    "DirectiveMatch",
    "EffectivePermissionResolver",
    "MostSpecificWins",
    "PrecedenceStrategy",
    "ResolutionResult",
    "ScopeEvaluator",
    "get_strategy",
    "has_all_permissions",
    "has_any_permission",
    "has_permission",
    "strategy_names",
]

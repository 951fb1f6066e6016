"""Tests for ScopeEvaluator."""
from __future__ import annotations

import pytest

from scope_authz.evaluation import (
    DenyOverrides,
    ScopeEvaluator,
    has_all_permissions,
    has_any_permission,
    has_permission,
)
from scope_authz.scopes import ScopeDirective


@pytest.fixture()
def evaluator() -> ScopeEvaluator:
    return ScopeEvaluator()


class TestHasPermission:
    def test_no_directives_denies(self, evaluator: ScopeEvaluator) -> None:
        assert evaluator.has_permission([], "api:iam:users") is False
        assert evaluator.has_permission(None, "api:iam:users") is False

    def test_no_match_denies(self, evaluator: ScopeEvaluator) -> None:
        assert evaluator.has_permission(["allow:api:auth:*"], "api:iam:users") is False

    def test_exact_allow(self, evaluator: ScopeEvaluator) -> None:
        assert evaluator.has_permission(["allow:api:iam:users"], "API:IAM:Users") is True

    def test_more_specific_deny_wins(self, evaluator: ScopeEvaluator) -> None:
        directives = ["allow:api:iam:*", "deny:api:iam:users"]
        assert evaluator.has_permission(directives, "api:iam:users") is False
        assert evaluator.has_permission(directives, "api:iam:roles") is True

    def test_more_specific_allow_wins(self, evaluator: ScopeEvaluator) -> None:
        directives = ["deny:api:**", "allow:api:iam:users:read"]
        assert evaluator.has_permission(directives, "api:iam:users:read") is True
        assert evaluator.has_permission(directives, "api:iam:users:write") is False

    def test_deny_wins_at_equal_specificity(self, evaluator: ScopeEvaluator) -> None:
        directives = ["allow:api:auth:apikeys:revoke", "deny:api:auth:apikeys:revoke"]
        assert evaluator.has_permission(directives, "api:auth:apikeys:revoke") is False

    def test_multi_wildcard_covers_prefix_itself(self, evaluator: ScopeEvaluator) -> None:
        assert evaluator.has_permission(["allow:api:**"], "api") is True

    def test_single_wildcard_needs_a_segment(self, evaluator: ScopeEvaluator) -> None:
        assert evaluator.has_permission(["allow:api:*"], "api") is False
        assert evaluator.has_permission(["allow:api:*"], "api:iam:users") is False

    @pytest.mark.parametrize("target", ["", "  ", "api:*", "api:**", "api:{userId}", None])
    def test_non_concrete_target_denies(self, evaluator: ScopeEvaluator, target: object) -> None:
        assert evaluator.has_permission(["allow:**"], target) is False  # type: ignore[arg-type]

    def test_malformed_directives_ignored(self, evaluator: ScopeEvaluator) -> None:
        directives = ["grant:api:iam:users", "allow:", 42, "allow:api:iam:users"]
        assert evaluator.has_permission(directives, "api:iam:users") is True  # type: ignore[list-item]
        assert evaluator.has_permission(["deny:**:x"], "api") is False

    def test_single_string_directive(self, evaluator: ScopeEvaluator) -> None:
        assert evaluator.has_permission("allow:api:iam:users", "api:iam:users") is True

    def test_directive_objects(self, evaluator: ScopeEvaluator) -> None:
        directives = [ScopeDirective.allow("api:iam:*")]
        assert evaluator.has_permission(directives, "api:iam:roles") is True

    def test_duplicates_and_order_do_not_matter(self, evaluator: ScopeEvaluator) -> None:
        directives = ["deny:api:iam:users", "allow:api:iam:*", "allow:api:iam:*"]
        assert evaluator.has_permission(directives, "api:iam:users") is False
        assert evaluator.has_permission(list(reversed(directives)), "api:iam:users") is False

    def test_repeated_calls_are_stable(self, evaluator: ScopeEvaluator) -> None:
        directives = ["allow:api:iam:*", "deny:api:iam:users"]
        results = {evaluator.has_permission(directives, "api:iam:roles") for _ in range(5)}
        assert results == {True}


class TestExplain:
    def test_decision_for_allow(self, evaluator: ScopeEvaluator) -> None:
        decision = evaluator.explain(["allow:api:**", "allow:api:iam:roles"], "api:iam:roles")
        assert decision
        assert decision.allowed is True
        assert len(decision.matches) == 2
        assert [str(m.directive) for m in decision.winning] == ["allow:api:iam:roles"]
        assert decision.reason == "allowed by allow:api:iam:roles"

    def test_decision_for_deny(self, evaluator: ScopeEvaluator) -> None:
        decision = evaluator.explain(["allow:api:iam:*", "deny:api:iam:users"], "api:iam:users")
        assert not decision
        assert decision.reason == "denied by deny:api:iam:users"

    def test_decision_without_match(self, evaluator: ScopeEvaluator) -> None:
        decision = evaluator.explain([], "api:iam:users")
        assert decision.reason == "no directive matches"
        assert decision.matches == ()

    def test_decision_for_non_concrete_target(self, evaluator: ScopeEvaluator) -> None:
        decision = evaluator.explain(["allow:**"], "api:*")
        assert decision.allowed is False
        assert "not a concrete" in decision.reason


class TestAnyAll:
    def test_any(self, evaluator: ScopeEvaluator) -> None:
        directives = ["allow:api:iam:users:read"]
        assert evaluator.has_any_permission(directives, ["api:iam:roles:read", "api:iam:users:read"])
        assert not evaluator.has_any_permission(directives, ["api:iam:roles:read"])
        assert not evaluator.has_any_permission(directives, [])

    def test_all(self, evaluator: ScopeEvaluator) -> None:
        directives = ["allow:api:iam:**", "deny:api:iam:roles:create"]
        assert evaluator.has_all_permissions(directives, ["api:iam:users:read", "api:iam:roles:read"])
        assert not evaluator.has_all_permissions(
            directives, ["api:iam:users:read", "api:iam:roles:create"]
        )

    def test_all_with_no_paths_denies(self, evaluator: ScopeEvaluator) -> None:
        assert evaluator.has_all_permissions(["allow:**"], []) is False

    def test_single_path_string(self, evaluator: ScopeEvaluator) -> None:
        assert evaluator.has_all_permissions(["allow:**"], "api:iam:users") is True


class TestStrategyChoice:
    def test_deny_overrides_vetoes_broad_deny(self) -> None:
        directives = ["deny:api:**", "allow:api:iam:users:read"]
        assert ScopeEvaluator(DenyOverrides()).has_permission(directives, "api:iam:users:read") is False
        assert ScopeEvaluator().has_permission(directives, "api:iam:users:read") is True


class TestModuleFunctions:
    def test_module_level_helpers(self) -> None:
        directives = ["allow:api:iam:*", "deny:api:iam:users"]
        assert has_permission(directives, "api:iam:roles") is True
        assert has_any_permission(directives, ["api:iam:users", "api:iam:roles"]) is True
        assert has_all_permissions(directives, ["api:iam:users", "api:iam:roles"]) is False

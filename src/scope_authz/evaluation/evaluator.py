"""Scope evaluator: decides whether a directive set grants a target path.

Algorithm
---------
1. Canonicalise the target path. A target that is not a concrete path
   (empty, wildcarded, placeholder left in) is denied.
2. Collect every directive whose pattern matches the target, with its
   specificity score.
3. No match denies.
4. Otherwise the precedence strategy decides; by default the most specific
   matches win and a deny among them vetoes.

The evaluator is pure and never raises. Malformed directives are ignored,
so an empty or garbage directive list denies everything.

Example
-------
>>> evaluator = ScopeEvaluator()
>>> evaluator.has_permission(["allow:api:iam:*", "deny:api:iam:users"], "api:iam:users")
False
>>> evaluator.has_permission(["allow:api:iam:*", "deny:api:iam:users"], "api:iam:roles")
True
"""
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from scope_authz.evaluation.strategies import (
    DirectiveMatch,
    MostSpecificWins,
    PrecedenceStrategy,
)
from scope_authz.scopes.directive import ScopeDirective
from scope_authz.scopes.matcher import canonical_target, match_segments

logger = logging.getLogger(__name__)

DirectiveInput = ScopeDirective | str


@dataclass(frozen=True)
class Decision:
    """Immutable outcome of an evaluation.

    Attributes
    ----------
    allowed:
        Whether access is granted.
    target:
        The target path as given.
    matches:
        Every directive that matched, in input order.
    winning:
        The matches that determined the outcome.
    reason:
        Human-readable explanation.
    """

    allowed: bool
    target: str
    matches: tuple[DirectiveMatch, ...] = ()
    winning: tuple[DirectiveMatch, ...] = ()
    reason: str = ""

    def __bool__(self) -> bool:
        """Return True if access is granted."""
        return self.allowed


class ScopeEvaluator:
    """Evaluates directive lists against concrete permission paths.

    Parameters
    ----------
    strategy:
        Precedence strategy; defaults to :class:`MostSpecificWins`.
    """

    def __init__(self, strategy: PrecedenceStrategy | None = None) -> None:
        self._strategy = strategy or MostSpecificWins()

    @property
    def strategy(self) -> PrecedenceStrategy:
        return self._strategy

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    def explain(self, directives: Iterable[DirectiveInput] | None, target: str) -> Decision:
        """Evaluate ``target`` and return the full :class:`Decision`."""
        return self._evaluate(_coerce(directives), target)

    def has_permission(self, directives: Iterable[DirectiveInput] | None, target: str) -> bool:
        return self._evaluate(_coerce(directives), target).allowed

    def has_any_permission(
        self, directives: Iterable[DirectiveInput] | None, paths: Iterable[str]
    ) -> bool:
        """True iff at least one of ``paths`` is granted. No paths denies."""
        coerced = _coerce(directives)
        return any(self._evaluate(coerced, path).allowed for path in _paths(paths))

    def has_all_permissions(
        self, directives: Iterable[DirectiveInput] | None, paths: Iterable[str]
    ) -> bool:
        """True iff every one of ``paths`` is granted. No paths denies."""
        coerced = _coerce(directives)
        targets = _paths(paths)
        if not targets:
            return False
        return all(self._evaluate(coerced, path).allowed for path in targets)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _evaluate(self, directives: list[ScopeDirective], target: str) -> Decision:
        segments = canonical_target(target)
        if segments is None:
            logger.debug("Denied %r: not a concrete permission path", target)
            return Decision(False, str(target), reason="target is not a concrete permission path")

        matches: list[DirectiveMatch] = []
        for directive in directives:
            specificity = match_segments(directive.segments, segments)
            if specificity is not None:
                matches.append(DirectiveMatch(directive, specificity))

        if not matches:
            logger.debug("Denied %s: no matching directive", target)
            return Decision(False, target, reason="no directive matches")

        winning = self._strategy.winning(matches)
        allowed = self._strategy.decide(matches)
        if allowed:
            reason = f"allowed by {', '.join(str(m.directive) for m in winning)}"
        else:
            denies = [m for m in winning if m.is_deny] or winning
            reason = f"denied by {', '.join(str(m.directive) for m in denies)}"
        logger.debug("%s %s (%s)", "Allowed" if allowed else "Denied", target, reason)
        return Decision(allowed, target, tuple(matches), tuple(winning), reason)


def _coerce(directives: Iterable[DirectiveInput] | None) -> list[ScopeDirective]:
    if directives is None:
        return []
    if isinstance(directives, (str, ScopeDirective)):
        directives = [directives]
    coerced: list[ScopeDirective] = []
    for item in directives:
        if isinstance(item, ScopeDirective):
            coerced.append(item)
            continue
        directive = ScopeDirective.try_parse(item)
        if directive is None:
            logger.debug("Ignoring malformed directive %r", item)
            continue
        coerced.append(directive)
    return coerced


def _paths(paths: Iterable[str] | None) -> list[str]:
    if paths is None:
        return []
    if isinstance(paths, str):
        return [paths]
    return list(paths)


# ---------------------------------------------------------------------------
# Module-level convenience
# ---------------------------------------------------------------------------

_default_evaluator = ScopeEvaluator()


def has_permission(directives: Iterable[DirectiveInput] | None, target: str) -> bool:
    """Evaluate with the default most-specific-wins strategy."""
    return _default_evaluator.has_permission(directives, target)


def has_any_permission(
    directives: Iterable[DirectiveInput] | None, paths: Iterable[str]
) -> bool:
    return _default_evaluator.has_any_permission(directives, paths)


def has_all_permissions(
    directives: Iterable[DirectiveInput] | None, paths: Iterable[str]
) -> bool:
    return _default_evaluator.has_all_permissions(directives, paths)

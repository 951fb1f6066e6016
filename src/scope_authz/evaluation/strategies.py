"""Precedence strategies for competing matching directives.

When several directives match a target path, a strategy decides which of
them win and whether the winners allow access.

- :class:`MostSpecificWins` (default): only the matches with the highest
  specificity count; a deny among them vetoes.
- :class:`DenyOverrides`: any matching deny vetoes regardless of
  specificity.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass

from scope_authz.errors import PermissionConfigError
from scope_authz.scopes.directive import ScopeDirective


@dataclass(frozen=True)
class DirectiveMatch:
    """A directive that matched a target, with its specificity score."""

    directive: ScopeDirective
    specificity: int

    @property
    def is_deny(self) -> bool:
        return self.directive.is_deny


# ---------------------------------------------------------------------------
# Abstract base
# ---------------------------------------------------------------------------


class PrecedenceStrategy(ABC):
    """Base class for precedence rules."""

    name: str = ""

    @abstractmethod
    def winning(self, matches: Sequence[DirectiveMatch]) -> list[DirectiveMatch]:
        """Return the matches that determine the outcome."""
        ...

    def decide(self, matches: Sequence[DirectiveMatch]) -> bool:
        """Return ``True`` when the winning matches allow access.

        No matches, or a deny among the winners, denies.
        """
        winners = self.winning(matches)
        return bool(winners) and not any(match.is_deny for match in winners)


# ---------------------------------------------------------------------------
# Concrete strategies
# ---------------------------------------------------------------------------


class MostSpecificWins(PrecedenceStrategy):
    """Highest specificity wins; deny wins ties at that level."""

    name = "most_specific"

    def winning(self, matches: Sequence[DirectiveMatch]) -> list[DirectiveMatch]:
        if not matches:
            return []
        best = max(match.specificity for match in matches)
        return [match for match in matches if match.specificity == best]


class DenyOverrides(PrecedenceStrategy):
    """Any matching deny wins, regardless of specificity."""

    name = "deny_overrides"

    def winning(self, matches: Sequence[DirectiveMatch]) -> list[DirectiveMatch]:
        denies = [match for match in matches if match.is_deny]
        return denies or list(matches)


# ---------------------------------------------------------------------------
# Strategy factory
# ---------------------------------------------------------------------------

_STRATEGIES: dict[str, type[PrecedenceStrategy]] = {
    MostSpecificWins.name: MostSpecificWins,
    DenyOverrides.name: DenyOverrides,
}


def get_strategy(name: str | None = None) -> PrecedenceStrategy:
    """Return a strategy instance by name; ``None`` gives the default.

    Raises
    ------
    PermissionConfigError
        If ``name`` is not a known strategy.
    """
    if name is None:
        return MostSpecificWins()
    key = name.strip().lower().replace("-", "_")
    try:
        return _STRATEGIES[key]()
    except KeyError:
        raise PermissionConfigError(
            f"Unknown precedence strategy {name!r}. Valid: {sorted(_STRATEGIES)}."
        ) from None


def strategy_names() -> list[str]:
    return sorted(_STRATEGIES)

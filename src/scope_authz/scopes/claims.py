"""Scope-claim serialisation for authentication tokens.

Effective directives travel inside tokens as a list of directive strings.
How that list is encoded into a token is up to the token issuer.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable

from scope_authz.scopes.directive import ScopeDirective

logger = logging.getLogger(__name__)


def serialize_scopes(directives: Iterable[ScopeDirective]) -> list[str]:
    """Return the claim strings for ``directives``, preserving order."""
    return [str(directive) for directive in directives]


def parse_scopes(tokens: Iterable[object] | None) -> list[ScopeDirective]:
    """Parse claim strings back into directives.

    Malformed tokens are dropped with a warning.
    """
    directives: list[ScopeDirective] = []
    for token in tokens or ():
        if isinstance(token, ScopeDirective):
            directives.append(token)
            continue
        directive = ScopeDirective.try_parse(token)
        if directive is None:
            logger.warning("Ignoring malformed scope claim %r", token)
            continue
        directives.append(directive)
    return directives

"""Scope directives, wildcard matching and scope-claim helpers."""
from __future__ import annotations

from scope_authz.scopes.claims import parse_scopes, serialize_scopes
from scope_authz.scopes.directive import (
    DirectiveType,
    ScopeDirective,
    canonicalize_pattern,
    coerce_directive_type,
)
from scope_authz.scopes.matcher import (
    canonical_target,
    match_segments,
    match_specificity,
    matches,
)

__all__ = [
    "DirectiveType",
    "ScopeDirective",
    "canonical_target",
    "canonicalize_pattern",
    "coerce_directive_type",
    "match_segments",
    "match_specificity",
    "matches",
    "parse_scopes",
    "serialize_scopes",
]

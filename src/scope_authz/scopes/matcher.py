"""Wildcard matching of directive patterns against concrete permission paths.

Rules
-----
- A literal pattern segment must equal the target segment (case-insensitive).
- ``*`` matches exactly one non-empty target segment.
- A trailing ``**`` matches the remaining target segments, zero or more.
- Otherwise pattern and target must have the same number of segments.

The specificity of a successful match is the number of literal segments
matched; the evaluator uses it for precedence.
"""
from __future__ import annotations

from scope_authz.catalog.identifiers import (
    MULTI_WILDCARD,
    WILDCARD,
    is_placeholder,
    split_identifier,
)
from scope_authz.errors import AuthorizationError
from scope_authz.scopes.directive import ScopeDirective, canonicalize_pattern


def match_segments(
    pattern: tuple[str, ...] | list[str], target: tuple[str, ...] | list[str]
) -> int | None:
    """Match canonical segment sequences; return the specificity or ``None``.

    Both sequences are expected to be canonical (lower-cased, non-empty).
    """
    specificity = 0
    last = len(pattern) - 1
    for index, segment in enumerate(pattern):
        if segment == MULTI_WILDCARD and index == last:
            return specificity
        if index >= len(target):
            return None
        if segment == WILDCARD:
            continue
        if segment != target[index]:
            return None
        specificity += 1
    if len(pattern) != len(target):
        return None
    return specificity


def canonical_target(path: object) -> tuple[str, ...] | None:
    """Canonicalise a target path to lower-cased segments.

    Returns ``None`` for anything that is not a concrete path: empty input,
    wildcard segments, or unresolved placeholders.
    """
    try:
        segments = split_identifier(path)
    except AuthorizationError:
        return None
    folded = tuple(segment.lower() for segment in segments)
    for segment in folded:
        if WILDCARD in segment or is_placeholder(segment):
            return None
    return folded


def match_specificity(pattern: ScopeDirective | str, target: str) -> int | None:
    """Return the specificity of ``pattern`` against ``target``, or ``None``.

    ``pattern`` may be a :class:`ScopeDirective`, a directive token
    (``"allow:api:*"``) or a bare pattern (``"api:*"``). Invalid input never
    raises; it simply does not match.
    """
    target_segments = canonical_target(target)
    if target_segments is None:
        return None

    if isinstance(pattern, ScopeDirective):
        pattern_segments = pattern.segments
    else:
        directive = ScopeDirective.try_parse(pattern)
        if directive is not None:
            pattern_segments = directive.segments
        else:
            try:
                pattern_segments = tuple(canonicalize_pattern(pattern).split(":"))
            except AuthorizationError:
                return None

    return match_segments(pattern_segments, target_segments)


def matches(pattern: ScopeDirective | str, target: str) -> bool:
    """Return ``True`` if ``pattern`` matches the concrete ``target`` path.

    Example
    -------
    >>> matches("allow:api:iam:*:read", "api:iam:users:read")
    True
    >>> matches("allow:api:iam:users:5f3", "api:iam:users")
    False
    """
    return match_specificity(pattern, target) is not None

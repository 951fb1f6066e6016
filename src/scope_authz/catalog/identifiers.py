"""Colon-delimited identifier helpers shared by the catalog and directives.

An identifier is a sequence of segments joined by ``:``. Canonicalisation
trims the whole string and each segment, and drops empty segments, so
``" api::iam : users "`` becomes ``"api:iam:users"``.

A segment written as ``{name}`` is a *placeholder*: it stands for a value
supplied when a templated path is turned into a concrete one.
"""
from __future__ import annotations

import re

from scope_authz.errors import MalformedIdentifierError

SEPARATOR: str = ":"
WILDCARD: str = "*"
MULTI_WILDCARD: str = "**"

_PLACEHOLDER_RE = re.compile(r"^\{([A-Za-z0-9_]+)\}$")
_PARAMETER_NAME_RE = re.compile(r"^[A-Za-z0-9_]+$")


def split_identifier(raw: object) -> tuple[str, ...]:
    """Split ``raw`` into canonical segments.

    Raises
    ------
    MalformedIdentifierError
        If ``raw`` is not a string or has no non-empty segment.
    """
    if not isinstance(raw, str):
        raise MalformedIdentifierError(raw, "identifier must be a string")
    segments = tuple(
        segment.strip() for segment in raw.split(SEPARATOR) if segment.strip()
    )
    if not segments:
        raise MalformedIdentifierError(raw)
    return segments


def parse_identifier(raw: object) -> str:
    """Return the canonical form of a raw permission identifier.

    Example
    -------
    >>> parse_identifier("  api::iam: users ")
    'api:iam:users'
    """
    return SEPARATOR.join(split_identifier(raw))


def is_placeholder(segment: str) -> bool:
    return _PLACEHOLDER_RE.match(segment) is not None


def placeholder_name(segment: str) -> str | None:
    """Return the placeholder name for ``{name}`` segments, else ``None``."""
    match = _PLACEHOLDER_RE.match(segment)
    return match.group(1) if match else None


def is_valid_parameter_name(name: str) -> bool:
    return bool(_PARAMETER_NAME_RE.match(name))


def fold_segment(segment: str) -> str:
    """Case-fold a literal segment; placeholder names keep their case."""
    return segment if is_placeholder(segment) else segment.lower()


def fold_key(segments: tuple[str, ...] | list[str]) -> str:
    return SEPARATOR.join(fold_segment(segment) for segment in segments)


def is_concrete_value(value: str) -> bool:
    """True when ``value`` can fill a placeholder: one segment, no wildcard."""
    return bool(value) and SEPARATOR not in value and WILDCARD not in value

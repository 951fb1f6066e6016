"""Scope directives: the atomic allow/deny unit.

A directive pairs a :class:`DirectiveType` with a concrete, canonical
colon-delimited pattern. Pattern segments are literals, the single-level
wildcard ``*`` or, as the final segment only, the multi-level wildcard
``**``.

The string form is the wire/claim representation::

    allow:api:iam:users:*
    deny:api:auth:apikeys:revoke

Example
-------
>>> d = ScopeDirective.parse("Allow: API:iam:Users:*")
>>> str(d)
'allow:api:iam:users:*'
>>> d == ScopeDirective.allow("api:iam:users:*")
True
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from scope_authz.catalog.identifiers import (
    MULTI_WILDCARD,
    SEPARATOR,
    is_placeholder,
    split_identifier,
)
from scope_authz.errors import (
    AuthorizationError,
    MalformedIdentifierError,
    UnknownDirectiveTypeError,
)


class DirectiveType(str, Enum):
    """Disposition of a scope directive."""

    ALLOW = "allow"
    DENY = "deny"


def coerce_directive_type(value: DirectiveType | str) -> DirectiveType:
    """Return ``value`` as a :class:`DirectiveType`, matching case-insensitively.

    Raises
    ------
    UnknownDirectiveTypeError
        If the keyword is not ``allow`` or ``deny``.
    """
    if isinstance(value, DirectiveType):
        return value
    keyword = str(value).strip()
    try:
        return DirectiveType(keyword.lower())
    except ValueError as exc:
        raise UnknownDirectiveTypeError(keyword) from exc


def canonicalize_pattern(raw: object) -> str:
    """Return the canonical form of a directive pattern.

    Segments are trimmed and lower-cased, empty segments are dropped.

    Raises
    ------
    MalformedIdentifierError
        If the pattern is empty, contains a placeholder, or uses ``**``
        anywhere but as the last segment.
    """
    segments = [segment.lower() for segment in split_identifier(raw)]
    for index, segment in enumerate(segments):
        if is_placeholder(segment):
            raise MalformedIdentifierError(
                raw, f"unresolved placeholder '{segment}' in a concrete pattern"
            )
        if MULTI_WILDCARD in segment and (
            segment != MULTI_WILDCARD or index != len(segments) - 1
        ):
            raise MalformedIdentifierError(
                raw, "'**' is only allowed as the final segment"
            )
    return SEPARATOR.join(segments)


@dataclass(frozen=True)
class ScopeDirective:
    """An allow or deny rule over a canonical permission pattern.

    Construct through :meth:`parse`, :meth:`allow` or :meth:`deny`; the
    constructor canonicalises ``pattern`` as well.

    Attributes
    ----------
    type:
        :class:`DirectiveType` of the directive.
    pattern:
        Canonical colon-delimited pattern.
    """

    type: DirectiveType
    pattern: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", coerce_directive_type(self.type))
        object.__setattr__(self, "pattern", canonicalize_pattern(self.pattern))

    # ------------------------------------------------------------------
    # Constructors
    # ------------------------------------------------------------------

    @classmethod
    def allow(cls, pattern: str) -> ScopeDirective:
        return cls(DirectiveType.ALLOW, pattern)

    @classmethod
    def deny(cls, pattern: str) -> ScopeDirective:
        return cls(DirectiveType.DENY, pattern)

    @classmethod
    def parse(cls, raw: str) -> ScopeDirective:
        """Parse a directive token such as ``"allow:api:iam:users:read"``.

        The type keyword is everything before the first ``:`` and is matched
        case-insensitively; the remainder is the pattern.

        Raises
        ------
        UnknownDirectiveTypeError
            If the keyword is not ``allow`` or ``deny``.
        MalformedIdentifierError
            If the token is not a string or the pattern is empty or invalid.
        """
        if not isinstance(raw, str):
            raise MalformedIdentifierError(raw, "directive must be a string")
        keyword, separator, pattern = raw.strip().partition(SEPARATOR)
        directive_type = coerce_directive_type(keyword)
        if not separator or not pattern.strip(SEPARATOR + " "):
            raise MalformedIdentifierError(raw, "directive pattern is empty")
        return cls(directive_type, pattern)

    @classmethod
    def try_parse(cls, raw: object) -> ScopeDirective | None:
        """Parse ``raw`` and return ``None`` instead of raising."""
        try:
            return cls.parse(raw)  # type: ignore[arg-type]
        except AuthorizationError:
            return None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def segments(self) -> tuple[str, ...]:
        return tuple(self.pattern.split(SEPARATOR))

    @property
    def is_allow(self) -> bool:
        return self.type is DirectiveType.ALLOW

    @property
    def is_deny(self) -> bool:
        return self.type is DirectiveType.DENY

    def __str__(self) -> str:
        return f"{self.type.value}{SEPARATOR}{self.pattern}"

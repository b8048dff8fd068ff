"""Version constraint expressions for ``@requires PHP ^7.4 || ^8.0``.

An expression is a list of alternatives joined by ``|`` or ``||``. Each
alternative is either a hyphen range (``7.4 - 8.1``) or terms joined by
whitespace or commas, all of which must hold. A term is one of:

- ``^1.2.3`` - same major (same minor for 0.x), at least 1.2.3
- ``~1.2``   - same major, at least 1.2
- ``~1.2.3`` - same major and minor, at least 1.2.3
- ``>=1.2``, ``<2``, ``!=1.4.1``, ``==1.3`` - plain comparison
- ``1.2.*``  - any release with that prefix; ``*`` alone matches everything
- ``1`` / ``1.2`` - any release within that major / minor
- ``1.2.3``  - exactly that release

Versions are compared with ``packaging.version``.
"""

from __future__ import annotations

import operator
import re
from collections.abc import Callable
from dataclasses import dataclass

from packaging.version import InvalidVersion, Version

_ALTERNATIVE_SPLIT = re.compile(r"\s*\|\|?\s*")
_CONJUNCTION_SPLIT = re.compile(r"\s*,\s*|\s+")
_HYPHEN_RANGE = re.compile(r"^(?P<lower>\S+)\s+-\s+(?P<upper>\S+)$")
_DETACHED_OPERATOR = re.compile(r"(?P<op>[<>!=]=?|[\^~])\s+")
_TERM = re.compile(
    r"^(?P<op>\^|~|[<>]=?|==?|!=)?v?"
    r"(?P<version>(?P<release>\d+(?:\.\d+){0,3})(?P<wildcard>\.\*)?(?:-?[A-Za-z]+\.?\d*)?|\*)$"
)

_COMPARATORS: dict[str, Callable[[Version, Version], bool]] = {
    ">=": operator.ge,
    ">": operator.gt,
    "<=": operator.le,
    "<": operator.lt,
    "==": operator.eq,
    "!=": operator.ne,
}


class ConstraintParseError(ValueError):
    """Raised for expressions the parser does not understand."""


@dataclass(frozen=True)
class VersionBound:
    operator: str
    version: Version

    def allows(self, version: Version) -> bool:
        return _COMPARATORS[self.operator](version, self.version)

    def __str__(self) -> str:
        return f"{self.operator}{self.version}"


@dataclass(frozen=True)
class VersionRange:
    """Conjunction of bounds; no bounds matches every version."""

    bounds: tuple[VersionBound, ...] = ()

    def contains(self, version: Version) -> bool:
        return all(bound.allows(version) for bound in self.bounds)


@dataclass(frozen=True)
class VersionConstraint:
    expression: str
    ranges: tuple[VersionRange, ...]

    def complies(self, version: str) -> bool:
        try:
            parsed = Version(version)
        except InvalidVersion:
            return False
        return any(r.contains(parsed) for r in self.ranges)

    def __str__(self) -> str:
        return self.expression


def parse_constraint(expression: str) -> VersionConstraint:
    """Parse a constraint expression.

    Raises:
        ConstraintParseError: When any alternative is malformed.
    """
    text = expression.strip()
    if not text:
        raise ConstraintParseError("Version constraint is empty")
    ranges = tuple(_parse_alternative(part) for part in _ALTERNATIVE_SPLIT.split(text))
    return VersionConstraint(expression=text, ranges=ranges)


def _parse_alternative(alternative: str) -> VersionRange:
    if not alternative:
        raise ConstraintParseError("Version constraint has an empty alternative")

    if m := _HYPHEN_RANGE.match(alternative):
        lower, _ = _parse_version(m.group("lower"))
        upper, parts = _parse_version(m.group("upper"))
        # A partial upper bound covers the whole of its last component
        if parts < 3:
            return VersionRange((VersionBound(">=", lower), VersionBound("<", _bump(upper, parts))))
        return VersionRange((VersionBound(">=", lower), VersionBound("<=", upper)))

    text = _DETACHED_OPERATOR.sub(r"\g<op>", alternative)
    bounds: list[VersionBound] = []
    for term in _CONJUNCTION_SPLIT.split(text):
        bounds.extend(_parse_term(term))
    return VersionRange(tuple(bounds))


def _parse_term(term: str) -> list[VersionBound]:
    m = _TERM.match(term)
    if m is None:
        raise ConstraintParseError(f'Version constraint "{term}" is not supported.')
    op = m.group("op") or ""

    if m.group("version") == "*" or m.group("wildcard"):
        if op:
            raise ConstraintParseError(f'Wildcard constraint "{term}" cannot take an operator.')
        if m.group("version") == "*":
            return []
        prefix, parts = _parse_version(m.group("release"))
        return [VersionBound(">=", prefix), VersionBound("<", _bump(prefix, parts))]

    version, parts = _parse_version(m.group("version"))

    if op == "^":
        if version.major:
            upper = _bump(version, 1)
        elif version.minor or parts < 3:
            upper = _bump(version, 2)
        else:
            upper = _bump(version, 3)
        return [VersionBound(">=", version), VersionBound("<", upper)]
    if op == "~":
        upper = _bump(version, 2) if parts >= 3 else _bump(version, 1)
        return [VersionBound(">=", version), VersionBound("<", upper)]
    if op in ("=", "=="):
        return [VersionBound("==", version)]
    if op:
        return [VersionBound(op, version)]
    if parts < 3:
        return [VersionBound(">=", version), VersionBound("<", _bump(version, parts))]
    return [VersionBound("==", version)]


def _parse_version(text: str) -> tuple[Version, int]:
    """Parsed version plus the number of release components written."""
    try:
        version = Version(text)
    except InvalidVersion as e:
        raise ConstraintParseError(f'Version "{text}" is not valid.') from e
    release = re.match(r"\d+(?:\.\d+)*", text)
    return version, len(release.group(0).split(".")) if release else 1


def _bump(version: Version, position: int) -> Version:
    """Smallest release above every version sharing the first ``position`` components."""
    release = list(version.release) + [0] * 3
    kept = release[: position - 1] + [release[position - 1] + 1]
    return Version(".".join(str(n) for n in kept))

"""Tag scanner - line patterns for the supported doc-block tags.

Every pattern is applied to a single physical line. A line may satisfy
more than one pattern (``@requires PHP 7.4`` is both a version and a
constraint expression); callers decide which match to apply.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum


class TagKind(Enum):
    """Recognized tag dialects, in scanning priority order."""

    VERSION = "version"
    VERSION_CONSTRAINT = "version_constraint"
    OS = "os"
    SETTING = "setting"
    PREREQUISITE = "prerequisite"  # function or extension
    DATA_PROVIDER = "data_provider"
    TEST_WITH = "test_with"
    EXPECTED_EXCEPTION = "expected_exception"
    GENERIC = "generic"


REQUIRES_VERSION = re.compile(
    r"@requires\s+(?P<name>PHP(?:Unit)?)\s+(?P<operator>[<>=!]{0,2})\s*"
    r"(?P<version>[\d.-]+(?:dev|(?:RC|alpha|beta)[\d.])?)[ \t]*\r?$",
    re.MULTILINE,
)

REQUIRES_VERSION_CONSTRAINT = re.compile(
    r"@requires\s+(?P<name>PHP(?:Unit)?)\s+(?P<constraint>[\d\t \-.|~^]+)[ \t]*\r?$",
    re.MULTILINE,
)

REQUIRES_OS = re.compile(
    r"@requires\s+(?P<name>OS(?:FAMILY)?)\s+(?P<value>.+?)[ \t]*\r?$",
    re.MULTILINE,
)

REQUIRES_SETTING = re.compile(
    r"@requires\s+(?P<name>setting)\s+(?P<setting>[^ ]+?)\s*"
    r"(?P<value>[\w.-]+[\w.]?)?[ \t]*\r?$",
    re.MULTILINE,
)

REQUIRES_PREREQUISITE = re.compile(
    r"@requires\s+(?P<name>function|extension)\s+(?P<value>[^\s<>=!]+)\s*"
    r"(?P<operator>[<>=!]{0,2})\s*(?P<version>[\d.-]+[\d.]?)?[ \t]*\r?$",
    re.MULTILINE,
)

DATA_PROVIDER = re.compile(r"@dataProvider\s+(?P<value>[\w.:\\-]+)")

TEST_WITH = re.compile(r"@testWith\s+")

# Message may be a double-quoted string so it can carry spaces.
EXPECTED_EXCEPTION = re.compile(
    r"@expectedException\s+(?P<name>[:.\w\\]+)"
    r'(?:[\t ]+(?P<message>"(?:[^"\\\n]|\\.)*"|\S*))?'
    r"(?:[\t ]+(?P<code>\S*))?\s*$",
    re.MULTILINE,
)

GENERIC_TAG = re.compile(
    r"@(?P<name>[A-Za-z_-]+)(?:[ \t]+(?P<value>.*?))?[ \t]*\r?$",
    re.MULTILINE,
)

INLINE_TAG = re.compile(
    r"/\*\*?\s*@(?P<name>[A-Za-z_-]+)(?:[ \t]+(?P<value>.*?))?[ \t]*\r?\*/\r?$",
    re.MULTILINE,
)

_PATTERNS: tuple[tuple[TagKind, re.Pattern[str]], ...] = (
    (TagKind.VERSION, REQUIRES_VERSION),
    (TagKind.VERSION_CONSTRAINT, REQUIRES_VERSION_CONSTRAINT),
    (TagKind.OS, REQUIRES_OS),
    (TagKind.SETTING, REQUIRES_SETTING),
    (TagKind.PREREQUISITE, REQUIRES_PREREQUISITE),
    (TagKind.DATA_PROVIDER, DATA_PROVIDER),
    (TagKind.TEST_WITH, TEST_WITH),
    (TagKind.EXPECTED_EXCEPTION, EXPECTED_EXCEPTION),
    (TagKind.GENERIC, GENERIC_TAG),
)

_BY_KIND = dict(_PATTERNS)


@dataclass(frozen=True)
class TagMatch:
    """A single pattern hit on a line."""

    kind: TagKind
    groups: Mapping[str, str | None] = field(default_factory=dict)

    def get(self, group: str) -> str | None:
        return self.groups.get(group)

    @property
    def name(self) -> str | None:
        return self.groups.get("name")


def match_tag(kind: TagKind, line: str) -> TagMatch | None:
    """Try one tag dialect against a line."""
    m = _BY_KIND[kind].search(line)
    if m is None:
        return None
    return TagMatch(kind=kind, groups=m.groupdict())


def scan_line_all(line: str) -> list[TagMatch]:
    """Every dialect the line satisfies, in priority order."""
    matches = []
    for kind, pattern in _PATTERNS:
        m = pattern.search(line)
        if m is not None:
            matches.append(TagMatch(kind=kind, groups=m.groupdict()))
    return matches


def scan_line(line: str) -> TagMatch | None:
    """Highest-priority dialect the line satisfies, if any."""
    for kind, pattern in _PATTERNS:
        m = pattern.search(line)
        if m is not None:
            return TagMatch(kind=kind, groups=m.groupdict())
    return None

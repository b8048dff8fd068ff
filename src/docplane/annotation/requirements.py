"""Requirement extraction from ``@requires`` tags."""

from __future__ import annotations

import re
from collections.abc import Callable
from pathlib import Path
from typing import Any

import structlog

from docplane.annotation.constraints import parse_constraint
from docplane.annotation.models import (
    ConstraintRequirement,
    Requirements,
    SymbolDescriptor,
    VersionRequirement,
)
from docplane.annotation.patterns import TagKind, match_tag
from docplane.core.errors import RequirementWarning

logger = structlog.get_logger()

ConstraintParser = Callable[[str], Any]

_LINE_SPLIT = re.compile(r"\r\n|\r|\n")

_VERSION_KINDS = {"PHP": "php_version", "PHPUnit": "phpunit_version"}
_OS_KINDS = {"OS": "os", "OSFAMILY": "os_family"}


def extract_requirements(
    symbol: SymbolDescriptor,
    constraint_parser: ConstraintParser = parse_constraint,
) -> Requirements:
    """Collect the requirements declared in a symbol's doc-comment.

    The line counter starts at ``start_line`` minus the number of lines in
    the doc-comment so that every recorded offset is an absolute source line.

    Only the first version tag for PHP / PHPUnit counts. A constraint
    expression is ignored once an operator form was recorded for the same
    name, including when both forms match the same line.

    Raises:
        RequirementWarning: A constraint expression could not be parsed.
    """
    lines = _LINE_SPLIT.split(symbol.doc_comment)
    offset = symbol.start_line - len(lines)

    versions: dict[str, VersionRequirement | ConstraintRequirement] = {}
    os_values: dict[str, str] = {}
    settings: dict[str, str] = {}
    prerequisites: dict[str, list[str]] = {"function": [], "extension": []}
    extension_versions: dict[str, VersionRequirement] = {}
    offsets: dict[str, int] = {}

    for line in lines:
        if m := match_tag(TagKind.OS, line):
            kind = _OS_KINDS[m.groups["name"]]
            os_values[kind] = m.groups["value"] or ""
            offsets[kind] = offset

        if (m := match_tag(TagKind.VERSION, line)) and _VERSION_KINDS[
            m.groups["name"]
        ] not in versions:
            kind = _VERSION_KINDS[m.groups["name"]]
            versions[kind] = VersionRequirement(
                version=m.groups["version"] or "",
                operator=m.groups["operator"] or "",
            )
            offsets[kind] = offset

        if (m := match_tag(TagKind.VERSION_CONSTRAINT, line)) and _VERSION_KINDS[
            m.groups["name"]
        ] not in versions:
            kind = _VERSION_KINDS[m.groups["name"]]
            expression = (m.groups["constraint"] or "").strip()
            try:
                constraint = constraint_parser(expression)
            except ValueError as e:
                logger.warning(
                    "requirement_constraint_malformed",
                    requirement=kind,
                    constraint=expression,
                    line=offset,
                    error=str(e),
                )
                raise RequirementWarning.malformed_constraint(kind, expression, str(e)) from e
            versions[kind] = ConstraintRequirement(expression=expression, constraint=constraint)
            offsets[kind] = offset

        if m := match_tag(TagKind.SETTING, line):
            name = m.groups["setting"] or ""
            settings[name] = m.groups["value"] or ""
            offsets[f"setting:{name}"] = offset

        if m := match_tag(TagKind.PREREQUISITE, line):
            kind, value = m.groups["name"] or "", m.groups["value"] or ""
            prerequisites[kind].append(value)
            offsets[f"{kind}:{value}"] = offset
            if kind == "extension" and m.groups["version"]:
                extension_versions[value] = VersionRequirement(
                    version=m.groups["version"],
                    operator=m.groups["operator"] or "",
                )

        offset += 1

    requirements = Requirements(
        file_path=str(Path(symbol.file_path).resolve()) if symbol.file_path else "",
        versions=versions,
        os=os_values.get("os"),
        os_family=os_values.get("os_family"),
        settings=settings,
        functions=tuple(prerequisites["function"]),
        extensions=tuple(prerequisites["extension"]),
        extension_versions=extension_versions,
        line_offsets=offsets,
    )
    logger.debug(
        "requirements_extracted",
        symbol=symbol.qualified_name,
        count=len(offsets),
    )
    return requirements

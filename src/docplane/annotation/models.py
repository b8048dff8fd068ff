"""Doc-block annotation models.

Input descriptor supplied by the reflection layer, and the immutable
records produced for the test runner.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

# =============================================================================
# Symbol Descriptor - supplied per call, never mutated
# =============================================================================


@dataclass(frozen=True)
class SymbolDescriptor:
    """Reflection view of a test class, method or function."""

    doc_comment: str
    file_path: str
    start_line: int
    end_line: int
    declaring_type_name: str | None = None
    member_name: str | None = None
    composed_trait_doc_comments: tuple[str, ...] = ()
    is_type_level: bool = False
    source_lines: tuple[str, ...] | None = None  # Read from file_path when None

    @property
    def qualified_name(self) -> str:
        if self.declaring_type_name and self.member_name and not self.is_type_level:
            return f"{self.declaring_type_name}::{self.member_name}"
        return self.declaring_type_name or self.member_name or "<anonymous>"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> SymbolDescriptor:
        """Build from a plain mapping (descriptor files)."""
        source_lines = data.get("source_lines")
        return cls(
            doc_comment=data.get("doc_comment") or "",
            file_path=str(data.get("file_path", "")),
            start_line=int(data.get("start_line", 0)),
            end_line=int(data.get("end_line", data.get("start_line", 0))),
            declaring_type_name=data.get("declaring_type_name"),
            member_name=data.get("member_name"),
            composed_trait_doc_comments=tuple(data.get("composed_trait_doc_comments") or ()),
            is_type_level=bool(data.get("is_type_level", False)),
            source_lines=tuple(source_lines) if source_lines is not None else None,
        )


# =============================================================================
# Requirements
# =============================================================================


@dataclass(frozen=True)
class VersionRequirement:
    """``@requires PHP >= 7.4`` style requirement."""

    version: str
    operator: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"version": self.version, "operator": self.operator}


@dataclass(frozen=True)
class ConstraintRequirement:
    """``@requires PHP ^7.4 || ^8.0`` style requirement."""

    expression: str
    constraint: Any  # Whatever the constraint parser produced

    def to_dict(self) -> dict[str, str]:
        return {"constraint": self.expression}


@dataclass(frozen=True)
class Requirements:
    """Requirements declared by a symbol's doc-comment.

    line_offsets maps a requirement key (``php_version``, ``os``,
    ``setting:<name>``, ``extension:<name>``, ``function:<name>``) to the
    source line the tag was read from.
    """

    file_path: str
    versions: Mapping[str, VersionRequirement | ConstraintRequirement] = field(
        default_factory=dict
    )
    os: str | None = None
    os_family: str | None = None
    settings: Mapping[str, str] = field(default_factory=dict)
    functions: tuple[str, ...] = ()
    extensions: tuple[str, ...] = ()
    extension_versions: Mapping[str, VersionRequirement] = field(default_factory=dict)
    line_offsets: Mapping[str, int] = field(default_factory=dict)

    def is_empty(self) -> bool:
        return not (
            self.versions
            or self.os
            or self.os_family
            or self.settings
            or self.functions
            or self.extensions
        )

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {"file": self.file_path}
        for kind, requirement in self.versions.items():
            result[kind] = requirement.to_dict()
        if self.os is not None:
            result["os"] = self.os
        if self.os_family is not None:
            result["os_family"] = self.os_family
        if self.settings:
            result["settings"] = dict(self.settings)
        if self.functions:
            result["functions"] = list(self.functions)
        if self.extensions:
            result["extensions"] = list(self.extensions)
        if self.extension_versions:
            result["extension_versions"] = {
                name: req.to_dict() for name, req in self.extension_versions.items()
            }
        result["line_offsets"] = dict(self.line_offsets)
        return result


# =============================================================================
# Expected exception (legacy tags)
# =============================================================================


@dataclass(frozen=True)
class ExpectedException:
    type_name: str
    code: int | str | None = None  # str when a constant reference could not be resolved
    message: str = ""
    message_pattern: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "class": self.type_name,
            "code": self.code,
            "message": self.message,
            "message_regex": self.message_pattern,
        }


# =============================================================================
# Provided data
# =============================================================================

Row = Sequence[Any] | Mapping[str, Any]


@dataclass(frozen=True)
class NamedRow:
    """Yielded by a generator provider to give a row a data set name."""

    name: str
    row: Any


@dataclass(frozen=True)
class DataSet:
    """One row of arguments for one parameterized invocation."""

    key: int | str
    arguments: Row

    @property
    def is_keyed(self) -> bool:
        return isinstance(self.key, str)

    @property
    def label(self) -> str:
        return f'"{self.key}"' if self.is_keyed else f"#{self.key}"


@dataclass(frozen=True)
class ProvidedData:
    """Ordered data sets for a parameterized test."""

    data_sets: tuple[DataSet, ...] = ()

    def __iter__(self) -> Iterator[DataSet]:
        return iter(self.data_sets)

    def __len__(self) -> int:
        return len(self.data_sets)

    def as_dict(self) -> dict[int | str, Row]:
        return {ds.key: ds.arguments for ds in self.data_sets}

    def to_list(self) -> list[dict[str, Any]]:
        """Rows in order; int keys are positional, str keys named."""
        return [{"key": ds.key, "arguments": _plain(ds.arguments)} for ds in self.data_sets]


def _plain(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


# =============================================================================
# Inline annotations
# =============================================================================


@dataclass(frozen=True)
class InlineAnnotation:
    """``/** @name value */`` found on a single source line."""

    line: int
    value: str

    def to_dict(self) -> dict[str, Any]:
        return {"line": self.line, "value": self.value}

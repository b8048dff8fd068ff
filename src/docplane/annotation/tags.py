"""Generic ``@name value`` tag tables for a symbol.

A type-level symbol inherits the tags of its composed traits: trait tags are
collected first in declaration order, the symbol's own tags are appended
after them. Nothing is dropped when the same tag appears in both.
"""

from __future__ import annotations

from typing import Any

from docplane.annotation.models import SymbolDescriptor
from docplane.annotation.patterns import GENERIC_TAG
from docplane.annotation.resolution import ConstantResolver

TagTable = dict[str, list[str]]


def strip_delimiters(doc_comment: str) -> str:
    """Drop the leading ``/**`` and trailing ``*/``."""
    return doc_comment[3:-2]


def parse_doc_block(doc_comment: str) -> TagTable:
    """Lowercased tag name -> values, in order of appearance."""
    annotations: TagTable = {}
    for m in GENERIC_TAG.finditer(strip_delimiters(doc_comment)):
        annotations.setdefault(m.group("name").lower(), []).append(m.group("value") or "")
    return annotations


def symbol_annotations(symbol: SymbolDescriptor) -> TagTable:
    """Tags of the symbol merged with those of its composed traits."""
    annotations: TagTable = {}
    sources = list(symbol.composed_trait_doc_comments) if symbol.is_type_level else []
    sources.append(symbol.doc_comment)
    for doc_comment in sources:
        for name, values in parse_doc_block(doc_comment).items():
            annotations.setdefault(name, []).extend(values)
    return annotations


def resolve_tag_content(value: str, constants: ConstantResolver | None) -> Any:
    """Substitute ``Type::CONST`` with the constant's value when it is defined.

    Anything else, including undefined constants, is returned verbatim.
    """
    if constants is None or value.count("::") != 1:
        return value
    resolved = constants.try_resolve_constant(value)
    return value if resolved is None else resolved

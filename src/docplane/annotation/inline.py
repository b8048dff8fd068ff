"""Per-line ``/** @name value */`` comments inside a symbol's source range."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from docplane.annotation.models import InlineAnnotation, SymbolDescriptor
from docplane.annotation.patterns import INLINE_TAG


def read_source_lines(symbol: SymbolDescriptor) -> Sequence[str]:
    """Lines of the symbol's file, split on line breaks only.

    Form feeds and other characters ``str.splitlines`` treats as breaks stay
    inside their line so line numbers match the file.

    Raises:
        OSError: The file cannot be read.
        UnicodeDecodeError: The file is not UTF-8.
    """
    if symbol.source_lines is not None:
        return symbol.source_lines
    text = Path(symbol.file_path).read_text(encoding="utf-8")
    return text.removesuffix("\n").split("\n")


def extract_inline_annotations(
    symbol: SymbolDescriptor,
    source_lines: Sequence[str] | None = None,
) -> dict[str, InlineAnnotation]:
    """Lowercased tag name -> last annotation found between start and end line.

    ``source_lines`` are the whole file's lines; line numbers are 1-based.
    """
    lines = source_lines if source_lines is not None else read_source_lines(symbol)
    annotations: dict[str, InlineAnnotation] = {}

    for line_number in range(symbol.start_line, symbol.end_line + 1):
        if not 1 <= line_number <= len(lines):
            continue
        m = INLINE_TAG.search(lines[line_number - 1])
        if m:
            annotations[m.group("name").lower()] = InlineAnnotation(
                line=line_number,
                value=m.group("value") or "",
            )

    return annotations

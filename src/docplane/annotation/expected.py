"""Legacy ``@expectedException`` tags."""

from __future__ import annotations

import re
from typing import Any

import structlog

from docplane.annotation.models import ExpectedException, SymbolDescriptor
from docplane.annotation.patterns import EXPECTED_EXCEPTION
from docplane.annotation.resolution import ConstantResolver
from docplane.annotation.tags import (
    parse_doc_block,
    resolve_tag_content,
    strip_delimiters,
    symbol_annotations,
)

logger = structlog.get_logger()

_INTEGER = re.compile(r"^\s*[+-]?\d+\s*$")
_NUMERIC = re.compile(r"^\s*[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?\s*$")


def extract_expected_exception(
    symbol: SymbolDescriptor,
    constants: ConstantResolver | None = None,
) -> ExpectedException | None:
    """Expected exception declared by the symbol, or None.

    ``@expectedException Type [message] [code]`` wins field by field over
    the separate ``@expectedExceptionMessage``, ``@expectedExceptionMessageRegExp``
    and ``@expectedExceptionCode`` tags. A message containing spaces must be
    double-quoted.
    """
    m = EXPECTED_EXCEPTION.search(strip_delimiters(symbol.doc_comment))
    if m is None:
        return None

    own = parse_doc_block(symbol.doc_comment)
    merged = symbol_annotations(symbol)

    def tagged(name: str) -> Any | None:
        # The symbol's own tag replaces any inherited from a trait
        values = own.get(name.lower()) or merged.get(name.lower())
        if not values:
            return None
        return resolve_tag_content(values[0], constants)

    message: Any = ""
    if m.group("message") is not None:
        message = _unquote(m.group("message").strip())
    elif (value := tagged("expectedExceptionMessage")) is not None:
        message = value

    message_pattern = tagged("expectedExceptionMessageRegExp") or ""

    code: Any = None
    if m.group("code") is not None:
        code = m.group("code")
    elif (value := tagged("expectedExceptionCode")) is not None:
        code = value

    expected = ExpectedException(
        type_name=m.group("name"),
        code=_normalize_code(code, constants),
        message=str(message),
        message_pattern=str(message_pattern),
    )
    logger.debug(
        "expected_exception_extracted",
        symbol=symbol.qualified_name,
        type=expected.type_name,
    )
    return expected


def _unquote(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] == '"':
        return text[1:-1].replace('\\"', '"')
    return text


def _normalize_code(code: Any, constants: ConstantResolver | None) -> int | str | None:
    if code is None or isinstance(code, int):
        return code
    if isinstance(code, float):
        return int(code)
    text = str(code)
    if _INTEGER.match(text):
        return int(text)
    if _NUMERIC.match(text):
        return int(float(text))
    if constants is not None:
        resolved = constants.try_resolve_constant(text)
        if isinstance(resolved, (int, float)):
            return int(resolved)
    return text

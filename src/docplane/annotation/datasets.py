"""Data sets for parameterized tests.

Two sources, tried in order:

1. ``@dataProvider`` references, resolved and invoked through a
   ``SymbolResolver``. Several tags concatenate in tag order.
2. ``@testWith`` followed by one JSON array literal per line.

``None`` means the symbol is not parameterized. A provider that returns
no rows at all raises ``SkipTest``.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

import structlog

from docplane.annotation.models import DataSet, NamedRow, ProvidedData, SymbolDescriptor
from docplane.annotation.patterns import DATA_PROVIDER, TEST_WITH
from docplane.annotation.resolution import SymbolResolver
from docplane.core.errors import DataSetError, ResolutionError, SkipTest

logger = structlog.get_logger()

_CONTINUATION = re.compile(r"\n\s*\*\s?")


def extract_provided_data(
    symbol: SymbolDescriptor,
    symbols: SymbolResolver,
) -> ProvidedData | None:
    """Resolve the data sets a symbol is parameterized with.

    Raises:
        SkipTest: Data providers were declared but produced no rows.
        DataSetError: A row is not a sequence or mapping, a ``@testWith`` row
            does not decode, or a data set name is used twice.
        ResolutionError: A provider type or member does not exist.
    """
    data = _from_data_providers(symbol, symbols)
    if data is None:
        data = _from_test_with(symbol.doc_comment)
    if data is None:
        return None

    if not data:
        raise SkipTest.empty_data_set(provider_references(symbol.doc_comment))

    for data_set in data:
        if not is_structured(data_set.arguments):
            raise DataSetError.invalid_row(data_set.key)

    return ProvidedData(data_sets=tuple(data))


def provider_references(doc_comment: str) -> list[str]:
    return [m.group("value") for m in DATA_PROVIDER.finditer(doc_comment)]


def split_provider_reference(
    reference: str, default_type: str | None
) -> tuple[str | None, str]:
    """Split ``[ns\\]Type::member`` (or ``pkg.mod.Type.member``) into type and member.

    A reference naming only the member belongs to ``default_type``.
    """
    *namespace, leaf = reference.split("\\")
    type_part, separator, member = leaf.rpartition("::")
    if not separator:
        type_part, _, member = leaf.rpartition(".")
    if not type_part:
        return default_type, member
    if namespace:
        return "\\".join([*namespace, type_part]), member
    return type_part, member


def is_structured(value: Any) -> bool:
    if isinstance(value, Mapping):
        return True
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


class _DataSetCollector:
    """Merges provider results; integer keys renumber, names must stay unique."""

    def __init__(self) -> None:
        self.data_sets: list[DataSet] = []
        self._names: set[str] = set()
        self._next_index = 0

    def add_positional(self, row: Any) -> None:
        self.data_sets.append(DataSet(key=self._next_index, arguments=row))
        self._next_index += 1

    def add_named(self, name: str, row: Any, reference: str) -> None:
        if name in self._names:
            raise DataSetError.duplicate_name(name, reference)
        self._names.add(name)
        self.data_sets.append(DataSet(key=name, arguments=row))

    def extend(self, reference: str, result: Any) -> None:
        if result is None:
            return
        if isinstance(result, Mapping):
            for key, row in result.items():
                if isinstance(key, int) and not isinstance(key, bool):
                    self.add_positional(row)
                else:
                    self.add_named(str(key), row, reference)
        elif isinstance(result, (str, bytes, bytearray)) or not isinstance(result, Iterable):
            raise DataSetError.invalid_result(reference, type(result).__name__)
        else:
            # Lists, tuples, and generators drained lazily
            for row in result:
                if isinstance(row, NamedRow):
                    self.add_named(row.name, row.row, reference)
                else:
                    self.add_positional(row)


def _from_data_providers(
    symbol: SymbolDescriptor,
    symbols: SymbolResolver,
) -> list[DataSet] | None:
    references = provider_references(symbol.doc_comment)
    if not references:
        return None

    caller = None if symbol.is_type_level else symbol.member_name
    collector = _DataSetCollector()

    for reference in references:
        type_name, member_name = split_provider_reference(reference, symbol.declaring_type_name)
        try:
            if type_name is None:
                raise ResolutionError.type_not_found(reference, "no owning type")
            owner = symbols.resolve_type(type_name)
            member = symbols.resolve_member(owner, member_name)
            instance = None if member.is_static else symbols.instantiate(owner)
        except ResolutionError as e:
            raise e.with_reference(reference) from e

        args = () if member.parameter_count == 0 else (caller,)
        before = len(collector.data_sets)
        collector.extend(reference, symbols.invoke(member, instance, args))
        logger.debug(
            "data_provider_resolved",
            provider=reference,
            symbol=symbol.qualified_name,
            rows=len(collector.data_sets) - before,
        )

    return collector.data_sets


def _clean_up_multi_line_annotation(doc_comment: str) -> str:
    """Remove the ``*`` continuation prefix so wrapped values read as plain lines."""
    doc_comment = doc_comment.replace("\r\n", "\n")
    doc_comment = _CONTINUATION.sub("\n", doc_comment)
    return doc_comment[:-1].rstrip("\n")


def _reject_object(pairs: list[tuple[str, Any]]) -> Any:
    raise ValueError("Object literals are not supported")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Unsupported literal {name}")


def _from_test_with(doc_comment: str) -> list[DataSet] | None:
    text = _clean_up_multi_line_annotation(doc_comment)
    m = TEST_WITH.search(text)
    if m is None:
        return None

    data_sets: list[DataSet] = []
    for candidate in text[m.end():].split("\n"):
        candidate = candidate.strip()
        if not candidate.startswith("["):
            break
        try:
            row = json.loads(
                candidate,
                object_pairs_hook=_reject_object,
                parse_constant=_reject_constant,
            )
        except json.JSONDecodeError as e:
            raise DataSetError.parse_error(candidate, e.msg) from e
        except ValueError as e:
            raise DataSetError.parse_error(candidate, str(e)) from e
        data_sets.append(DataSet(key=len(data_sets), arguments=row))

    if not data_sets:
        raise DataSetError.empty_literal()

    logger.debug("testwith_rows_decoded", rows=len(data_sets))
    return data_sets

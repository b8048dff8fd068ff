"""DocBlock - the questions a test runner asks about one symbol.

Each call reads the immutable descriptor and returns a fresh result;
nothing is cached between calls.
"""

from __future__ import annotations

from docplane.annotation.constraints import parse_constraint
from docplane.annotation.datasets import extract_provided_data
from docplane.annotation.expected import extract_expected_exception
from docplane.annotation.inline import extract_inline_annotations
from docplane.annotation.models import (
    ExpectedException,
    InlineAnnotation,
    ProvidedData,
    Requirements,
    SymbolDescriptor,
)
from docplane.annotation.requirements import ConstraintParser, extract_requirements
from docplane.annotation.resolution import (
    ConstantResolver,
    PythonConstantResolver,
    PythonSymbolResolver,
    SymbolResolver,
)
from docplane.annotation.tags import TagTable, symbol_annotations
from docplane.config.models import ExtractionConfig


class DocBlock:
    """Doc-block metadata for a test class, method or function."""

    def __init__(
        self,
        symbol: SymbolDescriptor,
        *,
        symbols: SymbolResolver | None = None,
        constants: ConstantResolver | None = None,
        constraint_parser: ConstraintParser = parse_constraint,
    ) -> None:
        self.symbol = symbol
        self._symbols = symbols or PythonSymbolResolver(
            search_modules=_module_of(symbol.declaring_type_name)
        )
        self._constants = constants
        self._constraint_parser = constraint_parser

    @classmethod
    def of_symbol(
        cls,
        symbol: SymbolDescriptor,
        config: ExtractionConfig | None = None,
    ) -> DocBlock:
        """DocBlock wired with the Python resolvers configured by ``config``."""
        config = config or ExtractionConfig()
        symbols = PythonSymbolResolver(
            default_module=config.default_module,
            search_modules=_module_of(symbol.declaring_type_name),
            instantiate_providers=config.instantiate_providers,
        )
        constants = PythonConstantResolver(symbols) if config.resolve_constants else None
        return cls(symbol, symbols=symbols, constants=constants)

    def requirements(self) -> Requirements:
        return extract_requirements(self.symbol, self._constraint_parser)

    def expected_exception(self) -> ExpectedException | None:
        return extract_expected_exception(self.symbol, self._constants)

    def provided_data(self) -> ProvidedData | None:
        return extract_provided_data(self.symbol, self._symbols)

    def inline_annotations(self) -> dict[str, InlineAnnotation]:
        return extract_inline_annotations(self.symbol)

    def symbol_annotations(self) -> TagTable:
        return symbol_annotations(self.symbol)


def _module_of(type_name: str | None) -> tuple[str, ...]:
    if not type_name:
        return ()
    module, _, _ = type_name.replace("\\", ".").rpartition(".")
    return (module,) if module else ()

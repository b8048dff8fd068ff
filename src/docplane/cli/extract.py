"""docplane query commands - requirements, expected-exception, data, inline, extract."""

from __future__ import annotations

import json
import sys
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
import structlog
import yaml

from docplane.annotation.docblock import DocBlock
from docplane.cli.descriptors import load_descriptors
from docplane.config.models import DocPlaneConfig
from docplane.core.errors import DocPlaneError, InternalError, RequirementWarning, SkipTest
from docplane.core.logging import begin_symbol, end_symbol

logger = structlog.get_logger()


def _requirements(doc: DocBlock) -> Any:
    return doc.requirements().to_dict()


def _expected_exception(doc: DocBlock) -> Any:
    expected = doc.expected_exception()
    return expected.to_dict() if expected else None


def _data(doc: DocBlock) -> Any:
    data = doc.provided_data()
    return data.to_list() if data is not None else None


def _inline(doc: DocBlock) -> Any:
    return {name: a.to_dict() for name, a in doc.inline_annotations().items()}


QUERIES: dict[str, Callable[[DocBlock], Any]] = {
    "requirements": _requirements,
    "expected_exception": _expected_exception,
    "data": _data,
    "inline": _inline,
}


def run_query(doc: DocBlock, query: str) -> tuple[Any, bool]:
    """Result for one query plus whether it failed fatally."""
    try:
        return QUERIES[query](doc), False
    except SkipTest as e:
        return {"skipped": True, "reason": e.message}, False
    except RequirementWarning as e:
        return {"warning": e.to_dict()}, False
    except DocPlaneError as e:
        logger.error("extraction_failed", query=query, error=e.error_name, message=e.message)
        return {"error": e.to_dict()}, True
    except (OSError, UnicodeDecodeError) as e:
        err = InternalError.unexpected(str(e), query=query)
        logger.error("extraction_failed", query=query, error=err.error_name, message=str(e))
        return {"error": err.to_dict()}, True


def _emit(config: DocPlaneConfig, output_format: str | None, payload: Any) -> None:
    # Provider rows may hold arbitrary objects; repr() them for output
    if (output_format or config.output.format) == "yaml":
        plain = json.loads(json.dumps(payload, default=repr))
        click.echo(yaml.safe_dump(plain, sort_keys=False), nl=False)
    else:
        click.echo(json.dumps(payload, indent=config.output.indent or None, default=repr))


def _make_command(name: str, queries: tuple[str, ...], help_text: str) -> click.Command:
    @click.command(name=name, help=help_text)
    @click.argument(
        "descriptor",
        type=click.Path(exists=True, dir_okay=False, path_type=Path),
    )
    @click.option(
        "--format",
        "output_format",
        type=click.Choice(["json", "yaml"]),
        default=None,
        help="Output format (default from config)",
    )
    @click.option(
        "-I",
        "--import-path",
        "import_paths",
        multiple=True,
        type=click.Path(exists=True, file_okay=False, path_type=Path),
        help="Directory to make importable for data provider lookup",
    )
    @click.pass_context
    def command(
        ctx: click.Context,
        descriptor: Path,
        output_format: str | None,
        import_paths: tuple[Path, ...],
    ) -> None:
        config: DocPlaneConfig = ctx.obj["config"]
        for import_path in import_paths:
            if str(import_path.resolve()) not in sys.path:
                sys.path.insert(0, str(import_path.resolve()))

        results = []
        failed = False
        for symbol in load_descriptors(descriptor):
            begin_symbol(symbol.qualified_name)
            try:
                doc = DocBlock.of_symbol(symbol, config.extraction)
                entry: dict[str, Any] = {"symbol": symbol.qualified_name}
                for query in queries:
                    entry[query], query_failed = run_query(doc, query)
                    failed = failed or query_failed
                logger.debug("symbol_extracted", queries=len(queries))
            finally:
                end_symbol()
            results.append(entry)

        _emit(config, output_format, results)
        if failed:
            ctx.exit(1)

    return command


requirements_command = _make_command(
    "requirements", ("requirements",), "Show @requires metadata for each symbol in DESCRIPTOR."
)
expected_exception_command = _make_command(
    "expected-exception",
    ("expected_exception",),
    "Show legacy @expectedException metadata for each symbol in DESCRIPTOR.",
)
data_command = _make_command(
    "data", ("data",), "Resolve @dataProvider / @testWith data sets for each symbol in DESCRIPTOR."
)
inline_command = _make_command(
    "inline", ("inline",), "Show /** @tag */ line annotations for each symbol in DESCRIPTOR."
)
extract_command = _make_command(
    "extract", tuple(QUERIES), "Run every extraction for each symbol in DESCRIPTOR."
)

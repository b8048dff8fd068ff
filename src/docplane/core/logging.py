"""Structured logging for extraction runs.

Records emitted while a symbol is being extracted carry the symbol's
qualified name and a short extraction id, so interleaved output from one
run can be split back per symbol. Each configured output gets its own
level and renderer.
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO
from uuid import uuid4

import structlog

if TYPE_CHECKING:
    from docplane.config.models import LoggingConfig, LogOutputConfig

_extraction_id: ContextVar[str | None] = ContextVar("extraction_id", default=None)


def current_extraction_id() -> str | None:
    return _extraction_id.get()


def begin_symbol(symbol: str) -> str:
    """Tag every following record with ``symbol`` and a fresh extraction id."""
    extraction_id = uuid4().hex[:12]
    _extraction_id.set(extraction_id)
    structlog.contextvars.bind_contextvars(symbol=symbol)
    return extraction_id


def end_symbol() -> None:
    _extraction_id.set(None)
    structlog.contextvars.unbind_contextvars("symbol")


def _add_extraction_id(
    _logger: structlog.types.WrappedLogger,
    _method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    if extraction_id := current_extraction_id():
        event_dict["extraction_id"] = extraction_id
    return event_dict


def configure_logging(config: LoggingConfig) -> None:
    """Route structlog through stdlib logging, one handler per configured output."""
    root_level = getattr(logging, config.level)

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S", key="timestamp"),
        _add_extraction_id,  # type: ignore[list-item]
    ]

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(root_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        # The CLI reconfigures per invocation; cached loggers would keep the old level
        cache_logger_on_first_use=False,
    )

    root_logger = logging.getLogger()
    for handler in root_logger.handlers:
        handler.close()
    root_logger.handlers.clear()
    root_logger.setLevel(root_level)

    for output in config.outputs:
        root_logger.addHandler(_create_handler(output, config.level, shared_processors))


def _create_handler(
    output: LogOutputConfig,
    default_level: str,
    shared_processors: list[structlog.types.Processor],
) -> logging.Handler:
    stream: TextIO | None = {"stderr": sys.stderr, "stdout": sys.stdout}.get(output.destination)
    handler: logging.Handler
    if stream is not None:
        handler = logging.StreamHandler(stream)
    else:
        path = Path(output.destination)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, mode="a", encoding="utf-8")

    renderer: structlog.types.Processor
    if output.format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=stream is not None and stream.isatty(),
            pad_event_to=0,
            pad_level=False,
        )

    handler.setLevel(getattr(logging, output.level or default_level))
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared_processors)
    )
    return handler

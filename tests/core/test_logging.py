"""Tests for structured logging."""

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog

from docplane.config.models import LoggingConfig, LogOutputConfig
from docplane.core.logging import (
    begin_symbol,
    configure_logging,
    current_extraction_id,
    end_symbol,
)


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    yield
    for handler in logging.getLogger().handlers:
        handler.close()
    logging.getLogger().handlers.clear()
    end_symbol()


def _file_output(path: Path, fmt: str = "json", level: str | None = None) -> LogOutputConfig:
    return LogOutputConfig(format=fmt, destination=str(path), level=level)


class TestSymbolContext:
    """Per-symbol extraction ids."""

    def test_given_symbol_when_begun_then_fresh_id(self) -> None:
        # When
        first = begin_symbol("FooTest::test_a")
        second = begin_symbol("FooTest::test_b")

        # Then
        assert len(first) == 12  # uuid4().hex[:12]
        assert first != second
        assert current_extraction_id() == second

    def test_given_symbol_when_ended_then_id_cleared(self) -> None:
        # Given
        begin_symbol("FooTest::test_a")

        # When
        end_symbol()

        # Then
        assert current_extraction_id() is None
        assert "symbol" not in structlog.contextvars.get_contextvars()


class TestConfigureLogging:
    def test_given_json_stderr_when_log_then_valid_json_output(
        self, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """JSON format produces valid JSON with required fields."""
        # Given
        configure_logging(LoggingConfig(level="INFO", outputs=[LogOutputConfig(format="json")]))

        # When
        structlog.get_logger().info("data_provider_resolved", provider="rows")

        # Then
        lines = [line for line in capsys.readouterr().err.strip().split("\n") if line]
        if lines:
            data = json.loads(lines[-1])
            assert data["event"] == "data_provider_resolved"
            assert data["provider"] == "rows"
            assert "timestamp" in data
            assert data["level"] == "info"

    def test_given_active_symbol_when_log_to_file_then_symbol_and_id_recorded(
        self, tmp_path: Path
    ) -> None:
        # Given
        log_file = tmp_path / "docplane.log"
        configure_logging(LoggingConfig(level="DEBUG", outputs=[_file_output(log_file)]))
        extraction_id = begin_symbol("FooTest::test_bar")

        # When
        structlog.get_logger().debug("requirements_extracted", count=2)
        end_symbol()
        structlog.get_logger().debug("run_finished")

        # Then
        first, second = (json.loads(line) for line in log_file.read_text().splitlines())
        assert first["symbol"] == "FooTest::test_bar"
        assert first["extraction_id"] == extraction_id
        assert "symbol" not in second
        assert "extraction_id" not in second

    def test_given_multi_output_config_when_configure_then_levels_per_output(
        self, tmp_path: Path
    ) -> None:
        """Outputs without their own level inherit the root level."""
        # Given
        debug_file = tmp_path / "debug.log"
        info_file = tmp_path / "logs" / "info.log"
        configure_logging(
            LoggingConfig(
                level="DEBUG",
                outputs=[
                    _file_output(info_file, level="INFO"),
                    _file_output(debug_file, "console"),
                ],
            )
        )
        logger = structlog.get_logger()

        # When
        logger.debug("debug only")
        logger.info("info msg")

        # Then
        info_content = info_file.read_text()
        assert "info msg" in info_content
        assert "debug only" not in info_content
        debug_content = debug_file.read_text()
        assert "debug only" in debug_content
        assert "info msg" in debug_content

    def test_given_reconfigured_when_log_then_old_handlers_replaced(self, tmp_path: Path) -> None:
        # Given
        old_file = tmp_path / "old.log"
        new_file = tmp_path / "new.log"
        configure_logging(LoggingConfig(level="INFO", outputs=[_file_output(old_file)]))

        # When
        configure_logging(LoggingConfig(level="INFO", outputs=[_file_output(new_file)]))
        structlog.get_logger().info("after_reconfigure")

        # Then
        assert len(logging.getLogger().handlers) == 1
        assert "after_reconfigure" not in old_file.read_text()
        assert "after_reconfigure" in new_file.read_text()

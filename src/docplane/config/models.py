"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (DOCPLANE__SECTION__KEY)
3. Project YAML (.docplane/config.yaml)
4. Global YAML (~/.config/docplane/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    DOCPLANE__<SECTION>__<KEY>=<VALUE>

Examples:
    DOCPLANE__LOGGING__LEVEL=DEBUG
    DOCPLANE__EXTRACTION__DEFAULT_MODULE=tests.providers
    DOCPLANE__OUTPUT__FORMAT=yaml
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        DOCPLANE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. DEBUG traces every recorded tag.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ExtractionConfig(BaseModel):
    """Doc-block extraction behaviour.

    Env vars:
        DOCPLANE__EXTRACTION__RESOLVE_CONSTANTS: Resolve Type::CONST tag values
        DOCPLANE__EXTRACTION__INSTANTIATE_PROVIDERS: Construct owners of non-static providers
        DOCPLANE__EXTRACTION__DEFAULT_MODULE: Module searched for unqualified provider types
    """

    resolve_constants: bool = Field(
        default=True,
        description="Resolve 'Type::CONST' values in expected exception tags. "
        "When off, the literal text is used.",
    )
    instantiate_providers: bool = Field(
        default=True,
        description="Construct the owning type (no arguments) before calling a "
        "non-static data provider. When off, such providers fail to resolve.",
    )
    default_module: str | None = Field(
        default=None,
        description="Module searched first for provider types given without a module path.",
    )


class OutputConfig(BaseModel):
    """CLI output configuration.

    Env vars:
        DOCPLANE__OUTPUT__FORMAT: json or yaml
        DOCPLANE__OUTPUT__INDENT: Indentation width for JSON output
    """

    format: Literal["json", "yaml"] = "json"
    indent: int = Field(default=2, description="JSON indentation width.")

    @field_validator("indent")
    @classmethod
    def validate_indent(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"Indent must be >= 0, got {v}")
        return v


class DocPlaneConfig(BaseModel):
    """Root configuration for DocPlane.

    All settings can be configured via:
    1. Environment variables: DOCPLANE__SECTION__KEY
    2. YAML config files (project or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    extraction: ExtractionConfig = Field(default_factory=ExtractionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

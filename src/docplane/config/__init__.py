"""Config module exports."""

from docplane.config.loader import DocPlaneSettings, load_config
from docplane.config.models import (
    DocPlaneConfig,
    ExtractionConfig,
    LoggingConfig,
    OutputConfig,
)

__all__ = [
    "load_config",
    "DocPlaneConfig",
    "DocPlaneSettings",
    "ExtractionConfig",
    "LoggingConfig",
    "OutputConfig",
]

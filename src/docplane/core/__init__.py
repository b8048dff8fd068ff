"""Core module exports."""

from docplane.core.errors import (
    ConfigError,
    DataSetError,
    DocPlaneError,
    ErrorCode,
    InternalError,
    RequirementWarning,
    ResolutionError,
    SkipTest,
)
from docplane.core.logging import (
    begin_symbol,
    configure_logging,
    current_extraction_id,
    end_symbol,
)

__all__ = [
    # Errors
    "DocPlaneError",
    "ConfigError",
    "DataSetError",
    "ErrorCode",
    "InternalError",
    "RequirementWarning",
    "ResolutionError",
    "SkipTest",
    # Logging
    "begin_symbol",
    "configure_logging",
    "current_extraction_id",
    "end_symbol",
]

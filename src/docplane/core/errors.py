"""DocPlane error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Requirement
- 4xxx: Data set
- 5xxx: Resolution
- 6xxx: Control (skip signals)
- 9xxx: Internal
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Requirement (3xxx)
    REQUIREMENT_MALFORMED_CONSTRAINT = 3001

    # Data set (4xxx)
    DATA_SET_INVALID_ROW = 4001
    DATA_SET_PARSE_ERROR = 4002
    DATA_SET_EMPTY_LITERAL = 4003
    DATA_SET_DUPLICATE_NAME = 4004

    # Resolution (5xxx)
    PROVIDER_TYPE_NOT_FOUND = 5001
    PROVIDER_MEMBER_NOT_FOUND = 5002
    PROVIDER_INSTANTIATION_FAILED = 5003

    # Control (6xxx)
    TEST_SKIPPED = 6001

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class DocPlaneError(Exception):
    """Base error with structured context for runner reports."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'DATA_SET_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON/YAML reports."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(DocPlaneError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class RequirementWarning(DocPlaneError):
    """A requirement could not be evaluated. The runner warns and skips that check."""

    @classmethod
    def malformed_constraint(
        cls, name: str, expression: str, reason: str
    ) -> "RequirementWarning":
        return cls(
            code=ErrorCode.REQUIREMENT_MALFORMED_CONSTRAINT,
            message=reason,
            details={"requirement": name, "constraint": expression},
        )


class DataSetError(DocPlaneError):
    """Structural problems with provided data. Fatal for the symbol."""

    @classmethod
    def invalid_row(cls, key: int | str) -> "DataSetError":
        label = f"#{key}" if isinstance(key, int) else f'"{key}"'
        return cls(
            code=ErrorCode.DATA_SET_INVALID_ROW,
            message=f"Data set {label} is invalid.",
            details={"key": key},
        )

    @classmethod
    def invalid_result(cls, provider: str, type_name: str) -> "DataSetError":
        return cls(
            code=ErrorCode.DATA_SET_INVALID_ROW,
            message=f'Data provider "{provider}" must return data sets, got {type_name}.',
            details={"provider": provider, "type": type_name},
        )

    @classmethod
    def parse_error(cls, row: str, reason: str) -> "DataSetError":
        return cls(
            code=ErrorCode.DATA_SET_PARSE_ERROR,
            message=f"The data set for the @testWith annotation cannot be parsed: {reason}",
            details={"row": row, "reason": reason},
        )

    @classmethod
    def empty_literal(cls) -> "DataSetError":
        return cls(
            code=ErrorCode.DATA_SET_EMPTY_LITERAL,
            message="The data set for the @testWith annotation cannot be parsed.",
        )

    @classmethod
    def duplicate_name(cls, name: str, provider: str) -> "DataSetError":
        return cls(
            code=ErrorCode.DATA_SET_DUPLICATE_NAME,
            message=(
                f'The key "{name}" has already been defined in the data provider "{provider}".'
            ),
            details={"key": name, "provider": provider},
        )


class ResolutionError(DocPlaneError):
    """A data provider reference could not be resolved to something callable."""

    @classmethod
    def type_not_found(cls, type_name: str, reason: str) -> "ResolutionError":
        return cls(
            code=ErrorCode.PROVIDER_TYPE_NOT_FOUND,
            message=f'Class "{type_name}" does not exist: {reason}',
            details={"type": type_name, "reason": reason},
        )

    @classmethod
    def member_not_found(cls, type_name: str, member: str) -> "ResolutionError":
        return cls(
            code=ErrorCode.PROVIDER_MEMBER_NOT_FOUND,
            message=f"Method {type_name}::{member}() does not exist",
            details={"type": type_name, "member": member},
        )

    @classmethod
    def instantiation_failed(cls, type_name: str, reason: str) -> "ResolutionError":
        return cls(
            code=ErrorCode.PROVIDER_INSTANTIATION_FAILED,
            message=f"Cannot instantiate {type_name}: {reason}",
            details={"type": type_name, "reason": reason},
        )

    def with_reference(self, reference: str) -> "ResolutionError":
        """Copy of this error carrying the provider reference that triggered it."""
        return type(self)(
            code=self.code,
            message=f'{self.message} (data provider "{reference}")',
            retryable=self.retryable,
            details={**self.details, "provider": reference},
        )


class SkipTest(DocPlaneError):
    """Control signal: the data providers explicitly returned no rows."""

    @classmethod
    def empty_data_set(cls, providers: list[str] | None = None) -> "SkipTest":
        return cls(
            code=ErrorCode.TEST_SKIPPED,
            message="Data provider returned an empty data set",
            details={"providers": providers or []},
        )


class InternalError(DocPlaneError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )

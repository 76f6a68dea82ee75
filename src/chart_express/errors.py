"""Canonical error taxonomy for chart construction and export."""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional


class ErrorCode(str, Enum):
    """Bounded error codes raised by the shorthand layer."""

    UNSUPPORTED_DATA = "UNSUPPORTED_DATA"
    FIELD_NOT_FOUND = "FIELD_NOT_FOUND"
    MISSING_FIELD_TYPE = "MISSING_FIELD_TYPE"
    INVALID_SHORTHAND = "INVALID_SHORTHAND"
    INVALID_OPTION = "INVALID_OPTION"
    CHART_VALIDATION = "CHART_VALIDATION"
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
    UNKNOWN_DATASET = "UNKNOWN_DATASET"
    UNKNOWN_SECTION = "UNKNOWN_SECTION"
    INTERNAL_ERROR = "INTERNAL_ERROR"


_CODE_GROUPS: dict[ErrorCode, str] = {
    ErrorCode.UNSUPPORTED_DATA: "DATA",
    ErrorCode.FIELD_NOT_FOUND: "DATA",
    ErrorCode.MISSING_FIELD_TYPE: "ENCODING",
    ErrorCode.INVALID_SHORTHAND: "ENCODING",
    ErrorCode.INVALID_OPTION: "ENCODING",
    ErrorCode.CHART_VALIDATION: "RENDER",
    ErrorCode.UNSUPPORTED_FORMAT: "RENDER",
    ErrorCode.UNKNOWN_DATASET: "LOOKUP",
    ErrorCode.UNKNOWN_SECTION: "LOOKUP",
    ErrorCode.INTERNAL_ERROR: "INTERNAL",
}


def parse_error_code(
    value: Any,
    *,
    fallback: ErrorCode = ErrorCode.INTERNAL_ERROR,
) -> ErrorCode:
    """Parse string-like values to `ErrorCode` with safe fallback."""
    if isinstance(value, ErrorCode):
        return value
    if value is None:
        return fallback
    try:
        return ErrorCode(str(value).strip())
    except ValueError:
        return fallback


def error_code_group(value: Any) -> str:
    """Return a stable coarse grouping for an error code."""
    parsed = parse_error_code(value)
    return _CODE_GROUPS.get(parsed, "INTERNAL")


class ChartExpressError(ValueError):
    """Base error for the shorthand layer.

    Args:
        message: Human readable description.
        details: Optional structured context (field names, options).
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def group(self) -> str:
        return error_code_group(self.code)

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for CLI output and logs."""
        return {
            "code": self.code.value,
            "group": self.group,
            "message": self.message,
            "details": self.details,
        }


class UnsupportedDataError(ChartExpressError):
    code = ErrorCode.UNSUPPORTED_DATA


class FieldNotFoundError(ChartExpressError):
    code = ErrorCode.FIELD_NOT_FOUND


class MissingFieldTypeError(ChartExpressError):
    code = ErrorCode.MISSING_FIELD_TYPE


class InvalidShorthandError(ChartExpressError):
    code = ErrorCode.INVALID_SHORTHAND


class InvalidOptionError(ChartExpressError):
    code = ErrorCode.INVALID_OPTION


class ChartValidationError(ChartExpressError):
    code = ErrorCode.CHART_VALIDATION


class UnsupportedFormatError(ChartExpressError):
    code = ErrorCode.UNSUPPORTED_FORMAT


class UnknownDatasetError(ChartExpressError):
    code = ErrorCode.UNKNOWN_DATASET


class UnknownSectionError(ChartExpressError):
    code = ErrorCode.UNKNOWN_SECTION

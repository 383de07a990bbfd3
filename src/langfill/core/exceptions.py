"""
Basic exception classes for langfill.

This module contains fundamental exception classes that are used throughout
the codebase without creating import cycles.
"""

from __future__ import annotations

from enum import Enum


class ErrorSeverity(Enum):
    """Error severity levels for classification and handling."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Categories of errors for appropriate handling strategies."""

    ENCODING = "encoding"
    DECODING = "decoding"
    TRANSLATION = "translation"
    CONFIGURATION = "configuration"
    UNKNOWN = "unknown"


class LangfillError(Exception):
    """Base exception class for langfill specific errors."""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.UNKNOWN,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: object | None = None,
        recoverable: bool = True,
    ) -> None:
        super().__init__(message)
        self.category: ErrorCategory = category
        self.severity: ErrorSeverity = severity
        self.context: object | None = context
        self.recoverable: bool = recoverable


class DecodeError(LangfillError):
    """Bytes that cannot be decoded with the resolved encoding."""

    def __init__(
        self,
        message: str,
        language: str | None = None,
        key: str | None = None,
        encoding: str | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.DECODING,
            severity=ErrorSeverity.MEDIUM,
            context={"language": language, "key": key, "encoding": encoding},
            recoverable=True,
        )
        self.language: str | None = language
        self.key: str | None = key
        self.encoding: str | None = encoding


class EncodingUndetectableError(LangfillError):
    """Auto-detection found no encoding and the caller supplied none."""

    def __init__(self, language: str) -> None:
        super().__init__(
            f"Cannot detect the encoding of the {language} translation; "
            + "supply one explicitly",
            category=ErrorCategory.ENCODING,
            severity=ErrorSeverity.HIGH,
            context={"language": language},
            recoverable=False,
        )
        self.language: str = language


class TranslationServiceError(LangfillError):
    """Failures of the external translation call."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.TRANSLATION,
            severity=ErrorSeverity.MEDIUM,
            context=context,
            recoverable=True,
        )
        self.status_code: int | None = status_code


class ConfigurationError(LangfillError):
    """Configuration-related errors."""

    def __init__(
        self,
        message: str,
        context: object | None = None,
    ) -> None:
        super().__init__(
            message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.HIGH,
            recoverable=False,
            context=context,
        )

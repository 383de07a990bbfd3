"""
Tests for the langfill exception hierarchy.
"""

from __future__ import annotations

from langfill.core.exceptions import (
    ConfigurationError,
    DecodeError,
    EncodingUndetectableError,
    ErrorCategory,
    ErrorSeverity,
    LangfillError,
    TranslationServiceError,
)


class TestExceptionHierarchy:
    """Test categories, severities and context of each error."""

    def test_base_defaults(self) -> None:
        """Test the base error defaults."""
        error = LangfillError("something failed")

        assert str(error) == "something failed"
        assert error.category is ErrorCategory.UNKNOWN
        assert error.severity is ErrorSeverity.MEDIUM
        assert error.context is None
        assert error.recoverable

    def test_decode_error(self) -> None:
        """Test that decode errors identify their key."""
        error = DecodeError("bad bytes", language="ja", key="title", encoding="euc-jp")

        assert isinstance(error, LangfillError)
        assert error.category is ErrorCategory.DECODING
        assert error.recoverable
        assert error.context == {"language": "ja", "key": "title", "encoding": "euc-jp"}

    def test_encoding_undetectable(self) -> None:
        """Test that undetectable encodings stop the language."""
        error = EncodingUndetectableError("ko")

        assert error.language == "ko"
        assert error.category is ErrorCategory.ENCODING
        assert error.severity is ErrorSeverity.HIGH
        assert not error.recoverable
        assert "ko" in str(error)

    def test_translation_service_error(self) -> None:
        """Test the status code of service errors."""
        error = TranslationServiceError("HTTP 429", 429)

        assert error.status_code == 429
        assert error.category is ErrorCategory.TRANSLATION
        assert error.recoverable

    def test_configuration_error(self) -> None:
        """Test that configuration errors are not recoverable."""
        error = ConfigurationError("missing project")

        assert error.category is ErrorCategory.CONFIGURATION
        assert not error.recoverable

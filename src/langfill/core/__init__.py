"""
Core building blocks shared by every langfill component.
"""

from .exceptions import (
    ConfigurationError,
    DecodeError,
    EncodingUndetectableError,
    ErrorCategory,
    ErrorSeverity,
    LangfillError,
    TranslationServiceError,
)
from .language_file import (
    LanguageFile,
    parse_language_file,
    read_language_file,
    serialize_language_file,
    write_language_file,
)

__all__ = [
    "ConfigurationError",
    "DecodeError",
    "EncodingUndetectableError",
    "ErrorCategory",
    "ErrorSeverity",
    "LangfillError",
    "LanguageFile",
    "TranslationServiceError",
    "parse_language_file",
    "read_language_file",
    "serialize_language_file",
    "write_language_file",
]

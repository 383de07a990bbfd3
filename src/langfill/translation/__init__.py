"""
Translation call and the per-language fill pipeline.
"""

from .client import (
    TranslateFunction,
    TranslationClient,
    escape_outside_markers,
    mime_type_for,
)
from .pipeline import (
    FillResult,
    fill_language,
    load_human_translations,
    read_legacy_file,
    translate_value,
)

__all__ = [
    "FillResult",
    "TranslateFunction",
    "TranslationClient",
    "escape_outside_markers",
    "fill_language",
    "load_human_translations",
    "mime_type_for",
    "read_legacy_file",
    "translate_value",
]

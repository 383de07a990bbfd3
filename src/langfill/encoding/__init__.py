"""
Encoding resolution and transcoding of legacy translated files.
"""

from .resolver import (
    DEFAULT_ENCODING,
    LEGACY_ENCODINGS,
    AutoDetect,
    EncodingMode,
    EncodingProfile,
    EncodingResolver,
    EncodingSource,
    EncodingStrategy,
    ExplicitTable,
    FixedDefault,
    ResolvedEncoding,
    resolve_encoding,
)
from .transcoder import (
    DecodedLanguageFile,
    canonicalize,
    decode_language_file,
    is_ascii_compatible,
    transcode,
)

__all__ = [
    "DEFAULT_ENCODING",
    "LEGACY_ENCODINGS",
    "AutoDetect",
    "DecodedLanguageFile",
    "EncodingMode",
    "EncodingProfile",
    "EncodingResolver",
    "EncodingSource",
    "EncodingStrategy",
    "ExplicitTable",
    "FixedDefault",
    "ResolvedEncoding",
    "canonicalize",
    "decode_language_file",
    "is_ascii_compatible",
    "resolve_encoding",
    "transcode",
]

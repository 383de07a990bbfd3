"""
Transcoding of legacy language files into canonical Unicode text.

Decoding follows the resolved encoding strictly; bytes that do not fit it are
reported as DecodeError instead of being replaced. HTML and XML character
entities left behind by older editors are unescaped, and the result is
normalized to NFC so that re-applying the transcoder is a no-op.
"""

from __future__ import annotations

import codecs
import html
import logging
import re
import unicodedata
from dataclasses import dataclass, field

from ..core.exceptions import DecodeError
from ..core.language_file import LanguageFile, parse_line

logger = logging.getLogger(__name__)

BYTE_ORDER_MARK = "\ufeff"


def canonicalize(text: str) -> str:
    """Unescape character entities and normalize text to NFC."""
    if text.startswith(BYTE_ORDER_MARK):
        text = text[len(BYTE_ORDER_MARK) :]
    return unicodedata.normalize("NFC", html.unescape(text))


def transcode(data: bytes, encoding: str) -> str:
    """
    Decode raw bytes into canonical Unicode text.

    Args:
        data: Raw file bytes
        encoding: Resolved encoding name

    Returns:
        Entity-free NFC text

    Raises:
        DecodeError: If the codec is unknown or the bytes are invalid for it
    """
    try:
        text = data.decode(encoding, errors="strict")
    except LookupError as e:
        raise DecodeError(f"Unknown encoding {encoding!r}", encoding=encoding) from e
    except UnicodeDecodeError as e:
        raise DecodeError(
            f"Invalid {encoding} data at byte {e.start}: {e.reason}",
            encoding=encoding,
        ) from e
    return canonicalize(text)


@dataclass
class DecodedLanguageFile:
    """Entries decoded from a legacy language file plus per-key failures."""

    language: str
    encoding: str
    entries: LanguageFile = field(default_factory=dict)
    errors: list[DecodeError] = field(default_factory=list)

    @property
    def failed_keys(self) -> list[str]:
        """Keys whose lines could not be decoded."""
        return [error.key for error in self.errors if error.key is not None]


LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")

# Line syntax every ASCII-compatible codec encodes byte for byte
ASCII_SAMPLE = "key=value # $1 <b>\r\n"


def is_ascii_compatible(encoding: str) -> bool:
    """True when ASCII text, line breaks included, encodes to the same bytes."""
    try:
        return ASCII_SAMPLE.encode(encoding) == ASCII_SAMPLE.encode("ascii")
    except (LookupError, UnicodeError):
        return False


def _raw_key(line: bytes) -> str | None:
    key, sep, _ = line.partition(b"=")
    if not sep:
        return None
    return key.strip().decode("ascii", errors="replace") or None


def _decode_by_line(data: bytes, encoding: str, language: str) -> DecodedLanguageFile:
    result = DecodedLanguageFile(language=language, encoding=encoding)

    for number, raw_line in enumerate(data.splitlines(), start=1):
        try:
            line = transcode(raw_line, encoding)
        except DecodeError as e:
            key = _raw_key(raw_line)
            error = DecodeError(
                f"Line {number} of the {language} file: {e}",
                language=language,
                key=key,
                encoding=encoding,
            )
            logger.warning(str(error))
            result.errors.append(error)
            continue

        parsed = parse_line(line)
        if parsed is not None:
            key, value = parsed
            result.entries[key] = value

    return result


def decode_language_file(data: bytes, encoding: str, language: str) -> DecodedLanguageFile:
    """
    Decode a legacy key-value file.

    The whole file is decoded first and split into lines afterwards, which
    works for every codec including UTF-16 and UTF-32. When that fails and the
    codec is ASCII-compatible, the raw bytes are decoded line by line instead:
    an invalid line then only costs its own key, and the error is recorded
    with the language, key and encoding.

    Args:
        data: Raw file bytes
        encoding: Resolved encoding name
        language: Language code, for error context

    Returns:
        The decoded entries and the per-key decode errors

    Raises:
        DecodeError: If the encoding is unknown to Python, or the data is
            invalid for a codec that cannot be split on raw line breaks
    """
    try:
        _ = codecs.lookup(encoding)
    except LookupError as e:
        raise DecodeError(
            f"Unknown encoding {encoding!r} for {language}",
            language=language,
            encoding=encoding,
        ) from e

    try:
        text = data.decode(encoding, errors="strict")
    except UnicodeDecodeError as e:
        if not is_ascii_compatible(encoding):
            raise DecodeError(
                f"Invalid {encoding} data in the {language} file at byte {e.start}: {e.reason}",
                language=language,
                encoding=encoding,
            ) from e
        logger.debug(f"The {language} file is not valid {encoding}, decoding line by line")
        result = _decode_by_line(data, encoding, language)
    else:
        result = DecodedLanguageFile(language=language, encoding=encoding)
        for line in LINE_BREAK_RE.split(text):
            parsed = parse_line(canonicalize(line))
            if parsed is not None:
                key, value = parsed
                result.entries[key] = value

    logger.debug(
        f"Decoded {len(result.entries)} {language} entries as {encoding}, "
        + f"{len(result.errors)} failed"
    )
    return result

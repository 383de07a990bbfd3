"""
Translation pipeline for one module/language pair.

Legacy file bytes go through the EncodingResolver and the Transcoder to give
the human translations. Template strings without a human or existing
translation go through the PlaceholderGuard, the translate call and the
ResponseNormalizer. The result is a new key-value mapping; inputs are never
modified in place.
"""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Mapping
from pathlib import Path
from typing import override

from ..core.exceptions import TranslationServiceError
from ..core.language_file import LanguageFile
from ..encoding.resolver import EncodingResolver
from ..encoding.transcoder import DecodedLanguageFile, decode_language_file
from ..text.guard import guard
from ..text.normalizer import normalize
from ..text.types import TranslationFormat, placeholders
from .client import TranslateFunction

logger = logging.getLogger(__name__)


class FillResult:
    """Result of filling one language file."""

    def __init__(self, language: str) -> None:
        self.language: str = language
        self.values: LanguageFile = {}
        self.human_keys: list[str] = []
        self.kept_keys: list[str] = []
        self.translated_keys: list[str] = []
        self.failed: dict[str, Exception] = {}
        self.total_keys: int = 0

    @property
    def failure_count(self) -> int:
        """Number of keys the translate call failed for."""
        return len(self.failed)

    @property
    def success_rate(self) -> float:
        """Share of template keys that received a value, as a percentage."""
        if self.total_keys == 0:
            return 100.0
        return (len(self.values) / self.total_keys) * 100.0

    @override
    def __str__(self) -> str:
        """String representation of the fill results."""
        return (
            f"{self.language}: "
            f"{len(self.human_keys)} human, "
            f"{len(self.kept_keys)} kept, "
            f"{len(self.translated_keys)} translated, "
            f"{self.failure_count} failed "
            f"({self.success_rate:.1f}% complete)"
        )


def read_legacy_file(path: Path) -> bytes | None:
    """
    Read the raw bytes of a human-translated file.

    A missing or unreadable file means there is no human translation; it is
    not an error.

    Args:
        path: Path to the legacy file

    Returns:
        The file bytes, or None when there is nothing to read
    """
    try:
        return path.read_bytes()
    except FileNotFoundError:
        logger.debug(f"No human translation at {path}")
        return None
    except OSError as e:
        logger.warning(f"Cannot read human translation {path}: {e}")
        return None


def load_human_translations(
    path: Path, language: str, resolver: EncodingResolver
) -> DecodedLanguageFile | None:
    """
    Load and decode a legacy human-translated language file.

    Args:
        path: Path to the legacy file
        language: Language code of the file
        resolver: Encoding resolver for the run

    Returns:
        The decoded entries and per-key decode errors, or None if there is no file

    Raises:
        EncodingUndetectableError: In auto-detect mode without a usable encoding
        DecodeError: If the resolved encoding is unknown to Python
    """
    data = read_legacy_file(path)
    if data is None:
        return None

    resolved = resolver.resolve(language, data)
    if resolved.forced_fallback:
        logger.warning(f"Decoding {path} as {resolved.encoding} (forced fallback)")
    else:
        logger.info(f"Decoding {path} as {resolved.encoding} ({resolved.source.value})")

    return decode_language_file(data, resolved.encoding, language)


def translate_value(
    text: str,
    source_language: str,
    target_language: str,
    fmt: TranslationFormat,
    translate: TranslateFunction,
) -> str:
    """
    Guard, translate and normalize a single string.

    Raises:
        TranslationServiceError: If the translate call fails
    """
    guarded = guard(text, fmt)
    raw = translate(source_language, target_language, fmt, guarded)
    result = normalize(raw, text, fmt)

    if Counter(placeholders(result)) != Counter(placeholders(text)):
        logger.warning(f"Placeholders changed in translation of {text!r}: {result!r}")
    return result


def fill_language(
    template: Mapping[str, str],
    language: str,
    translate: TranslateFunction,
    *,
    existing: Mapping[str, str] | None = None,
    human: Mapping[str, str] | None = None,
    fmt: TranslationFormat = TranslationFormat.TEXT,
    source_language: str = "en",
    fail_fast: bool = False,
) -> FillResult:
    """
    Build the complete value mapping for one language.

    Keys come from the template, in template order. A human translation wins,
    then a value already present in the existing file; everything else is
    machine translated. A translate failure is recorded for its key and the
    remaining keys are still processed.

    Args:
        template: Source language mapping
        language: Target language code
        translate: External translate call
        existing: Current contents of the target file
        human: Decoded human translations
        fmt: Translation format for the run
        source_language: Language code of the template
        fail_fast: Stop at the first failed key

    Returns:
        FillResult with the new mapping and per-key outcome
    """
    existing = existing or {}
    human = human or {}
    result = FillResult(language)
    result.total_keys = len(template)

    for key, source in template.items():
        if key in human:
            result.values[key] = human[key]
            result.human_keys.append(key)
            continue
        if key in existing:
            result.values[key] = existing[key]
            result.kept_keys.append(key)
            continue
        if not source.strip():
            result.values[key] = source
            result.kept_keys.append(key)
            continue

        try:
            result.values[key] = translate_value(
                source, source_language, language, fmt, translate
            )
            result.translated_keys.append(key)
        except TranslationServiceError as e:
            logger.error(f"Failed to translate {key} into {language}: {e}")
            result.failed[key] = e
            if fail_fast:
                logger.error(f"Stopping {language} due to error in {key}")
                break

    dropped = (set(existing) | set(human)) - set(template)
    if dropped:
        logger.debug(f"Dropped {len(dropped)} {language} keys not in the template")

    logger.info(str(result))
    return result

"""
Encoding resolution for legacy translated language files.

Human translations predating the move to UTF-8 were saved in per-language
legacy charsets. This module decides which byte encoding applies to such a
file. The decision is made by a small closed set of strategies, selected by
the configured encoding mode:

    utf8-default  FixedDefault("utf-8")
    explicit      FixedDefault(code)
    legacy-map    ExplicitTable, then AutoDetect, then forced UTF-8
    auto-detect   AutoDetect, then the caller-supplied callback, else an error

Auto-detect mode never guesses: when statistical detection yields nothing and
the caller cannot supply an encoding, EncodingUndetectableError is raised.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import override

import chardet

from ..core.exceptions import ConfigurationError, EncodingUndetectableError

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"

# Historical per-language charsets, keyed by lowercase language code
LEGACY_ENCODINGS: dict[str, str] = {
    "ja": "euc-jp",
    "ko": "euc-kr",
    "zh": "gb2312",
    "zh_cn": "gb2312",
    "zh_tw": "big5",
    "ru": "koi8-r",
    "uk": "koi8-u",
    "bg": "windows-1251",
    "cs": "iso-8859-2",
    "hr": "iso-8859-2",
    "hu": "iso-8859-2",
    "pl": "iso-8859-2",
    "ro": "iso-8859-2",
    "sk": "iso-8859-2",
    "sl": "iso-8859-2",
    "tr": "iso-8859-9",
    "he": "iso-8859-8",
    "th": "tis-620",
    "el": "iso-8859-7",
    "lt": "iso-8859-13",
    "lv": "iso-8859-13",
}

UndetectableCallback = Callable[[str], str | None]


class EncodingMode(Enum):
    """How the encoding of a legacy file is chosen."""

    EXPLICIT = "explicit"
    AUTO_DETECT = "auto-detect"
    LEGACY_MAP = "legacy-map"
    UTF8_DEFAULT = "utf8-default"


class EncodingSource(Enum):
    """Which step produced a resolved encoding."""

    EXPLICIT = "explicit"
    TABLE = "table"
    DETECTED = "detected"
    DEFAULT = "default"
    FORCED_FALLBACK = "forced-fallback"
    CALLER = "caller"


@dataclass(frozen=True)
class ResolvedEncoding:
    """A concrete encoding together with the step that chose it."""

    encoding: str
    source: EncodingSource

    @property
    def forced_fallback(self) -> bool:
        """True when nothing matched and UTF-8 was forced."""
        return self.source is EncodingSource.FORCED_FALLBACK


@dataclass(frozen=True)
class EncodingProfile:
    """Encoding mode plus the explicit code it needs, resolved once per run."""

    mode: EncodingMode = EncodingMode.LEGACY_MAP
    code: str | None = None

    def __post_init__(self) -> None:
        if self.mode is EncodingMode.EXPLICIT and not self.code:
            raise ConfigurationError("Explicit encoding mode requires an encoding code")


def normalize_language_code(language: str) -> str:
    """Lowercase a language code and use ``_`` as the region separator."""
    return language.strip().lower().replace("-", "_")


class EncodingStrategy(ABC):
    """One step of an encoding resolution chain."""

    @abstractmethod
    def resolve(self, language: str, data: bytes) -> ResolvedEncoding | None:
        """
        Try to pick an encoding.

        Args:
            language: Language code of the file
            data: Raw file bytes

        Returns:
            The resolved encoding, or None when this step has no answer
        """


class FixedDefault(EncodingStrategy):
    """Always answers with the same encoding."""

    def __init__(
        self, encoding: str = DEFAULT_ENCODING, source: EncodingSource = EncodingSource.DEFAULT
    ) -> None:
        self.encoding: str = encoding
        self.source: EncodingSource = source

    @override
    def resolve(self, language: str, data: bytes) -> ResolvedEncoding | None:
        return ResolvedEncoding(self.encoding, self.source)


class ExplicitTable(EncodingStrategy):
    """Looks the language up in the legacy charset table."""

    def __init__(self, table: Mapping[str, str] | None = None) -> None:
        merged = dict(LEGACY_ENCODINGS)
        if table:
            merged.update(
                {normalize_language_code(code): enc for code, enc in table.items()}
            )
        self.table: dict[str, str] = merged

    def lookup(self, language: str) -> str | None:
        """Find the charset for a code, falling back from region to base language."""
        code = normalize_language_code(language)
        if code in self.table:
            return self.table[code]
        base = code.split("_", 1)[0]
        return self.table.get(base)

    @override
    def resolve(self, language: str, data: bytes) -> ResolvedEncoding | None:
        encoding = self.lookup(language)
        if encoding is None:
            return None
        return ResolvedEncoding(encoding, EncodingSource.TABLE)


class AutoDetect(EncodingStrategy):
    """Statistical charset detection over the file bytes."""

    def __init__(self, min_confidence: float = 0.0) -> None:
        self.min_confidence: float = min_confidence

    @override
    def resolve(self, language: str, data: bytes) -> ResolvedEncoding | None:
        if not data:
            return None

        detection = chardet.detect(data)
        encoding = detection.get("encoding")
        confidence = detection.get("confidence") or 0.0

        if not encoding:
            logger.debug(f"No encoding detected for {language}")
            return None
        if confidence < self.min_confidence:
            logger.debug(
                f"Detected {encoding} for {language} with confidence "
                + f"{confidence:.2f}, below {self.min_confidence:.2f}"
            )
            return None

        logger.debug(f"Detected {encoding} for {language} ({confidence:.2f})")
        return ResolvedEncoding(encoding.lower(), EncodingSource.DETECTED)


class EncodingResolver:
    """
    Resolve the concrete encoding of a legacy language file.

    The strategy chain is built once from the profile; resolve() walks it and
    applies the mode's terminal behavior when every step comes back empty.
    """

    def __init__(
        self,
        profile: EncodingProfile,
        table: Mapping[str, str] | None = None,
        min_confidence: float = 0.0,
        on_undetectable: UndetectableCallback | None = None,
    ) -> None:
        self.profile: EncodingProfile = profile
        self.on_undetectable: UndetectableCallback | None = on_undetectable
        self.strategies: list[EncodingStrategy] = self._build_chain(
            profile, table, min_confidence
        )

    @staticmethod
    def _build_chain(
        profile: EncodingProfile,
        table: Mapping[str, str] | None,
        min_confidence: float,
    ) -> list[EncodingStrategy]:
        match profile.mode:
            case EncodingMode.UTF8_DEFAULT:
                return [FixedDefault(DEFAULT_ENCODING)]
            case EncodingMode.EXPLICIT:
                if not profile.code:
                    raise ConfigurationError("Explicit encoding mode requires an encoding code")
                return [FixedDefault(profile.code, EncodingSource.EXPLICIT)]
            case EncodingMode.LEGACY_MAP:
                return [ExplicitTable(table), AutoDetect(min_confidence)]
            case EncodingMode.AUTO_DETECT:
                return [AutoDetect(min_confidence)]

    def resolve(self, language: str, data: bytes = b"") -> ResolvedEncoding:
        """
        Resolve the encoding for one language file.

        Args:
            language: Language code of the file
            data: Raw file bytes, only needed by the detection steps

        Returns:
            The resolved encoding

        Raises:
            EncodingUndetectableError: In auto-detect mode when neither
                detection nor the caller produced an encoding
        """
        for strategy in self.strategies:
            resolved = strategy.resolve(language, data)
            if resolved is not None:
                logger.debug(
                    f"Resolved {language} to {resolved.encoding} ({resolved.source.value})"
                )
                return resolved

        if self.profile.mode is EncodingMode.AUTO_DETECT:
            return self._ask_caller(language)

        logger.warning(
            f"No encoding found for {language}, forcing {DEFAULT_ENCODING}"
        )
        return ResolvedEncoding(DEFAULT_ENCODING, EncodingSource.FORCED_FALLBACK)

    def _ask_caller(self, language: str) -> ResolvedEncoding:
        if self.on_undetectable is not None:
            encoding = self.on_undetectable(language)
            if encoding:
                logger.info(f"Using caller-supplied encoding {encoding} for {language}")
                return ResolvedEncoding(encoding, EncodingSource.CALLER)
        raise EncodingUndetectableError(language)


def resolve_encoding(
    language: str,
    profile: EncodingProfile,
    data: bytes = b"",
    on_undetectable: UndetectableCallback | None = None,
) -> ResolvedEncoding:
    """Resolve an encoding with the default legacy table."""
    resolver = EncodingResolver(profile, on_undetectable=on_undetectable)
    return resolver.resolve(language, data)

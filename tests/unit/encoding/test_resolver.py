"""
Tests for encoding resolution of legacy language files.

This module tests the resolution strategies, the legacy charset table and the
terminal behavior of each encoding mode.
"""

from __future__ import annotations

from unittest.mock import patch

import pytest

from langfill.core.exceptions import ConfigurationError, EncodingUndetectableError
from langfill.encoding.resolver import (
    AutoDetect,
    EncodingMode,
    EncodingProfile,
    EncodingResolver,
    EncodingSource,
    ExplicitTable,
    FixedDefault,
    resolve_encoding,
)

DETECT = "langfill.encoding.resolver.chardet.detect"

UNDETECTED: dict[str, object] = {"encoding": None, "confidence": 0.0, "language": None}


class TestEncodingProfile:
    """Test the EncodingProfile value object."""

    def test_default_mode_is_legacy_map(self) -> None:
        """Test that profiles default to the legacy table."""
        assert EncodingProfile().mode is EncodingMode.LEGACY_MAP

    def test_explicit_mode_requires_code(self) -> None:
        """Test that explicit mode without a code is rejected."""
        with pytest.raises(ConfigurationError):
            _ = EncodingProfile(mode=EncodingMode.EXPLICIT)


class TestStrategies:
    """Test the individual resolution strategies."""

    def test_fixed_default(self) -> None:
        """Test that FixedDefault always answers."""
        resolved = FixedDefault().resolve("de", b"\xff")

        assert resolved is not None
        assert resolved.encoding == "utf-8"
        assert resolved.source is EncodingSource.DEFAULT

    def test_table_lookup_is_case_insensitive(self) -> None:
        """Test case-insensitive table lookup."""
        assert ExplicitTable().lookup("JA") == "euc-jp"

    def test_table_region_specific_entry(self) -> None:
        """Test that a region-qualified code hits its own entry."""
        assert ExplicitTable().lookup("zh_TW") == "big5"
        assert ExplicitTable().lookup("zh-TW") == "big5"

    def test_table_falls_back_to_base_language(self) -> None:
        """Test region to base language fallback."""
        assert ExplicitTable().lookup("ru_RU") == "koi8-r"

    def test_table_unknown_language(self) -> None:
        """Test that unknown languages are not in the table."""
        assert ExplicitTable().lookup("xx") is None
        assert ExplicitTable().resolve("xx", b"") is None

    def test_table_overrides(self) -> None:
        """Test that configured entries take precedence."""
        table = ExplicitTable({"JA": "shift_jis", "eo": "iso-8859-3"})

        assert table.lookup("ja") == "shift_jis"
        assert table.lookup("eo") == "iso-8859-3"
        assert table.lookup("ko") == "euc-kr"

    def test_auto_detect_empty_data(self) -> None:
        """Test that empty data is never detected."""
        with patch(DETECT) as mock_detect:
            assert AutoDetect().resolve("de", b"") is None
            mock_detect.assert_not_called()

    def test_auto_detect_result(self) -> None:
        """Test that a detection result is lowercased."""
        with patch(DETECT, return_value={"encoding": "ISO-8859-1", "confidence": 0.73}):
            resolved = AutoDetect().resolve("de", b"Gr\xfc\xdfe")

        assert resolved is not None
        assert resolved.encoding == "iso-8859-1"
        assert resolved.source is EncodingSource.DETECTED

    def test_auto_detect_below_confidence(self) -> None:
        """Test that low-confidence detections count as nothing."""
        with patch(DETECT, return_value={"encoding": "windows-1252", "confidence": 0.3}):
            assert AutoDetect(min_confidence=0.5).resolve("de", b"abc\xe9") is None


class TestEncodingResolver:
    """Test mode selection and fallback behavior."""

    def test_utf8_default(self) -> None:
        """Test that utf8-default always resolves to UTF-8."""
        resolver = EncodingResolver(EncodingProfile(mode=EncodingMode.UTF8_DEFAULT))

        resolved = resolver.resolve("ja", b"\xa4\xa2")

        assert resolved.encoding == "utf-8"
        assert not resolved.forced_fallback

    def test_explicit_code_returned_verbatim(self) -> None:
        """Test that explicit codes are not normalized."""
        resolver = EncodingResolver(
            EncodingProfile(mode=EncodingMode.EXPLICIT, code="Shift_JIS")
        )

        resolved = resolver.resolve("ja")

        assert resolved.encoding == "Shift_JIS"
        assert resolved.source is EncodingSource.EXPLICIT

    def test_explicit_without_code_raises(self) -> None:
        """Test that an explicit profile that lost its code is rejected."""
        profile = EncodingProfile(mode=EncodingMode.EXPLICIT, code="iso-8859-2")
        object.__setattr__(profile, "code", None)

        with pytest.raises(ConfigurationError):
            _ = EncodingResolver(profile)

    def test_legacy_map_japanese_ignores_detection(self) -> None:
        """Test that a table hit never consults detection."""
        resolver = EncodingResolver(EncodingProfile(mode=EncodingMode.LEGACY_MAP))

        with patch(DETECT, return_value={"encoding": "utf-8", "confidence": 0.99}) as mock_detect:
            resolved = resolver.resolve("ja", "日本語".encode("utf-8"))

        assert resolved.encoding == "euc-jp"
        assert resolved.source is EncodingSource.TABLE
        mock_detect.assert_not_called()

    def test_legacy_map_unknown_language_detects(self) -> None:
        """Test detection for languages missing from the table."""
        resolver = EncodingResolver(EncodingProfile(mode=EncodingMode.LEGACY_MAP))

        with patch(DETECT, return_value={"encoding": "ISO-8859-15", "confidence": 0.8}):
            resolved = resolver.resolve("pt_BR", b"Configura\xe7\xe3o")

        assert resolved.encoding == "iso-8859-15"
        assert resolved.source is EncodingSource.DETECTED

    def test_legacy_map_undetectable_forces_utf8(self) -> None:
        """Test the forced fallback for unknown, undetectable input."""
        resolver = EncodingResolver(EncodingProfile(mode=EncodingMode.LEGACY_MAP))

        resolved = resolver.resolve("xx", b"")

        assert resolved.encoding == "utf-8"
        assert resolved.forced_fallback
        assert resolved.source is EncodingSource.FORCED_FALLBACK

    def test_legacy_map_detection_returns_nothing(self) -> None:
        """Test the forced fallback when detection has no answer."""
        resolver = EncodingResolver(EncodingProfile(mode=EncodingMode.LEGACY_MAP))

        with patch(DETECT, return_value=UNDETECTED):
            resolved = resolver.resolve("xx", b"\x81\x82\x83")

        assert resolved.forced_fallback

    def test_auto_detect_always_detects(self) -> None:
        """Test that auto-detect skips the table."""
        resolver = EncodingResolver(EncodingProfile(mode=EncodingMode.AUTO_DETECT))

        with patch(DETECT, return_value={"encoding": "EUC-JP", "confidence": 0.99}) as mock_detect:
            resolved = resolver.resolve("ko", b"\xa4\xa2\xa4\xa4")

        assert resolved.encoding == "euc-jp"
        mock_detect.assert_called_once()

    def test_auto_detect_undetectable_raises(self) -> None:
        """Test that auto-detect never silently defaults."""
        resolver = EncodingResolver(EncodingProfile(mode=EncodingMode.AUTO_DETECT))

        with patch(DETECT, return_value=UNDETECTED):
            with pytest.raises(EncodingUndetectableError) as exc_info:
                _ = resolver.resolve("ko", b"\x81\x82")

        assert exc_info.value.language == "ko"
        assert not exc_info.value.recoverable

    def test_auto_detect_asks_caller(self) -> None:
        """Test that the caller callback supplies the encoding."""
        asked: list[str] = []

        def on_undetectable(language: str) -> str | None:
            asked.append(language)
            return "euc-kr"

        resolver = EncodingResolver(
            EncodingProfile(mode=EncodingMode.AUTO_DETECT),
            on_undetectable=on_undetectable,
        )

        with patch(DETECT, return_value=UNDETECTED):
            resolved = resolver.resolve("ko", b"\x81\x82")

        assert asked == ["ko"]
        assert resolved.encoding == "euc-kr"
        assert resolved.source is EncodingSource.CALLER

    def test_auto_detect_caller_without_answer(self) -> None:
        """Test that an empty callback answer still raises."""
        resolver = EncodingResolver(
            EncodingProfile(mode=EncodingMode.AUTO_DETECT),
            on_undetectable=lambda _language: None,
        )

        with pytest.raises(EncodingUndetectableError):
            _ = resolver.resolve("ko", b"")

    def test_resolve_encoding_helper(self) -> None:
        """Test the module-level convenience function."""
        resolved = resolve_encoding("he", EncodingProfile())

        assert resolved.encoding == "iso-8859-8"

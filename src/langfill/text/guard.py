"""
Placeholder and path guarding ahead of the translation call.

The translation service reorders, respaces and sometimes translates inline
tokens. Wrapping them in a no-translate marker keeps them intact; the
ResponseNormalizer unwraps them again afterwards.
"""

from __future__ import annotations

import logging
import re

from .types import (
    CLOSING_QUOTES,
    NO_TRANSLATE_CLOSE,
    NO_TRANSLATE_OPEN,
    OPENING_QUOTES,
    PATH_RE,
    PLACEHOLDER_RE,
    TranslationFormat,
)

logger = logging.getLogger(__name__)


def wrap(token: str) -> str:
    """Wrap a token in a no-translate marker."""
    return f"{NO_TRANSLATE_OPEN}{token}{NO_TRANSLATE_CLOSE}"


def is_quoted(text: str, start: int, end: int) -> bool:
    """True when text[start:end] sits directly between quoting punctuation."""
    if start == 0 or end >= len(text):
        return False
    return text[start - 1] in OPENING_QUOTES and text[end] in CLOSING_QUOTES


def _guard_placeholder(match: re.Match[str]) -> str:
    if is_quoted(match.string, match.start(), match.end()):
        return match.group(0)
    return wrap(match.group(0))


def _guard_path(match: re.Match[str]) -> str:
    return wrap(match.group(0))


def guard(text: str, fmt: TranslationFormat) -> str:
    """
    Wrap the tokens a translator would damage in no-translate markers.

    In text format every standalone ``$N`` not already enclosed in quotes is
    wrapped. In markup format every leading path-like substring is wrapped up
    to its delimiter.

    Args:
        text: Source string
        fmt: Translation format of the string

    Returns:
        Guarded text, safe to pass to the translation call
    """
    if not text:
        return text

    match fmt:
        case TranslationFormat.TEXT:
            guarded = PLACEHOLDER_RE.sub(_guard_placeholder, text)
        case TranslationFormat.MARKUP:
            guarded = PATH_RE.sub(_guard_path, text)

    if guarded != text:
        logger.debug(f"Guarded {text!r} as {guarded!r}")
    return guarded


def guarded_tokens(text: str, fmt: TranslationFormat) -> list[str]:
    """The tokens guard() would wrap, in order."""
    match fmt:
        case TranslationFormat.TEXT:
            return [
                m.group(0)
                for m in PLACEHOLDER_RE.finditer(text)
                if not is_quoted(text, m.start(), m.end())
            ]
        case TranslationFormat.MARKUP:
            return PATH_RE.findall(text)

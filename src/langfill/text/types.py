"""Shared types and constants for the text guard and normalizer."""

from __future__ import annotations

import re
from enum import Enum


class TranslationFormat(Enum):
    """Which guard and restore rules apply to a string."""

    TEXT = "text"
    MARKUP = "markup"


NO_TRANSLATE_OPEN = '<span translate="no">'
NO_TRANSLATE_CLOSE = "</span>"

# Positional placeholder: $ followed by digits, not part of a longer token
PLACEHOLDER_RE = re.compile(r"(?<![\w$])\$\d+(?!\d)")

# Leading path-like substring, up to a comma, period, whitespace or markup
PATH_RE = re.compile(r"(?<!\S)/[^\s,.<>\"']+")

OPENING_QUOTES = "\"'`‘‚“„«‹"
CLOSING_QUOTES = "\"'`’‘”“»›"


def placeholders(text: str) -> list[str]:
    """All positional placeholders of a string, in order of appearance."""
    return PLACEHOLDER_RE.findall(text)

"""
Repair of translation service output.

The translator hands back guarded text with broken tag delimiters, shuffled
tag nesting, extra spaces around punctuation and escaped quotes. The rules in
this module undo that damage. They run in a fixed order, each one on the
output of the previous one:

    1. repair_tag_delimiters
    2. strip_no_translate_markers
    3. restore_tag_pairing
    4. join_placeholder_colon, collapse_whitespace, reattach_punctuation,
       preserve_date_patterns, tighten_attribute_spacing, space_before_ellipsis
    5. restore_colon_spacing

The order matters: restore_colon_spacing deliberately undoes part of what the
spacing rules did, based on how the original string ends.

normalize() never raises. A rule that fails is skipped, and an empty result
falls back to the best earlier intermediate, then to the original string.
"""

from __future__ import annotations

import logging
import re
from collections import Counter
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from .types import NO_TRANSLATE_CLOSE, TranslationFormat

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewriteContext:
    """What every rule may consult besides the text being rewritten."""

    original: str
    fmt: TranslationFormat


RewriteFunction = Callable[[str, RewriteContext], str]


@dataclass(frozen=True)
class RewriteRule:
    """A named, independently testable rewrite step."""

    name: str
    apply: RewriteFunction


# -- 1. tag delimiters ------------------------------------------------------

CLOSE_TAG_SPACING_RE = re.compile(r"<\s*/\s*([A-Za-z][\w:-]*)\s*>")
OPEN_TAG_LEADING_SPACE_RE = re.compile(r"<\s+([A-Za-z][\w:-]*)(?=[^<>]*>)")
SELF_CLOSE_SPACING_RE = re.compile(r"(<[A-Za-z][^<>]*?)/\s+>")
TAG_TRAILING_SPACE_RE = re.compile(r"(<[A-Za-z](?:[^<>]*?[^\s/<>])?)\s+>")


def repair_tag_delimiters(text: str, ctx: RewriteContext) -> str:
    """Drop stray whitespace inside ``< >``, ``</ >`` and ``/ >``."""
    text = CLOSE_TAG_SPACING_RE.sub(r"</\1>", text)
    text = OPEN_TAG_LEADING_SPACE_RE.sub(r"<\1", text)
    text = SELF_CLOSE_SPACING_RE.sub(r"\1/>", text)
    return TAG_TRAILING_SPACE_RE.sub(r"\1>", text)


# -- 2. no-translate markers ------------------------------------------------

_MARKER_OPEN = r"""<span\s+translate\s*=\s*["'“”]?no["'“”]?\s*>"""
MARKER_RE = re.compile(_MARKER_OPEN + r"(.*?)</span\s*>", re.IGNORECASE | re.DOTALL)
ORPHAN_MARKER_RE = re.compile(_MARKER_OPEN, re.IGNORECASE)
SPLIT_PLACEHOLDER_RE = re.compile(r"\$\s+(\d+)")

QUOTE_ESCAPES: dict[str, str] = {
    "&quot;": '"',
    "&#34;": '"',
    "&#39;": "'",
    "&#039;": "'",
    "&apos;": "'",
    '\\"': '"',
    "\\'": "'",
}


def _unescape_quotes(text: str, original: str) -> str:
    for escaped, quote in QUOTE_ESCAPES.items():
        if escaped in text and escaped not in original:
            text = text.replace(escaped, quote)
    return text


def strip_no_translate_markers(text: str, ctx: RewriteContext) -> str:
    """Unwrap no-translate markers back to the bare placeholder or path."""

    def unwrap(match: re.Match[str]) -> str:
        inner = match.group(1).strip()
        if ctx.fmt is TranslationFormat.TEXT:
            return SPLIT_PLACEHOLDER_RE.sub(r"$\1", inner)
        return _unescape_quotes(inner, ctx.original)

    text = MARKER_RE.sub(unwrap, text)
    text = ORPHAN_MARKER_RE.sub("", text)

    # Closers whose marker opener the translator dropped
    surplus = text.count(NO_TRANSLATE_CLOSE) - ctx.original.count(NO_TRANSLATE_CLOSE)
    while surplus > 0:
        index = text.rfind(NO_TRANSLATE_CLOSE)
        text = text[:index] + text[index + len(NO_TRANSLATE_CLOSE) :]
        surplus -= 1

    if ctx.fmt is TranslationFormat.MARKUP:
        text = _unescape_quotes(text, ctx.original)
    return text


# -- 3. tag pairing ---------------------------------------------------------

TAG_RE = re.compile(r"<(/?)([A-Za-z][\w:-]*)\b[^<>]*?(/?)>")

VOID_TAGS = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)


def _closing_counts(text: str) -> Counter[str]:
    return Counter(
        m.group(2).lower() for m in TAG_RE.finditer(text) if m.group(1)
    )


def restore_tag_pairing(text: str, ctx: RewriteContext) -> str:
    """
    Close tags in the order they were opened.

    Closers that arrive out of order are moved so nesting is restored,
    closers the translator duplicated are dropped, and closers it lost are
    appended for tags the original closes.
    """
    if "<" not in text:
        return text

    original_closes = _closing_counts(ctx.original)
    emitted_closes: Counter[str] = Counter()
    closed_early: Counter[str] = Counter()
    stack: list[tuple[str, str]] = []
    out: list[str] = []
    pos = 0

    for match in TAG_RE.finditer(text):
        out.append(text[pos : match.start()])
        pos = match.end()
        closing, spelled, self_closing = match.group(1), match.group(2), match.group(3)
        name = spelled.lower()
        tag = match.group(0)

        if self_closing or name in VOID_TAGS:
            out.append(tag)
        elif not closing:
            stack.append((name, spelled))
            out.append(tag)
        elif any(open_name == name for open_name, _ in stack):
            while stack[-1][0] != name:
                inner, inner_spelled = stack.pop()
                out.append(f"</{inner_spelled}>")
                emitted_closes[inner] += 1
                closed_early[inner] += 1
            _ = stack.pop()
            out.append(tag)
            emitted_closes[name] += 1
        elif closed_early[name]:
            closed_early[name] -= 1
        elif emitted_closes[name] >= original_closes[name]:
            logger.debug(f"Dropping duplicated </{name}>")
        else:
            out.append(tag)
            emitted_closes[name] += 1

    out.append(text[pos:])

    for name, spelled in reversed(stack):
        if emitted_closes[name] < original_closes[name]:
            out.append(f"</{spelled}>")
            emitted_closes[name] += 1

    return "".join(out)


# -- 4. spacing and punctuation ---------------------------------------------

WORD_PLACEHOLDER_COLON_RE = re.compile(r"(?<=\w)\s+(:\s*\$\d+)")
WHITESPACE_RUN_RE = re.compile(r"[ \t\r\n\f\v]+")
DETACHED_PUNCTUATION_RE = re.compile(r"(?<=\w)[ \t]+([,.;!?])(?=\s|$|<)")
_DATE_SEGMENT = r"[^\W_]{1,4}"
COMPACT_DATE_RE = re.compile(
    rf"(?<![\w/]){_DATE_SEGMENT}/{_DATE_SEGMENT}/{_DATE_SEGMENT}(?![\w/])"
)
SPACED_DATE_RE = re.compile(
    rf"(?<![\w/])({_DATE_SEGMENT})\s*/\s*({_DATE_SEGMENT})\s*/\s*({_DATE_SEGMENT})(?![\w/])"
)
TAG_BODY_RE = re.compile(r"<[A-Za-z][^<>]*>")
ATTRIBUTE_ASSIGNMENT_RE = re.compile(r"\s*=\s*")
TRAILING_ELLIPSIS_RE = re.compile(r"(?<=[^\s.])\.\.(\s*)$")


def join_placeholder_colon(text: str, ctx: RewriteContext) -> str:
    """Remove the space between a word and a following ``:$N`` group."""
    return WORD_PLACEHOLDER_COLON_RE.sub(r"\1", text)


def collapse_whitespace(text: str, ctx: RewriteContext) -> str:
    """Collapse whitespace runs to a single space."""
    return WHITESPACE_RUN_RE.sub(" ", text)


def reattach_punctuation(text: str, ctx: RewriteContext) -> str:
    """Pull punctuation back onto the word the translator split it from."""
    return DETACHED_PUNCTUATION_RE.sub(r"\1", text)


def preserve_date_patterns(text: str, ctx: RewriteContext) -> str:
    """Keep ``dd/mm/yyyy`` style patterns of the original free of spaces."""
    if not COMPACT_DATE_RE.search(ctx.original):
        return text
    return SPACED_DATE_RE.sub(r"\1/\2/\3", text)


def tighten_attribute_spacing(text: str, ctx: RewriteContext) -> str:
    """Remove spaces around ``=`` inside tag attributes."""
    return TAG_BODY_RE.sub(
        lambda m: ATTRIBUTE_ASSIGNMENT_RE.sub("=", m.group(0)), text
    )


def space_before_ellipsis(text: str, ctx: RewriteContext) -> str:
    """A trailing ``..`` is separated from the preceding word by a space."""
    return TRAILING_ELLIPSIS_RE.sub(r" ..\1", text)


# -- 5. colon spacing -------------------------------------------------------

ORIGINAL_COLON_SUFFIX_RE = re.compile(r"\s:(\s*\$\d+)?\s*$")
TRAILING_COLON_RE = re.compile(r"\s*:\s*(\$\d+)?\s*$")
ADJACENT_PLACEHOLDER_RE = re.compile(r"(\$\d+) :(\$\d+)")


def restore_colon_spacing(text: str, ctx: RewriteContext) -> str:
    """
    Re-insert the space before a trailing colon when the original had one.

    Only applies when the original ends with `` :`` or `` : $N``; the trailing
    colon (and its placeholder) of the output is rewritten to the same shape.
    """
    if not ORIGINAL_COLON_SUFFIX_RE.search(ctx.original):
        return text

    match = TRAILING_COLON_RE.search(text)
    if match is not None:
        placeholder = match.group(1)
        suffix = f" : {placeholder}" if placeholder else " :"
        text = text[: match.start()] + suffix

    return ADJACENT_PLACEHOLDER_RE.sub(r"\1 : \2", text)


RULES: tuple[RewriteRule, ...] = (
    RewriteRule("repair_tag_delimiters", repair_tag_delimiters),
    RewriteRule("strip_no_translate_markers", strip_no_translate_markers),
    RewriteRule("restore_tag_pairing", restore_tag_pairing),
    RewriteRule("join_placeholder_colon", join_placeholder_colon),
    RewriteRule("collapse_whitespace", collapse_whitespace),
    RewriteRule("reattach_punctuation", reattach_punctuation),
    RewriteRule("preserve_date_patterns", preserve_date_patterns),
    RewriteRule("tighten_attribute_spacing", tighten_attribute_spacing),
    RewriteRule("space_before_ellipsis", space_before_ellipsis),
    RewriteRule("restore_colon_spacing", restore_colon_spacing),
)


def normalize(
    translated: str,
    original: str,
    fmt: TranslationFormat,
    rules: Sequence[RewriteRule] = RULES,
) -> str:
    """
    Clean up a translated string.

    Args:
        translated: Marker-bearing text returned by the translator
        original: The source string before guarding
        fmt: Translation format of the string
        rules: Rewrite chain, RULES unless a test swaps it

    Returns:
        The cleaned string; never raises
    """
    original = original if isinstance(original, str) else ""
    text = translated if isinstance(translated, str) else ""
    best = text
    ctx = RewriteContext(original=original, fmt=fmt)

    for rule in rules:
        try:
            result = rule.apply(text, ctx)
        except Exception as e:  # noqa: BLE001
            logger.debug(f"Rewrite rule {rule.name} failed on {text!r}: {e}")
            continue
        if not isinstance(result, str):
            continue
        text = result
        if text.strip():
            best = text

    if text.strip():
        return text
    if best.strip():
        return best
    return original or text

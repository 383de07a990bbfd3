"""
Key-value language file handling.

A language file holds one ``key=value`` mapping per line. Blank lines and
lines starting with ``#`` carry no entries. Values may embed positional
placeholders (``$1``, ``$2``...), inline markup and path-like substrings;
they are kept verbatim apart from the line terminator.
"""

from __future__ import annotations

import logging
import tempfile
from collections.abc import Iterable, Mapping
from pathlib import Path

logger = logging.getLogger(__name__)

LanguageFile = dict[str, str]


def parse_line(line: str) -> tuple[str, str] | None:
    """
    Split a single language file line into key and value.

    Args:
        line: Line without its terminator

    Returns:
        The ``(key, value)`` pair, or None for blank, comment and malformed lines
    """
    if not line.strip() or line.lstrip().startswith("#"):
        return None
    key, sep, value = line.partition("=")
    key = key.strip()
    if not sep or not key:
        return None
    return key, value


def parse_language_file(lines: str | Iterable[str]) -> LanguageFile:
    """
    Parse language file text into an ordered mapping.

    Later duplicates of a key replace earlier ones.

    Args:
        lines: Whole file text or an iterable of lines

    Returns:
        Mapping of keys to values in file order
    """
    if isinstance(lines, str):
        lines = lines.splitlines()

    entries: LanguageFile = {}
    for line in lines:
        parsed = parse_line(line.rstrip("\r\n"))
        if parsed is None:
            continue
        key, value = parsed
        if key in entries:
            logger.debug(f"Duplicate key {key!r}, keeping the last value")
        entries[key] = value
    return entries


def serialize_language_file(entries: Mapping[str, str]) -> str:
    """Render a mapping as language file text."""
    return "".join(f"{key}={value}\n" for key, value in entries.items())


def read_language_file(path: Path) -> LanguageFile:
    """
    Read a UTF-8 language file.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    with path.open("r", encoding="utf-8") as f:
        return parse_language_file(f.read())


def write_language_file(path: Path, entries: Mapping[str, str]) -> None:
    """
    Write a mapping as a UTF-8 language file with an atomic replace.

    Raises:
        OSError: If file operations fail
    """
    content = serialize_language_file(entries)

    temp_file = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            encoding="utf-8",
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            delete=False,
        ) as temp_file:
            _ = temp_file.write(content)
            temp_file.flush()
            temp_path = Path(temp_file.name)

        _ = temp_path.replace(path)

    except Exception as e:
        if temp_file and Path(temp_file.name).exists():
            Path(temp_file.name).unlink(missing_ok=True)
        raise OSError(f"Failed to write language file {path}: {e}") from e

    logger.debug(f"Wrote {len(entries)} entries to {path}")

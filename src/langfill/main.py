"""
Command-line interface for filling a language file from its template.

This script fills the missing strings of one target language file by machine
translating the template, while preserving human translations from a legacy
file and values already present in the target file.

Usage Examples:
    Fill the German file of a module:
        langfill --template lang/en --language de --output lang/de

    Prefer human translations from a legacy file:
        langfill --template lang/en --language ja --output lang/ja --legacy ulang/ja

    Supply the encoding when auto-detection cannot find one:
        langfill --template lang/en --language ko --output lang/ko \\
            --legacy ulang/ko --encoding euc-kr

    Show what would be done:
        langfill --template lang/en --language de --output lang/de --dry-run
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import NamedTuple

import yaml
from pydantic import ValidationError

from .config.manager import ConfigManager
from .config.schema import LangfillConfig
from .core.exceptions import LangfillError
from .core.language_file import read_language_file, write_language_file
from .encoding.resolver import EncodingMode, EncodingProfile, EncodingResolver
from .text.types import TranslationFormat
from .translation.client import TranslateFunction, TranslationClient
from .translation.pipeline import fill_language, load_human_translations

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_PARTIAL = 2


class FillArgs(NamedTuple):
    """Type-safe container for command-line arguments."""

    template: Path
    language: str
    output: Path
    existing: Path | None
    legacy: Path | None
    config: Path
    encoding: str | None
    format: str | None
    dry_run: bool
    fail_fast: bool
    verbose: bool


def setup_logging(verbose: bool = False) -> None:
    """
    Set up logging configuration.

    Args:
        verbose: Enable verbose logging
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_argument_parser() -> argparse.ArgumentParser:
    """
    Create the argument parser for langfill.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="langfill",
        description="Fill missing translations of a language file",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --template lang/en --language de --output lang/de
  %(prog)s --template lang/en --language ja --output lang/ja --legacy ulang/ja
  %(prog)s --template lang/en --language de --output lang/de --dry-run
        """,
    )

    _ = parser.add_argument(
        "--template",
        type=Path,
        required=True,
        help="Path to the source language file",
    )
    _ = parser.add_argument(
        "--language",
        type=str,
        required=True,
        help='Target language code (e.g., "de", "zh_TW")',
    )
    _ = parser.add_argument(
        "--output",
        type=Path,
        required=True,
        help="Path of the language file to write",
    )
    _ = parser.add_argument(
        "--existing",
        type=Path,
        default=None,
        help="Current target file whose values are kept (default: the output file)",
    )
    _ = parser.add_argument(
        "--legacy",
        type=Path,
        default=None,
        help="Human-translated file in a legacy encoding",
    )
    _ = parser.add_argument(
        "--config",
        type=Path,
        default=Path("langfill.yml"),
        help="Path to the configuration file (default: langfill.yml)",
    )
    _ = parser.add_argument(
        "--encoding",
        type=str,
        default=None,
        help="Encoding of the legacy file; used when detection finds none",
    )
    _ = parser.add_argument(
        "--format",
        choices=[fmt.value for fmt in TranslationFormat],
        default=None,
        help="Override the configured translation format",
    )
    _ = parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be done without translating or writing",
    )
    _ = parser.add_argument(
        "--fail-fast",
        action="store_true",
        help="Stop at the first failed string and leave the output file untouched",
    )
    _ = parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def parse_arguments(argv: list[str] | None = None) -> FillArgs:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments in a type-safe container
    """
    args = create_argument_parser().parse_args(argv)

    template: Path = args.template
    language: str = args.language
    output: Path = args.output
    existing: Path | None = args.existing
    legacy: Path | None = args.legacy
    config: Path = args.config
    encoding: str | None = args.encoding
    fmt: str | None = args.format
    dry_run: bool = args.dry_run
    fail_fast: bool = args.fail_fast
    verbose: bool = args.verbose

    return FillArgs(
        template=template,
        language=language,
        output=output,
        existing=existing,
        legacy=legacy,
        config=config,
        encoding=encoding,
        format=fmt,
        dry_run=dry_run,
        fail_fast=fail_fast,
        verbose=verbose,
    )


def build_resolver(config: LangfillConfig, encoding: str | None) -> EncodingResolver:
    """
    Build the encoding resolver for a run.

    Without an encoding the configured mode applies. In auto-detect mode a
    command-line encoding only answers when detection finds nothing; in every
    other mode it is used explicitly.
    """
    profile = config.encoding.to_profile()
    if encoding and profile.mode is not EncodingMode.AUTO_DETECT:
        profile = EncodingProfile(mode=EncodingMode.EXPLICIT, code=encoding)

    return EncodingResolver(
        profile,
        table=config.encoding.legacy_table,
        min_confidence=config.encoding.min_confidence,
        on_undetectable=(lambda _language: encoding) if encoding else None,
    )


def run(
    args: FillArgs,
    config: LangfillConfig,
    translate: TranslateFunction | None = None,
) -> int:
    """
    Fill one language file.

    Args:
        args: Parsed command-line arguments
        config: Loaded configuration
        translate: Translate call; a TranslationClient is created when omitted

    Returns:
        Exit code
    """
    logger = logging.getLogger(__name__)

    if not args.template.exists():
        logger.error(f"Template file does not exist: {args.template}")
        return EXIT_ERROR

    template = read_language_file(args.template)
    existing_path = args.existing or args.output
    existing = read_language_file(existing_path) if existing_path.exists() else {}

    human = None
    if args.legacy is not None:
        resolver = build_resolver(config, args.encoding)
        decoded = load_human_translations(args.legacy, args.language, resolver)
        if decoded is not None:
            human = decoded.entries
            for error in decoded.errors:
                logger.warning(f"Skipping undecodable key {error.key}: {error}")

    fmt = (
        TranslationFormat(args.format)
        if args.format
        else config.output.translation_format
    )

    if args.dry_run:
        missing = [
            key
            for key in template
            if key not in (human or {}) and key not in existing
        ]
        logger.info(
            f"DRY RUN: Would translate {len(missing)} of {len(template)} "
            + f"{args.language} strings into {args.output}"
        )
        for key in missing:
            logger.info(f"  - {key}")
        return EXIT_OK

    client: TranslationClient | None = None
    if translate is None:
        client = TranslationClient(config.translation)
        translate = client

    try:
        result = fill_language(
            template,
            args.language,
            translate,
            existing=existing,
            human=human,
            fmt=fmt,
            source_language=config.translation.source_language,
            fail_fast=args.fail_fast,
        )
    finally:
        if client is not None:
            client.close()

    if args.fail_fast and result.failed:
        logger.error(f"Stopped {args.language} at the first failure, {args.output} not written")
        return EXIT_PARTIAL

    write_language_file(args.output, result.values)
    logger.info(f"Wrote {len(result.values)} strings to {args.output}")

    return EXIT_PARTIAL if result.failed else EXIT_OK


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for langfill.

    Returns:
        Exit code (0 for success, 1 for error, 2 when some keys failed)
    """
    args = parse_arguments(argv)
    setup_logging(args.verbose)

    logger = logging.getLogger(__name__)

    try:
        config = ConfigManager.load_or_default(args.config)
    except (yaml.YAMLError, ValueError, ValidationError) as e:
        logger.error(f"Invalid configuration in {args.config}: {e}")
        return EXIT_ERROR

    try:
        return run(args, config)
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        return EXIT_ERROR
    except (LangfillError, OSError) as e:
        logger.error(f"Error while filling {args.language}: {e}")
        if args.verbose:
            logger.exception("Full traceback:")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())

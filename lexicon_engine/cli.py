#!/usr/bin/env python3
"""
Lexicon Engine CLI

Command-line access to the markup converter, the phonetic index generator,
the directive resolver and the bulk dictionary importer.

Usage:
    python -m lexicon_engine markup mw --key-word agni < entry.xml
    python -m lexicon_engine markup - < page.html          # generic markup
    python -m lexicon_engine phonetic --lang SAN "अग्नि"
    python -m lexicon_engine resolve --fill SAN IAST < values.json
    python -m lexicon_engine import mw.sqlite mw --limit 100 > mw.jsonl
    python -m lexicon_engine dictionaries
"""

import argparse
import json
import logging
import sqlite3
import sys

from . import scripts
from .converters.markup_converter import MarkupConverter
from .dictionaries import ConfigurationError, list_dictionaries
from .directives import resolve_directives
from .importer import DEFAULT_BATCH_SIZE, DEFAULT_MAX_WORKERS, DictionaryImporter, SqliteRowSource
from .models import ImportProgress, LanguageValue
from .phonetic import DEFAULT_MAX_LENGTH, generate_phonetic_string


def main(argv=None):
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    if not args.command:
        parser.print_help()
        print("\nError: No command provided.")
        sys.exit(1)

    try:
        args.handler(args)
    except ConfigurationError as e:
        print(f"[ERROR] {e}", file=sys.stderr)
        sys.exit(1)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lexicon_engine",
        description=(
            "Lexicon and transliteration engine\n\n"
            "Converts dictionary entry markup to markdown, builds phonetic\n"
            "search strings, resolves $transliterateFrom directives and\n"
            "imports whole dictionaries from SQLite."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  python -m lexicon_engine markup mw --key-word agni < entry.xml\n"
            "  python -m lexicon_engine phonetic --lang SAN अग्नि\n"
            "  python -m lexicon_engine resolve --fill SAN TEL < values.json\n"
            "  python -m lexicon_engine import mw.sqlite mw --workers 4 > mw.jsonl\n"
        ),
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Log progress (-v) or debug detail (-vv) to stderr",
    )

    subparsers = parser.add_subparsers(dest="command")

    markup = subparsers.add_parser("markup", help="Convert entry markup on stdin to markdown")
    markup.add_argument("dictionary", help="Source dictionary name, or - for generic markup")
    markup.add_argument("--key-word", default="", help="Headword of the entry")
    markup.add_argument(
        "--to-scheme",
        default=scripts.DEVANAGARI,
        help=f"Scheme for Sanskrit headwords (default: {scripts.DEVANAGARI})",
    )
    markup.set_defaults(handler=_run_markup)

    phonetic = subparsers.add_parser("phonetic", help="Print the phonetic search string for text")
    phonetic.add_argument("text", nargs="+", help="Values to index")
    phonetic.add_argument("--lang", default="ENG", help="Language code of the values (default: ENG)")
    phonetic.add_argument(
        "--max-length",
        type=int,
        default=DEFAULT_MAX_LENGTH,
        help=f"Characters of each value to index (default: {DEFAULT_MAX_LENGTH})",
    )
    phonetic.set_defaults(handler=_run_phonetic)

    resolve = subparsers.add_parser(
        "resolve", help="Resolve directives in a JSON list of {language, value} on stdin"
    )
    resolve.add_argument("--fill", nargs="*", default=[], help="Languages to add when absent")
    resolve.set_defaults(handler=_run_resolve)

    importer = subparsers.add_parser("import", help="Import a dictionary table from SQLite as JSON lines")
    importer.add_argument("sqlite_file", help="SQLite file holding the dictionary table")
    importer.add_argument("dictionary", help="Source dictionary name")
    importer.add_argument("--limit", type=int, default=None, help="Import at most this many rows")
    importer.add_argument(
        "--batch-size",
        type=int,
        default=DEFAULT_BATCH_SIZE,
        help=f"Rows per batch (default: {DEFAULT_BATCH_SIZE})",
    )
    importer.add_argument(
        "--workers",
        type=int,
        default=DEFAULT_MAX_WORKERS,
        help=f"Threads per batch (default: {DEFAULT_MAX_WORKERS})",
    )
    importer.add_argument("--validate", action="store_true", help="Validate rows before processing")
    importer.set_defaults(handler=_run_import)

    dictionaries = subparsers.add_parser("dictionaries", help="List supported dictionaries")
    dictionaries.set_defaults(handler=_run_dictionaries)

    return parser


def _configure_logging(verbosity: int) -> None:
    if verbosity >= 2:
        level = logging.DEBUG
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _run_markup(args) -> None:
    dictionary = None if args.dictionary == "-" else args.dictionary
    content = sys.stdin.read()
    print(MarkupConverter.convert(
        content,
        dictionary=dictionary,
        key_word=args.key_word,
        to_scheme=args.to_scheme,
    ))


def _run_phonetic(args) -> None:
    values = [LanguageValue(args.lang, text) for text in args.text]
    print(generate_phonetic_string(values, max_length=args.max_length))


def _run_resolve(args) -> None:
    try:
        data = json.load(sys.stdin)
    except json.JSONDecodeError as e:
        print(f"[ERROR] Invalid JSON on stdin: {e}", file=sys.stderr)
        sys.exit(1)

    if not isinstance(data, list):
        print("[ERROR] Expected a JSON list of {language, value} objects", file=sys.stderr)
        sys.exit(1)

    entries = [LanguageValue.from_dict(item) for item in data]
    resolved = resolve_directives(entries, args.fill)
    print(json.dumps([item.to_dict() for item in resolved], ensure_ascii=False, indent=2))


def _run_import(args) -> None:
    source = SqliteRowSource(args.sqlite_file, args.dictionary, limit=args.limit)

    def write_batch(entries):
        for entry in entries:
            sys.stdout.write(json.dumps(entry.to_dict(), ensure_ascii=False) + "\n")

    def report(progress: ImportProgress):
        print(
            f"  [batch {progress.batch_number}] {progress.processed}/{progress.total} "
            f"({progress.percent}%), {progress.errors} errors",
            file=sys.stderr,
        )

    importer = DictionaryImporter(
        args.dictionary,
        batch_size=args.batch_size,
        max_workers=args.workers,
        validate=args.validate,
        progress_callback=report,
    )

    print("=" * 60, file=sys.stderr)
    print(f"  LEXICON IMPORT - {importer.config.name.value} from {args.sqlite_file}", file=sys.stderr)
    print("=" * 60, file=sys.stderr)

    try:
        result = importer.run(source, sink=write_batch, total=source.count(), columns=source.columns())
    except sqlite3.Error as e:
        print(f"[ERROR] Cannot read {args.sqlite_file}: {e}", file=sys.stderr)
        sys.exit(1)

    print("-" * 60, file=sys.stderr)
    print(
        f"  Done: {result.processed_rows} processed, {result.invalid_rows} invalid, "
        f"{len(result.errors)} errors in {result.duration_seconds:.2f}s",
        file=sys.stderr,
    )
    for error in result.errors:
        print(f"  [ERROR] {error}", file=sys.stderr)
    print("-" * 60, file=sys.stderr)


def _run_dictionaries(args) -> None:
    """Display all supported dictionaries."""
    print("\nSupported Dictionaries:")
    print("-" * 40)
    for config in list_dictionaries():
        print(f"  {config.name.value:<12} {config.origin:<10} {config.kind.value}")
    print()


if __name__ == "__main__":
    main()

"""Command line interface for the ExeTranslate patcher."""

from __future__ import annotations

import argparse
import pathlib
import sys
from typing import Iterable, Optional

from .configuration import ExeTranslateConfig, get_settings, resolve_delimiter
from .errors import (
    ConfigurationError,
    ExeTranslateError,
    OverwriteRefusedError,
    TranslationTableError,
    UnsupportedExecutableError,
)
from .translator import (
    TranslationRunner,
    TranslationSummary,
    derive_output_path,
    validate_paths,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="exetranslate",
        description=(
            "Find UTF-16 strings in an executable and replace them with a translation."
        ),
    )
    parser.add_argument(
        "exe_file",
        help="The input executable file to be translated.",
    )
    parser.add_argument(
        "csv_file",
        help=(
            "The translation table. First column is original text, second column "
            "is translated text. No header row."
        ),
    )
    parser.add_argument(
        "out_file",
        nargs="?",
        help="Output file path. Defaults to the executable path plus '.translated'.",
    )
    parser.add_argument(
        "-p",
        "--potentially-harmful",
        action="store_true",
        default=None,
        help=(
            "Also apply translations that take more bytes than the original text. "
            "Following data in the section may be overwritten."
        ),
    )
    parser.add_argument(
        "-s",
        "--section",
        help="Section to translate (default: .rdata).",
    )
    parser.add_argument(
        "-d",
        "--delimiter",
        help=(
            "Column delimiter of the translation table: one character, or "
            "tab, comma or semicolon (default: ',')."
        ),
    )
    parser.add_argument(
        "-e",
        "--encoding",
        help="Text encoding of the translation table (default: utf-8-sig).",
    )
    parser.add_argument(
        "-f",
        "--force",
        action="store_true",
        help="Allow overwriting the output file if it already exists.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show detailed progress information.",
    )
    return parser


def execute_translation(
    *,
    exe_file: str,
    csv_file: str,
    output_file: str | None,
    settings: ExeTranslateConfig,
    section: str | None,
    allow_unsafe_growth: bool | None,
    delimiter: str | None,
    encoding: str | None,
    force_overwrite: bool,
    verbose: bool,
) -> tuple[int, TranslationSummary | None, str | None]:
    """Execute a translation run and return the exit code, summary, and message."""

    input_path = pathlib.Path(exe_file).expanduser().resolve()
    table_path = pathlib.Path(csv_file).expanduser().resolve()
    output_path = (
        pathlib.Path(output_file).expanduser().resolve()
        if output_file
        else derive_output_path(input_path, settings.EXETRANSLATE_OUTPUT_SUFFIX)
    )

    try:
        validate_paths(input_path, table_path, output_path, force_overwrite=force_overwrite)
        table_delimiter = (
            resolve_delimiter(delimiter)
            if delimiter
            else settings.EXETRANSLATE_TABLE_DELIMITER
        )
    except FileNotFoundError as exc:
        return 1, None, str(exc)
    except OverwriteRefusedError as exc:
        return 1, None, str(exc)
    except ConfigurationError as exc:
        return 1, None, str(exc)
    except ExeTranslateError as exc:
        return 1, None, str(exc)

    runner = TranslationRunner(
        input_path=input_path,
        table_path=table_path,
        output_path=output_path,
        section=section or settings.EXETRANSLATE_SECTION,
        allow_unsafe_growth=(
            settings.EXETRANSLATE_ALLOW_UNSAFE_GROWTH
            if allow_unsafe_growth is None
            else allow_unsafe_growth
        ),
        delimiter=table_delimiter,
        encoding=encoding or settings.EXETRANSLATE_TABLE_ENCODING,
        verbose=verbose,
    )

    try:
        summary = runner.run()
    except UnsupportedExecutableError as exc:
        return 1, None, str(exc)
    except TranslationTableError as exc:
        return 1, None, str(exc)
    except ExeTranslateError as exc:
        return 1, None, str(exc)
    except OSError as exc:
        return 1, None, f"Could not read or write a file: {exc}"
    except KeyboardInterrupt:
        return 2, None, "Translation interrupted by user."

    return 0, summary, None


def print_summary(summary: TranslationSummary) -> None:
    """Output a friendly report once processing completes."""

    print("\nTranslation complete.")
    print(f"  Executable:      {summary.input_path}")
    print(f"  Table:           {summary.table_path}")
    print(f"  Output file:     {summary.output_path}")
    print(f"  Section:         {summary.section} ({summary.regions} found)")
    print(
        "  Translations:    "
        f"{summary.applied_entries} applied / {summary.loaded_entries} loaded "
        f"({summary.skipped_entries} skipped, {summary.skipped_rows} bad rows)"
    )
    print(f"  Replacements:    {summary.total_replacements}")
    print(f"  Elapsed time:    {summary.elapsed_seconds:.2f} seconds")
    if summary.warning_messages:
        print("  Notes:")
        for message in summary.warning_messages:
            print(f"    - {message}")


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        settings = get_settings()
    except ConfigurationError as exc:
        print(exc)
        return 1

    exit_code, summary, message = execute_translation(
        exe_file=args.exe_file,
        csv_file=args.csv_file,
        output_file=args.out_file,
        settings=settings,
        section=args.section,
        allow_unsafe_growth=args.potentially_harmful,
        delimiter=args.delimiter,
        encoding=args.encoding,
        force_overwrite=args.force,
        verbose=args.verbose,
    )

    if message:
        print(message)
    if summary:
        print_summary(summary)
    return exit_code


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())

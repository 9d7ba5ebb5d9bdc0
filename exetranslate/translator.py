"""High-level orchestration for executable string translation."""

from __future__ import annotations

import pathlib
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .applier import DiagnosticSink, TranslationApplier
from .errors import ExeTranslateError, OverwriteRefusedError
from .policy import DiagnosticLog
from .regions import (
    DEFAULT_SECTION,
    load_image,
    parse_pe,
    section_extents,
    select_regions,
)
from .table import load_translations


@dataclass
class TranslationSummary:
    """Report returned after patching an executable."""

    input_path: pathlib.Path
    table_path: pathlib.Path
    output_path: pathlib.Path
    section: str
    regions: int
    loaded_entries: int
    skipped_rows: int
    applied_entries: int
    skipped_entries: int
    total_replacements: int
    elapsed_seconds: float
    replacements_by_original: Dict[str, int] = field(default_factory=dict)
    warning_messages: List[str] = field(default_factory=list)


class TranslationRunner:
    """Coordinates loading, section selection, substitution, and writing."""

    def __init__(
        self,
        *,
        input_path: pathlib.Path,
        table_path: pathlib.Path,
        output_path: pathlib.Path,
        section: str = DEFAULT_SECTION,
        allow_unsafe_growth: bool = False,
        delimiter: str = ",",
        encoding: str = "utf-8-sig",
        verbose: bool = False,
        sink: Optional[DiagnosticSink] = None,
    ) -> None:
        self.input_path = input_path
        self.table_path = table_path
        self.output_path = output_path
        self.section = section
        self.allow_unsafe_growth = allow_unsafe_growth
        self.delimiter = delimiter
        self.encoding = encoding
        self.verbose = verbose
        self.sink = sink if sink is not None else DiagnosticLog()

    def run(self) -> TranslationSummary:
        start_time = time.time()

        buffer = load_image(self.input_path)
        pe = parse_pe(buffer)
        sections = section_extents(pe)
        pe.close()

        table = load_translations(
            self.table_path,
            delimiter=self.delimiter,
            encoding=self.encoding,
            sink=self.sink,
        )
        if self.verbose:
            print(
                f"Loaded {len(table.entries)} translations "
                f"({table.skipped_rows} rows skipped) and {len(sections)} sections."
            )

        applier = TranslationApplier(
            allow_unsafe_growth=self.allow_unsafe_growth,
            sink=self.sink,
        )

        regions = 0
        applied = 0
        skipped = 0
        total = 0
        by_original: Dict[str, int] = {}
        warnings: List[str] = [diagnostic.message for diagnostic in table.diagnostics]

        for region in select_regions(buffer, sections, self.section):
            regions += 1
            if self.verbose:
                print(
                    f"Translating section {region.name} "
                    f"at {region.offset:#x} ({region.size} bytes)."
                )
            report = applier.apply(region, table.entries)
            applied += report.applied
            skipped += report.skipped
            total += report.replacements
            for entry, count in zip(table.entries, report.counts):
                if count is not None:
                    by_original[entry.original] = by_original.get(entry.original, 0) + count
            warnings.extend(
                diagnostic.message for diagnostic in report.diagnostics if diagnostic.is_warning
            )

        if regions == 0 and self.verbose:
            print(f"No section named {self.section} was found. Writing an unchanged copy.")

        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        self.output_path.write_bytes(buffer)

        return TranslationSummary(
            input_path=self.input_path,
            table_path=self.table_path,
            output_path=self.output_path,
            section=self.section,
            regions=regions,
            loaded_entries=len(table.entries),
            skipped_rows=table.skipped_rows,
            applied_entries=applied,
            skipped_entries=skipped,
            total_replacements=total,
            elapsed_seconds=time.time() - start_time,
            replacements_by_original=by_original,
            warning_messages=warnings,
        )


def derive_output_path(input_path: pathlib.Path, suffix: str = ".translated") -> pathlib.Path:
    return input_path.with_name(input_path.name + suffix)


def validate_paths(
    input_path: pathlib.Path,
    table_path: pathlib.Path,
    output_path: pathlib.Path,
    force_overwrite: bool,
) -> None:
    """Validate input/output path combinations and overwrite policy."""

    if not input_path.exists():
        raise FileNotFoundError(
            f"Executable not found: {input_path}. Please provide a readable PE file."
        )
    if not input_path.is_file():
        raise ExeTranslateError("Executable path must be a file.")

    if not table_path.exists():
        raise FileNotFoundError(f"Translation table not found: {table_path}.")
    if not table_path.is_file():
        raise ExeTranslateError("Translation table path must be a file.")

    if input_path.resolve() == output_path.resolve():
        raise OverwriteRefusedError(
            "The output path matches the input executable. Refusing to overwrite the source file."
        )

    if output_path.exists() and not force_overwrite:
        raise OverwriteRefusedError(
            "The output file already exists. Rename it or use the overwrite flag."
        )

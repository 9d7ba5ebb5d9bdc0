"""Translation table loading."""

from __future__ import annotations

import csv
import pathlib
import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .errors import TranslationTableError
from .structures import Diagnostic, DiagnosticKind, TranslationEntry

# Bytes that failed to decode come back as lone surrogates U+DC80..U+DCFF.
UNDECODABLE_PATTERN = re.compile("[\udc80-\udcff]")


@dataclass
class TranslationTable:
    """Entries loaded from a two-column table, in file order."""

    entries: List[TranslationEntry] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def skipped_rows(self) -> int:
        return len(self.diagnostics)


def load_translations(
    path: pathlib.Path,
    *,
    delimiter: str = ",",
    encoding: str = "utf-8-sig",
    sink: Optional[Callable[[Diagnostic], None]] = None,
) -> TranslationTable:
    """Load (original, translated) rows from a headerless delimited file.

    Malformed rows are dropped with a diagnostic; only an unreadable file
    raises.
    """

    table = TranslationTable()

    def skip(line: int, message: str) -> None:
        diagnostic = Diagnostic(
            kind=DiagnosticKind.ROW_SKIPPED,
            message=message,
            line=line,
        )
        table.diagnostics.append(diagnostic)
        if sink is not None:
            sink(diagnostic)

    try:
        with path.open(
            "r", encoding=encoding, errors="surrogateescape", newline=""
        ) as handle:
            try:
                reader = csv.reader(handle, delimiter=delimiter)
            except TypeError as exc:
                raise TranslationTableError(
                    f"Invalid table delimiter {delimiter!r}: {exc}"
                ) from exc
            while True:
                try:
                    row = next(reader)
                except StopIteration:
                    break
                except csv.Error as exc:
                    skip(reader.line_num, f"Line {reader.line_num} could not be parsed: {exc}")
                    continue

                line = reader.line_num
                if not row:
                    continue
                if len(row) != 2:
                    skip(line, f"Line {line} doesn't have 2 columns: {row!r}")
                    continue

                original, translated = row
                if UNDECODABLE_PATTERN.search(original) or UNDECODABLE_PATTERN.search(translated):
                    skip(line, f"Line {line} is not valid {encoding} text.")
                    continue
                if not original:
                    skip(line, f"Line {line} has an empty original text.")
                    continue

                table.entries.append(
                    TranslationEntry(original=original, translated=translated, line=line)
                )
    except LookupError as exc:
        raise TranslationTableError(f"Unknown table encoding '{encoding}'.") from exc
    except OSError as exc:
        raise TranslationTableError(
            f"Translation table {path} could not be read: {exc}"
        ) from exc

    return table

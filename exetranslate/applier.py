"""Apply a translation table to a region of an executable image."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from .codec import encode_utf16z
from .structures import (
    ByteRegion,
    Diagnostic,
    DiagnosticKind,
    TranslationEntry,
)

DiagnosticSink = Callable[[Diagnostic], None]


@dataclass
class ApplyReport:
    """Outcome of running every translation entry against one region."""

    region: ByteRegion
    counts: List[Optional[int]] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)

    @property
    def replacements(self) -> int:
        return sum(count for count in self.counts if count is not None)

    @property
    def applied(self) -> int:
        return sum(1 for count in self.counts if count is not None)

    @property
    def skipped(self) -> int:
        return sum(1 for count in self.counts if count is None)


class TranslationApplier:
    """Runs translation entries in table order and enforces the length policy.

    Entries whose translated encoding is longer than the original are skipped
    unless ``allow_unsafe_growth`` is set, in which case the replacement is
    written anyway and spills into the bytes after each match.
    """

    def __init__(
        self,
        *,
        allow_unsafe_growth: bool = False,
        sink: Optional[DiagnosticSink] = None,
    ) -> None:
        self.allow_unsafe_growth = allow_unsafe_growth
        self.sink = sink

    def apply(
        self,
        region: ByteRegion,
        entries: Sequence[TranslationEntry],
    ) -> ApplyReport:
        report = ApplyReport(region=region)

        for entry in entries:
            original = encode_utf16z(entry.original)
            translated = encode_utf16z(entry.translated)

            if len(original) < len(translated):
                if not self.allow_unsafe_growth:
                    self._emit(
                        report,
                        Diagnostic(
                            kind=DiagnosticKind.GROWTH_SKIPPED,
                            message=(
                                f"'{entry.translated}' is longer than '{entry.original}' "
                                f"({len(translated)} > {len(original)} bytes). "
                                "Skipping this translation."
                            ),
                            entry=entry,
                            line=entry.line,
                        ),
                    )
                    report.counts.append(None)
                    continue

                self._emit(
                    report,
                    Diagnostic(
                        kind=DiagnosticKind.GROWTH_FORCED,
                        message=(
                            f"'{entry.translated}' is longer than '{entry.original}' "
                            f"({len(translated)} > {len(original)} bytes). "
                            "Following data may be corrupted."
                        ),
                        entry=entry,
                        line=entry.line,
                    ),
                )

            replaced = region.replace(original, translated)
            report.counts.append(replaced)
            self._emit(
                report,
                Diagnostic(
                    kind=DiagnosticKind.REPLACED,
                    message=f"Replaced {replaced} occurrences of '{entry.original}'",
                    entry=entry,
                    line=entry.line,
                    count=replaced,
                ),
            )

        return report

    def _emit(self, report: ApplyReport, diagnostic: Diagnostic) -> None:
        report.diagnostics.append(diagnostic)
        if self.sink is not None:
            self.sink(diagnostic)

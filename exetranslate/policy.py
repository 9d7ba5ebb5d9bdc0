"""Diagnostic collection and reporting."""

from __future__ import annotations

from typing import List

from .structures import Diagnostic


class DiagnosticLog:
    """Records diagnostics and echoes them to standard output."""

    def __init__(self, *, echo: bool = True) -> None:
        self.echo = echo
        self.records: List[Diagnostic] = []

    def __call__(self, diagnostic: Diagnostic) -> None:
        self.records.append(diagnostic)
        if self.echo:
            print(self.format(diagnostic))

    @staticmethod
    def format(diagnostic: Diagnostic) -> str:
        if diagnostic.is_warning:
            return f"WARNING: {diagnostic.message}"
        return diagnostic.message

    @property
    def warnings(self) -> List[Diagnostic]:
        return [record for record in self.records if record.is_warning]

    def clear(self) -> None:
        self.records.clear()

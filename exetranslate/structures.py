"""Core data structures for the ExeTranslate patcher."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional

from .substitutor import replace_bytes


@dataclass(frozen=True)
class TranslationEntry:
    """A single (original, translated) substitution rule."""

    original: str
    translated: str
    line: Optional[int] = None


@dataclass(frozen=True)
class SectionExtent:
    """Name and raw-data extent of one executable section."""

    name: bytes
    pointer_to_raw_data: int
    size_of_raw_data: int

    def decoded_name(self) -> Optional[str]:
        """Return the section name without null padding, or None if undecodable."""

        try:
            return self.name.rstrip(b"\x00").decode("utf-8")
        except UnicodeDecodeError:
            return None


class ByteRegion:
    """A bounded, writable window onto an image buffer.

    Writes made through the region land directly in ``buffer``.
    """

    def __init__(self, buffer: bytearray, offset: int, size: int, name: str = "") -> None:
        if offset < 0 or size < 0 or offset + size > len(buffer):
            raise ValueError(
                f"Region {name or '<unnamed>'} [{offset:#x}, {offset + size:#x}) "
                f"lies outside a buffer of {len(buffer)} bytes."
            )
        self.buffer = buffer
        self.offset = offset
        self.size = size
        self.name = name

    @property
    def end(self) -> int:
        return self.offset + self.size

    def __len__(self) -> int:
        return self.size

    def tobytes(self) -> bytes:
        return bytes(self.buffer[self.offset:self.end])

    def replace(self, pattern: bytes, replacement: bytes) -> int:
        """Substitute ``pattern`` with ``replacement`` inside this region only."""

        return replace_bytes(
            self.buffer,
            pattern,
            replacement,
            start=self.offset,
            end=self.end,
        )

    def __repr__(self) -> str:
        return f"ByteRegion(name={self.name!r}, offset={self.offset:#x}, size={self.size})"


class DiagnosticKind(Enum):
    """Categorises diagnostics emitted while loading and applying translations."""

    ROW_SKIPPED = auto()
    GROWTH_SKIPPED = auto()
    GROWTH_FORCED = auto()
    REPLACED = auto()


@dataclass(frozen=True)
class Diagnostic:
    """Stores context for a reported anomaly or replacement count."""

    kind: DiagnosticKind
    message: str
    entry: Optional[TranslationEntry] = None
    line: Optional[int] = None
    count: Optional[int] = None

    @property
    def is_warning(self) -> bool:
        return self.kind is not DiagnosticKind.REPLACED

"""Executable loading and selection of patchable section regions."""

from __future__ import annotations

import pathlib
from typing import Iterable, Iterator, List

import pefile

from .errors import UnsupportedExecutableError
from .structures import ByteRegion, SectionExtent

DEFAULT_SECTION = ".rdata"


def load_image(path: pathlib.Path) -> bytearray:
    """Read the whole executable into a mutable buffer."""

    return bytearray(path.read_bytes())


def parse_pe(buffer: bytearray) -> pefile.PE:
    """Parse the buffer as a PE image without touching the data directories."""

    try:
        return pefile.PE(data=bytes(buffer), fast_load=True)
    except pefile.PEFormatError as exc:
        raise UnsupportedExecutableError(
            f"Wrong executable file type: {exc.value}"
        ) from exc


def section_extents(pe: pefile.PE) -> List[SectionExtent]:
    return [
        SectionExtent(
            name=bytes(section.Name),
            pointer_to_raw_data=section.PointerToRawData,
            size_of_raw_data=section.SizeOfRawData,
        )
        for section in pe.sections
    ]


def select_regions(
    buffer: bytearray,
    sections: Iterable[SectionExtent],
    target_name: str = DEFAULT_SECTION,
) -> Iterator[ByteRegion]:
    """Yield one region per section named ``target_name``.

    Regions are produced lazily so callers hold at most one at a time.
    """

    for section in sections:
        name = section.decoded_name()
        if name is None or name != target_name:
            continue
        try:
            yield ByteRegion(
                buffer,
                section.pointer_to_raw_data,
                section.size_of_raw_data,
                name=name,
            )
        except ValueError as exc:
            raise UnsupportedExecutableError(
                f"Section {name} points outside the executable: {exc}"
            ) from exc

"""Shared fixtures: a minimal PE32 image builder."""

from __future__ import annotations

import struct
from typing import Sequence, Tuple

import pytest

FILE_ALIGNMENT = 0x200
SECTION_ALIGNMENT = 0x1000
E_LFANEW = 0x40
OPTIONAL_HEADER_SIZE = 0xE0


def _align(value: int, alignment: int) -> int:
    return (value + alignment - 1) // alignment * alignment


def build_pe(sections: Sequence[Tuple[bytes, bytes]]) -> bytes:
    """Build a PE32 image with the given (name, raw data) sections.

    Raw data is padded to the file alignment and placed after the headers in
    order. Returns the complete image.
    """

    headers_size = _align(
        E_LFANEW + 4 + 20 + OPTIONAL_HEADER_SIZE + 40 * len(sections),
        FILE_ALIGNMENT,
    )

    dos_header = bytearray(E_LFANEW)
    dos_header[0:2] = b"MZ"
    struct.pack_into("<I", dos_header, 0x3C, E_LFANEW)

    file_header = struct.pack(
        "<HHIIIHH",
        0x14C,
        len(sections),
        0,
        0,
        0,
        OPTIONAL_HEADER_SIZE,
        0x0102,
    )

    image_size = SECTION_ALIGNMENT * (len(sections) + 1)
    optional_header = struct.pack(
        "<HBBIIIIIIIIIHHHHHHIIIIHHIIIIII",
        0x10B,
        14,
        0,
        0,
        0,
        0,
        SECTION_ALIGNMENT,
        SECTION_ALIGNMENT,
        0,
        0x400000,
        SECTION_ALIGNMENT,
        FILE_ALIGNMENT,
        6,
        0,
        0,
        0,
        6,
        0,
        0,
        image_size,
        headers_size,
        0,
        3,
        0,
        0x100000,
        0x1000,
        0x100000,
        0x1000,
        0,
        16,
    )
    optional_header += bytes(16 * 8)
    assert len(optional_header) == OPTIONAL_HEADER_SIZE

    section_headers = b""
    section_data = b""
    pointer = headers_size
    for index, (name, data) in enumerate(sections):
        raw_size = _align(len(data), FILE_ALIGNMENT) if data else 0
        section_headers += struct.pack(
            "<8sIIIIIIHHI",
            name,
            len(data),
            SECTION_ALIGNMENT * (index + 1),
            raw_size,
            pointer if raw_size else 0,
            0,
            0,
            0,
            0,
            0x40000040,
        )
        section_data += data.ljust(raw_size, b"\x00")
        pointer += raw_size

    headers = bytes(dos_header) + b"PE\x00\x00" + file_header + optional_header + section_headers
    return headers.ljust(headers_size, b"\x00") + section_data


def section_offset(sections: Sequence[Tuple[bytes, bytes]], index: int) -> int:
    """Return the raw-data file offset of ``sections[index]`` in ``build_pe`` output."""

    offset = _align(
        E_LFANEW + 4 + 20 + OPTIONAL_HEADER_SIZE + 40 * len(sections),
        FILE_ALIGNMENT,
    )
    for _, data in sections[:index]:
        offset += _align(len(data), FILE_ALIGNMENT) if data else 0
    return offset


@pytest.fixture
def pe_builder():
    return build_pe


@pytest.fixture
def write_table(tmp_path):
    """Write translation table text to a file and return its path."""

    def _write(content: str, name: str = "table.csv", encoding: str = "utf-8"):
        path = tmp_path / name
        path.write_bytes(content.encode(encoding))
        return path

    return _write

"""Null-terminated UTF-16LE string encoding."""

from __future__ import annotations

TERMINATOR = b"\x00\x00"


def encode_utf16z(text: str) -> bytes:
    """Encode text as UTF-16LE code units followed by a null code unit."""

    return text.encode("utf-16-le") + TERMINATOR


def decode_utf16z(data: bytes) -> str:
    """Decode a UTF-16LE string up to its first code-unit-aligned terminator.

    Unpaired surrogates are passed through rather than rejected, so any
    section bytes can be read back.
    """

    end = len(data) - (len(data) % 2)
    for index in range(0, end, 2):
        if data[index:index + 2] == TERMINATOR:
            end = index
            break
    return bytes(data[:end]).decode("utf-16-le", errors="surrogatepass")

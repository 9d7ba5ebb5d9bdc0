"""In-place byte pattern substitution."""

from __future__ import annotations

from typing import Optional


def replace_bytes(
    buffer: bytearray,
    pattern: bytes,
    replacement: bytes,
    *,
    start: int = 0,
    end: Optional[int] = None,
) -> int:
    """Overwrite every occurrence of ``pattern`` in ``buffer[start:end]``.

    Each match is zero-filled and ``replacement`` is written from the match
    start. A replacement longer than the pattern spills into the bytes that
    follow the match. Candidate offsets run from the region start up to
    ``region length - max(len(pattern), len(replacement))``, so writes never
    leave the region. Scanning resumes one byte after each match start, which
    means overlapping occurrences and freshly written bytes are matched too.

    Returns the number of replacements made. The buffer never changes size.
    """

    if end is None:
        end = len(buffer)
    width = max(len(pattern), len(replacement))
    if not pattern or end - start < width:
        return 0

    last_start = end - width
    search_end = last_start + len(pattern)
    zeros = bytes(len(pattern))
    replaced = 0

    index = buffer.find(pattern, start, search_end)
    while index != -1:
        buffer[index:index + len(pattern)] = zeros
        buffer[index:index + len(replacement)] = replacement
        replaced += 1
        index = buffer.find(pattern, index + 1, search_end)

    return replaced

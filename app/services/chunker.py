"""Heading-aligned content chunking.

Boundary rules:
  * a boundary sits immediately before every `<h1`, `<h2` or `<h3` opening tag
    (case-insensitive); the tag stays at the start of the following piece
  * pieces are packed greedily; a chunk is closed when the next piece would
    push it past `max_size` and it already holds something
  * a single piece longer than `max_size` becomes its own oversized chunk,
    so markup is never cut mid-tag
  * "".join(chunks) == content, always
"""
from __future__ import annotations

import re

HEADING_BOUNDARY_RE = re.compile(r"(?=<h[1-3][\s>/])", re.IGNORECASE)


def split_on_headings(content: str) -> list[str]:
    """Split before each level 1-3 heading tag without dropping anything."""
    return [piece for piece in HEADING_BOUNDARY_RE.split(content) if piece]


def split_content(content: str, max_size: int) -> list[str]:
    pieces = split_on_headings(content)
    if len(pieces) <= 1:
        return [content]

    max_size = max(max_size, 1)
    chunks: list[str] = []
    buffer = ""
    for piece in pieces:
        if buffer and len(buffer) + len(piece) > max_size:
            chunks.append(buffer)
            buffer = ""
        buffer += piece
    chunks.append(buffer)
    return chunks

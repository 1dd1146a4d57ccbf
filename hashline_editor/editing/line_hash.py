"""
Line hashing — short, whitespace-insensitive fingerprints for anchors.

Each line is identified by its 1-indexed number and a 2-character code
derived from ``"<number>:<content without whitespace>"`` with xxHash32.
Because the number is part of the input, the same text at another line
usually hashes differently, so an anchor cannot silently follow a line
that moved.
"""

from __future__ import annotations

import re
from typing import Iterable, Iterator

import xxhash

NIBBLE_STR = "ZPMQVRWSNKTXJBYH"

# 256 two-letter codes, indexed by the low byte of the digest
HASHLINE_DICT = [f"{NIBBLE_STR[i >> 4]}{NIBBLE_STR[i & 0x0F]}" for i in range(256)]

HASH_CHARS = frozenset(NIBBLE_STR)

_WHITESPACE = re.compile(r"\s+")


def compute_line_hash(line_number: int, content: str) -> str:
    """Return the 2-character hash of *content* at *line_number*.

    Parameters
    ----------
    line_number:
        1-indexed line number; part of the hash input.
    content:
        Line text without its newline. All whitespace is ignored.

    Returns
    -------
    str
        Two characters from :data:`NIBBLE_STR`.
    """
    stripped = _WHITESPACE.sub("", content)
    key = f"{line_number}:{stripped}"
    digest = xxhash.xxh32(key.encode("utf-8")).intdigest()
    return HASHLINE_DICT[digest % 256]


def format_hash_line(line_number: int, content: str) -> str:
    """Format one line as ``LINE#ID|content``."""
    return f"{line_number}#{compute_line_hash(line_number, content)}|{content}"


def iter_hash_lines(lines: Iterable[str], start_line: int = 1) -> Iterator[str]:
    """Yield ``LINE#ID|content`` for each line, numbering from *start_line*."""
    for offset, content in enumerate(lines):
        yield format_hash_line(start_line + offset, content)


def format_hash_lines(content: str, start_line: int = 1) -> str:
    """Return the hashed listing of a whole text.

    A trailing newline does not produce an extra listed line, so the
    numbering matches the anchors the editor accepts.
    """
    if not content:
        return ""
    lines = content.split("\n")
    if lines[-1] == "":
        lines.pop()
    return "\n".join(iter_hash_lines(lines, start_line))

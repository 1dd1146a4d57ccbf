"""
Anchor parsing and validation.

An anchor (``LINE#ID``) names one line of one snapshot of a file.  Parsing
is tolerant of the noise that creeps in when a caller copies tags out of a
listing; validation is strict.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterable, Union

from .errors import (
    HashMismatch,
    HashMismatchError,
    InvalidAnchorFormatError,
    NotALineNumberError,
    OutOfBoundsError,
)
from .line_hash import HASHLINE_DICT, NIBBLE_STR, compute_line_hash

logger = logging.getLogger(__name__)

# Lines of unmarked context shown around each mismatch
MISMATCH_CONTEXT = 2

_LEADING_NOISE = re.compile(r"^(?:>>>|>>|>|\+|-)?\s*")
_ANCHOR = re.compile(
    r"^(?P<line>\d+)\s*#\s*(?P<hash>[" + NIBBLE_STR + r"]{2})(?:\s*[|:].*)?$",
    re.IGNORECASE | re.DOTALL,
)
_LEGACY_ANCHOR = re.compile(
    r"^(?P<line>\d+):(?P<hex>[0-9a-fA-F]{2})(?:\s*\|.*)?$", re.DOTALL
)
_PLACEHOLDER = re.compile(r"^(?P<token>[A-Za-z_][\w-]*)\s*[#:]")


@dataclass(frozen=True)
class LineRef:
    """A parsed anchor: 1-indexed line number plus expected hash."""
    line: int
    hash: str

    def __str__(self) -> str:
        return f"{self.line}#{self.hash}"


Anchor = Union[LineRef, str]


def parse_anchor(raw: str) -> LineRef:
    """Parse ``"42#VK"`` (and tolerated variants) into a :class:`LineRef`.

    Accepted noise: surrounding whitespace, a leading ``>>>``/``>``/``+``/
    ``-`` marker, spaces around ``#``, a trailing ``|content`` echo,
    lower-case hash letters and the legacy ``42:a3`` hex form.

    Raises
    ------
    NotALineNumberError
        If the line position holds a word such as ``LINE``.
    InvalidAnchorFormatError
        For anything else that is not an anchor.
    """
    if not isinstance(raw, str):
        raise InvalidAnchorFormatError(repr(raw), "Anchors must be strings.")

    text = _LEADING_NOISE.sub("", raw.strip(), count=1)

    match = _ANCHOR.match(text)
    if match:
        line = int(match.group("line"))
        if line < 1:
            raise InvalidAnchorFormatError(raw, "Line numbers start at 1.")
        return LineRef(line=line, hash=match.group("hash").upper())

    legacy = _LEGACY_ANCHOR.match(text)
    if legacy:
        line = int(legacy.group("line"))
        if line < 1:
            raise InvalidAnchorFormatError(raw, "Line numbers start at 1.")
        return LineRef(line=line, hash=HASHLINE_DICT[int(legacy.group("hex"), 16)])

    placeholder = _PLACEHOLDER.match(text)
    if placeholder:
        raise NotALineNumberError(raw, placeholder.group("token"))

    raise InvalidAnchorFormatError(raw)


def coerce_anchor(anchor: LineRef | str) -> LineRef:
    """Return *anchor* as a :class:`LineRef`, parsing strings."""
    if isinstance(anchor, LineRef):
        return anchor
    return parse_anchor(anchor)


def validate_anchor(lines: list[str], anchor: LineRef | str) -> None:
    """Check a single anchor against the current lines."""
    validate_anchors(lines, [anchor])


def validate_anchors(lines: list[str], anchors: Iterable[LineRef | str]) -> None:
    """Check every anchor against one snapshot of the file.

    Bounds are checked first (the first out-of-range anchor raises).
    Hash mismatches are collected and reported together so the caller can
    fix all of them in one round trip.

    Raises
    ------
    OutOfBoundsError
        If an anchor points outside ``[1, len(lines)]``.
    HashMismatchError
        Listing every stale anchor with the line's current tag and text.
    """
    refs: list[LineRef] = []
    seen: set[LineRef] = set()
    for anchor in anchors:
        ref = coerce_anchor(anchor)
        if ref in seen:
            continue
        seen.add(ref)
        refs.append(ref)

    for ref in refs:
        if ref.line < 1 or ref.line > len(lines):
            raise OutOfBoundsError(ref.line, len(lines))

    mismatches: list[HashMismatch] = []
    for ref in refs:
        content = lines[ref.line - 1]
        actual = compute_line_hash(ref.line, content)
        if actual != ref.hash:
            mismatches.append(HashMismatch(
                line=ref.line, expected=ref.hash, actual=actual, content=content,
            ))

    if mismatches:
        logger.debug(
            "[HashlineEdit] %d stale anchor(s): %s",
            len(mismatches), ", ".join(f"{m.line}#{m.expected}" for m in mismatches),
        )
        raise HashMismatchError(
            mismatches, lines, format_mismatch_listing(mismatches, lines),
        )


def format_mismatch_listing(mismatches: list[HashMismatch], lines: list[str]) -> str:
    """Render mismatched lines (``>>>``) with surrounding context."""
    marked = {m.line for m in mismatches}
    shown: set[int] = set()
    for m in mismatches:
        lo = max(1, m.line - MISMATCH_CONTEXT)
        hi = min(len(lines), m.line + MISMATCH_CONTEXT)
        shown.update(range(lo, hi + 1))

    out: list[str] = []
    previous = None
    for number in sorted(shown):
        if previous is not None and number > previous + 1:
            out.append("    ...")
        previous = number
        content = lines[number - 1]
        tag = f"{number}#{compute_line_hash(number, content)}|{content}"
        out.append(f">>> {tag}" if number in marked else f"    {tag}")
    return "\n".join(out)

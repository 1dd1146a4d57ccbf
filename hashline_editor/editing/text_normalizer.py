"""
Text normalizer — turns edit payloads into line lists and undoes the
usual copy-paste artifacts in agent-written replacement text.

All helpers are pure: they take lists and return new lists.
"""

from __future__ import annotations

import re

from .errors import EmptyInsertPayloadError

# Minimum non-whitespace length for a wrapped line to be collapsed
COLLAPSE_MIN_LENGTH = 12

_HASHLINE_PREFIX = re.compile(r"^\s*(?:>>>\s*)?\d+\s*#\s*[ZPMQVRWSNKTXJBYH]{2}\|", re.IGNORECASE)
_LEADING_WS = re.compile(r"^\s*")
_WHITESPACE = re.compile(r"\s+")


def to_lines(payload: str | list[str] | None) -> list[str]:
    """Convert an edit payload into a list of lines.

    Strings are split on real newline characters only; a literal
    backslash-n (two characters) is kept as text.
    """
    if payload is None:
        return []
    if isinstance(payload, str):
        return payload.split("\n")
    return [str(line) for line in payload]


def strip_hashline_prefixes(lines: list[str]) -> list[str]:
    """Remove ``LINE#ID|`` prefixes when every non-empty line carries one."""
    non_empty = [line for line in lines if line.strip()]
    if not non_empty:
        return list(lines)
    if not all(_HASHLINE_PREFIX.match(line) for line in non_empty):
        return list(lines)
    return [_HASHLINE_PREFIX.sub("", line, count=1) for line in lines]


def payload_lines(payload: str | list[str] | None) -> list[str]:
    """:func:`to_lines` followed by :func:`strip_hashline_prefixes`."""
    return strip_hashline_prefixes(to_lines(payload))


# ------------------------------------------------------------------
# Echo stripping
# ------------------------------------------------------------------

def strip_insert_after_echo(anchor_line: str, lines: list[str]) -> list[str]:
    """Drop a leading copy of the anchor line from an insert_after payload."""
    if lines and lines[0] == anchor_line:
        return lines[1:]
    return list(lines)


def strip_insert_before_echo(anchor_line: str, lines: list[str]) -> list[str]:
    """Drop a trailing copy of the anchor line from an insert_before payload."""
    if lines and lines[-1] == anchor_line:
        return lines[:-1]
    return list(lines)


def strip_insert_between_echo(
    after_line: str,
    before_line: str,
    lines: list[str],
) -> list[str]:
    """Strip both boundary echoes from an insert_between payload."""
    return strip_insert_before_echo(
        before_line, strip_insert_after_echo(after_line, lines)
    )


def strip_range_boundary_echo(
    file_lines: list[str],
    start_line: int,
    end_line: int,
    replacement: list[str],
) -> list[str]:
    """Strip copies of the lines just outside ``start_line..end_line``.

    Only multi-line payloads are touched: a one-line replacement that
    equals a neighbour is a legitimate edit, not an echo.
    """
    result = list(replacement)
    if len(result) <= 1:
        return result
    before_index = start_line - 2
    if before_index >= 0 and result[0] == file_lines[before_index]:
        result = result[1:]
    after_index = end_line
    if result and after_index < len(file_lines) and result[-1] == file_lines[after_index]:
        result = result[:-1]
    return result


def require_insert_payload(lines: list[str], operation: str, *anchors: str) -> list[str]:
    """Return *lines*, or raise if an insert-type payload ended up empty."""
    if not lines:
        raise EmptyInsertPayloadError(operation, tuple(str(a) for a in anchors))
    return lines


# ------------------------------------------------------------------
# Indentation
# ------------------------------------------------------------------

def leading_whitespace(text: str) -> str:
    match = _LEADING_WS.match(text)
    return match.group(0) if match else ""


def restore_leading_indent(original: str, replacement: list[str]) -> list[str]:
    """Give the first replacement line the original line's indentation
    when the caller dropped it."""
    if not replacement:
        return []
    first = replacement[0]
    if not first or leading_whitespace(first):
        return list(replacement)
    indent = leading_whitespace(original)
    if not indent:
        return list(replacement)
    return [indent + first] + replacement[1:]


def restore_paired_indent(original_lines: list[str], replacement_lines: list[str]) -> list[str]:
    """Line-by-line indentation restore when both lists have equal length."""
    if len(original_lines) != len(replacement_lines):
        return list(replacement_lines)
    restored = []
    for original, line in zip(original_lines, replacement_lines):
        if not line or leading_whitespace(line):
            restored.append(line)
            continue
        restored.append(leading_whitespace(original) + line)
    return restored


# ------------------------------------------------------------------
# Merged / wrapped line correction
# ------------------------------------------------------------------

def restore_old_wrapped_lines(original_lines: list[str], replacement_lines: list[str]) -> list[str]:
    """Keep the original span when the replacement only changes whitespace.

    Applies to multi-line replacements with the same line count as the
    span they replace.
    """
    if len(replacement_lines) <= 1 or len(original_lines) != len(replacement_lines):
        return list(replacement_lines)
    original = _WHITESPACE.sub("", "\n".join(original_lines))
    replacement = _WHITESPACE.sub("", "\n".join(replacement_lines))
    if original != replacement:
        return list(replacement_lines)
    return list(original_lines)


def expand_merged_line(original_lines: list[str], replacement_lines: list[str]) -> list[str]:
    """Split a single merged replacement line back into the original count.

    Applies when the replacement is one line, the original span is several
    non-blank lines, and every original line's trimmed text occurs in the
    merged line in order.  Falls back to splitting on ``"; "`` when that
    yields exactly the original line count.
    """
    if len(replacement_lines) != 1 or len(original_lines) <= 1:
        return list(replacement_lines)

    merged = replacement_lines[0]
    parts = [line.strip() for line in original_lines]
    if any(not part for part in parts):
        return list(replacement_lines)

    indices: list[int] = []
    offset = 0
    for part in parts:
        idx = merged.find(part, offset)
        if idx == -1:
            break
        indices.append(idx)
        offset = idx + len(part)

    if len(indices) == len(parts):
        expanded = []
        for i, start in enumerate(indices):
            end = indices[i + 1] if i + 1 < len(indices) else len(merged)
            piece = merged[start:end].strip()
            if not piece:
                break
            expanded.append(piece)
        if len(expanded) == len(original_lines):
            return expanded

    pieces = [p.strip() for p in re.split(r";\s+", merged)]
    pieces = [p for p in pieces if p]
    if len(pieces) == len(original_lines):
        return [
            p if i == len(pieces) - 1 or p.endswith(";") else f"{p};"
            for i, p in enumerate(pieces)
        ]

    return list(replacement_lines)


def collapse_wrapped_lines(file_lines: list[str], replacement_lines: list[str]) -> list[str]:
    """Collapse a re-wrapped replacement back to the single original line.

    A multi-line replacement whose concatenation (whitespace-free, or
    joined with single spaces) rebuilds exactly one line of the original
    file becomes that line again.  Skipped when the candidate is shorter
    than :data:`COLLAPSE_MIN_LENGTH`, occurs more than once in the file, or
    the replacement repeats one of its own non-blank lines.
    """
    if len(replacement_lines) <= 1:
        return list(replacement_lines)

    stripped = [line.strip() for line in replacement_lines if line.strip()]
    if len(stripped) != len(set(stripped)):
        return list(replacement_lines)

    compact = _WHITESPACE.sub("", "".join(stripped))
    spaced = " ".join(stripped)
    if len(compact) < COLLAPSE_MIN_LENGTH:
        return list(replacement_lines)

    matches = [
        line for line in file_lines
        if _WHITESPACE.sub("", line) == compact or line.strip() == spaced
    ]
    if len(matches) != 1:
        return list(replacement_lines)
    return [matches[0]]

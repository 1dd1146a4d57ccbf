"""
Edit operations — one pure function per edit primitive.

Every function takes the current line list and returns a new one; the
input is never mutated.  Anchored primitives validate their anchors unless
``skip_validation`` is set (the batch applicator validates all anchors
against one snapshot before applying anything).
"""

from __future__ import annotations

from .anchors import Anchor, coerce_anchor, validate_anchors
from .errors import InvalidAdjacencyError, InvalidRangeError, TextNotFoundError
from .text_normalizer import (
    collapse_wrapped_lines,
    expand_merged_line,
    payload_lines,
    require_insert_payload,
    restore_leading_indent,
    restore_old_wrapped_lines,
    restore_paired_indent,
    strip_insert_after_echo,
    strip_insert_before_echo,
    strip_insert_between_echo,
    strip_range_boundary_echo,
)


def apply_set_line(
    lines: list[str],
    anchor: Anchor,
    text: str | list[str],
    *,
    skip_validation: bool = False,
) -> list[str]:
    """Replace the anchored line. An empty payload deletes it."""
    ref = coerce_anchor(anchor)
    if not skip_validation:
        validate_anchors(lines, [ref])

    index = ref.line - 1
    replacement = strip_range_boundary_echo(lines, ref.line, ref.line, payload_lines(text))
    replacement = restore_leading_indent(lines[index], replacement)
    return lines[:index] + replacement + lines[index + 1:]


def apply_replace_lines(
    lines: list[str],
    start_anchor: Anchor,
    end_anchor: Anchor,
    text: str | list[str],
    *,
    skip_validation: bool = False,
) -> list[str]:
    """Replace the inclusive span between two anchors."""
    start = coerce_anchor(start_anchor)
    end = coerce_anchor(end_anchor)
    if start.line > end.line:
        raise InvalidRangeError(start.line, end.line)
    if not skip_validation:
        validate_anchors(lines, [start, end])

    original = lines[start.line - 1:end.line]
    replacement = strip_range_boundary_echo(lines, start.line, end.line, payload_lines(text))

    expanded = expand_merged_line(original, replacement)
    if expanded == replacement and len(original) > 1:
        replacement = collapse_wrapped_lines(lines, replacement)
    else:
        replacement = expanded
    replacement = restore_old_wrapped_lines(original, replacement)
    replacement = restore_paired_indent(original, replacement)

    replacement = restore_leading_indent(original[0], replacement)
    return lines[:start.line - 1] + replacement + lines[end.line:]


def apply_insert_after(
    lines: list[str],
    anchor: Anchor,
    text: str | list[str],
    *,
    skip_validation: bool = False,
) -> list[str]:
    ref = coerce_anchor(anchor)
    if not skip_validation:
        validate_anchors(lines, [ref])

    inserted = strip_insert_after_echo(lines[ref.line - 1], payload_lines(text))
    require_insert_payload(inserted, "insert_after", str(ref))
    return lines[:ref.line] + inserted + lines[ref.line:]


def apply_insert_before(
    lines: list[str],
    anchor: Anchor,
    text: str | list[str],
    *,
    skip_validation: bool = False,
) -> list[str]:
    ref = coerce_anchor(anchor)
    if not skip_validation:
        validate_anchors(lines, [ref])

    inserted = strip_insert_before_echo(lines[ref.line - 1], payload_lines(text))
    require_insert_payload(inserted, "insert_before", str(ref))
    return lines[:ref.line - 1] + inserted + lines[ref.line - 1:]


def apply_insert_between(
    lines: list[str],
    after_anchor: Anchor,
    before_anchor: Anchor,
    text: str | list[str],
    *,
    skip_validation: bool = False,
) -> list[str]:
    """Insert once into the gap directly above ``before_anchor``.

    The anchors need not be adjacent; skipped lines stay where they are.
    """
    after = coerce_anchor(after_anchor)
    before = coerce_anchor(before_anchor)
    if before.line <= after.line:
        raise InvalidAdjacencyError(after.line, before.line)
    if not skip_validation:
        validate_anchors(lines, [after, before])

    inserted = strip_insert_between_echo(
        lines[after.line - 1], lines[before.line - 1], payload_lines(text)
    )
    require_insert_payload(inserted, "insert_between", str(after), str(before))
    return lines[:before.line - 1] + inserted + lines[before.line - 1:]


def apply_replace(content: str, old_text: str, new_text: str | list[str]) -> str:
    """Replace every occurrence of *old_text* in the whole text.

    Raises
    ------
    TextNotFoundError
        If *old_text* does not occur.
    """
    if not old_text or old_text not in content:
        raise TextNotFoundError(old_text)
    replacement = new_text if isinstance(new_text, str) else "\n".join(new_text)
    return content.replace(old_text, replacement)


def apply_append(lines: list[str], text: str | list[str]) -> list[str]:
    """Add lines after the last line; an empty file just becomes the payload."""
    appended = require_insert_payload(payload_lines(text), "append")
    return list(lines) + appended


def apply_prepend(lines: list[str], text: str | list[str]) -> list[str]:
    """Add lines before the first line."""
    prepended = require_insert_payload(payload_lines(text), "prepend")
    return prepended + list(lines)

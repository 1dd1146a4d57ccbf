"""
Batch applicator — dedupes, validates, orders and applies an edit batch.

A batch is all-or-nothing: every anchor is validated against the same
pre-edit snapshot before anything is applied, and any failure raises
without producing content.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .anchors import LineRef, coerce_anchor, validate_anchors
from .edits import (
    Append,
    Edit,
    InsertAfter,
    InsertBefore,
    InsertBetween,
    Prepend,
    Replace,
    ReplaceLines,
    SetLine,
    edit_kind,
    is_whole_file,
)
from .envelope import join_content, split_content
from .errors import InvalidEditError
from .operations import (
    apply_append,
    apply_insert_after,
    apply_insert_before,
    apply_insert_between,
    apply_prepend,
    apply_replace,
    apply_replace_lines,
    apply_set_line,
)
from .text_normalizer import to_lines

logger = logging.getLogger(__name__)

# Order of anchored edits that share an effective line. Inserting after a
# line must happen before that line is rewritten, inserting before it after.
_SAME_LINE_PRECEDENCE = {
    InsertAfter: 0,
    SetLine: 1,
    ReplaceLines: 1,
    InsertBetween: 2,
    InsertBefore: 3,
}


@dataclass
class ApplyReport:
    """Outcome of one batch."""
    content: str
    noop_edits: int = 0
    deduplicated_edits: int = 0


# ------------------------------------------------------------------
# Dedupe
# ------------------------------------------------------------------

def _payload_key(payload: str | list[str]) -> tuple[str, ...]:
    return tuple(to_lines(payload))


def _anchor_key(anchor: LineRef | str) -> str:
    return str(coerce_anchor(anchor))


def dedupe_key(edit: Edit) -> tuple:
    """Canonical key: kind, anchors and normalized payload.

    Each part is its own tuple item.
    """
    if isinstance(edit, SetLine):
        parts = [_anchor_key(edit.line), _payload_key(edit.text)]
    elif isinstance(edit, ReplaceLines):
        parts = [_anchor_key(edit.start_line), _anchor_key(edit.end_line), _payload_key(edit.text)]
    elif isinstance(edit, (InsertAfter, InsertBefore)):
        parts = [_anchor_key(edit.line), _payload_key(edit.text)]
    elif isinstance(edit, InsertBetween):
        parts = [_anchor_key(edit.after_line), _anchor_key(edit.before_line), _payload_key(edit.text)]
    elif isinstance(edit, Replace):
        parts = [edit.old_text, _payload_key(edit.new_text)]
    elif isinstance(edit, (Append, Prepend)):
        parts = [_payload_key(edit.text)]
    else:
        raise InvalidEditError(f"Unsupported edit object: {edit!r}")
    return (edit_kind(edit), *parts)


def dedupe_edits(edits: list[Edit]) -> tuple[list[Edit], int]:
    """Drop later duplicates. Returns (unique edits, number dropped)."""
    seen: set[tuple] = set()
    unique: list[Edit] = []
    dropped = 0
    for edit in edits:
        key = dedupe_key(edit)
        if key in seen:
            dropped += 1
            continue
        seen.add(key)
        unique.append(edit)
    return unique, dropped


# ------------------------------------------------------------------
# Validation and ordering
# ------------------------------------------------------------------

def collect_line_refs(edits: list[Edit]) -> list[LineRef]:
    """Every anchor referenced by *edits*, parsed."""
    refs: list[LineRef] = []
    for edit in edits:
        if isinstance(edit, SetLine):
            refs.append(coerce_anchor(edit.line))
        elif isinstance(edit, ReplaceLines):
            refs.extend([coerce_anchor(edit.start_line), coerce_anchor(edit.end_line)])
        elif isinstance(edit, (InsertAfter, InsertBefore)):
            refs.append(coerce_anchor(edit.line))
        elif isinstance(edit, InsertBetween):
            refs.extend([coerce_anchor(edit.after_line), coerce_anchor(edit.before_line)])
    return refs


def effective_line(edit: Edit) -> int | None:
    """Line an anchored edit sorts by; ``None`` for whole-file edits."""
    if isinstance(edit, SetLine):
        return coerce_anchor(edit.line).line
    if isinstance(edit, ReplaceLines):
        return coerce_anchor(edit.end_line).line
    if isinstance(edit, (InsertAfter, InsertBefore)):
        return coerce_anchor(edit.line).line
    if isinstance(edit, InsertBetween):
        return coerce_anchor(edit.before_line).line
    return None


def edit_sort_key(edit: Edit) -> tuple[int, int, int]:
    """Sort key for bottom-up application.

    Anchored edits come first, highest effective line first; whole-file
    edits (replace, append, prepend) come after all of them.  Sorting is
    stable, so whole-file edits keep their submission order.
    """
    if is_whole_file(edit):
        return (1, 0, 0)
    return (0, -effective_line(edit), _SAME_LINE_PRECEDENCE[type(edit)])


# ------------------------------------------------------------------
# Application
# ------------------------------------------------------------------

def _apply_lines(lines: list[str], edit: Edit) -> list[str]:
    if isinstance(edit, SetLine):
        return apply_set_line(lines, edit.line, edit.text, skip_validation=True)
    if isinstance(edit, ReplaceLines):
        return apply_replace_lines(
            lines, edit.start_line, edit.end_line, edit.text, skip_validation=True,
        )
    if isinstance(edit, InsertAfter):
        return apply_insert_after(lines, edit.line, edit.text, skip_validation=True)
    if isinstance(edit, InsertBefore):
        return apply_insert_before(lines, edit.line, edit.text, skip_validation=True)
    if isinstance(edit, InsertBetween):
        return apply_insert_between(
            lines, edit.after_line, edit.before_line, edit.text, skip_validation=True,
        )
    if isinstance(edit, Append):
        return apply_append(lines, edit.text)
    if isinstance(edit, Prepend):
        return apply_prepend(lines, edit.text)
    raise InvalidEditError(f"Unsupported edit object: {edit!r}")


def _apply_one(
    lines: list[str], trailing_newline: bool, edit: Edit,
) -> tuple[list[str], bool]:
    """Apply one edit; returns the new lines and trailing-newline flag."""
    if isinstance(edit, Replace):
        # Plain-text replace sees the whole file, final newline included
        text = join_content(lines, trailing_newline)
        return split_content(apply_replace(text, edit.old_text, edit.new_text))
    return _apply_lines(lines, edit), trailing_newline


def apply_edits_with_report(content: str, edits: list[Edit]) -> ApplyReport:
    """Apply a batch of edits to LF-normalized *content*.

    Parameters
    ----------
    content:
        Canonical (LF, BOM-free) file text.
    edits:
        The batch, in caller order.

    Returns
    -------
    ApplyReport
        New content with the no-op and deduplication counts.
    """
    if not edits:
        return ApplyReport(content=content)

    unique, deduplicated = dedupe_edits(edits)
    lines, trailing_newline = split_content(content)

    validate_anchors(lines, collect_line_refs(unique))

    ordered = sorted(unique, key=edit_sort_key)
    logger.debug(
        "[HashlineEdit] Applying %d edit(s) (%d duplicate(s) dropped): %s",
        len(ordered), deduplicated, ", ".join(edit_kind(e) for e in ordered),
    )

    noop_edits = 0
    current = join_content(lines, trailing_newline)
    for edit in ordered:
        updated, updated_trailing = _apply_one(lines, trailing_newline, edit)
        updated_text = join_content(updated, updated_trailing)
        if updated_text == current:
            noop_edits += 1
            continue
        lines, trailing_newline, current = updated, updated_trailing, updated_text

    return ApplyReport(
        content=current,
        noop_edits=noop_edits,
        deduplicated_edits=deduplicated,
    )


def apply_edits(content: str, edits: list[Edit]) -> str:
    """Shortcut for :func:`apply_edits_with_report` returning only content."""
    return apply_edits_with_report(content, edits).content

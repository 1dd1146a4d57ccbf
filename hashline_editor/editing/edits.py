"""
Edit variants and wire-schema normalization.

The eight edit kinds form a closed set of plain dataclasses.  Callers may
also send dicts, either in the canonical ``{"type": ...}`` shape or in the
compact tool-facing ``{"op": "replace"|"append"|"prepend", "pos", "end",
"lines"}`` shape; :func:`normalize_edits` maps both onto the dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

from .anchors import Anchor, LineRef
from .errors import InvalidEditError

Payload = Union[str, list[str]]


@dataclass
class SetLine:
    """Replace exactly one line."""
    line: Anchor
    text: Payload


@dataclass
class ReplaceLines:
    """Replace the inclusive span ``start_line..end_line``."""
    start_line: Anchor
    end_line: Anchor
    text: Payload


@dataclass
class InsertAfter:
    line: Anchor
    text: Payload


@dataclass
class InsertBefore:
    line: Anchor
    text: Payload


@dataclass
class InsertBetween:
    """Insert into the gap between two anchors (``after_line < before_line``)."""
    after_line: Anchor
    before_line: Anchor
    text: Payload


@dataclass
class Replace:
    """Plain-text replacement of every occurrence of ``old_text``."""
    old_text: str
    new_text: Payload


@dataclass
class Append:
    """Add lines at the end of the file (creates a missing file)."""
    text: Payload


@dataclass
class Prepend:
    """Add lines at the start of the file (creates a missing file)."""
    text: Payload


Edit = Union[
    SetLine, ReplaceLines, InsertAfter, InsertBefore, InsertBetween,
    Replace, Append, Prepend,
]

EDIT_TYPES: dict[str, type] = {
    "set_line": SetLine,
    "replace_lines": ReplaceLines,
    "insert_after": InsertAfter,
    "insert_before": InsertBefore,
    "insert_between": InsertBetween,
    "replace": Replace,
    "append": Append,
    "prepend": Prepend,
}

_KIND_BY_TYPE = {cls: name for name, cls in EDIT_TYPES.items()}

WHOLE_FILE_EDITS = (Replace, Append, Prepend)
# Unanchored kinds that may target a file that does not exist yet
FILE_CREATING_EDITS = (Append, Prepend)


def edit_kind(edit: Edit) -> str:
    """Return the wire name of an edit (``"set_line"``, ``"append"``, ...)."""
    try:
        return _KIND_BY_TYPE[type(edit)]
    except KeyError:
        raise InvalidEditError(f"Unsupported edit object: {edit!r}") from None


def is_whole_file(edit: Edit) -> bool:
    return isinstance(edit, WHOLE_FILE_EDITS)


# ------------------------------------------------------------------
# Wire-schema normalization
# ------------------------------------------------------------------

def _first_defined(*values: Any) -> Any:
    for value in values:
        if isinstance(value, LineRef):
            return value
        if isinstance(value, str) and value.strip():
            return value
    return None


def _require_anchor(anchor: Any, index: int, op: str) -> Anchor:
    if anchor is None:
        raise InvalidEditError(
            f"Edit {index}: {op} requires at least one anchor line reference"
        )
    return anchor


def _require_text(raw: dict, index: int, kind: str) -> Payload:
    text = raw.get("text")
    if text is None:
        text = raw.get("new_text")
    if text is None:
        raise InvalidEditError(f"Edit {index}: text is required for {kind}")
    return _check_payload(text, index)


def _check_payload(text: Any, index: int) -> Payload:
    if isinstance(text, str):
        return text
    if isinstance(text, (list, tuple)) and all(isinstance(t, str) for t in text):
        return list(text)
    raise InvalidEditError(
        f"Edit {index}: text must be a string or a list of strings"
    )


def _from_canonical(raw: dict, index: int) -> Edit:
    kind = raw.get("type")
    line = raw.get("line")
    start = raw.get("start_line")
    end = raw.get("end_line")
    after = raw.get("after_line")
    before = raw.get("before_line")

    if kind == "set_line":
        anchor = _first_defined(line, start, end, after, before)
        return SetLine(_require_anchor(anchor, index, kind), _require_text(raw, index, kind))

    if kind == "replace_lines":
        start_anchor = _first_defined(start, line, after)
        end_anchor = _first_defined(end, line, before)
        if start_anchor is None and end_anchor is None:
            raise InvalidEditError(
                f"Edit {index}: replace_lines requires start_line or end_line"
            )
        text = _require_text(raw, index, kind)
        if start_anchor is not None and end_anchor is not None:
            return ReplaceLines(start_anchor, end_anchor, text)
        return SetLine(start_anchor if start_anchor is not None else end_anchor, text)

    if kind == "insert_after":
        anchor = _first_defined(line, after, end, start)
        return InsertAfter(_require_anchor(anchor, index, kind), _require_text(raw, index, kind))

    if kind == "insert_before":
        anchor = _first_defined(line, before, start, end)
        return InsertBefore(_require_anchor(anchor, index, kind), _require_text(raw, index, kind))

    if kind == "insert_between":
        after_anchor = _first_defined(after, line, start)
        before_anchor = _first_defined(before, end, line)
        return InsertBetween(
            _require_anchor(after_anchor, index, "insert_between.after_line"),
            _require_anchor(before_anchor, index, "insert_between.before_line"),
            _require_text(raw, index, kind),
        )

    if kind == "replace":
        old_text = raw.get("old_text")
        if not isinstance(old_text, str) or not old_text:
            raise InvalidEditError(f"Edit {index}: replace requires old_text")
        new_text = raw.get("new_text")
        if new_text is None:
            new_text = raw.get("text")
        if new_text is None:
            raise InvalidEditError(f"Edit {index}: replace requires new_text or text")
        return Replace(old_text, _check_payload(new_text, index))

    if kind == "append":
        return Append(_require_text(raw, index, kind))

    if kind == "prepend":
        return Prepend(_require_text(raw, index, kind))

    raise InvalidEditError(f'Edit {index}: unsupported type "{kind}"')


def _from_tool_schema(raw: dict, index: int) -> Edit:
    op = raw.get("op")
    pos = _first_defined(raw.get("pos"))
    end = _first_defined(raw.get("end"))
    lines = raw.get("lines")
    text: Payload = [] if lines is None else _check_payload(lines, index)

    if op == "replace":
        if pos is not None and end is not None:
            return ReplaceLines(pos, end, text)
        anchor = pos if pos is not None else end
        return SetLine(_require_anchor(anchor, index, "replace"), text)

    if op == "append":
        anchor = end if end is not None else pos
        return Append(text) if anchor is None else InsertAfter(anchor, text)

    if op == "prepend":
        anchor = pos if pos is not None else end
        return Prepend(text) if anchor is None else InsertBefore(anchor, text)

    raise InvalidEditError(
        f'Edit {index}: unsupported op "{op}" (expected replace, append or prepend)'
    )


def normalize_edits(raw_edits: list[Any]) -> list[Edit]:
    """Map caller-supplied edits onto the edit dataclasses.

    Parameters
    ----------
    raw_edits:
        Edit objects, canonical ``{"type": ...}`` dicts or tool-facing
        ``{"op": ...}`` dicts, freely mixed.

    Returns
    -------
    list[Edit]
        One edit per input entry, in the same order.

    Raises
    ------
    InvalidEditError
        If an entry is malformed; the message names its index.
    """
    normalized: list[Edit] = []
    for index, raw in enumerate(raw_edits):
        if isinstance(raw, tuple(EDIT_TYPES.values())):
            normalized.append(raw)
        elif isinstance(raw, dict) and "op" in raw:
            normalized.append(_from_tool_schema(raw, index))
        elif isinstance(raw, dict) and "type" in raw:
            normalized.append(_from_canonical(raw, index))
        else:
            raise InvalidEditError(
                f'Edit {index}: expected an object with "op" or "type", got {raw!r}'
            )
    return normalized

"""
Read-output annotator — adds ``LINE#ID`` tags to numbered file listings.

Readers typically print ``"12: text"`` or ``"12| text"``, sometimes inside
``<content>`` / ``<file>`` blocks.  Annotating that output lets callers
copy anchors straight from what they just read.
"""

from __future__ import annotations

import re

from .line_hash import format_hash_line

TRUNCATION_SUFFIX = "... (line truncated to 2000 chars)"

_COLON_LINE = re.compile(r"^\s*(\d+): ?(.*)$")
_PIPE_LINE = re.compile(r"^\s*(\d+)\| ?(.*)$")

_BLOCK_TAGS = (("<content>", "</content>"), ("<file>", "</file>"))


def parse_read_line(line: str) -> tuple[int, str] | None:
    """Return ``(line_number, content)`` for a numbered line, else None."""
    match = _COLON_LINE.match(line) or _PIPE_LINE.match(line)
    if not match:
        return None
    return int(match.group(1)), match.group(2)


def annotate_line(line: str) -> str:
    parsed = parse_read_line(line)
    if parsed is None:
        return line
    number, content = parsed
    if content.endswith(TRUNCATION_SUFFIX):
        # A truncated line cannot be hashed faithfully
        return line
    return format_hash_line(number, content)


def _annotate_run(lines: list[str]) -> list[str]:
    """Annotate leading numbered lines; stop at the first unnumbered one."""
    if not lines or parse_read_line(lines[0]) is None:
        return list(lines)
    result: list[str] = []
    for i, line in enumerate(lines):
        if parse_read_line(line) is None:
            return result + lines[i:]
        result.append(annotate_line(line))
    return result


def annotate_read_output(output: str) -> str:
    """Return *output* with numbered lines rewritten as ``N#ID|content``.

    Output that is not a numbered listing is returned unchanged.
    """
    if not output:
        return output

    lines = output.split("\n")
    for open_tag, close_tag in _BLOCK_TAGS:
        start = next((i for i, l in enumerate(lines) if l.startswith(open_tag)), -1)
        if start == -1:
            continue
        end = lines.index(close_tag) if close_tag in lines else -1
        if end <= start:
            return output

        open_line = lines[start]
        inline_first = open_line[len(open_tag):] if open_line != open_tag else None
        body = lines[start + 1:end]
        if inline_first is not None:
            annotated = _annotate_run([inline_first] + body)
            prefix = lines[:start] + [open_tag]
        else:
            annotated = _annotate_run(body)
            prefix = lines[:start + 1]
        return "\n".join(prefix + annotated + lines[end:])

    return "\n".join(_annotate_run(lines))

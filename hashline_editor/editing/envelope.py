"""
File text envelope — byte-order mark and line-ending bookkeeping.

Editing always happens on LF-only, BOM-free text.  The envelope records
what was stripped on read so the write puts it back.
"""

from __future__ import annotations

from dataclasses import dataclass

BOM = "\ufeff"
LF = "\n"
CRLF = "\r\n"


@dataclass
class FileTextEnvelope:
    """Canonical content plus what is needed to restore the original shape."""
    content: str
    had_bom: bool = False
    line_ending: str = LF


def detect_line_ending(text: str) -> str:
    """Return CRLF if the first newline in *text* is preceded by ``\\r``."""
    index = text.find(LF)
    if index > 0 and text[index - 1] == "\r":
        return CRLF
    return LF


def split_content(content: str) -> tuple[list[str], bool]:
    """Split LF text into lines plus a trailing-newline flag.

    ``"a\\nb\\n"`` gives ``(["a", "b"], True)``; the empty string gives
    ``([], False)``.
    """
    if not content:
        return [], False
    if content.endswith(LF):
        return content[:-1].split(LF), True
    return content.split(LF), False


def join_content(lines: list[str], trailing_newline: bool) -> str:
    """Inverse of :func:`split_content`."""
    if not lines:
        return ""
    text = LF.join(lines)
    return text + LF if trailing_newline else text


def canonicalize_file_text(raw: str) -> FileTextEnvelope:
    """Strip the BOM and normalize CRLF to LF.

    Bare ``\\r`` characters are content, not line endings, and are kept.
    """
    had_bom = raw.startswith(BOM)
    text = raw[len(BOM):] if had_bom else raw
    return FileTextEnvelope(
        content=text.replace(CRLF, LF),
        had_bom=had_bom,
        line_ending=detect_line_ending(text),
    )


def restore_file_text(content: str, envelope: FileTextEnvelope) -> str:
    """Re-apply the envelope's line ending and BOM to canonical *content*."""
    text = content.replace(LF, CRLF) if envelope.line_ending == CRLF else content
    return BOM + text if envelope.had_bom else text

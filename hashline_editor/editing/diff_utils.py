"""
Diff and listing generation for edit results.

The unified diff is a positional walk (line *i* of the old text against
line *i* of the new text), which is all a caller needs to eyeball an
anchored edit; it is not meant to be fed to ``patch``.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field

from .line_hash import format_hash_lines

# A hunk is flushed once it has more unchanged trailing lines than this
DEFAULT_CONTEXT_THRESHOLD = 6
# Context lines kept before and after each change
DEFAULT_CONTEXT_LINES = 3


@dataclass
class _Hunk:
    old_start: int
    new_start: int
    old_count: int = 0
    new_count: int = 0
    lines: list[str] = field(default_factory=list)
    trailing_context: int = 0

    def context(self, line: str) -> None:
        self.lines.append(f" {line}")
        self.old_count += 1
        self.new_count += 1

    def trim_trailing_context(self, keep: int) -> None:
        extra = self.trailing_context - keep
        if extra > 0:
            del self.lines[-extra:]
            self.old_count -= extra
            self.new_count -= extra
            self.trailing_context = keep

    def render(self) -> str:
        old_start = self.old_start if self.old_count else self.old_start - 1
        new_start = self.new_start if self.new_count else self.new_start - 1
        header = f"@@ -{old_start},{self.old_count} +{new_start},{self.new_count} @@"
        return "\n".join([header] + self.lines)


def _split(content: str) -> list[str]:
    return content.split("\n") if content else []


def generate_unified_diff(
    old_content: str,
    new_content: str,
    file_path: str,
    context_threshold: int = DEFAULT_CONTEXT_THRESHOLD,
    context_lines: int = DEFAULT_CONTEXT_LINES,
) -> str:
    """Return a unified diff of two texts.

    Parameters
    ----------
    old_content, new_content:
        LF-normalized texts.
    file_path:
        Name used in the ``---``/``+++`` header.
    context_threshold:
        Unchanged lines after a change that close the current hunk when
        exceeded. Changes closer than this share one hunk.
    context_lines:
        Leading context per hunk, and trailing context kept on flush.

    Returns
    -------
    str
        Header plus hunks; only the header when the texts are identical.
    """
    old_lines = _split(old_content)
    new_lines = _split(new_content)
    hunks: list[_Hunk] = []
    current: _Hunk | None = None

    for i in range(max(len(old_lines), len(new_lines))):
        old_line = old_lines[i] if i < len(old_lines) else None
        new_line = new_lines[i] if i < len(new_lines) else None

        if old_line is not None and old_line == new_line:
            if current is None:
                continue
            current.context(old_line)
            current.trailing_context += 1
            if current.trailing_context > context_threshold:
                current.trim_trailing_context(context_lines)
                hunks.append(current)
                current = None
            continue

        if current is None:
            start = max(0, i - context_lines)
            current = _Hunk(old_start=start + 1, new_start=start + 1)
            for j in range(start, i):
                current.context(old_lines[j])
        current.trailing_context = 0
        if old_line is not None:
            current.lines.append(f"-{old_line}")
            current.old_count += 1
        if new_line is not None:
            current.lines.append(f"+{new_line}")
            current.new_count += 1

    if current is not None:
        current.trim_trailing_context(context_lines)
        hunks.append(current)

    header = f"--- {file_path}\n+++ {file_path}\n"
    if not hunks:
        return header
    return header + "\n".join(h.render() for h in hunks) + "\n"


def count_line_diffs(old_content: str, new_content: str) -> tuple[int, int]:
    """Return ``(additions, deletions)`` as multiset line differences."""
    old_counts = Counter(old_content.split("\n"))
    new_counts = Counter(new_content.split("\n"))
    additions = sum((new_counts - old_counts).values())
    deletions = sum((old_counts - new_counts).values())
    return additions, deletions


def first_changed_line(old_content: str, new_content: str) -> int | None:
    """1-indexed number of the first differing line, or None if equal."""
    old_lines = old_content.split("\n")
    new_lines = new_content.split("\n")
    for i in range(max(len(old_lines), len(new_lines))):
        old_line = old_lines[i] if i < len(old_lines) else None
        new_line = new_lines[i] if i < len(new_lines) else None
        if old_line != new_line:
            return i + 1
    return None


def to_hashline_content(content: str) -> str:
    """Hashed ``LINE#ID|content`` listing of the whole text."""
    return format_hash_lines(content)

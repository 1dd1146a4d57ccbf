"""
Error taxonomy for anchored line editing.

Every failure the editing core can raise derives from
:class:`HashlineEditError`.  The core never recovers from these itself;
the executor turns them into textual results for the caller.
"""

from __future__ import annotations

from dataclasses import dataclass


class HashlineEditError(Exception):
    """Base class for all anchored-edit failures."""

    #: Stale-anchor failures get a dedicated remediation hint.
    hash_related = False


class InvalidEditError(HashlineEditError):
    """Raised when an edit entry is malformed or of an unknown kind."""


class InvalidAnchorFormatError(HashlineEditError):
    """Raised when an anchor string is not ``LINE#ID``."""

    def __init__(self, raw: str, reason: str = "") -> None:
        self.raw = raw
        message = (
            f'Invalid line reference "{raw}". '
            'Expected format "LINE#ID" (e.g. "5#VK").'
        )
        if reason:
            message = f"{message} {reason}"
        super().__init__(message)


class NotALineNumberError(InvalidAnchorFormatError):
    """Raised when the line position of an anchor holds a placeholder word."""

    def __init__(self, raw: str, token: str) -> None:
        self.token = token
        super().__init__(
            raw,
            f'"{token}" is not a line number; copy the numeric LINE#ID tag '
            "from the latest read output.",
        )


class OutOfBoundsError(HashlineEditError):
    """Raised when an anchor points outside the file."""

    def __init__(self, line: int, line_count: int) -> None:
        self.line = line
        self.line_count = line_count
        super().__init__(
            f"Line number {line} out of bounds. File has {line_count} lines."
        )


@dataclass
class HashMismatch:
    """One stale anchor: what the caller sent versus what the file holds."""
    line: int
    expected: str
    actual: str
    content: str


class HashMismatchError(HashlineEditError):
    """Raised when one or more anchors no longer match the file.

    The message lists every mismatched line with its *current* hash and
    content (marked with ``>>>``) plus a little surrounding context, so the
    caller can re-anchor without another read.
    """

    hash_related = True

    def __init__(
        self,
        mismatches: list[HashMismatch],
        file_lines: list[str],
        listing: str,
    ) -> None:
        self.mismatches = mismatches
        self.file_lines = file_lines
        self.remaps = {
            f"{m.line}#{m.expected}": f"{m.line}#{m.actual}" for m in mismatches
        }
        count = len(mismatches)
        header = (
            f"Hash mismatch: {count} line{'s have' if count > 1 else ' has'} "
            "changed since last read. Use the updated LINE#ID references "
            "shown below (>>> marks changed lines)."
        )
        super().__init__(f"{header}\n\n{listing}")

    @property
    def expected_hash(self) -> str:
        return self.mismatches[0].expected

    @property
    def actual_hash(self) -> str:
        return self.mismatches[0].actual

    @property
    def actual_content(self) -> str:
        return self.mismatches[0].content


class InvalidRangeError(HashlineEditError):
    """Raised when a range edit ends before it starts."""

    def __init__(self, start_line: int, end_line: int) -> None:
        self.start_line = start_line
        self.end_line = end_line
        super().__init__(
            f"Invalid range: start line {start_line} cannot be greater than "
            f"end line {end_line}"
        )


class InvalidAdjacencyError(HashlineEditError):
    """Raised when insert_between boundaries are not strictly ordered."""

    def __init__(self, after_line: int, before_line: int) -> None:
        self.after_line = after_line
        self.before_line = before_line
        super().__init__(
            f"insert_between requires after_line ({after_line}) to be lower "
            f"than before_line ({before_line})"
        )


class EmptyInsertPayloadError(HashlineEditError):
    """Raised when an insert would add nothing after echo stripping."""

    def __init__(self, operation: str, anchors: tuple[str, ...] = ()) -> None:
        self.operation = operation
        self.anchors = anchors
        where = f" at {', '.join(anchors)}" if anchors else ""
        super().__init__(
            f"{operation}{where} requires non-empty text; the payload is empty "
            "or only repeats the anchor line(s)"
        )


class TextNotFoundError(HashlineEditError):
    """Raised when a plain-text replace cannot find its needle."""

    def __init__(self, old_text: str) -> None:
        self.old_text = old_text
        preview = old_text if len(old_text) <= 80 else old_text[:77] + "..."
        super().__init__(f"Text not found in file: {preview!r}")


class EditFileNotFoundError(HashlineEditError):
    """Raised when the target file is missing and cannot be created."""

    def __init__(self, file_path: str) -> None:
        self.file_path = file_path
        super().__init__(f"File not found: {file_path}")


class InvalidModeCombinationError(HashlineEditError):
    """Raised for conflicting delete/rename/edits arguments."""

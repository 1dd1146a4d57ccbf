"""Anchored line editing — hash-verified LINE#ID edits applied bottom-up."""

from .line_hash import compute_line_hash, format_hash_line, format_hash_lines
from .anchors import LineRef, parse_anchor, validate_anchors
from .edits import (
    SetLine, ReplaceLines, InsertAfter, InsertBefore, InsertBetween,
    Replace, Append, Prepend, normalize_edits,
)
from .applier import ApplyReport, apply_edits, apply_edits_with_report
from .envelope import FileTextEnvelope, canonicalize_file_text, restore_file_text
from .diff_utils import generate_unified_diff, count_line_diffs, to_hashline_content
from .executor import HashlineEditExecutor, EditResult
from .metadata_store import ToolMetadataStore
from .read_annotator import annotate_read_output
from .tool_description import HASHLINE_EDIT_DESCRIPTION
from .metrics import log_edit_metric, read_edit_stats
from .errors import HashlineEditError, HashMismatchError

__all__ = [
    "compute_line_hash", "format_hash_line", "format_hash_lines",
    "LineRef", "parse_anchor", "validate_anchors",
    "SetLine", "ReplaceLines", "InsertAfter", "InsertBefore", "InsertBetween",
    "Replace", "Append", "Prepend", "normalize_edits",
    "ApplyReport", "apply_edits", "apply_edits_with_report",
    "FileTextEnvelope", "canonicalize_file_text", "restore_file_text",
    "generate_unified_diff", "count_line_diffs", "to_hashline_content",
    "HashlineEditExecutor", "EditResult",
    "ToolMetadataStore",
    "annotate_read_output",
    "HASHLINE_EDIT_DESCRIPTION",
    "log_edit_metric", "read_edit_stats",
    "HashlineEditError", "HashMismatchError",
]

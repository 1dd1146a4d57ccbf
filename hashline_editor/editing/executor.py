"""
Edit executor — runs one anchored-edit call against a file on disk.

Reads the file, applies the batch through :mod:`.applier`, writes the
result atomically with its original BOM and line endings, and renders a
textual summary (diff plus a fresh ``LINE#ID`` listing) for the caller.
"""

from __future__ import annotations

import logging
import os
import shutil
import tempfile
from dataclasses import dataclass, field
from typing import Any

from ..config import Config
from ..diff_display import format_colored_diff
from .applier import ApplyReport, apply_edits_with_report
from .diff_utils import (
    count_line_diffs,
    first_changed_line,
    generate_unified_diff,
    to_hashline_content,
)
from .edits import FILE_CREATING_EDITS, Edit, edit_kind, normalize_edits
from .envelope import FileTextEnvelope, canonicalize_file_text, restore_file_text
from .errors import (
    EditFileNotFoundError,
    HashlineEditError,
    InvalidEditError,
    InvalidModeCombinationError,
)
from .metadata_store import ToolMetadataStore
from .metrics import log_edit_metric

logger = logging.getLogger(__name__)

HASH_MISMATCH_TIP = (
    "Tip: reuse LINE#ID entries from the latest read/edit output, "
    "or batch related edits in one call."
)


@dataclass
class EditResult:
    """Result of one executor call."""
    success: bool = False
    output: str = ""
    file_path: str = ""
    metadata: dict[str, Any] = field(default_factory=dict)
    error: str = ""
    hash_mismatch: bool = False


class HashlineEditExecutor:
    """Apply anchored edit batches to files."""

    def __init__(
        self,
        config: Config | None = None,
        metadata_store: ToolMetadataStore | None = None,
    ) -> None:
        self._config = config or Config()
        if metadata_store is None:
            metadata_store = ToolMetadataStore(ttl_seconds=self._config.METADATA_TTL_SECONDS)
        self._metadata_store = metadata_store

    @property
    def metadata_store(self) -> ToolMetadataStore:
        """Store holding per-call metadata of successful edits."""
        return self._metadata_store

    def execute(
        self,
        file_path: str,
        edits: list[Any] | None,
        delete: bool = False,
        rename: str | None = None,
        session_id: str | None = None,
        call_id: str | None = None,
    ) -> EditResult:
        """Run one edit call.

        Parameters
        ----------
        file_path:
            Target file.
        edits:
            Edit objects or wire dicts (``{"type": ...}`` or ``{"op": ...}``).
        delete:
            Delete the file instead of editing it; requires an empty batch.
        rename:
            Write the result to this path and remove the original.
        session_id, call_id:
            When both are given, the result metadata is kept in
            :attr:`metadata_store` under this key.

        Returns
        -------
        EditResult
            ``success=False`` with an ``Error: ...`` output on any failure;
            the file is left untouched in that case.
        """
        edits = list(edits or [])
        try:
            result = self._execute(file_path, edits, delete, rename)
        except HashlineEditError as exc:
            result = self._error_result(file_path, exc)
        except UnicodeDecodeError as exc:
            logger.warning("[HashlineEdit] %s is not valid UTF-8: %s", file_path, exc)
            result = self._error_result(
                file_path, HashlineEditError(f"{file_path} is not valid UTF-8 text: {exc}"),
            )
        except OSError as exc:
            logger.error("[HashlineEdit] I/O failure on %s: %s", file_path, exc)
            result = self._error_result(file_path, exc)

        if result.success and session_id and call_id:
            self._metadata_store.store(session_id, call_id, result.metadata)

        if self._config.METRICS_ENABLED:
            self._log_metric(result, edits)
        return result

    # ------------------------------------------------------------------
    # Call flow
    # ------------------------------------------------------------------

    def _execute(
        self,
        file_path: str,
        raw_edits: list[Any],
        delete: bool,
        rename: str | None,
    ) -> EditResult:
        if delete and rename:
            raise InvalidModeCombinationError("delete and rename cannot be used together")
        if delete and raw_edits:
            raise InvalidModeCombinationError("delete mode requires edits to be an empty array")
        if delete:
            return self._delete(file_path)
        if not raw_edits:
            raise InvalidEditError("Provide at least one edit operation.")

        edits = normalize_edits(raw_edits)

        if not os.path.isfile(file_path):
            if not all(isinstance(e, FILE_CREATING_EDITS) for e in edits):
                raise EditFileNotFoundError(file_path)
            logger.info("[HashlineEdit] Creating %s", file_path)
            envelope = FileTextEnvelope(content="")
        else:
            with open(file_path, "rb") as f:
                raw = f.read()
            envelope = canonicalize_file_text(raw.decode("utf-8"))

        old_content = envelope.content
        report = apply_edits_with_report(old_content, edits)
        new_content = report.content

        if new_content == old_content and not rename:
            raise HashlineEditError(self._no_change_message(file_path, report))

        target = rename or file_path
        self._safe_write(target, restore_file_text(new_content, envelope))
        if rename and os.path.abspath(rename) != os.path.abspath(file_path):
            if os.path.exists(file_path):
                os.remove(file_path)
            logger.info("[HashlineEdit] Moved %s to %s", file_path, rename)

        return self._success_result(file_path, rename, edits, report, old_content)

    def _delete(self, file_path: str) -> EditResult:
        if not os.path.isfile(file_path):
            raise EditFileNotFoundError(file_path)
        os.remove(file_path)
        logger.info("[HashlineEdit] Deleted %s", file_path)
        return EditResult(
            success=True,
            output=f"Successfully deleted {file_path}",
            file_path=file_path,
            metadata={"filePath": file_path, "deleted": True},
        )

    @staticmethod
    def _no_change_message(file_path: str, report: ApplyReport) -> str:
        message = (
            f"No changes made to {file_path}. The edits produced identical content."
        )
        if report.noop_edits:
            message += (
                f" {report.noop_edits} edit(s) were no-ops because the "
                "replacement text matches the existing content."
            )
        return message

    # ------------------------------------------------------------------
    # Result rendering
    # ------------------------------------------------------------------

    def _success_result(
        self,
        file_path: str,
        rename: str | None,
        edits: list[Edit],
        report: ApplyReport,
        old_content: str,
    ) -> EditResult:
        new_content = report.content
        display_path = rename or file_path
        diff = generate_unified_diff(
            old_content,
            new_content,
            display_path,
            context_threshold=self._config.DIFF_CONTEXT_THRESHOLD,
            context_lines=self._config.DIFF_CONTEXT_LINES,
        )
        additions, deletions = count_line_diffs(old_content, new_content)

        if rename and rename != file_path:
            parts = [f"Moved {file_path} to {rename}"]
        else:
            parts = [f"Updated {file_path}"]
        parts.append(
            f"Applied {len(edits)} edit(s): {report.noop_edits} no-op, "
            f"{report.deduplicated_edits} deduplicated."
        )
        parts.append(format_colored_diff(diff) if self._config.COLOR_DIFF else diff.rstrip("\n"))
        if self._config.INCLUDE_LISTING:
            parts.append("Updated file (LINE#ID|content):")
            parts.append(to_hashline_content(new_content))

        metadata = {
            "filePath": display_path,
            "diff": diff,
            "noopEdits": report.noop_edits,
            "deduplicatedEdits": report.deduplicated_edits,
            "firstChangedLine": first_changed_line(old_content, new_content),
            "filediff": {
                "file": display_path,
                "before": old_content,
                "after": new_content,
                "additions": additions,
                "deletions": deletions,
            },
        }
        logger.info(
            "[HashlineEdit] %s: %d edit(s), +%d/-%d lines",
            display_path, len(edits), additions, deletions,
        )
        return EditResult(
            success=True,
            output="\n\n".join(parts),
            file_path=display_path,
            metadata=metadata,
        )

    @staticmethod
    def _error_result(file_path: str, exc: Exception) -> EditResult:
        hash_related = getattr(exc, "hash_related", False)
        if hash_related:
            output = f"Error: hash mismatch - {exc}\n{HASH_MISMATCH_TIP}"
        else:
            output = f"Error: {exc}"
        logger.warning("[HashlineEdit] Edit of %s rejected: %s", file_path, exc)
        return EditResult(
            success=False,
            output=output,
            file_path=file_path,
            error=str(exc),
            hash_mismatch=hash_related,
        )

    def _log_metric(self, result: EditResult, edits: list[Any]) -> None:
        operations: list[str] = []
        try:
            operations = [edit_kind(e) for e in normalize_edits(edits)]
        except HashlineEditError as exc:
            logger.debug("[HashlineEdit] No operation list for metrics: %s", exc)
        error_kind = ""
        if result.hash_mismatch:
            error_kind = "hash_mismatch"
        elif not result.success:
            error_kind = "error"
        log_edit_metric(
            {
                "file": result.file_path,
                "success": result.success,
                "edit_count": len(edits),
                "noop_edits": result.metadata.get("noopEdits", 0),
                "deduplicated_edits": result.metadata.get("deduplicatedEdits", 0),
                "operations": operations,
                "error_kind": error_kind,
            },
            metrics_dir=self._config.METRICS_DIR,
        )

    # ------------------------------------------------------------------
    # Atomic file write
    # ------------------------------------------------------------------

    @staticmethod
    def _safe_write(file_path: str, text: str) -> None:
        """Write text to file atomically via temp file + rename."""
        abs_path = os.path.abspath(file_path)
        directory = os.path.dirname(abs_path)
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".hashline_", suffix=".tmp", dir=directory)

        try:
            with os.fdopen(fd, "wb") as f:
                f.write(text.encode("utf-8"))
            if os.path.exists(abs_path):
                shutil.copymode(abs_path, tmp_path)
            os.replace(tmp_path, abs_path)
        except OSError:
            logger.error("[HashlineEdit] Write failed for %s", abs_path)
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise

"""
Edit metrics — records anchored-edit outcomes in a JSONL log file.
"""

from __future__ import annotations

import json
import logging
import os
from collections import Counter
from datetime import datetime, timezone

logger = logging.getLogger(__name__)

_METRICS_DIR = ".hashline"
_METRICS_FILE = "edit_metrics.jsonl"


def _metrics_path(project_root: str | None = None, metrics_dir: str = _METRICS_DIR) -> str:
    """Return the absolute path to the metrics file."""
    base = project_root or os.getcwd()
    return os.path.join(base, metrics_dir, _METRICS_FILE)


def log_edit_metric(
    data: dict,
    project_root: str | None = None,
    metrics_dir: str = _METRICS_DIR,
) -> None:
    """Append a single edit metric entry to the JSONL log.

    Parameters
    ----------
    data:
        Metric fields to log (file, success, edit_count, noop_edits,
        deduplicated_edits, operations, error_kind, ...).
    project_root:
        Optional project root directory. Defaults to CWD.
    metrics_dir:
        Directory under the project root holding the log.
    """
    path = _metrics_path(project_root, metrics_dir)

    entry = {"timestamp": datetime.now(timezone.utc).isoformat()}
    entry.update(data)

    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        with open(path, "a", encoding="utf-8") as f:
            f.write(json.dumps(entry) + "\n")
    except OSError as exc:
        logger.warning("[HashlineEdit] Failed to write metrics: %s", exc)


def read_edit_stats(
    last_n: int = 50,
    project_root: str | None = None,
    metrics_dir: str = _METRICS_DIR,
) -> dict:
    """Compute rolling statistics from the metrics log.

    Parameters
    ----------
    last_n:
        Number of most-recent entries to include.
    project_root:
        Optional project root directory.

    Returns
    -------
    dict
        total_edits, success_rate, hash_mismatch_rate, avg_noop_edits,
        avg_deduplicated_edits and operations (share of each edit kind).
    """
    path = _metrics_path(project_root, metrics_dir)

    entries: list[dict] = []
    if os.path.isfile(path):
        try:
            with open(path, "r", encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if line:
                        try:
                            entries.append(json.loads(line))
                        except json.JSONDecodeError:
                            continue
        except OSError as exc:
            logger.warning("[HashlineEdit] Failed to read metrics: %s", exc)

    entries = entries[-last_n:]

    if not entries:
        return {
            "total_edits": 0,
            "success_rate": 0.0,
            "hash_mismatch_rate": 0.0,
            "avg_noop_edits": 0.0,
            "avg_deduplicated_edits": 0.0,
            "operations": {},
        }

    total = len(entries)
    successes = sum(1 for e in entries if e.get("success", False))
    mismatches = sum(1 for e in entries if e.get("error_kind") == "hash_mismatch")
    noops = [e.get("noop_edits", 0) for e in entries if "noop_edits" in e]
    dedups = [e.get("deduplicated_edits", 0) for e in entries if "deduplicated_edits" in e]

    operations: Counter = Counter()
    for e in entries:
        operations.update(e.get("operations", []))
    op_total = sum(operations.values())

    return {
        "total_edits": total,
        "success_rate": successes / total * 100,
        "hash_mismatch_rate": mismatches / total * 100,
        "avg_noop_edits": sum(noops) / len(noops) if noops else 0.0,
        "avg_deduplicated_edits": sum(dedups) / len(dedups) if dedups else 0.0,
        "operations": {
            op: count / op_total * 100
            for op, count in operations.most_common()
        },
    }

"""
Programmatic API for hashline_editor — use as a library from Python code.

Example usage::

    from hashline_editor import create_executor

    executor = create_executor()
    result = executor.execute(
        "app.py", [{"op": "replace", "pos": "12#VK", "lines": ["x = 1"]}],
    )
    print(result.output)
"""

from __future__ import annotations

import logging
from typing import Any

from .config import Config
from .editing.executor import EditResult, HashlineEditExecutor
from .logging_setup import setup_logger

_logger = logging.getLogger(__name__)


def create_executor(
    config_path: str | None = None,
    *,
    enable_file_log: bool = True,
) -> HashlineEditExecutor:
    """Build an executor from ``.hashline.yaml`` + env vars + defaults.

    The executor's metadata store uses the configured TTL, and debug
    logging goes to a file under the configured ``log_dir`` unless
    *enable_file_log* is false.
    """
    config = Config.load(config_path)
    if enable_file_log:
        setup_logger(config.LOG_DIR)
    _logger.debug("[HashlineEdit] Executor created (metadata TTL %.0fs)",
                  config.METADATA_TTL_SECONDS)
    return HashlineEditExecutor(config=config)


def run_edit(
    file_path: str,
    edits: list[Any],
    *,
    delete: bool = False,
    rename: str | None = None,
    config_path: str | None = None,
) -> EditResult:
    """One-shot edit call with a freshly configured executor."""
    executor = create_executor(config_path)
    return executor.execute(file_path, edits, delete=delete, rename=rename)

"""
hashline_editor — hash-anchored line editing for files.

Public API for library usage::

    from hashline_editor import run_edit

    result = run_edit(
        "app.py", [{"op": "replace", "pos": "12#VK", "lines": ["x = 1"]}],
    )
"""

from .api import create_executor, run_edit
from .config import Config
from .editing import EditResult, HashlineEditExecutor

__all__ = ["create_executor", "run_edit", "Config", "EditResult", "HashlineEditExecutor"]

"""
Per-call metadata store.

Hosts that run edits for several sessions in one process hand the result
metadata over through an explicit store object rather than a module-level
map, so sessions never see each other's entries.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300.0


class ToolMetadataStore:
    """Metadata keyed by ``(session_id, call_id)`` with stale-entry expiry."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[tuple[str, str], tuple[float, dict[str, Any]]] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def store(self, session_id: str, call_id: str, metadata: dict[str, Any]) -> None:
        with self._lock:
            self._evict_stale()
            self._entries[(session_id, call_id)] = (self._clock(), metadata)

    def peek(self, session_id: str, call_id: str) -> dict[str, Any] | None:
        with self._lock:
            self._evict_stale()
            entry = self._entries.get((session_id, call_id))
            return entry[1] if entry else None

    def consume(self, session_id: str, call_id: str) -> dict[str, Any] | None:
        """Return and remove the entry for this call, if still fresh."""
        with self._lock:
            self._evict_stale()
            entry = self._entries.pop((session_id, call_id), None)
            return entry[1] if entry else None

    def clear(self, session_id: str | None = None) -> None:
        """Drop every entry, or only those of *session_id*."""
        with self._lock:
            if session_id is None:
                self._entries.clear()
                return
            for key in [k for k in self._entries if k[0] == session_id]:
                del self._entries[key]

    def __len__(self) -> int:
        with self._lock:
            self._evict_stale()
            return len(self._entries)

    def _evict_stale(self) -> None:
        now = self._clock()
        stale = [k for k, (stored_at, _) in self._entries.items() if now - stored_at > self._ttl]
        for key in stale:
            del self._entries[key]
        if stale:
            logger.debug("[HashlineEdit] Evicted %d stale metadata entr(ies)", len(stale))

"""In-memory catalog of ingested systems."""

from __future__ import annotations

import threading
from typing import Any, Dict, List, Tuple

from syscatalog.models import SystemCatalogEntry


class CatalogStore:
    """Append-only, thread-safe sequence of catalog entries."""

    def __init__(self) -> None:
        self._entries: List[SystemCatalogEntry] = []
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def append(self, entry: SystemCatalogEntry) -> None:
        with self._lock:
            self._entries.append(entry)

    def snapshot(self) -> Tuple[SystemCatalogEntry, ...]:
        """Return the entries appended so far, oldest first."""
        with self._lock:
            return tuple(self._entries)

    def to_dict(self) -> Dict[str, Any]:
        return {"systems": [entry.to_dict() for entry in self.snapshot()]}

"""Per-file cache of fingerprints and dependencies, keyed by path.

Wraps the ``files_data`` mapping of a cache snapshot in place. File tasks
run on worker threads and each writes its own key; the lock keeps the
underlying dict consistent while they do.
"""

import threading

from .protocols import CacheEntry


class FileCache:
    """Lock-guarded dict cache keyed by file path."""

    def __init__(self, data: dict | None = None):
        self._data: dict[str, dict] = data if data is not None else {}
        self._lock = threading.Lock()

    def get(self, path: str) -> CacheEntry | None:
        """Return the stored entry for path, or None if absent or malformed."""
        with self._lock:
            raw = self._data.get(path)
        return CacheEntry.from_dict(raw)

    def put(self, path: str, entry: CacheEntry) -> None:
        """Store the entry for path, replacing any previous one."""
        with self._lock:
            self._data[path] = entry.to_dict()

    def to_dict(self) -> dict[str, dict]:
        """Return the wrapped mapping (not a copy)."""
        return self._data

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return path in self._data

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

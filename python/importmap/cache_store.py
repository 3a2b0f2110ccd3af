"""Cache managers holding the snapshot between batches.

Usage:
    from .cache_store import JsonCacheManager

    manager = JsonCacheManager(project / ".importmap/cache.json")
    snapshot = manager.get()      # {} on first run
    ...
    manager.set(snapshot)
"""

import copy
import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

# Bumped when the stored layout changes; older snapshots are discarded
SNAPSHOT_VERSION = 1


class InMemoryCacheManager:
    """Keeps the last snapshot in process memory."""

    def __init__(self, snapshot: dict | None = None):
        self._snapshot = copy.deepcopy(snapshot) if snapshot else {}
        self.set_calls = 0

    def get(self) -> dict:
        return copy.deepcopy(self._snapshot)

    def set(self, snapshot: dict) -> None:
        self._snapshot = copy.deepcopy(snapshot)
        self.set_calls += 1


class JsonCacheManager:
    """Persists the snapshot as a JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def get(self) -> dict:
        """Load the snapshot; missing, corrupt or outdated files read as empty."""
        if not self.path.exists():
            return {}

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, UnicodeDecodeError, OSError):
            logger.warning("cache_store.unreadable", extra={"path": str(self.path)})
            return {}

        if not isinstance(data, dict) or data.get("version") != SNAPSHOT_VERSION:
            logger.debug("cache_store.version_mismatch", extra={"path": str(self.path)})
            return {}
        return data

    def set(self, snapshot: dict) -> None:
        """Write the snapshot atomically (temp file + rename)."""
        data = dict(snapshot)
        data["version"] = SNAPSHOT_VERSION
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        os.replace(tmp_path, self.path)

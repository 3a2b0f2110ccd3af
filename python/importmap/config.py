"""Environment-driven settings for importmap."""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_CONCURRENCY = 10
DEFAULT_CACHE_PATH = ".importmap/cache.json"


def get_concurrency() -> int:
    """Maximum number of files processed at once (IMPORTMAP_CONCURRENCY)."""
    raw = os.getenv("IMPORTMAP_CONCURRENCY", "").strip()
    if not raw:
        return DEFAULT_CONCURRENCY
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value < 1:
        logger.warning(
            "config.invalid_concurrency",
            extra={"value": raw, "fallback": DEFAULT_CONCURRENCY},
        )
        return DEFAULT_CONCURRENCY
    return value


def get_cache_path(project_path: str | Path) -> Path:
    """Location of the persisted snapshot (IMPORTMAP_CACHE_PATH).

    Relative values are taken from the project directory.
    """
    raw = os.getenv("IMPORTMAP_CACHE_PATH", "").strip() or DEFAULT_CACHE_PATH
    path = Path(raw)
    if not path.is_absolute():
        path = Path(project_path) / path
    return path

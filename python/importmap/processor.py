"""Incremental dependency extraction over a batch of files.

Each file is read and fingerprinted. Files whose fingerprint matches the
cached one reuse the cached dependency list; the rest are parsed and their
imports resolved. The cache snapshot is only written back when every file
of the batch succeeded.
"""

import logging
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from functools import partial
from pathlib import Path

from .config import get_concurrency
from .extractors import get_dependencies, is_parsed_extension, parse
from .file_cache import FileCache
from .hashing import get_hash_function
from .protocols import CacheEntry, CacheManager, FileRecord, HashFunction, Logger, ResolveImport
from .resolver import ResolveOptions, get_resolve_import

logger = logging.getLogger(__name__)

FILES_DATA_KEY = "files_data"


def read_file_data(
    file_path: str,
    resolve_import: ResolveImport,
    cache: FileCache,
    get_hash: HashFunction,
    log: Logger,
) -> FileRecord:
    """Process one file and refresh its cache entry.

    Raises OSError if the file cannot be read, SyntaxError or ValueError if
    it cannot be parsed and ResolutionError if one of its imports cannot be
    resolved.
    """
    log.debug("Processing %s", file_path)
    source = Path(file_path).read_bytes()
    parsed = is_parsed_extension(file_path)
    file_hash = get_hash(source)
    cached = cache.get(file_path)

    dependencies: list[str] | None = None
    if cached is not None and cached.hash == file_hash:
        dependencies = cached.dependencies
    elif parsed:
        try:
            tree = parse(file_path, source)
        except (SyntaxError, ValueError):
            # ValueError: NUL bytes in the source before Python 3.12
            log.error("Unable to parse %s", file_path)
            raise
        dependencies = get_dependencies(tree, file_path, resolve_import)

    # Re-parses on every call; trees are not kept alive with the record
    get_ast = partial(parse, file_path) if parsed else None
    record = FileRecord(source=source, get_ast=get_ast, dependencies=dependencies)

    cache.put(file_path, CacheEntry(hash=file_hash, dependencies=dependencies))
    log.debug(" + Done %s", file_path)
    return record


def process_files(
    files: list[str],
    cache_manager: CacheManager,
    log: Logger | None = None,
    resolve_options: ResolveOptions | None = None,
    *,
    concurrency: int | None = None,
) -> dict[str, FileRecord]:
    """Extract dependencies for every file, reusing the cache where possible.

    Args:
        files: Paths to process; an empty list yields an empty mapping.
        cache_manager: Source and destination of the cache snapshot.
        log: Receives progress and parse failures (module logger by default).
        resolve_options: Configuration of the import resolver.
        concurrency: Files processed at once (IMPORTMAP_CONCURRENCY, else 10).

    Returns:
        Mapping of each input path to its FileRecord.

    Raises:
        The first error of a failed file. Files not yet started are skipped,
        files already running are waited for, and the snapshot is not saved.
    """
    log = log or logger
    max_workers = concurrency if concurrency is not None else get_concurrency()
    if max_workers < 1:
        raise ValueError(f"concurrency must be positive, got {max_workers}")

    resolve_import = get_resolve_import(resolve_options)
    snapshot = cache_manager.get() or {}
    files_data = snapshot.get(FILES_DATA_KEY)
    cache = FileCache(files_data if isinstance(files_data, dict) else None)
    get_hash = get_hash_function()

    with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="importmap") as pool:
        futures = [
            pool.submit(read_file_data, path, resolve_import, cache, get_hash, log)
            for path in files
        ]
        done, _ = wait(futures, return_when=FIRST_EXCEPTION)
        failed = [f for f in futures if f in done and f.exception() is not None]
        if failed:
            pool.shutdown(wait=True, cancel_futures=True)
            raise failed[0].exception()

    results = {path: future.result() for path, future in zip(files, futures)}

    snapshot[FILES_DATA_KEY] = cache.to_dict()
    cache_manager.set(snapshot)
    return results

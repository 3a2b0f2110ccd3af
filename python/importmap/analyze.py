"""Command dispatcher for importmap.

Routes --command values to the appropriate pipeline function.
Called from __main__.py.
"""

from __future__ import annotations

from pathlib import Path

from .protocols import CacheManager


def dispatch(
    command: str,
    project: str,
    args: dict,
    cache_manager: CacheManager | None = None,
) -> dict:
    """Dispatch a command to the appropriate function.

    Args:
        command: Command name ("process" or "imports")
        project: Project root path
        args: Extra arguments dict
        cache_manager: Snapshot store; the project's JSON cache if omitted

    Returns:
        Dict result of the command
    """
    if command == "process":
        from .cache_store import JsonCacheManager
        from .config import get_cache_path
        from .processor import process_files
        from .resolver import ResolveOptions
        from .workspace import expand_paths

        if cache_manager is None:
            cache_manager = JsonCacheManager(args.get("cache_path") or get_cache_path(project))
        # Absolute names resolve from the project root, then installed packages
        options = ResolveOptions.from_dict(
            {"search_paths": [project], "use_sys_path": True, **args}
        )

        extensions = args.get("extensions")
        files = expand_paths(
            project,
            args.get("files"),
            extensions=set(extensions) if extensions else None,
            include_gitignore=bool(args.get("gitignore")),
        )
        records = process_files(
            files,
            cache_manager,
            resolve_options=options,
            concurrency=args.get("concurrency"),
        )
        return {
            "project": str(Path(project).resolve()),
            "file_count": len(records),
            "files": {
                path: {"dependencies": record.dependencies, "size": len(record.source)}
                for path, record in records.items()
            },
        }

    elif command == "imports":
        from .extractors import parse, parse_imports

        tree = parse(args.get("file", project))
        return parse_imports(tree).to_dict()

    else:
        return {"error": "UnknownCommand", "message": f"Unknown command: {command}"}

"""Expansion of project directories into the files to process."""

from collections.abc import Iterator
from pathlib import Path

import pathspec

from .ignore import load_ignore_patterns


def iter_workspace_files(
    root: str | Path,
    extensions: set[str] | None = None,
    spec: pathspec.PathSpec | None = None,
    include_gitignore: bool = False,
    spec_root: str | Path | None = None,
) -> Iterator[Path]:
    """
    Iterate over the non-ignored files below root, in sorted order.

    Args:
        root: Directory to scan.
        extensions: Lower-case suffixes to keep (e.g. {'.py'}). None keeps all.
        spec: Ignore patterns; loaded from root when omitted.
        include_gitignore: Also honour .gitignore files when loading patterns.
        spec_root: Directory the patterns of spec are relative to (root by default).

    Yields:
        Absolute paths of matching files.
    """
    root = Path(root).resolve()
    base = Path(spec_root).resolve() if spec_root is not None else root
    if spec is None:
        spec = load_ignore_patterns(base, include_gitignore=include_gitignore)

    def _walk(current: Path) -> Iterator[Path]:
        try:
            entries = sorted(current.iterdir())
        except PermissionError:
            return

        for entry in entries:
            rel = entry.relative_to(base).as_posix()
            if entry.is_dir():
                if spec.match_file(rel + "/"):
                    continue
                yield from _walk(entry)
            elif entry.is_file():
                if spec.match_file(rel):
                    continue
                if extensions is None or entry.suffix.lower() in extensions:
                    yield entry

    yield from _walk(root)


def expand_paths(
    project: str | Path,
    paths: list[str] | None = None,
    extensions: set[str] | None = None,
    include_gitignore: bool = False,
) -> list[str]:
    """Turn files and directories (relative to project) into absolute file paths.

    Directories are expanded with iter_workspace_files using the project's
    ignore patterns; plain files are kept as given, even if an ignore
    pattern matches them. No paths means the whole project.
    """
    project_path = Path(project).resolve()
    spec = load_ignore_patterns(project_path, include_gitignore=include_gitignore)
    files: list[str] = []
    for raw in paths or ["."]:
        path = Path(raw)
        if not path.is_absolute():
            path = project_path / path
        if path.is_dir():
            path = path.resolve()
            if not path.is_relative_to(project_path):
                # Outside the project: its own ignore file applies
                files.extend(str(p) for p in iter_workspace_files(path, extensions=extensions))
                continue
            files.extend(
                str(p)
                for p in iter_workspace_files(
                    path, extensions=extensions, spec=spec, spec_root=project_path
                )
            )
        else:
            files.append(str(path.resolve()))
    return files

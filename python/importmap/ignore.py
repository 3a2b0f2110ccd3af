"""Ignore file handling (.importmapignore).

Provides gitignore-style pattern matching, through pathspec, for excluding
files when a directory is expanded into the files to process.
"""

from __future__ import annotations

import os
from pathlib import Path

import pathspec

IGNORE_FILENAME = ".importmapignore"

# Default patterns used when the project has no .importmapignore
DEFAULT_TEMPLATE = """\
# importmap ignore patterns (gitignore syntax)
node_modules/
.venv/
venv/
env/
__pycache__/
.tox/
.nox/
.pytest_cache/
.mypy_cache/
.ruff_cache/
dist/
build/
*.egg-info/
*.pyc
*.pyo
*.so
.idea/
.vscode/
.git/
.hg/
.svn/
.importmap/
.DS_Store
"""


def load_ignore_patterns(
    project_dir: str | Path,
    include_gitignore: bool = False,
) -> pathspec.PathSpec:
    """Load ignore patterns from .importmapignore, else the default template."""
    project_path = Path(project_dir)
    ignore_path = project_path / IGNORE_FILENAME
    patterns: list[str] = []

    if include_gitignore:
        patterns.extend(_load_gitignore_patterns(project_path))

    if ignore_path.exists():
        patterns.extend(ignore_path.read_text().splitlines())
    else:
        patterns.extend(DEFAULT_TEMPLATE.splitlines())

    return pathspec.GitIgnoreSpec.from_lines(patterns)


def _load_gitignore_patterns(project_path: Path) -> list[str]:
    patterns: list[str] = []
    skip_dirs = {".git", ".hg", ".svn", ".importmap", "node_modules", ".venv", "venv", "__pycache__"}

    for dirpath, dirnames, filenames in os.walk(project_path):
        dirnames[:] = [
            name for name in dirnames if name not in skip_dirs and not name.startswith(".git")
        ]
        if ".gitignore" not in filenames:
            continue
        gitignore_path = Path(dirpath) / ".gitignore"
        rel_dir = os.path.relpath(dirpath, project_path)
        prefix = "" if rel_dir == "." else rel_dir.replace(os.sep, "/")
        for line in gitignore_path.read_text().splitlines():
            patterns.append(_translate_gitignore_pattern(line, prefix))

    return patterns


def _translate_gitignore_pattern(pattern: str, prefix: str) -> str:
    """Re-anchor a nested .gitignore pattern at the project root."""
    line = pattern.rstrip("\n")
    if not line or line.lstrip().startswith("#"):
        return line

    negated = line.startswith("!")
    body = line[1:] if negated else line

    if body.startswith("\\#"):
        body = body[1:]

    if not prefix:
        return f"!{body}" if negated else body

    prefix = prefix.strip("/")
    if body.startswith("/"):
        combined = f"{prefix}/{body[1:]}"
    elif "/" not in body.rstrip("/"):
        combined = f"{prefix}/**/{body}"
    else:
        combined = f"{prefix}/{body}"

    return f"!{combined}" if negated else combined


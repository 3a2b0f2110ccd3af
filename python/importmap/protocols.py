"""Data model and collaborator protocols for importmap.

Defines the records exchanged between the processing pipeline and the
collaborators it is wired to (cache manager, logger, import resolver), so
that the pipeline does not depend on any concrete implementation.
"""

import ast
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol


HashFunction = Callable[[bytes], str]
AstAccessor = Callable[[], ast.Module]


@dataclass(frozen=True)
class FileRecord:
    """Result of processing one file.

    ``get_ast`` is only set for parseable files and re-parses the file on
    every call; the tree is deliberately not kept in memory.
    ``dependencies`` is None for files that are not parsed.
    """
    source: bytes
    get_ast: AstAccessor | None = None
    dependencies: list[str] | None = None


@dataclass
class CacheEntry:
    """Last known fingerprint of a file and the dependencies computed for it."""
    hash: str
    dependencies: list[str] | None = None

    def to_dict(self) -> dict:
        return {
            "hash": self.hash,
            "dependencies": None if self.dependencies is None else list(self.dependencies),
        }

    @classmethod
    def from_dict(cls, data: object) -> "CacheEntry | None":
        if not isinstance(data, dict) or not isinstance(data.get("hash"), str):
            return None
        deps = data.get("dependencies")
        if deps is not None and not isinstance(deps, list):
            return None
        return cls(hash=data["hash"], dependencies=deps)


@dataclass
class ImportSpecifiers:
    """Raw import specifiers of a module, in source order."""
    static: list[str] = field(default_factory=list)
    dynamic: list[str] = field(default_factory=list)
    # Indexes into `static` of `from . import NAME` names, which may be
    # attributes of the package rather than submodules
    package_names: set[int] = field(default_factory=set)

    def to_dict(self) -> dict:
        return {"static": self.static, "dynamic": self.dynamic}


class CacheManager(Protocol):
    """Loads and stores the snapshot carried between batches."""

    def get(self) -> dict:
        """Return the last stored snapshot, or an empty dict."""
        ...

    def set(self, snapshot: dict) -> None:
        """Replace the stored snapshot."""
        ...


class Logger(Protocol):
    """Subset of logging.Logger used by the pipeline."""

    def debug(self, msg: str, *args: object) -> None:
        ...

    def error(self, msg: str, *args: object) -> None:
        ...


class ResolveImport(Protocol):
    """Maps an import specifier to an absolute path.

    Returns None for modules that are configured as external, raises
    ResolutionError when the specifier cannot be found.
    """

    def __call__(self, specifier: str, base_dir: str) -> str | None:
        ...

"""Import specifier resolution.

Maps the module names found by the extractors to the files that define
them. Relative specifiers (``.sibling``, ``..pkg.mod``) are resolved
against the importing file's directory; absolute ones against configured
aliases and search paths.
"""

import os
import sys
from dataclasses import dataclass, field


DEFAULT_EXTENSIONS = (".py", ".pyi")


class ResolutionError(ImportError):
    """Raised when an import specifier does not map to any file."""

    def __init__(self, specifier: str, base_dir: str):
        super().__init__(f"Cannot resolve '{specifier}' from {base_dir}")
        self.specifier = specifier
        self.base_dir = base_dir


@dataclass(frozen=True)
class ResolveOptions:
    """Resolver configuration, fixed for one batch.

    Attributes:
        search_paths: Roots used for absolute module names, in priority order.
        extensions: Module file extensions, in priority order.
        aliases: Top-level module name -> directory or file it lives in.
        use_sys_path: Also search the interpreter's sys.path.
        externals: Top-level module names that are not file dependencies.
    """
    search_paths: tuple[str, ...] = ()
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    aliases: dict[str, str] = field(default_factory=dict)
    use_sys_path: bool = False
    externals: frozenset[str] = frozenset(sys.stdlib_module_names)

    @classmethod
    def from_dict(cls, data: dict) -> "ResolveOptions":
        """Build options from a JSON-style dict; unknown keys are ignored."""
        kwargs: dict = {}
        if "search_paths" in data:
            kwargs["search_paths"] = tuple(data["search_paths"])
        if "extensions" in data:
            kwargs["extensions"] = tuple(data["extensions"])
        if "aliases" in data:
            kwargs["aliases"] = dict(data["aliases"])
        if "use_sys_path" in data:
            kwargs["use_sys_path"] = bool(data["use_sys_path"])
        if "externals" in data:
            kwargs["externals"] = frozenset(data["externals"])
        return cls(**kwargs)


class ImportResolver:
    """Callable resolver shared read-only by all tasks of a batch."""

    def __init__(self, options: ResolveOptions):
        self._extensions = tuple(options.extensions)
        self._aliases = {
            name: os.path.abspath(target) for name, target in options.aliases.items()
        }
        roots = [os.path.abspath(p) for p in options.search_paths]
        if options.use_sys_path:
            roots.extend(os.path.abspath(p) for p in sys.path if p)
        self._roots = tuple(roots)
        self._externals = frozenset(options.externals)

    def __call__(self, specifier: str, base_dir: str) -> str | None:
        if specifier.startswith("."):
            return self._resolve_relative(specifier, base_dir)

        parts = specifier.split(".")
        top = parts[0]
        if top in self._aliases:
            found = self._resolve_alias(self._aliases[top], parts[1:])
            if found is not None:
                return found
            raise ResolutionError(specifier, base_dir)
        if top in self._externals:
            return None

        for root in self._roots:
            found = self._find_module(root, parts)
            if found is not None:
                return found
        raise ResolutionError(specifier, base_dir)

    def _resolve_relative(self, specifier: str, base_dir: str) -> str:
        stripped = specifier.lstrip(".")
        level = len(specifier) - len(stripped)
        package_dir = os.path.abspath(base_dir)
        for _ in range(level - 1):
            package_dir = os.path.dirname(package_dir)

        parts = stripped.split(".") if stripped else []
        found = self._find_module(package_dir, parts)
        if found is None:
            raise ResolutionError(specifier, base_dir)
        return found

    def _resolve_alias(self, target: str, rest: list[str]) -> str | None:
        if not rest and os.path.isfile(target):
            return target
        return self._find_module(target, rest)

    def _find_module(self, root: str, parts: list[str]) -> str | None:
        """Locate ``parts`` below ``root`` as a module file or package."""
        target = os.path.join(root, *parts)
        if parts:
            for ext in self._extensions:
                candidate = target + ext
                if os.path.isfile(candidate):
                    return os.path.normpath(candidate)
        for ext in self._extensions:
            candidate = os.path.join(target, "__init__" + ext)
            if os.path.isfile(candidate):
                return os.path.normpath(candidate)
        return None


def get_resolve_import(options: ResolveOptions | None = None) -> ImportResolver:
    return ImportResolver(options or ResolveOptions())

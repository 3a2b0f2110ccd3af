"""Import extraction using Python AST (stdlib).

Collects the module specifiers a Python source file imports, split into
static ``import``/``from`` statements and dynamic ``import_module`` /
``__import__`` calls, and resolves them to file paths.
"""

import ast
import os
from pathlib import Path

from .protocols import ImportSpecifiers, ResolveImport
from .resolver import ResolutionError


# Extensions handed to the parser; everything else is passed through unparsed
PARSED_EXTENSIONS = frozenset({".py", ".pyi"})

# Callables recognised as dynamic imports when given a string literal
_DYNAMIC_IMPORT_NAMES = {"import_module", "__import__"}


def is_parsed_extension(path: str) -> bool:
    return Path(path).suffix.lower() in PARSED_EXTENSIONS


def parse(path: str, source: bytes | None = None) -> ast.Module:
    """Parse a Python file into a module tree.

    Reads the file when ``source`` is not given. Raises SyntaxError
    (with ``filename`` set) when the content is rejected.
    """
    if source is None:
        source = Path(path).read_bytes()
    return ast.parse(source, filename=path)


class _ImportCollector(ast.NodeVisitor):
    """Walks a tree in source order, recording import specifiers."""

    def __init__(self):
        self.static: list[str] = []
        self.dynamic: list[str] = []
        self.package_names: set[int] = set()

    def visit_Import(self, node: ast.Import) -> None:
        for alias in node.names:
            self.static.append(alias.name)

    def visit_ImportFrom(self, node: ast.ImportFrom) -> None:
        prefix = "." * node.level
        if node.module:
            self.static.append(prefix + node.module)
            return
        # `from . import a, b` names submodules, or attributes of the package
        for alias in node.names:
            if alias.name == "*":
                self.static.append(prefix)
            else:
                self.package_names.add(len(self.static))
                self.static.append(prefix + alias.name)

    def visit_Call(self, node: ast.Call) -> None:
        specifier = _dynamic_import_specifier(node)
        if specifier is not None:
            self.dynamic.append(specifier)
        self.generic_visit(node)


def _dynamic_import_specifier(node: ast.Call) -> str | None:
    """Return the literal module name of an import call, else None."""
    func = node.func
    if isinstance(func, ast.Name):
        name = func.id
    elif isinstance(func, ast.Attribute):
        name = func.attr
    else:
        return None
    if name not in _DYNAMIC_IMPORT_NAMES or not node.args:
        return None

    first = node.args[0]
    if not isinstance(first, ast.Constant) or not isinstance(first.value, str):
        return None
    if not first.value:
        return None

    if name == "__import__":
        level = _import_level(node)
        if level is None:
            return None
        return "." * level + first.value
    return first.value


def _import_level(node: ast.Call) -> int | None:
    """Constant ``level`` of an ``__import__`` call (5th positional or keyword)."""
    level_node = node.args[4] if len(node.args) > 4 else None
    for keyword in node.keywords:
        if keyword.arg == "level":
            level_node = keyword.value
    if level_node is None:
        return 0
    if isinstance(level_node, ast.Constant) and isinstance(level_node.value, int):
        return max(level_node.value, 0)
    return None


def parse_imports(tree: ast.AST) -> ImportSpecifiers:
    collector = _ImportCollector()
    collector.visit(tree)
    return ImportSpecifiers(
        static=collector.static,
        dynamic=collector.dynamic,
        package_names=collector.package_names,
    )


def get_dependencies(tree: ast.AST, file_path: str, resolve_import: ResolveImport) -> list[str]:
    """Resolve every import of ``tree``: static ones first, then dynamic.

    Source order is kept within each group and duplicates are not removed.
    Specifiers naming external modules are left out; unresolvable ones
    raise ResolutionError. A `from . import NAME` with no NAME submodule
    depends on the package itself.
    """
    file_dir = os.path.dirname(os.path.abspath(file_path))
    imports = parse_imports(tree)
    dependencies = []
    for index, specifier in enumerate(imports.static + imports.dynamic):
        if index in imports.package_names:
            resolved = _resolve_package_name(specifier, file_dir, resolve_import)
        else:
            resolved = resolve_import(specifier, file_dir)
        if resolved is not None:
            dependencies.append(resolved)
    return dependencies


def _resolve_package_name(specifier: str, file_dir: str, resolve_import: ResolveImport) -> str | None:
    try:
        return resolve_import(specifier, file_dir)
    except ResolutionError as exc:
        package = specifier[: len(specifier) - len(specifier.lstrip("."))]
        try:
            return resolve_import(package, file_dir)
        except ResolutionError:
            raise exc from None

"""Tests for import specifier resolution."""

import os
import sys

import pytest

from importmap.resolver import ImportResolver, ResolutionError, ResolveOptions, get_resolve_import


@pytest.fixture
def project(tmp_path):
    """pkg/{__init__,a,sub/__init__,sub/b}.py plus top.py and stub.pyi."""
    pkg = tmp_path / "pkg"
    sub = pkg / "sub"
    sub.mkdir(parents=True)
    (pkg / "__init__.py").write_text("")
    (pkg / "a.py").write_text("")
    (sub / "__init__.py").write_text("")
    (sub / "b.py").write_text("")
    (tmp_path / "top.py").write_text("")
    (tmp_path / "stub.pyi").write_text("")
    return tmp_path


def test_relative_sibling(project):
    resolve = get_resolve_import()
    assert resolve(".a", str(project / "pkg")) == str(project / "pkg" / "a.py")


def test_relative_package_itself(project):
    resolve = get_resolve_import()
    assert resolve(".", str(project / "pkg")) == str(project / "pkg" / "__init__.py")


def test_relative_parent_levels(project):
    resolve = get_resolve_import()
    base = str(project / "pkg" / "sub")
    assert resolve("..a", base) == str(project / "pkg" / "a.py")
    assert resolve("...top", base) == str(project / "top.py")
    assert resolve("..", base) == str(project / "pkg" / "__init__.py")


def test_relative_dotted(project):
    resolve = get_resolve_import()
    assert resolve(".sub.b", str(project / "pkg")) == str(project / "pkg" / "sub" / "b.py")
    assert resolve(".sub", str(project / "pkg")) == str(project / "pkg" / "sub" / "__init__.py")


def test_module_file_wins_over_package(project):
    (project / "pkg" / "a").mkdir()
    (project / "pkg" / "a" / "__init__.py").write_text("")
    resolve = get_resolve_import()
    assert resolve(".a", str(project / "pkg")) == str(project / "pkg" / "a.py")


def test_extension_priority(project):
    resolve = get_resolve_import()
    assert resolve(".stub", str(project)) == str(project / "stub.pyi")
    (project / "stub.py").write_text("")
    assert resolve(".stub", str(project)) == str(project / "stub.py")

    pyi_first = get_resolve_import(ResolveOptions(extensions=(".pyi", ".py")))
    assert pyi_first(".stub", str(project)) == str(project / "stub.pyi")


def test_absolute_from_search_paths(project, tmp_path_factory):
    other = tmp_path_factory.mktemp("other")
    (other / "top.py").write_text("")
    resolve = get_resolve_import(ResolveOptions(search_paths=(str(other), str(project))))
    assert resolve("top", "/anywhere") == str(other / "top.py")
    assert resolve("pkg.sub.b", "/anywhere") == str(project / "pkg" / "sub" / "b.py")


def test_absolute_without_search_paths_fails(project):
    resolve = get_resolve_import()
    with pytest.raises(ResolutionError) as excinfo:
        resolve("pkg.a", str(project))
    assert excinfo.value.specifier == "pkg.a"
    assert excinfo.value.base_dir == str(project)
    assert "pkg.a" in str(excinfo.value)


def test_unresolvable_relative_raises(project):
    resolve = get_resolve_import()
    with pytest.raises(ResolutionError):
        resolve(".missing", str(project / "pkg"))
    with pytest.raises(ImportError):
        resolve(".", str(project))


def test_externals_return_none(project):
    resolve = get_resolve_import()
    assert resolve("os", str(project)) is None
    assert resolve("os.path", str(project)) is None

    custom = get_resolve_import(ResolveOptions(externals=frozenset({"requests"})))
    assert custom("requests.adapters", str(project)) is None
    with pytest.raises(ResolutionError):
        custom("os", str(project))


def test_aliases(project, tmp_path_factory):
    vendored = tmp_path_factory.mktemp("vendored")
    (vendored / "core.py").write_text("")
    (vendored / "__init__.py").write_text("")
    single = vendored / "single.py"
    single.write_text("")
    resolve = get_resolve_import(ResolveOptions(aliases={"ext": str(vendored), "one": str(single)}))
    assert resolve("ext.core", str(project)) == str(vendored / "core.py")
    assert resolve("ext", str(project)) == str(vendored / "__init__.py")
    assert resolve("one", str(project)) == str(single)
    with pytest.raises(ResolutionError):
        resolve("ext.missing", str(project))


def test_alias_overrides_external(project):
    resolve = get_resolve_import(ResolveOptions(aliases={"json": str(project / "pkg")}))
    assert resolve("json.a", str(project)) == str(project / "pkg" / "a.py")


def test_use_sys_path(project, monkeypatch):
    monkeypatch.setattr(sys, "path", [str(project)])
    resolve = get_resolve_import(ResolveOptions(use_sys_path=True))
    assert resolve("pkg.a", "/anywhere") == str(project / "pkg" / "a.py")


def test_results_are_absolute(project, monkeypatch):
    monkeypatch.chdir(project)
    resolve = ImportResolver(ResolveOptions(search_paths=(".",)))
    assert os.path.isabs(resolve("top", "pkg"))
    assert os.path.isabs(resolve(".a", "pkg"))


def test_options_from_dict():
    options = ResolveOptions.from_dict({
        "search_paths": ["src"],
        "extensions": [".py"],
        "aliases": {"x": "vendor/x"},
        "use_sys_path": True,
        "externals": ["numpy"],
        "unrelated": 1,
    })
    assert options.search_paths == ("src",)
    assert options.extensions == (".py",)
    assert options.aliases == {"x": "vendor/x"}
    assert options.use_sys_path is True
    assert options.externals == frozenset({"numpy"})

    defaults = ResolveOptions.from_dict({})
    assert "os" in defaults.externals

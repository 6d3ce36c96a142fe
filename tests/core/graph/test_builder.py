"""Tests for dependency index construction.

Validates direct vs recursive expansion, standard-package filtering,
shallow test dependencies, root handling, cycle safety, foreign-function
imports and failure propagation.
"""

from __future__ import annotations

import pytest

from showdeps.core.graph import (
    BuildOptions,
    DependencyIndex,
    PackageInfo,
    build_dependency_index,
    prune_roots,
)
from showdeps.core.resolver import PackageResolver
from showdeps.exceptions import ResolutionError, TraversalLimitError


def _build(resolver, roots, **options) -> dict[str, list[str]]:
    """Build, prune the roots and return the plain mapping."""
    index = build_dependency_index(roots, resolver, BuildOptions(**options), "/src")
    return prune_roots(index, roots).as_dict()


class _CountingResolver(PackageResolver):
    """Wraps another resolver and records every resolve call."""

    def __init__(self, inner: PackageResolver) -> None:
        self.inner = inner
        self.calls: list[tuple[str, str]] = []

    def resolve(self, package_id, directory, *, find_only=False):
        self.calls.append((package_id, directory))
        return self.inner.resolve(package_id, directory, find_only=find_only)

    def is_standard(self, package_id):
        return self.inner.is_standard(package_id)


# ===========================================================================
# The reference scenario
# ===========================================================================


class TestScenario:
    """app -> {lib1, lib2}; lib1 -> {lib2, core(std)}."""

    def test_direct_without_standard(self, scenario_resolver) -> None:
        result = _build(scenario_resolver, ["app"])
        assert sorted(result) == ["lib1", "lib2"]

    def test_recursive_without_standard(self, scenario_resolver) -> None:
        result = _build(scenario_resolver, ["app"], recursive=True)
        assert sorted(result) == ["lib1", "lib2"]
        assert result["lib2"] == ["app", "lib1"]

    def test_recursive_with_standard(self, scenario_resolver) -> None:
        result = _build(
            scenario_resolver, ["app"], recursive=True, include_standard=True,
        )
        assert sorted(result) == ["core", "lib1", "lib2"]
        assert result["core"] == ["lib1"]


# ===========================================================================
# Expansion behaviour
# ===========================================================================


class TestExpansion:
    """Tests for which packages are reached and recorded."""

    def test_non_recursive_records_only_direct_imports(self, web_resolver) -> None:
        result = _build(web_resolver, ["example.com/web"])
        assert sorted(result) == [
            "example.com/assert", "example.com/log", "example.com/router",
        ]

    def test_non_recursive_resolves_only_roots(self, web_resolver) -> None:
        counting = _CountingResolver(web_resolver)
        _build(counting, ["example.com/web"])
        assert [name for name, _ in counting.calls] == ["example.com/web"]

    def test_resolved_metadata_collected(self, scenario_resolver) -> None:
        resolved: dict[str, PackageInfo] = {}
        build_dependency_index(
            ["app"], scenario_resolver, BuildOptions(recursive=True), "/src",
            resolved=resolved,
        )
        assert sorted(resolved) == ["app", "lib1", "lib2"]
        assert resolved["lib1"].imports == ("lib2", "core")

    def test_recursive_reaches_transitive_imports(self, web_resolver) -> None:
        result = _build(web_resolver, ["example.com/web"], recursive=True)
        assert sorted(result) == [
            "example.com/assert",
            "example.com/config",
            "example.com/diff",
            "example.com/log",
            "example.com/middleware",
            "example.com/router",
        ]

    def test_importers_are_sorted_and_unique(self, web_resolver) -> None:
        result = _build(web_resolver, ["example.com/web"], recursive=True)
        assert result["example.com/log"] == [
            "example.com/config", "example.com/middleware", "example.com/web",
        ]

    def test_each_package_resolved_once(self, web_resolver) -> None:
        counting = _CountingResolver(web_resolver)
        _build(counting, ["example.com/cli", "example.com/web"], recursive=True)
        names = [name for name, _ in counting.calls]
        assert len(names) == len(set(names))

    def test_import_cycle_terminates(self, web_resolver) -> None:
        result = _build(web_resolver, ["example.com/config"], recursive=True)
        assert result == {"example.com/log": ["example.com/config"]}

    def test_imports_resolved_from_importer_directory(self, make_resolver) -> None:
        resolver = make_resolver({
            "example.com/a": {"dir": "/src/a", "imports": ["example.com/b"]},
            "example.com/b": {"dir": "/src/b"},
        })
        counting = _CountingResolver(resolver)
        _build(counting, ["example.com/a"], recursive=True)
        assert counting.calls == [("example.com/a", "/src"), ("example.com/b", "/src/a")]

    def test_empty_roots_give_empty_index(self, web_resolver) -> None:
        assert _build(web_resolver, []) == {}


# ===========================================================================
# Filtering
# ===========================================================================


class TestStandardFiltering:
    """Tests for standard-distribution filtering."""

    def test_standard_packages_absent_everywhere(self, web_resolver) -> None:
        result = _build(web_resolver, ["example.com/cli"], recursive=True)
        for package, importers in result.items():
            assert not web_resolver.is_standard(package)
            assert not any(web_resolver.is_standard(i) for i in importers)

    def test_standard_included_when_enabled(self, web_resolver) -> None:
        result = _build(
            web_resolver, ["example.com/web"], recursive=True, include_standard=True,
        )
        assert {"fmt", "io", "net/http", "testing"} <= set(result)
        assert result["io"] == ["fmt", "net/http"]

    def test_foreign_function_import_is_recorded_not_resolved(self, web_resolver) -> None:
        """The cgo pseudo-package has no manifest entry yet causes no error."""
        result = _build(
            web_resolver, ["example.com/router"], recursive=True, include_standard=True,
        )
        assert result["C"] == ["example.com/middleware"]


class TestTestDependencies:
    """Test imports are followed for roots only."""

    def test_root_test_imports_included(self, web_resolver) -> None:
        result = _build(web_resolver, ["example.com/web"])
        assert result["example.com/assert"] == ["example.com/web"]

    def test_root_test_imports_excluded_when_disabled(self, web_resolver) -> None:
        result = _build(
            web_resolver, ["example.com/web"], recursive=True, include_test_deps=False,
        )
        assert "example.com/assert" not in result
        assert "example.com/diff" not in result

    def test_dependency_test_imports_never_followed(self, web_resolver) -> None:
        """router's tests import mock, but router is not a root."""
        result = _build(web_resolver, ["example.com/web"], recursive=True)
        assert "example.com/mock" not in result

    def test_test_imports_of_dependencies_of_tests_are_normal_imports(
        self, web_resolver,
    ) -> None:
        """assert is a test import of the root; its own imports are followed."""
        result = _build(web_resolver, ["example.com/web"], recursive=True)
        assert result["example.com/diff"] == ["example.com/assert"]


# ===========================================================================
# Roots
# ===========================================================================


class TestRoots:
    """Tests for root packages in the index."""

    def test_roots_removed_from_keys_but_kept_as_importers(self, web_resolver) -> None:
        result = _build(web_resolver, ["example.com/web"])
        assert "example.com/web" not in result
        assert "example.com/web" in result["example.com/router"]

    def test_root_imported_by_root_is_recorded_before_pruning(self, web_resolver) -> None:
        roots = ["example.com/cli", "example.com/web"]
        index = build_dependency_index(roots, web_resolver, BuildOptions(), "/src")
        assert index.importers("example.com/web") == ["example.com/cli"]
        prune_roots(index, roots)
        assert "example.com/web" not in index

    def test_root_imported_by_root_not_resolved_twice(self, web_resolver) -> None:
        counting = _CountingResolver(web_resolver)
        _build(counting, ["example.com/cli", "example.com/web"], recursive=True)
        names = [name for name, _ in counting.calls]
        assert names.count("example.com/web") == 1


# ===========================================================================
# Failures and limits
# ===========================================================================


class TestFailures:
    """Resolver failures abort the build; caps are enforced."""

    def test_missing_dependency_aborts(self, make_resolver) -> None:
        resolver = make_resolver({"example.com/a": {"imports": ["example.com/gone"]}})
        with pytest.raises(ResolutionError) as excinfo:
            _build(resolver, ["example.com/a"], recursive=True)
        assert excinfo.value.package_id == "example.com/gone"
        assert "example.com/gone" in str(excinfo.value)

    def test_missing_dependency_ignored_without_recursion(self, make_resolver) -> None:
        resolver = make_resolver({"example.com/a": {"imports": ["example.com/gone"]}})
        assert _build(resolver, ["example.com/a"]) == {"example.com/gone": ["example.com/a"]}

    def test_missing_root_aborts(self, make_resolver) -> None:
        with pytest.raises(ResolutionError):
            _build(make_resolver({}), ["example.com/nope"])

    def test_package_cap(self, web_resolver) -> None:
        with pytest.raises(TraversalLimitError):
            _build(web_resolver, ["example.com/cli"], recursive=True, max_packages=3)


class TestDependencyIndex:
    """Tests for the index container itself."""

    def test_entry_without_importers(self) -> None:
        index = DependencyIndex()
        index.ensure("a")
        assert "a" in index
        assert index.importers("a") == []

    def test_normalize_dedupes(self) -> None:
        index = DependencyIndex({"a": ["z", "b", "z"]})
        index.normalize()
        assert index.as_dict() == {"a": ["b", "z"]}

    def test_equality_ignores_importer_order(self) -> None:
        assert DependencyIndex({"a": ["c", "b"]}) == DependencyIndex({"a": ["b", "c", "b"]})

    def test_restrict_copies(self) -> None:
        index = DependencyIndex({"a": ["x"], "b": ["y"]})
        kept = index.restrict({"a"})
        assert kept.packages() == ["a"]
        assert index.packages() == ["a", "b"]

    def test_package_info_defaults(self) -> None:
        info = PackageInfo(import_path="example.com/a")
        assert info.imports == ()
        assert not info.is_standard

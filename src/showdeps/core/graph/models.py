"""Data model for the dependency graph engine.

Defines the resolver output record (``PackageInfo``), the immutable build
configuration (``BuildOptions``), and the reverse-edge adjacency structure
(``DependencyIndex``) that the builder populates and the reachability and
chain queries read.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator

# Import path of the synthetic foreign-function pseudo-package (cgo).
FOREIGN_FUNCTION_IMPORT = "C"

# Upper bound on the number of packages a single build may resolve.
DEFAULT_MAX_PACKAGES = 50_000


# ---------------------------------------------------------------------------
# PackageInfo: what a resolver knows about one package
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PackageInfo:
    """Resolved metadata for a single package.

    Attributes:
        import_path: Canonical package identifier.
        dir: Directory holding the package sources ("" if unknown).
        imports: Direct non-test import identifiers, in source order.
        test_imports: Direct test-only import identifiers (in-package and
            external tests merged), in source order.
        is_standard: True if the package ships with the toolchain.
        files: Non-test source file names, relative to ``dir``.
        test_files: Test source file names, relative to ``dir``.
    """

    import_path: str
    dir: str = ""
    imports: tuple[str, ...] = ()
    test_imports: tuple[str, ...] = ()
    is_standard: bool = False
    files: tuple[str, ...] = ()
    test_files: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# BuildOptions: explicit configuration threaded into the builder
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class BuildOptions:
    """Immutable switches controlling dependency graph construction.

    Attributes:
        recursive: Expand imports transitively instead of only the roots'
            direct imports.
        include_standard: Keep standard-distribution import targets.
        include_test_deps: Add the root packages' test-only imports. Test
            imports of non-root packages are never considered.
        max_packages: Cap on resolver calls for one build.
    """

    recursive: bool = False
    include_standard: bool = False
    include_test_deps: bool = True
    max_packages: int = DEFAULT_MAX_PACKAGES


# ---------------------------------------------------------------------------
# DependencyIndex: package -> importers
# ---------------------------------------------------------------------------


class DependencyIndex:
    """Reverse-edge map from each package to the packages importing it.

    Every package reached during construction owns a key, even with zero
    importers. Importer lists may hold duplicates while the graph is being
    built; :meth:`normalize` sorts and deduplicates them before the index is
    queried or presented.

    The index is only an adjacency structure. Traversal bookkeeping
    ("already visited") lives in the traversals themselves.
    """

    def __init__(self, edges: dict[str, list[str]] | None = None) -> None:
        self._importers: dict[str, list[str]] = {}
        for package, importers in (edges or {}).items():
            self._importers[package] = list(importers)

    def __contains__(self, package: object) -> bool:
        return package in self._importers

    def __iter__(self) -> Iterator[str]:
        return iter(self.packages())

    def __len__(self) -> int:
        return len(self._importers)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, DependencyIndex):
            return NotImplemented
        return self.as_dict() == other.as_dict()

    def __repr__(self) -> str:
        return f"DependencyIndex({self.as_dict()!r})"

    def ensure(self, package: str) -> None:
        """Make sure ``package`` has an entry, possibly with no importers."""
        self._importers.setdefault(package, [])

    def add_edge(self, importer: str, package: str) -> None:
        """Record that ``importer`` directly imports ``package``."""
        self._importers.setdefault(package, []).append(importer)

    def discard(self, package: str) -> None:
        """Remove the entry for ``package``; importer values are untouched."""
        self._importers.pop(package, None)

    def packages(self) -> list[str]:
        """Return every package key in lexicographic order."""
        return sorted(self._importers)

    def importers(self, package: str) -> list[str]:
        """Return the sorted, deduplicated importers of ``package``.

        Packages without an entry (for example deleted roots) have none.
        """
        return sorted(set(self._importers.get(package, ())))

    def normalize(self) -> None:
        """Sort and deduplicate every importer list in place."""
        for package, importers in self._importers.items():
            self._importers[package] = sorted(set(importers))

    def restrict(self, keep: Iterable[str]) -> DependencyIndex:
        """Return a copy containing only the keys in ``keep``."""
        wanted = set(keep)
        return DependencyIndex({
            package: importers
            for package, importers in self._importers.items()
            if package in wanted
        })

    def as_dict(self) -> dict[str, list[str]]:
        """Return a plain ``{package: sorted unique importers}`` mapping."""
        return {package: self.importers(package) for package in self.packages()}


@dataclass
class ChainSet:
    """Dependency chains grouped by the root package they start from.

    Attributes:
        limit: Maximum chains kept per root (0 means unlimited).
        by_root: Root identifier to chains, in discovery order.
    """

    limit: int = 1
    by_root: dict[str, list[tuple[str, ...]]] = field(default_factory=dict)

    def offer(self, chain: tuple[str, ...]) -> bool:
        """Keep ``chain`` unless its root already holds ``limit`` chains."""
        kept = self.by_root.setdefault(chain[0], [])
        if self.limit > 0 and len(kept) >= self.limit:
            return False
        kept.append(chain)
        return True

    def ordered(self) -> list[tuple[str, ...]]:
        """Return all kept chains, roots in lexicographic order."""
        return [
            chain
            for root in sorted(self.by_root)
            for chain in self.by_root[root]
        ]

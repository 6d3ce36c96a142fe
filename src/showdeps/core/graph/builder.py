"""Dependency graph construction.

Expands a set of root packages through a :class:`PackageResolver` and
records every discovered import as a reverse edge (package -> importer) in
a :class:`DependencyIndex`.

Test dependencies are shallow: only the roots' own test imports are
followed, never the tests of the packages they pull in. Following them
transitively would drag in the test tooling of unrelated repositories.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING, Iterable

from showdeps.core.graph.models import (
    FOREIGN_FUNCTION_IMPORT,
    BuildOptions,
    DependencyIndex,
    PackageInfo,
)
from showdeps.exceptions import TraversalLimitError

if TYPE_CHECKING:
    from showdeps.core.resolver.base import PackageResolver

logger = logging.getLogger(__name__)


def build_dependency_index(
    roots: Iterable[str],
    resolver: PackageResolver,
    options: BuildOptions,
    directory: str,
    *,
    resolved: dict[str, PackageInfo] | None = None,
) -> DependencyIndex:
    """Build the reverse-edge dependency index for ``roots``.

    Packages are processed breadth-first from a work queue seeded with the
    roots in sorted order. In non-recursive mode only the roots are
    expanded; their direct imports still get entries. A root that is also
    imported by another root keeps the importer edges recorded for it.

    Args:
        roots: Canonical identifiers of the root packages.
        resolver: Source of package metadata.
        options: Build switches.
        directory: Base directory for resolving the roots.
        resolved: If given, receives the metadata of every resolved
            package, keyed by canonical identifier.

    Returns:
        The raw index. Roots are still present as keys and importer lists
        are not yet normalised; see :func:`prune_roots`.

    Raises:
        ResolutionError: If any reached package cannot be resolved.
        TraversalLimitError: If more than ``options.max_packages`` packages
            would have to be resolved.
    """
    root_set = frozenset(roots)
    index = DependencyIndex()
    seen: set[str] = set(root_set)
    queue: deque[tuple[str, str]] = deque(
        (root, directory) for root in sorted(root_set)
    )
    count = 0

    while queue:
        name, source_dir = queue.popleft()
        if name == FOREIGN_FUNCTION_IMPORT:
            continue
        if count >= options.max_packages:
            raise TraversalLimitError(
                f"more than {options.max_packages} packages reached; "
                f"stopped before {name!r}"
            )
        count += 1

        logger.debug("Resolving %s from %s", name, source_dir)
        info = resolver.resolve(name, source_dir)
        package = info.import_path
        seen.add(package)
        index.ensure(package)
        if resolved is not None:
            resolved[package] = info

        is_root = package in root_set or name in root_set
        for target in _direct_imports(info, is_root, options, resolver):
            index.add_edge(package, target)
            if options.recursive and target not in seen:
                seen.add(target)
                queue.append((target, info.dir or source_dir))

    logger.debug("Resolved %d packages, %d in index", count, len(index))
    return index


def _direct_imports(
    info: PackageInfo,
    is_root: bool,
    options: BuildOptions,
    resolver: PackageResolver,
) -> list[str]:
    """Return the filtered, deduplicated import targets of one package."""
    names = list(info.imports)
    if is_root and options.include_test_deps:
        names.extend(info.test_imports)

    targets: dict[str, None] = {}
    for name in names:
        if not options.include_standard and resolver.is_standard(name):
            continue
        targets.setdefault(name)
    return list(targets)


def prune_roots(index: DependencyIndex, roots: Iterable[str]) -> DependencyIndex:
    """Delete the root packages from ``index`` and normalise importer lists.

    Roots remain visible as importer values. The index is modified in
    place and returned for convenience.
    """
    for root in roots:
        index.discard(root)
    index.normalize()
    return index

"""Reachability filtering: keep only packages that lead to a target.

Answers "why is this package here?" by retaining the packages that sit on
some path between a root and a package matching a predicate. The walk
follows importer edges (dependency -> dependents), the reverse of the
import relation, so every package marked from a match transitively
imports that match.
"""

from __future__ import annotations

from typing import Callable

from showdeps.core.graph.models import DependencyIndex


def mark_importers(
    index: DependencyIndex,
    package: str,
    marked: set[str],
) -> None:
    """Add ``package`` and all of its transitive importers to ``marked``.

    Packages already in ``marked`` are not walked again, which both
    terminates on import cycles and avoids repeated work across several
    starting packages.
    """
    stack = [package]
    while stack:
        current = stack.pop()
        if current in marked:
            continue
        marked.add(current)
        stack.extend(
            importer for importer in index.importers(current)
            if importer not in marked
        )


def filter_by_target(
    index: DependencyIndex,
    matches: Callable[[str], bool],
) -> DependencyIndex:
    """Restrict ``index`` to packages that depend on a matching package.

    Args:
        index: Normalised dependency index (roots already removed).
        matches: Predicate selecting the target packages.

    Returns:
        A new index holding the matching packages and every package that
        imports one of them, directly or indirectly.
    """
    marked: set[str] = set()
    for package in index.packages():
        if matches(package):
            mark_importers(index, package, marked)
    return index.restrict(marked)

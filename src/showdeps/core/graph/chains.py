"""Dependency chain enumeration.

A chain is a sequence of package identifiers from a root package to a
target, each consecutive pair linked by a direct import. Chains are found
by a depth-first walk from the target along importer edges until a root is
reached.

The walk is not exhaustive. A package is visited at most once per target,
so each importer branch contributes the first chain found through it and
the chains produced are witnesses, not necessarily the shortest paths.
Enumerating every path would be exponential in the graph size.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator

from showdeps.core.graph.models import ChainSet, DependencyIndex
from showdeps.exceptions import TraversalLimitError

logger = logging.getLogger(__name__)

# Longest chain the walk will follow before giving up.
DEFAULT_MAX_DEPTH = 10_000


def iter_dependency_chains(
    index: DependencyIndex,
    leaf: str,
    roots: Iterable[str],
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> Iterator[tuple[str, ...]]:
    """Yield dependency chains ending at ``leaf``, each reading root -> leaf.

    Importers are explored in sorted order so the sequence of chains is
    stable across runs on identical input. The visited set is private to
    this call.

    Args:
        index: Normalised dependency index.
        leaf: Package the chains must end at.
        roots: Root package identifiers where chains start.
        max_depth: Maximum chain length before the walk is abandoned.

    Yields:
        Tuples of package identifiers, root first and ``leaf`` last.

    Raises:
        TraversalLimitError: If a chain grows beyond ``max_depth``.
    """
    root_set = frozenset(roots)
    if leaf in root_set:
        yield (leaf,)
        return

    visited = {leaf}
    path = [leaf]
    pending = [iter(index.importers(leaf))]

    while pending:
        importer = next(pending[-1], None)
        if importer is None:
            pending.pop()
            path.pop()
            continue
        if importer in root_set:
            yield (importer, *reversed(path))
            continue
        if importer in visited:
            continue
        if len(path) >= max_depth:
            raise TraversalLimitError(
                f"dependency chain to {leaf!r} longer than {max_depth} packages"
            )
        visited.add(importer)
        path.append(importer)
        pending.append(iter(index.importers(importer)))


def find_chains(
    index: DependencyIndex,
    matches: Callable[[str], bool],
    roots: Iterable[str],
    limit: int = 1,
    *,
    max_depth: int = DEFAULT_MAX_DEPTH,
) -> list[tuple[str, ...]]:
    """Collect bounded dependency chains from the roots to matching packages.

    Every package in ``index`` satisfying ``matches`` is used as a leaf, in
    sorted order. Chains are grouped by the root they start from and at
    most ``limit`` are kept per root; later chains for a full root are
    dropped.

    Args:
        index: Normalised dependency index (roots already removed).
        matches: Predicate selecting target packages.
        roots: Root package identifiers.
        limit: Maximum chains per root, 0 for unlimited.
        max_depth: Passed through to :func:`iter_dependency_chains`.

    Returns:
        Chains ordered by root, then by discovery.
    """
    root_set = frozenset(roots)
    chains = ChainSet(limit=limit)
    for leaf in index.packages():
        if not matches(leaf):
            continue
        for chain in iter_dependency_chains(
            index, leaf, root_set, max_depth=max_depth
        ):
            chains.offer(chain)
    result = chains.ordered()
    logger.debug("Found %d chains from %d roots", len(result), len(chains.by_root))
    return result

"""Dependency graph engine.

Builds a reverse-edge dependency index from a set of root packages and
answers "why does X depend on Y" questions over it, either by pruning the
index to the packages between the roots and a target (reachability) or by
listing concrete root-to-target dependency chains.
"""

from showdeps.core.graph.builder import build_dependency_index, prune_roots
from showdeps.core.graph.chains import find_chains, iter_dependency_chains
from showdeps.core.graph.models import (
    FOREIGN_FUNCTION_IMPORT,
    BuildOptions,
    ChainSet,
    DependencyIndex,
    PackageInfo,
)
from showdeps.core.graph.pattern import compile_pattern, is_standard_package
from showdeps.core.graph.reachability import filter_by_target, mark_importers

__all__ = [
    "FOREIGN_FUNCTION_IMPORT",
    "BuildOptions",
    "ChainSet",
    "DependencyIndex",
    "PackageInfo",
    "build_dependency_index",
    "compile_pattern",
    "filter_by_target",
    "find_chains",
    "is_standard_package",
    "iter_dependency_chains",
    "mark_importers",
    "prune_roots",
]

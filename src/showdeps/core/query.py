"""One dependency query, from command-line patterns to presentable results.

Ties the pieces together the way a single invocation uses them:

1. Expand the root patterns and canonicalise each root.
2. Build the dependency index and drop the roots from it.
3. Optionally explain a target, either by pruning the index to the
   packages that lead to it or by listing root-to-target chains.

File listing is a separate entry point that skips root removal and target
filtering and reports source files instead of packages.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Sequence

from showdeps.core.graph import (
    FOREIGN_FUNCTION_IMPORT,
    BuildOptions,
    build_dependency_index,
    compile_pattern,
    filter_by_target,
    find_chains,
    is_standard_package,
    prune_roots,
)
from showdeps.core.graph.models import DEFAULT_MAX_PACKAGES, PackageInfo
from showdeps.core.resolver.base import PackageResolver
from showdeps.exceptions import WorkingDirectoryError

logger = logging.getLogger(__name__)


class OutputMode(str, Enum):
    """Shape of a query result."""

    PLAIN = "plain"
    IMPORTERS = "importers"
    CHAINS = "chains"


@dataclass(frozen=True)
class QueryOptions:
    """Immutable settings for a dependency query.

    Attributes:
        recursive: Report all transitive dependencies, not just direct ones.
            Combined with ``why``, report every package on a path to the
            target instead of sample chains.
        include_standard: Report standard-distribution packages.
        include_test_deps: Include the roots' test dependencies.
        show_importers: Annotate each package with its importers.
        why: Wildcard pattern naming the target dependency to explain.
        max_chains: Chains printed per root in chain mode (0 = unlimited).
        max_packages: Cap on packages resolved while building the graph.
    """

    recursive: bool = False
    include_standard: bool = False
    include_test_deps: bool = True
    show_importers: bool = False
    why: str | None = None
    max_chains: int = 1
    max_packages: int = DEFAULT_MAX_PACKAGES

    @property
    def mode(self) -> OutputMode:
        if self.why is not None:
            return OutputMode.IMPORTERS if self.recursive else OutputMode.CHAINS
        if self.show_importers:
            return OutputMode.IMPORTERS
        return OutputMode.PLAIN

    def build_options(self) -> BuildOptions:
        """Derive the graph build switches.

        A target pattern forces recursive expansion, and a standard target
        forces standard packages to be kept so the target can be found.
        """
        include_standard = self.include_standard
        if self.why is not None and is_standard_package(self.why):
            include_standard = True
        return BuildOptions(
            recursive=self.recursive or self.why is not None,
            include_standard=include_standard,
            include_test_deps=self.include_test_deps,
            max_packages=self.max_packages,
        )


@dataclass
class QueryResult:
    """Outcome of :func:`run_query`.

    Attributes:
        roots: Canonical root package identifiers, sorted.
        mode: How the result should be presented.
        packages: Reported packages mapped to their sorted importers.
            Empty in chain mode.
        chains: Root-to-target chains. Empty unless in chain mode.
    """

    roots: tuple[str, ...]
    mode: OutputMode
    packages: dict[str, list[str]] = field(default_factory=dict)
    chains: list[tuple[str, ...]] = field(default_factory=list)


def current_directory() -> str:
    """Return the working directory.

    Raises:
        WorkingDirectoryError: If it cannot be determined, for example
            because it was deleted.
    """
    try:
        return os.getcwd()
    except OSError as exc:
        raise WorkingDirectoryError(f"cannot get working directory: {exc}") from exc


def resolve_roots(
    resolver: PackageResolver,
    patterns: Sequence[str],
    directory: str,
) -> tuple[str, ...]:
    """Expand root patterns and return their canonical identifiers, sorted."""
    roots: set[str] = set()
    for name in resolver.expand(patterns or ["."], directory):
        info = resolver.resolve(name, directory, find_only=True)
        roots.add(info.import_path)
    logger.debug("Roots: %s", ", ".join(sorted(roots)))
    return tuple(sorted(roots))


def run_query(
    resolver: PackageResolver,
    patterns: Sequence[str] = (),
    options: QueryOptions | None = None,
    directory: str | None = None,
) -> QueryResult:
    """Run a dependency query.

    Args:
        resolver: Source of package metadata.
        patterns: Root packages or wildcard patterns; defaults to ``"."``.
        options: Query settings.
        directory: Base directory; defaults to the working directory.

    Raises:
        PatternError: If ``options.why`` is malformed. Raised before any
            package is resolved.
        ResolutionError: If a root or dependency cannot be resolved.
        TraversalLimitError: If the graph exceeds the configured caps.
    """
    options = options or QueryOptions()
    matches: Callable[[str], bool] | None = None
    if options.why is not None:
        matches = compile_pattern(options.why)
    base = os.path.abspath(directory) if directory else current_directory()

    roots = resolve_roots(resolver, patterns, base)
    index = build_dependency_index(roots, resolver, options.build_options(), base)
    prune_roots(index, roots)

    mode = options.mode
    if mode is OutputMode.CHAINS and matches is not None:
        chains = find_chains(index, matches, roots, options.max_chains)
        return QueryResult(roots=roots, mode=mode, chains=chains)
    if matches is not None:
        index = filter_by_target(index, matches)
    return QueryResult(roots=roots, mode=mode, packages=index.as_dict())


def list_files(
    resolver: PackageResolver,
    patterns: Sequence[str] = (),
    options: QueryOptions | None = None,
    directory: str | None = None,
) -> list[str]:
    """List the source files of the roots and their dependencies.

    Root packages are included, and their test files are listed too unless
    test dependencies are excluded. ``options.why`` is ignored.

    Returns:
        File paths, grouped by package in sorted package order.
    """
    options = options or QueryOptions()
    base = os.path.abspath(directory) if directory else current_directory()
    roots = resolve_roots(resolver, patterns, base)
    build = replace(options, why=None).build_options()
    resolved: dict[str, PackageInfo] = {}
    index = build_dependency_index(roots, resolver, build, base, resolved=resolved)

    root_set = set(roots)
    paths: list[str] = []
    for package in index.packages():
        if package == FOREIGN_FUNCTION_IMPORT:
            continue
        # Direct dependencies in non-recursive mode were never resolved.
        info = resolved.get(package) or resolver.resolve(package, base)
        names = list(info.files)
        if package in root_set and options.include_test_deps:
            names.extend(info.test_files)
        paths.extend(os.path.join(info.dir, name) for name in names)
    return paths

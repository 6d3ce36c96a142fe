"""Abstract package resolver.

The graph engine never locates or parses packages itself. It asks a
``PackageResolver`` for a package's canonical identity and direct imports
and treats any failure as fatal for the whole run. Resolution is assumed
deterministic, so failures are never retried.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from showdeps.core.graph.models import PackageInfo
from showdeps.core.graph.pattern import is_standard_package


class PackageResolver(ABC):
    """Source of package metadata for the dependency graph builder.

    Subclasses must implement ``resolve``. ``expand`` and ``is_standard``
    have defaults suitable for resolvers without wildcard support and for
    ecosystems whose standard packages carry no domain prefix.
    """

    @abstractmethod
    def resolve(
        self,
        package_id: str,
        directory: str,
        *,
        find_only: bool = False,
    ) -> PackageInfo:
        """Resolve a package identifier to its metadata.

        Args:
            package_id: Import path, or a path relative to ``directory``.
            directory: Directory the identifier is resolved from.
            find_only: Only establish the canonical identity and location;
                import and file lists may be left empty.

        Returns:
            The package's ``PackageInfo``.

        Raises:
            ResolutionError: If the package cannot be found or parsed.
        """

    def expand(self, patterns: Iterable[str], directory: str) -> list[str]:
        """Expand command-line patterns into package identifiers.

        The default passes every pattern through unchanged.
        """
        return list(patterns)

    def is_standard(self, package_id: str) -> bool:
        """Return True if ``package_id`` is a standard-distribution package."""
        return is_standard_package(package_id)

"""Package resolver backed by a static YAML or JSON manifest.

The manifest describes a package universe without any toolchain
installed, which makes it useful for offline inspection, for reviewing
another machine's dependency dump and for tests. Format::

    packages:
      example.com/app:
        dir: app                  # relative to the manifest file
        imports: [example.com/lib, fmt]
        test_imports: [example.com/testutil]
        files: [main.go]
        test_files: [main_test.go]
      fmt:
        standard: true

Every key under ``packages`` is a canonical import path. ``standard``
defaults to the domain-prefix heuristic. JSON manifests load through the
same parser since JSON is valid YAML.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Iterable, Mapping

import yaml

from showdeps.core.graph.models import PackageInfo
from showdeps.core.graph.pattern import (
    compile_pattern,
    has_wildcard,
    is_relative_path,
    is_standard_package,
)
from showdeps.core.resolver.base import PackageResolver
from showdeps.exceptions import ManifestError, ResolutionError

logger = logging.getLogger(__name__)

_LIST_FIELDS = ("imports", "test_imports", "files", "test_files")


class ManifestResolver(PackageResolver):
    """Resolve packages from an in-memory package table.

    Args:
        packages: Package infos keyed by canonical import path.
    """

    def __init__(self, packages: Mapping[str, PackageInfo]) -> None:
        self._packages = dict(packages)
        self._by_dir = {
            os.path.normpath(info.dir): path
            for path, info in self._packages.items()
            if info.dir
        }

    @classmethod
    def from_file(cls, path: str | Path) -> ManifestResolver:
        """Load a manifest file.

        Raises:
            ManifestError: If the file cannot be read or parsed.
        """
        manifest = Path(path)
        try:
            data = yaml.safe_load(manifest.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError) as exc:
            raise ManifestError(f"cannot read manifest {manifest}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise ManifestError(f"cannot parse manifest {manifest}: {exc}") from exc
        return cls.from_mapping(data, base_dir=manifest.resolve().parent)

    @classmethod
    def from_mapping(
        cls,
        data: Any,
        base_dir: str | Path | None = None,
    ) -> ManifestResolver:
        """Build a resolver from already-parsed manifest data.

        Args:
            data: Mapping with a ``packages`` table.
            base_dir: Directory that relative ``dir`` entries are joined to.

        Raises:
            ManifestError: If the data does not follow the manifest format.
        """
        if not isinstance(data, Mapping):
            raise ManifestError("manifest must be a mapping with a 'packages' table")
        if "packages" not in data:
            raise ManifestError("manifest has no 'packages' table")
        table = data["packages"]
        if table is None:
            table = {}
        if not isinstance(table, Mapping):
            raise ManifestError("'packages' must be a mapping of import paths")

        packages = {
            str(path): _parse_entry(str(path), entry, base_dir)
            for path, entry in table.items()
        }
        return cls(packages)

    @property
    def package_ids(self) -> list[str]:
        """Return every known import path in lexicographic order."""
        return sorted(self._packages)

    def resolve(
        self,
        package_id: str,
        directory: str,
        *,
        find_only: bool = False,
    ) -> PackageInfo:
        key = self._lookup(package_id, directory)
        info = self._packages.get(key) if key is not None else None
        if info is None:
            raise ResolutionError(package_id, "package not found in manifest")
        if find_only:
            return PackageInfo(
                import_path=info.import_path,
                dir=info.dir,
                is_standard=info.is_standard,
            )
        return info

    def expand(self, patterns: Iterable[str], directory: str) -> list[str]:
        expanded: list[str] = []
        for pattern in patterns:
            if pattern == "all":
                matched = self.package_ids
            elif pattern == "std":
                matched = [p for p in self.package_ids if self._packages[p].is_standard]
            elif has_wildcard(pattern):
                matched = self._match(pattern, directory)
            else:
                expanded.append(pattern)
                continue
            if not matched:
                logger.warning("Pattern %r matched no packages", pattern)
            expanded.extend(matched)
        return expanded

    def is_standard(self, package_id: str) -> bool:
        info = self._packages.get(package_id)
        if info is None:
            return is_standard_package(package_id)
        return info.is_standard

    def _lookup(self, package_id: str, directory: str) -> str | None:
        if not is_relative_path(package_id):
            return package_id
        target = os.path.normpath(os.path.join(directory, package_id))
        return self._by_dir.get(target)

    def _match(self, pattern: str, directory: str) -> list[str]:
        if is_relative_path(pattern):
            # "..." is an ordinary segment to normpath, so it survives.
            matches = compile_pattern(os.path.normpath(os.path.join(directory, pattern)))
            return sorted(self._by_dir[d] for d in self._by_dir if matches(d))
        matches = compile_pattern(pattern)
        return [p for p in self.package_ids if matches(p)]


def _parse_entry(
    path: str,
    entry: Any,
    base_dir: str | Path | None,
) -> PackageInfo:
    """Convert one manifest entry into a ``PackageInfo``."""
    if entry is None:
        entry = {}
    if not isinstance(entry, Mapping):
        raise ManifestError(f"entry for {path!r} must be a mapping")

    lists: dict[str, tuple[str, ...]] = {}
    for name in _LIST_FIELDS:
        value = entry.get(name) or []
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ManifestError(f"{name!r} of {path!r} must be a list of strings")
        lists[name] = tuple(dict.fromkeys(value))

    directory = entry.get("dir") or ""
    if not isinstance(directory, str):
        raise ManifestError(f"'dir' of {path!r} must be a string")
    if directory and base_dir is not None:
        directory = os.path.normpath(os.path.join(str(base_dir), directory))

    standard = entry.get("standard")
    if standard is None:
        standard = is_standard_package(path)
    elif not isinstance(standard, bool):
        raise ManifestError(f"'standard' of {path!r} must be true or false")

    return PackageInfo(
        import_path=path,
        dir=directory,
        imports=lists["imports"],
        test_imports=lists["test_imports"],
        is_standard=standard,
        files=lists["files"],
        test_files=lists["test_files"],
    )

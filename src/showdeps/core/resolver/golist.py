"""Package resolver driven by the Go toolchain's ``go list`` command.

Each resolution runs ``go list -e -json`` in the requesting directory, so
module and vendor handling stay the toolchain's business. Results are not
cached; every call reflects the tree as it is.

``go list`` only evaluates build constraints for one target platform. To
report a package's dependencies on every platform it supports, the
resolver lists each package once per configured ``GOOS/GOARCH`` pair and
merges the results. A package that builds on none of them is an error.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
from dataclasses import replace
from typing import Any, Iterable, Iterator, Mapping, Sequence

from showdeps.core.graph.models import PackageInfo
from showdeps.core.graph.pattern import has_wildcard
from showdeps.core.resolver.base import PackageResolver
from showdeps.exceptions import ResolutionError

logger = logging.getLogger(__name__)

# Timeout for a single go invocation (seconds).
DEFAULT_TIMEOUT: float = 120.0

# Platforms listed when none are given. Together they cover the
# OS-specific files of most packages.
DEFAULT_PLATFORMS: tuple[str, ...] = ("linux/amd64", "darwin/arm64", "windows/amd64")

# Meta-patterns the go command expands itself.
_META_PATTERNS = frozenset({"all", "std", "cmd"})


class GoListResolver(PackageResolver):
    """Resolve Go packages by shelling out to ``go list``.

    Args:
        go: Path or name of the go binary.
        env: Environment for the subprocess; inherits ours when None.
        timeout: Per-invocation timeout in seconds.
        platforms: ``GOOS/GOARCH`` pairs whose imports are merged. An
            empty sequence lists for the host platform only.

    Raises:
        ValueError: If a platform is not of the form ``GOOS/GOARCH``.
    """

    def __init__(
        self,
        go: str = "go",
        *,
        env: Mapping[str, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        platforms: Sequence[str] = DEFAULT_PLATFORMS,
    ) -> None:
        self.go = go
        self.env = dict(env) if env is not None else None
        self.timeout = timeout
        self.platforms = tuple(platforms)
        for platform in self.platforms:
            split_platform(platform)

    def resolve(
        self,
        package_id: str,
        directory: str,
        *,
        find_only: bool = False,
    ) -> PackageInfo:
        args = [self.go, "list", "-e", "-json"]
        if find_only:
            args.append("-find")
        args.append(package_id)

        found: list[PackageInfo] = []
        errors: list[str] = []
        for platform, env in self._environments():
            record = self._list_record(args, directory, package_id, env)
            error = record.get("Error")
            if error:
                message = error.get("Err") if isinstance(error, dict) else error
                logger.debug("%s unavailable on %s: %s", package_id, platform, message)
                errors.append(str(message))
                continue
            found.append(package_from_record(record))
            if find_only:
                break

        if not found:
            raise ResolutionError(package_id, errors[0])
        return merge_packages(found)

    def expand(self, patterns: Iterable[str], directory: str) -> list[str]:
        expanded: list[str] = []
        for pattern in patterns:
            if not (has_wildcard(pattern) or pattern in _META_PATTERNS):
                expanded.append(pattern)
                continue
            matched: dict[str, None] = {}
            for _, env in self._environments():
                stdout = self._run([self.go, "list", "-e", pattern], directory, pattern, env)
                for line in stdout.splitlines():
                    if line.strip():
                        matched.setdefault(line.strip())
            if not matched:
                logger.warning("Pattern %r matched no packages", pattern)
            expanded.extend(matched)
        return expanded

    def _environments(self) -> Iterator[tuple[str, dict[str, str] | None]]:
        """Yield ``(platform, env)`` for each go list run of one query."""
        if not self.platforms:
            yield "host", self.env
            return
        base = dict(os.environ) if self.env is None else self.env
        for platform in self.platforms:
            goos, goarch = split_platform(platform)
            # cgo stays on so "C" imports and cgo files are not dropped
            # when listing for a foreign platform.
            yield platform, {**base, "GOOS": goos, "GOARCH": goarch, "CGO_ENABLED": "1"}

    def _list_record(
        self,
        args: list[str],
        directory: str,
        package_id: str,
        env: dict[str, str] | None,
    ) -> dict[str, Any]:
        stdout = self._run(args, directory, package_id, env)
        try:
            record = json.loads(stdout)
        except json.JSONDecodeError as exc:
            raise ResolutionError(package_id, f"unreadable go list output: {exc}") from exc
        if not isinstance(record, dict):
            raise ResolutionError(package_id, "unexpected go list output")
        return record

    def _run(
        self,
        args: list[str],
        directory: str,
        package_id: str,
        env: dict[str, str] | None,
    ) -> str:
        """Run a go command and return its stdout.

        Output that is not valid UTF-8 is decoded with replacement
        characters rather than failing.

        Raises:
            ResolutionError: If the command cannot be started, times out
                or fails.
        """
        logger.debug("Running %s in %s", " ".join(args), directory)
        try:
            result = subprocess.run(
                args,
                cwd=directory or None,
                env=env,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self.timeout,
            )
        except FileNotFoundError as exc:
            raise ResolutionError(package_id, f"{self.go} command not found") from exc
        except OSError as exc:
            raise ResolutionError(
                package_id, f"cannot run {self.go}: {exc.strerror or exc}"
            ) from exc
        except subprocess.TimeoutExpired as exc:
            raise ResolutionError(
                package_id, f"go list timed out after {self.timeout:g}s"
            ) from exc
        if result.returncode != 0:
            detail = result.stderr.strip() or f"exit status {result.returncode}"
            raise ResolutionError(package_id, detail)
        return result.stdout


def split_platform(platform: str) -> tuple[str, str]:
    """Split ``"GOOS/GOARCH"`` into its parts.

    Raises:
        ValueError: If ``platform`` is not two non-empty parts.
    """
    goos, sep, goarch = platform.partition("/")
    if not sep or not goos or not goarch or "/" in goarch:
        raise ValueError(f"platform must be GOOS/GOARCH, got {platform!r}")
    return goos, goarch


def merge_packages(infos: Sequence[PackageInfo]) -> PackageInfo:
    """Union the import and file lists of per-platform views of one package.

    Identity fields come from the first view. List order is first-seen.
    """

    def union(field_name: str) -> tuple[str, ...]:
        merged: dict[str, None] = {}
        for info in infos:
            for value in getattr(info, field_name):
                merged.setdefault(value)
        return tuple(merged)

    return replace(
        infos[0],
        imports=union("imports"),
        test_imports=union("test_imports"),
        files=union("files"),
        test_files=union("test_files"),
    )


def package_from_record(record: Mapping[str, Any]) -> PackageInfo:
    """Convert one ``go list -json`` record into a ``PackageInfo``.

    In-package and external test imports are merged, as are the two kinds
    of test files. Cgo files count as ordinary sources.
    """

    def strings(*keys: str) -> tuple[str, ...]:
        merged: dict[str, None] = {}
        for key in keys:
            for value in record.get(key) or ():
                merged.setdefault(str(value))
        return tuple(merged)

    return PackageInfo(
        import_path=str(record.get("ImportPath", "")),
        dir=str(record.get("Dir", "")),
        imports=strings("Imports"),
        test_imports=strings("TestImports", "XTestImports"),
        is_standard=bool(record.get("Standard", False)),
        files=strings("GoFiles", "CgoFiles"),
        test_files=strings("TestGoFiles", "XTestGoFiles"),
    )

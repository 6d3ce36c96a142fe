"""Wildcard package patterns and standard-distribution classification.

A pattern is a package path in which ``...`` stands for any string
(including one spanning several path segments) and nothing else is
special. Matching is anchored at both ends. As a convenience a pattern
ending in ``/...`` also matches the path without that suffix, so
``example.com/x/...`` matches ``example.com/x`` itself.
"""

from __future__ import annotations

import re
from typing import Callable

from showdeps.exceptions import PatternError

WILDCARD = "..."

_ESCAPED_WILDCARD = re.escape(WILDCARD)


def compile_pattern(pattern: str) -> Callable[[str], bool]:
    """Compile a wildcard pattern into a predicate over package identifiers.

    Args:
        pattern: Package path, optionally containing ``...`` wildcards.

    Returns:
        A function reporting whether a package identifier matches.

    Raises:
        PatternError: If the pattern is empty or cannot be compiled.
    """
    if not pattern or not pattern.strip():
        raise PatternError("empty package pattern")

    expr = re.escape(pattern).replace(_ESCAPED_WILDCARD, ".*")
    if expr.endswith("/.*"):
        expr = expr[: -len("/.*")] + "(/.*)?"
    try:
        regex = re.compile(expr, re.DOTALL)
    except re.error as exc:
        raise PatternError(f"invalid package pattern {pattern!r}: {exc}") from exc

    def matches(package_id: str) -> bool:
        return regex.fullmatch(package_id) is not None

    return matches


def has_wildcard(pattern: str) -> bool:
    """Return True if ``pattern`` contains the ``...`` wildcard."""
    return WILDCARD in pattern


def is_standard_package(package_id: str) -> bool:
    """Report whether ``package_id`` looks like a standard-distribution package.

    Standard packages have no registry or domain prefix: their first path
    segment contains no dot (``fmt``, ``net/http``), whereas third-party
    packages start with a host name (``example.com/lib``).
    """
    return "." not in package_id.split("/", 1)[0]


def is_relative_path(package_id: str) -> bool:
    """Return True for filesystem-relative identifiers such as ``./x``."""
    return package_id in (".", "..") or package_id.startswith(("./", "../"))

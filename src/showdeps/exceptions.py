"""showdeps exception hierarchy.

All public exceptions inherit from ShowdepsError, giving callers a single
base class to catch when they want to handle any showdeps-specific failure
without swallowing unrelated errors. Every error is fatal to the current
invocation; nothing is retried.
"""

from __future__ import annotations


class ShowdepsError(Exception):
    """Base exception for all showdeps errors."""


class ResolutionError(ShowdepsError):
    """Raised when a package identifier cannot be located or parsed.

    Carries the identifier that failed and the underlying cause so the
    caller can report exactly which package broke the run.
    """

    def __init__(self, package_id: str, cause: object) -> None:
        self.package_id = package_id
        self.cause = cause
        super().__init__(f"cannot find {package_id!r}: {cause}")


class ManifestError(ShowdepsError):
    """Raised when a package manifest cannot be read or is malformed."""


class PatternError(ShowdepsError):
    """Raised when a wildcard package pattern cannot be compiled."""


class WorkingDirectoryError(ShowdepsError):
    """Raised when the base directory for relative resolution is unavailable."""


class TraversalLimitError(ShowdepsError):
    """Raised when a graph traversal exceeds its package or depth cap.

    Pathologically deep or wide graphs are reported through this error
    instead of exhausting memory or the interpreter stack.
    """

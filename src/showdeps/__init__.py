"""showdeps: Inspect package dependency graphs and explain why a dependency is present."""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

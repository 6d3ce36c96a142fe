"""Shared fixtures for CLI tests.

Provides a manifest describing a small package universe on disk so the
commands can run without a Go toolchain.
"""

from __future__ import annotations

from pathlib import Path

import pytest
from click.testing import CliRunner

MANIFEST = """\
packages:
  example.com/app:
    dir: app
    imports: [example.com/lib1, example.com/lib2, fmt]
    test_imports: [example.com/assert]
    files: [main.go]
    test_files: [main_test.go]
  example.com/lib1:
    dir: lib1
    imports: [example.com/lib2, example.com/target]
    files: [lib1.go]
  example.com/lib2:
    dir: lib2
    imports: [example.com/target, os]
    files: [lib2.go]
  example.com/target:
    dir: target
    files: [target.go]
  example.com/assert:
    dir: assert
    files: [assert.go]
  fmt:
    imports: [os]
  os: {}
"""


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture
def manifest_path(tmp_path: Path) -> Path:
    """Write the test manifest and return its path."""
    path = tmp_path.resolve() / "deps.yaml"
    path.write_text(MANIFEST)
    return path

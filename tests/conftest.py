"""Shared fixtures for showdeps tests."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from showdeps.core.resolver import ManifestResolver


@pytest.fixture
def make_resolver() -> Callable[[dict[str, Any]], ManifestResolver]:
    """Return a factory building a resolver from a ``packages`` table."""

    def factory(packages: dict[str, Any]) -> ManifestResolver:
        return ManifestResolver.from_mapping({"packages": packages})

    return factory


@pytest.fixture
def scenario_resolver(make_resolver) -> ManifestResolver:
    """app -> {lib1, lib2}; lib1 -> {lib2, core}; core is standard.

    Names carry no domain, so standard-ness is declared explicitly.
    """
    return make_resolver({
        "app": {"imports": ["lib1", "lib2"], "standard": False},
        "lib1": {"imports": ["lib2", "core"], "standard": False},
        "lib2": {"standard": False},
        "core": {"standard": True},
    })


@pytest.fixture
def web_resolver(make_resolver) -> ManifestResolver:
    """A small ecosystem with tests, a diamond, a cycle and cgo.

    example.com/web   -> router, log, fmt       (tests: example.com/assert)
    example.com/cli   -> web, config            (tests: example.com/mock)
    example.com/router -> middleware, net/http
    example.com/middleware -> log, C
    example.com/log   -> example.com/config
    example.com/config -> example.com/log       (cycle via indirection)
    example.com/assert -> example.com/diff      (test-only tooling)
    example.com/mock  -> example.com/assert
    """
    return make_resolver({
        "example.com/web": {
            "imports": ["example.com/router", "example.com/log", "fmt"],
            "test_imports": ["example.com/assert", "testing"],
        },
        "example.com/cli": {
            "imports": ["example.com/web", "example.com/config"],
            "test_imports": ["example.com/mock"],
        },
        "example.com/router": {
            "imports": ["example.com/middleware", "net/http"],
            "test_imports": ["example.com/mock"],
        },
        "example.com/middleware": {"imports": ["example.com/log", "C"]},
        "example.com/log": {"imports": ["example.com/config", "fmt"]},
        "example.com/config": {"imports": ["example.com/log"]},
        "example.com/assert": {"imports": ["example.com/diff"]},
        "example.com/diff": {},
        "example.com/mock": {"imports": ["example.com/assert"]},
        "fmt": {"imports": ["io"]},
        "io": {},
        "net/http": {"imports": ["io", "fmt"]},
        "testing": {"imports": ["fmt"]},
    })

"""Options and helpers shared by the showdeps subcommands."""

from __future__ import annotations

import sys
from functools import wraps
from typing import Any, Callable

import click

from showdeps.core.resolver import GoListResolver, ManifestResolver, PackageResolver
from showdeps.core.resolver.golist import DEFAULT_PLATFORMS, split_platform
from showdeps.exceptions import ShowdepsError


def resolver_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the resolver selection and base-directory options."""
    func = click.option(
        "--directory", "-C",
        type=click.Path(exists=True, file_okay=False),
        default=None,
        help="Resolve packages relative to this directory (default: cwd).",
    )(func)
    func = click.option(
        "--platform", "platforms",
        multiple=True,
        metavar="GOOS/GOARCH",
        envvar="SHOWDEPS_PLATFORMS",
        callback=_check_platforms,
        help="Platform whose build constraints go list applies; repeatable. "
             "Imports of all given platforms are merged. \"host\" lists for the "
             f"host only. Default: {', '.join(DEFAULT_PLATFORMS)}.",
    )(func)
    func = click.option(
        "--go", "go_binary",
        envvar="SHOWDEPS_GO",
        default="go",
        show_default=True,
        help="go binary used to resolve packages.",
    )(func)
    func = click.option(
        "--manifest",
        envvar="SHOWDEPS_MANIFEST",
        type=click.Path(exists=True, dir_okay=False),
        default=None,
        help="Resolve packages from a YAML/JSON manifest instead of go list.",
    )(func)
    return func


def graph_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Attach the switches that shape graph construction."""
    func = click.option(
        "--no-test-deps", "-T",
        is_flag=True,
        help="Exclude test dependencies of the named packages.",
    )(func)
    func = click.option(
        "--stdlib",
        is_flag=True,
        help="Show standard library dependencies.",
    )(func)
    func = click.option(
        "--all", "-a", "recursive",
        is_flag=True,
        help="Show all dependencies recursively (only the named packages' "
             "test dependencies are followed).",
    )(func)
    return func


def _check_platforms(
    ctx: click.Context, param: click.Parameter, value: tuple[str, ...],
) -> tuple[str, ...]:
    for platform in value:
        if platform == "host":
            continue
        try:
            split_platform(platform)
        except ValueError as exc:
            raise click.BadParameter(str(exc)) from exc
    return value


def make_resolver(
    manifest: str | None,
    go_binary: str,
    platforms: tuple[str, ...] = (),
) -> PackageResolver:
    """Pick the manifest resolver if a manifest was given, else go list.

    ``platforms`` only affects go list. No platforms means the defaults;
    "host" means the host platform alone.
    """
    if manifest:
        return ManifestResolver.from_file(manifest)
    if not platforms:
        return GoListResolver(go=go_binary)
    return GoListResolver(
        go=go_binary,
        platforms=[p for p in platforms if p != "host"],
    )


def exit_on_error(func: Callable[..., Any]) -> Callable[..., Any]:
    """Report ``ShowdepsError`` on stderr and exit with status 1."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except ShowdepsError as exc:
            click.echo(f"Error: {exc}", err=True)
            sys.exit(1)

    return wrapper

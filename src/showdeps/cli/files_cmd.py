"""``showdeps files [pkg...]`` - Print source files instead of packages.

Lists the source files of every package the named packages depend on,
plus the named packages themselves. The named packages' test files are
included unless ``-T`` is given.
"""

from __future__ import annotations

import click

from showdeps.cli.common import (
    exit_on_error,
    graph_options,
    make_resolver,
    resolver_options,
)
from showdeps.core.query import QueryOptions, list_files


@click.command("files")
@click.argument("packages", nargs=-1)
@graph_options
@resolver_options
@exit_on_error
def files_command(
    packages: tuple[str, ...],
    recursive: bool,
    stdlib: bool,
    no_test_deps: bool,
    manifest: str | None,
    go_binary: str,
    platforms: tuple[str, ...],
    directory: str | None,
) -> None:
    """Print the source files of PACKAGES and their dependencies."""
    options = QueryOptions(
        recursive=recursive,
        include_standard=stdlib,
        include_test_deps=not no_test_deps,
    )
    resolver = make_resolver(manifest, go_binary, platforms)
    for path in list_files(resolver, packages, options, directory):
        click.echo(path)

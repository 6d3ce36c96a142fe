"""``showdeps deps [pkg...]`` - Print package dependencies.

Prints the dependencies of the named packages (as in the go command, so
``...`` wildcards work), one per line. With no packages it uses the
package in the current directory.

By default only direct dependencies of the packages (and their tests) are
printed; ``-a`` prints everything reachable. ``--from`` follows each
package with the packages that import it.

``--why PATTERN`` explains why a dependency is present. By default it
prints one dependency chain per named package that depends on a package
matching PATTERN; ``-n`` raises that to several chains, each differing in
at least one package. With ``-a`` it instead prints every package on any
such chain in ``--from`` style.

Exit Codes:
    0 - Dependencies printed.
    1 - A package or pattern could not be resolved.
    2 - Invalid command-line usage.
"""

from __future__ import annotations

import click

from showdeps.cli.common import (
    exit_on_error,
    graph_options,
    make_resolver,
    resolver_options,
)
from showdeps.core.query import QueryOptions, run_query


@click.command("deps")
@click.argument("packages", nargs=-1)
@graph_options
@click.option(
    "--from", "show_importers",
    is_flag=True,
    help="Show which dependencies are introduced by which packages.",
)
@click.option(
    "--why",
    default=None,
    metavar="PATTERN",
    help="Show only packages which import PATTERN directly or indirectly "
         "(implies -a and --from). An empty PATTERN disables the filter.",
)
@click.option(
    "--max-chains", "-n",
    type=click.IntRange(min=0),
    default=1,
    show_default=True,
    help="Max dependency chains per package with --why (0 = unlimited).",
)
@click.option(
    "--format", "output_format",
    type=click.Choice(["text", "json", "table"]),
    default="text",
    help="Output format (default: text).",
)
@resolver_options
@exit_on_error
def deps_command(
    packages: tuple[str, ...],
    recursive: bool,
    stdlib: bool,
    no_test_deps: bool,
    show_importers: bool,
    why: str | None,
    max_chains: int,
    output_format: str,
    manifest: str | None,
    go_binary: str,
    platforms: tuple[str, ...],
    directory: str | None,
) -> None:
    """Print the dependencies of PACKAGES, one per line."""
    options = QueryOptions(
        recursive=recursive,
        include_standard=stdlib,
        include_test_deps=not no_test_deps,
        show_importers=show_importers,
        why=why or None,
        max_chains=max_chains,
    )
    resolver = make_resolver(manifest, go_binary, platforms)
    result = run_query(resolver, packages, options, directory)

    if output_format == "json":
        from showdeps.cli.output import print_json
        print_json(result)
    elif output_format == "table":
        from showdeps.cli.output import print_table
        print_table(result)
    else:
        from showdeps.cli.output import text_lines
        for line in text_lines(result):
            click.echo(line)

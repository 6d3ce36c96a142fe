"""showdeps CLI: Show package dependencies and why they are there.

Entry point for the ``showdeps`` command-line tool. Registers all
subcommands under a single Click group.

Commands:
    deps   - List the dependencies of packages, optionally explaining one.
    files  - List the source files of packages and their dependencies.

Usage::

    showdeps deps                               # Direct deps of "."
    showdeps deps -a ./...                      # All deps of every package
    showdeps deps --why example.com/x/...       # One chain per root to x
    showdeps deps --why example.com/x -a        # Every package leading to x
    showdeps files -a example.com/app
    showdeps deps --manifest deps.yaml --from example.com/app
"""

from __future__ import annotations

import logging

import click

from showdeps import __version__
from showdeps.cli.deps_cmd import deps_command
from showdeps.cli.files_cmd import files_command


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Log resolver calls and traversal progress to stderr.",
)
def cli(verbose: bool) -> None:
    """showdeps: Inspect package dependencies and explain why they exist.

    Testing dependencies are only considered for the packages named on
    the command line, never transitively.
    """
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(levelname)s %(name)s: %(message)s",
        )


# Register all subcommands
cli.add_command(deps_command)
cli.add_command(files_command)


if __name__ == "__main__":
    cli()

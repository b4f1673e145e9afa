#!/usr/bin/env python3
"""
Seedrunner CLI - Reproduction tooling for randomized test runs

Main entrypoint for the seedrunner command-line tool.
"""

import typer
from rich.console import Console
from rich.table import Table

from cli.commands import seed
from seedrunner.logging_config import setup_logging

app = typer.Typer(
    name="seedrunner",
    help="Reproducible randomized test runner tools",
    add_completion=False,
)

console = Console()

app.add_typer(seed.app, name="seed", help="Seed chain operations")


@app.command()
def version():
    """Show version information."""
    from cli import __version__
    from seedrunner import __version__ as engine_version

    table = Table(show_header=False, box=None)
    table.add_row("[bold]Seedrunner CLI[/bold]", f"v{__version__}")
    table.add_row("Engine", f"v{engine_version}")

    console.print(table)


def main():
    """Main entrypoint."""
    setup_logging()
    app()


if __name__ == "__main__":
    main()

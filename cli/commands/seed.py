"""
Seed commands: parse, strip, plan
"""

import json
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from seedrunner.config import RunnerConfig
from seedrunner.core.errors import ConfigurationError
from seedrunner.core.seeds import format_seed, format_seed_chain, parse_seed_chain
from seedrunner.runner import RandomizedRunner, parse_display_name, strip_seed
from seedrunner.suite import Repeat, SuiteDefinition, TestUnit, UnitMetadata

app = typer.Typer()
console = Console()


def _fail(message: str, json_output: bool) -> None:
    if json_output:
        print(json.dumps({"error": message}))
    else:
        console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(2)


@app.command()
def parse(
    chain: str = typer.Argument(..., help="Seed chain, e.g. [1F:A3]"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Decode a seed chain into its components.

    Examples:
        seedrunner seed parse "[1F:A3]"
        seedrunner seed parse 1F --json
    """
    try:
        seeds = parse_seed_chain(chain)
    except ConfigurationError as e:
        _fail(str(e), json_output)

    if json_output:
        print(json.dumps({"chain": format_seed_chain(*seeds), "seeds": list(seeds)}, indent=2))
        return

    table = Table(title=f"Seed chain {format_seed_chain(*seeds)}")
    table.add_column("Level", style="cyan", justify="right")
    table.add_column("Role", style="green")
    table.add_column("Hex", style="yellow")
    table.add_column("Decimal", style="dim")
    roles = ["runner", "test"]
    for i, s in enumerate(seeds):
        role = roles[i] if i < len(roles) else "nested"
        table.add_row(str(i), role, format_seed(s), str(s))
    console.print(table)


@app.command()
def strip(
    name: str = typer.Argument(..., help="Candidate display name"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Strip the iteration index and seed chain from a display name.

    Examples:
        seedrunner seed strip "testFoo#2 [1:A3](pkg.FooTest)"
    """
    stripped = strip_seed(name)
    if json_output:
        try:
            parsed = parse_display_name(name)
        except ValueError:
            print(json.dumps({"name": stripped}))
            return
        print(json.dumps({
            "name": stripped,
            "unit": parsed.unit,
            "iteration": parsed.iteration,
            "seed": format_seed_chain(*parsed.seed_chain),
            "suite": parsed.suite,
        }, indent=2))
        return
    console.print(stripped, markup=False)


@app.command()
def plan(
    seed_chain: str = typer.Option(..., "--seed", "-s", help="Master seed chain, e.g. [1] or [1:A3]"),
    units: List[str] = typer.Option(..., "--unit", "-u", help="Test unit name (repeatable)"),
    iterations: Optional[int] = typer.Option(None, "--iters", "-i", help="Iterations per unit"),
    constant: bool = typer.Option(False, "--constant", help="Reuse the unit seed for every iteration"),
    suite_name: str = typer.Option("Suite", "--suite", help="Suite name used in display names"),
    json_output: bool = typer.Option(False, "--json", help="Output as JSON"),
):
    """
    Show the candidates and seeds a run with the given seed would produce.

    Examples:
        seedrunner seed plan --seed "[1]" --unit testFoo --iters 3
        seedrunner seed plan --seed "[1:A3]" --unit testFoo --unit testBar
    """
    repeat = Repeat(use_constant_seed=constant) if constant else None
    suite = SuiteDefinition(
        name=suite_name,
        factory=object,
        units=[TestUnit(name=u, body=lambda _: None, metadata=UnitMetadata(repeat=repeat)) for u in units],
    )
    try:
        runner = RandomizedRunner(suite, RunnerConfig(seed=seed_chain, iterations=iterations))
    except ConfigurationError as e:
        _fail(str(e), json_output)

    rows = [
        {
            "name": c.description.display_name,
            "unit": c.unit.name,
            "iteration": c.iteration,
            "seed": format_seed(c.randomness.seed),
        }
        for c in runner.candidates
    ]

    if json_output:
        print(json.dumps({"runner_seed": runner.seed, "candidates": rows}, indent=2))
        return

    table = Table(title=f"Run plan {runner.seed}")
    table.add_column("Candidate", style="green")
    table.add_column("Iteration", style="cyan", justify="right")
    table.add_column("Seed", style="yellow")
    table.add_column("Reproduce with", style="dim")
    for row in rows:
        table.add_row(escape(row["name"]), str(row["iteration"]), row["seed"], f"[{runner.seed[1:-1]}:{row['seed']}]")
    console.print(table)

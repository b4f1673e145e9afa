"""
Suite definition checks, run before any seed is derived.
"""

from typing import List, Optional

from ..core.errors import ConfigurationError, SeedFormatError
from ..core.seeds import parse_seed_chain
from .model import Phase, Repeat, SuiteDefinition


def _check_seed(problems: List[str], what: str, chain: Optional[str], max_components: int) -> None:
    if chain is None:
        return
    try:
        seeds = parse_seed_chain(chain)
    except SeedFormatError as e:
        problems.append(f"{what}: {e}")
        return
    if len(seeds) > max_components:
        problems.append(f"{what}: at most {max_components} seed(s) allowed, got {chain!r}")


def _check_repeat(problems: List[str], what: str, repeat: Optional[Repeat]) -> None:
    if repeat is not None and repeat.iterations < 1:
        problems.append(f"{what}: iterations must be >= 1, got {repeat.iterations}")


def validate_suite(suite: SuiteDefinition) -> None:
    """
    Validate a suite definition.

    Raises:
        ConfigurationError: Listing every problem found
    """
    problems: List[str] = []

    if not suite.name:
        problems.append("Suite name must not be empty")
    if not callable(suite.factory):
        problems.append(f"Suite {suite.name}: factory is not callable")

    _check_seed(problems, f"Suite {suite.name} seed", suite.metadata.seed, 2)
    _check_repeat(problems, f"Suite {suite.name} repeat", suite.metadata.repeat)

    for level in suite.levels:
        for phase in Phase:
            for hook in level.hooks(phase):
                if not callable(hook.func):
                    problems.append(f"{phase.value} hook {level.owner}#{hook.name} is not callable")

    seen = set()
    for unit in suite.units:
        what = f"Test unit {suite.name}#{unit.name}"
        if not unit.name:
            problems.append(f"Suite {suite.name}: test unit with an empty name")
        if unit.name in seen:
            problems.append(f"{what}: duplicate name")
        seen.add(unit.name)
        if not callable(unit.body):
            problems.append(f"{what}: body is not callable")
        _check_seed(problems, f"{what} seed", unit.metadata.seed, 1)
        _check_repeat(problems, f"{what} repeat", unit.metadata.repeat)

    if problems:
        raise ConfigurationError("Invalid suite definition:\n  " + "\n  ".join(problems))

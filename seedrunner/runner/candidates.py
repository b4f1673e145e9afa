"""
Candidate expansion: one schedulable candidate per unit iteration.

Each candidate carries its iteration Randomness and a display name that
embeds the seed chain needed to reproduce it:

    testFoo#2 [1:9E3779B97F4A7C15](pkg.FooTest)
"""

import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from ..config import RunnerConfig
from ..core.randomness import Randomness
from ..core.seeds import format_seed_chain, parse_seed_chain
from ..suite.model import SuiteDefinition, SuiteMetadata, TestUnit
from .derivation import SeedDeriver

_DISPLAY_NAME = re.compile(
    r"^(?P<unit>.+?)(?:#(?P<iteration>[0-9]+))? \[(?P<chain>[0-9A-Fa-f:]+)\](?:\((?P<suite>.*)\))?$"
)
_SEED_SUFFIX = re.compile(r"(#[0-9]+)?\s\[[A-Za-z0-9:]+\]")


@dataclass
class Description:
    """Node of the suite/candidate tree. Leaves are candidates."""
    display_name: str
    children: List["Description"] = field(default_factory=list)

    def add_child(self, child: "Description") -> None:
        self.children.append(child)

    @property
    def is_suite(self) -> bool:
        return bool(self.children)

    def leaves(self) -> Iterator["Description"]:
        if not self.children:
            yield self
            return
        for child in self.children:
            yield from child.leaves()


@dataclass(frozen=True)
class TestCandidate:
    """One execution of a unit under one resolved seed."""
    __test__ = False

    unit: TestUnit
    randomness: Randomness
    description: Description
    iteration: int = 0


@dataclass(frozen=True)
class CandidateName:
    """Parsed form of a candidate display name."""
    unit: str
    iteration: Optional[int]
    seed_chain: Tuple[int, ...]
    suite: Optional[str]


def iteration_count(unit: TestUnit, metadata: SuiteMetadata, config: RunnerConfig) -> int:
    """
    Number of iterations of a unit. First match wins: global override,
    unit repeat, suite repeat, 1.
    """
    if config.iterations is not None:
        return config.iterations
    if unit.metadata.repeat is not None:
        return unit.metadata.repeat.iterations
    if metadata.repeat is not None:
        return metadata.repeat.iterations
    return 1


def display_name(
    unit_name: str,
    iteration: int,
    count: int,
    runner_randomness: Randomness,
    iteration_randomness: Randomness,
    suite_name: str,
) -> str:
    index = f"#{iteration}" if count > 1 else ""
    chain = format_seed_chain(runner_randomness, iteration_randomness)
    return f"{unit_name}{index} {chain}({suite_name})"


def expand_candidates(
    suite: SuiteDefinition,
    deriver: SeedDeriver,
    runner_randomness: Randomness,
    config: RunnerConfig,
    root: Description,
) -> List[TestCandidate]:
    """
    Expand every unit into its iteration candidates, in declaration order.

    Units with more than one iteration are grouped under a synthetic
    description named after the unit; all descriptions are attached to root.
    """
    candidates: List[TestCandidate] = []
    for unit in suite.units:
        count = iteration_count(unit, suite.metadata, config)
        parent = root
        if count > 1:
            parent = Description(unit.name)
            root.add_child(parent)

        for i, seed in enumerate(deriver.iteration_seeds(unit, count)):
            rnd = Randomness(seed)
            desc = Description(display_name(unit.name, i, count, runner_randomness, rnd, suite.name))
            parent.add_child(desc)
            candidates.append(TestCandidate(unit=unit, randomness=rnd, description=desc, iteration=i))
    return candidates


def parse_display_name(name: str) -> CandidateName:
    """
    Parse a candidate display name back into its parts.

    Raises:
        ValueError: If name is not a candidate display name
    """
    m = _DISPLAY_NAME.match(name)
    if m is None:
        raise ValueError(f"Not a candidate display name: {name!r}")
    iteration = m.group("iteration")
    return CandidateName(
        unit=m.group("unit"),
        iteration=int(iteration) if iteration is not None else None,
        seed_chain=parse_seed_chain(m.group("chain")),
        suite=m.group("suite"),
    )


def strip_seed(name: str) -> str:
    """Remove the iteration index and seed chain from a display name."""
    return _SEED_SUFFIX.sub("", name)

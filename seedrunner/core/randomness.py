"""
Seeded pseudo-random source.

Randomness wraps one 64-bit seed and lazily builds a random.Random from it.
Equal seeds always yield identical generator output.
"""

import random
from dataclasses import dataclass, field
from typing import Optional

from .hashing import MASK64
from .seeds import format_seed_chain


@dataclass(frozen=True)
class Randomness:
    """
    Immutable seed holder with a lazily created generator.

    The seed never changes; the generator is owned by whichever scope
    created this instance (runner, unit or iteration).
    """
    seed: int
    _random: Optional[random.Random] = field(
        default=None, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        object.__setattr__(self, "seed", self.seed & MASK64)

    @property
    def random(self) -> random.Random:
        """Generator seeded from self.seed, created on first access."""
        if self._random is None:
            object.__setattr__(self, "_random", random.Random(self.seed))
        return self._random

    def fork(self) -> "Randomness":
        """
        Derive a child Randomness from this generator's next 64 bits.

        Deterministic given the sequence of draws made on the parent.
        """
        return Randomness(self.random.getrandbits(64))

    def __str__(self) -> str:
        return format_seed_chain(self.seed)

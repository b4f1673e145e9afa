"""
Seed derivation: master, per-unit and per-iteration seeds.

All functions are deterministic given the configuration, except the
fallback master seed, which mixes a process-wide sequence number with the
wall clock so that runners created in rapid succession still differ.
"""

import itertools
import threading
import time
from typing import Callable, List, Optional

from ..config import RunnerConfig
from ..core.hashing import mix64, name_hash
from ..core.seeds import parse_seed_chain
from ..suite.model import SuiteMetadata, TestUnit

_sequencer = itertools.count()
_sequencer_lock = threading.Lock()


def next_sequence() -> int:
    """Next value of the process-wide runner sequence."""
    with _sequencer_lock:
        return next(_sequencer)


class SeedDeriver:
    """
    Derives every seed of one runner.

    Usage:
        deriver = SeedDeriver(suite.metadata, config)
        base = deriver.unit_seed(unit)
        seeds = deriver.iteration_seeds(unit, 3)

    Args:
        metadata: Suite-level metadata (declared seed, repeat)
        config: Run configuration (global seed chain override)
        clock: Nanosecond time source for the fallback master seed
    """

    def __init__(
        self,
        metadata: SuiteMetadata,
        config: RunnerConfig,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.metadata = metadata
        chain = config.seed_chain()
        self.unit_override: Optional[int] = chain[1] if len(chain) > 1 else None
        self.master_seed = self._master_seed(chain, clock or time.time_ns)

    def _master_seed(self, chain, clock: Callable[[], int]) -> int:
        if chain:
            return chain[0]
        if self.metadata.seed is not None:
            return parse_seed_chain(self.metadata.seed)[0]
        return mix64(next_sequence() + clock())

    def unit_seed(self, unit: TestUnit) -> int:
        """
        Base seed of a unit.

        Order: global unit override, unit-declared seed, second component of
        the suite-declared seed, master seed XOR hash of the unit name.
        """
        if self.unit_override is not None:
            return self.unit_override
        if unit.metadata.seed is not None:
            return parse_seed_chain(unit.metadata.seed)[0]
        if self.metadata.seed is not None:
            seeds = parse_seed_chain(self.metadata.seed)
            if len(seeds) > 1:
                return seeds[1]
        return self.master_seed ^ name_hash(unit.name)

    def constant_seed(self, unit: TestUnit) -> bool:
        """Whether all iterations of the unit reuse its base seed."""
        if self.unit_override is not None:
            return True
        if unit.metadata.repeat is not None:
            return unit.metadata.repeat.use_constant_seed
        if self.metadata.repeat is not None:
            return self.metadata.repeat.use_constant_seed
        return False

    def iteration_seeds(self, unit: TestUnit, count: int) -> List[int]:
        base = self.unit_seed(unit)
        if self.constant_seed(unit):
            return [base] * count
        return [base ^ mix64(i) for i in range(count)]

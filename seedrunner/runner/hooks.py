"""
Hook ordering across class-hierarchy levels.

Before-phases run ancestor levels first, after-phases run descendant levels
first. Within one level the hooks are shuffled with a generator derived
from the active seed and the phase, so their order is reproducible from
the seed alone and never consumes the random stream seen by test code.
"""

import random
from typing import List, Sequence

from ..core.hashing import mix64, name_hash
from ..suite.model import HookGroup, HookMethod, Phase


def phase_random(seed: int, phase: Phase) -> random.Random:
    """Dedicated shuffle generator for one phase of one scope."""
    return random.Random(seed ^ mix64(name_hash(phase.value)))


def resolve_hooks(levels: Sequence[HookGroup], phase: Phase, rnd: random.Random) -> List[HookMethod]:
    """
    Flatten hook groups into execution order for one phase.

    Args:
        levels: Hook groups, most-derived class first
        phase: Lifecycle phase to resolve
        rnd: Shuffle generator, usually phase_random() of the active seed

    Returns:
        Hooks in the order they must be invoked
    """
    groups = [sorted(level.hooks(phase), key=lambda h: h.name) for level in levels]
    if phase.ancestors_first:
        groups.reverse()

    result: List[HookMethod] = []
    for group in groups:
        rnd.shuffle(group)
        result.extend(group)
    return result

"""
Core primitives for reproducible randomized execution.

- Seeds: text format for seeds and seed chains
- Hashing: stable 64-bit mixing of integers and names
- Randomness: seed holder with a lazily built generator
- Context: run-scoped stack of active randomness
- Errors: configuration, context and assumption errors
"""

from .errors import (
    SeedRunnerError,
    ConfigurationError,
    SeedFormatError,
    ContextError,
    AssumptionViolatedError,
    assume,
)
from .hashing import mix64, name_hash
from .seeds import format_seed, parse_seed, format_seed_chain, parse_seed_chain
from .randomness import Randomness
from .context import (
    ContextStack,
    RunContext,
    current_context,
    current_randomness,
    current_random,
)

__all__ = [
    "SeedRunnerError",
    "ConfigurationError",
    "SeedFormatError",
    "ContextError",
    "AssumptionViolatedError",
    "assume",
    "mix64",
    "name_hash",
    "format_seed",
    "parse_seed",
    "format_seed_chain",
    "parse_seed_chain",
    "Randomness",
    "ContextStack",
    "RunContext",
    "current_context",
    "current_randomness",
    "current_random",
]

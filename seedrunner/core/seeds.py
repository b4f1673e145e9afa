"""
Seed and seed chain text formats.

A seed chain prints as "[A:B]" (uppercase hex, outer seed first) and parses
back into the same tuple of unsigned 64-bit integers.
"""

import re
from typing import Any, Tuple

from .errors import SeedFormatError
from .hashing import MASK64

SEED_CHAIN_DELIMITER = ":"

_CHAIN_BODY = re.compile(r"^[0-9A-Fa-f:]+$")


def format_seed(seed: int) -> str:
    """Format one seed as uppercase hex without prefix or padding."""
    return format(seed & MASK64, "X")


def parse_seed(text: str) -> int:
    """
    Parse one hex seed component.

    Raises:
        SeedFormatError: If text is empty, not hex, or wider than 64 bits
    """
    try:
        value = int(text, 16)
    except ValueError:
        raise SeedFormatError(f"Not a valid seed: {text!r}") from None
    if value < 0 or value > MASK64 or not text:
        raise SeedFormatError(f"Seed out of 64-bit range: {text!r}")
    return value


def format_seed_chain(*seeds: Any) -> str:
    """
    Format seeds (ints or anything with a .seed attribute) as "[A:B:...]".
    """
    values = [s if isinstance(s, int) else s.seed for s in seeds]
    return "[" + SEED_CHAIN_DELIMITER.join(format_seed(v) for v in values) + "]"


def parse_seed_chain(chain: str) -> Tuple[int, ...]:
    """
    Parse "[A:B]" back into a tuple of seeds. The enclosing brackets are
    optional; brackets anywhere else are malformed.

    Raises:
        SeedFormatError: If the chain is empty, has an empty component or
            contains anything besides hex digits and delimiters
    """
    body = chain.strip().removeprefix("[").removesuffix("]")
    if not _CHAIN_BODY.match(body):
        raise SeedFormatError(f"Not a valid seed chain: {chain!r}")
    parts = body.split(SEED_CHAIN_DELIMITER)
    if any(not p for p in parts):
        raise SeedFormatError(f"Empty component in seed chain: {chain!r}")
    return tuple(parse_seed(p) for p in parts)


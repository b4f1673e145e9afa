"""
Failure augmentation with reproduction seeds.

Every error surfaced from a hook or test body gets the seed chain it ran
under recorded on it as a structured attribute, plus a marked note that
shows up in the printed traceback:

    __randomizedtesting.SeedInfo.seed([1F:A3])

extract_seed() reads the structured attribute back, walking the cause chain.
"""

from typing import List, Optional, Tuple

from ..core.seeds import format_seed_chain
from ..logging_config import get_logger

logger = get_logger(__name__)

AUGMENTED_SEED_PACKAGE = "__randomizedtesting"
SEED_CHAINS_ATTR = "__seed_chains__"


def seed_note(chain: str) -> str:
    return f"{AUGMENTED_SEED_PACKAGE}.SeedInfo.seed({chain})"


def augment(error: BaseException, *seeds) -> BaseException:
    """
    Record the seed chain on error in place and return the same object.

    Args:
        error: Raised error; its type and message are left untouched
        *seeds: Randomness instances (or ints), outer-most first

    Never raises.
    """
    chain = format_seed_chain(*seeds)
    try:
        chains = list(getattr(error, SEED_CHAINS_ATTR, ()))
        chains.insert(0, chain)
        setattr(error, SEED_CHAINS_ATTR, chains)
        error.add_note(seed_note(chain))
    except (AttributeError, TypeError) as e:
        logger.debug("Could not augment %r with seed %s: %s", error, chain, e)
    return error


def seed_chains(error: BaseException) -> Tuple[str, ...]:
    """Seed chains recorded directly on error, most recent first."""
    return tuple(getattr(error, SEED_CHAINS_ATTR, ()))


def _causes(error: Optional[BaseException]):
    seen = set()
    while error is not None and id(error) not in seen:
        seen.add(id(error))
        yield error
        if error.__cause__ is not None:
            error = error.__cause__
        elif not error.__suppress_context__:
            error = error.__context__
        else:
            error = None


def extract_seed(error: BaseException) -> Optional[str]:
    """
    Collect all recorded seed chains from error and its causes.

    Returns:
        Chains joined with ", ", or None if nothing was recorded
    """
    found: List[str] = []
    for e in _causes(error):
        found.extend(seed_chains(e))
    if not found:
        return None
    return ", ".join(found)

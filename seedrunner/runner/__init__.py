"""
Randomized runner: seed derivation, candidate expansion, hook ordering,
scheduling and failure augmentation.
"""

from .derivation import SeedDeriver, next_sequence
from .candidates import (
    Description,
    TestCandidate,
    CandidateName,
    iteration_count,
    expand_candidates,
    parse_display_name,
    strip_seed,
)
from .hooks import phase_random, resolve_hooks
from .augment import AUGMENTED_SEED_PACKAGE, augment, seed_chains, extract_seed
from .notifier import (
    Failure,
    RunListener,
    RunNotifier,
    Notification,
    NotificationKind,
    RecordingListener,
)
from .scheduler import RandomizedRunner, RunState, HookOutcome, invoke_all
from .api import RunResult, run_suite

__all__ = [
    "SeedDeriver",
    "next_sequence",
    "Description",
    "TestCandidate",
    "CandidateName",
    "iteration_count",
    "expand_candidates",
    "parse_display_name",
    "strip_seed",
    "phase_random",
    "resolve_hooks",
    "AUGMENTED_SEED_PACKAGE",
    "augment",
    "seed_chains",
    "extract_seed",
    "Failure",
    "RunListener",
    "RunNotifier",
    "Notification",
    "NotificationKind",
    "RecordingListener",
    "RandomizedRunner",
    "RunState",
    "HookOutcome",
    "invoke_all",
    "RunResult",
    "run_suite",
]

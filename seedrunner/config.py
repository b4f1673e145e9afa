"""
Run configuration read from the environment.

Environment Variables:
    SEEDRUNNER_SEED: Global seed chain, "[MASTER]" or "[MASTER:UNIT]"
    SEEDRUNNER_NIGHTLY: Run nightly-only units (true/yes/on/1) - default: false
    SEEDRUNNER_ITERS: Global iteration count override (>= 1)
    SEEDRUNNER_CLASS: Only run the suite with exactly this name
    SEEDRUNNER_METHOD: Only run test units with exactly this name

Usage:
    config = RunnerConfig.from_env()
    runner = RandomizedRunner(suite, config)
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from .core.errors import ConfigurationError, SeedFormatError
from .core.seeds import parse_seed_chain

ENV_SEED = "SEEDRUNNER_SEED"
ENV_NIGHTLY = "SEEDRUNNER_NIGHTLY"
ENV_ITERS = "SEEDRUNNER_ITERS"
ENV_CLASS = "SEEDRUNNER_CLASS"
ENV_METHOD = "SEEDRUNNER_METHOD"

_TRUE_VALUES = ("true", "yes", "on", "1")
_FALSE_VALUES = ("false", "no", "off", "0", "")


def parse_bool(name: str, value: Optional[str], default: bool = False) -> bool:
    if value is None:
        return default
    v = value.strip().lower()
    if v in _TRUE_VALUES:
        return True
    if v in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")


@dataclass(frozen=True)
class RunnerConfig:
    """
    Immutable run configuration.

    Fields:
        seed: Global seed chain override (1 or 2 components)
        nightly: Nightly mode
        iterations: Global iteration override
        target_class: Suite name filter (exact match)
        target_method: Unit name filter (exact match)
    """
    seed: Optional[str] = None
    nightly: bool = False
    iterations: Optional[int] = None
    target_class: Optional[str] = None
    target_method: Optional[str] = None

    def __post_init__(self) -> None:
        self.seed_chain()
        if self.iterations is not None and self.iterations < 1:
            raise ConfigurationError(f"{ENV_ITERS} must be >= 1: {self.iterations}")

    def seed_chain(self) -> Tuple[int, ...]:
        """
        Parsed global seed chain, empty when no override is set.

        Raises:
            ConfigurationError: If the chain does not have 1 or 2 components
        """
        if self.seed is None:
            return ()
        try:
            chain = parse_seed_chain(self.seed)
        except SeedFormatError as e:
            raise ConfigurationError(f"Invalid {ENV_SEED} specification: {self.seed} ({e})") from e
        if len(chain) == 0 or len(chain) > 2:
            raise ConfigurationError(f"Invalid {ENV_SEED} specification: {self.seed}")
        return chain

    @staticmethod
    def from_env(environ: Optional[Mapping[str, str]] = None) -> "RunnerConfig":
        """
        Build configuration from environment variables.

        Raises:
            ConfigurationError: If any variable is malformed
        """
        env = os.environ if environ is None else environ

        iterations = None
        raw_iters = env.get(ENV_ITERS)
        if raw_iters is not None and raw_iters.strip():
            try:
                iterations = int(raw_iters)
            except ValueError:
                raise ConfigurationError(f"{ENV_ITERS} must be an integer: {raw_iters!r}") from None

        return RunnerConfig(
            seed=env.get(ENV_SEED) or None,
            nightly=parse_bool(ENV_NIGHTLY, env.get(ENV_NIGHTLY)),
            iterations=iterations,
            target_class=env.get(ENV_CLASS) or None,
            target_method=env.get(ENV_METHOD) or None,
        )

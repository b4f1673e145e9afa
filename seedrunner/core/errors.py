"""
Exception types for the randomized test runner.
"""


class SeedRunnerError(Exception):
    """Base class for runner errors."""
    pass


class ConfigurationError(SeedRunnerError):
    """Raised when run configuration or suite definition is invalid. Fatal."""
    pass


class SeedFormatError(ConfigurationError, ValueError):
    """Raised when a seed or seed chain string cannot be parsed."""
    pass


class ContextError(RuntimeError):
    """Raised when the randomness context is queried outside of a run scope."""
    pass


class AssumptionViolatedError(Exception):
    """
    Signals that a test's precondition does not hold.

    Reported as an "assumption failed" outcome, never as a test failure.
    """
    pass


def assume(condition: bool, message: str = "assumption not met") -> None:
    """Raise AssumptionViolatedError unless condition holds."""
    if not condition:
        raise AssumptionViolatedError(message)

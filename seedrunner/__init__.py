"""
Deterministic Randomized Test Runner

Seed-chained, reproducible execution of test suites: every failure can be
re-run byte-for-byte from the seed chain printed with it.
"""

__version__ = "0.1.0"

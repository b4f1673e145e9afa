"""
Suite model: resolved hooks, test units and their metadata.
"""

from .model import (
    Phase,
    HookMethod,
    HookGroup,
    Repeat,
    UnitMetadata,
    TestUnit,
    SuiteMetadata,
    SuiteDefinition,
    Rule,
    Statement,
)
from .validation import validate_suite

__all__ = [
    "Phase",
    "HookMethod",
    "HookGroup",
    "Repeat",
    "UnitMetadata",
    "TestUnit",
    "SuiteMetadata",
    "SuiteDefinition",
    "Rule",
    "Statement",
    "validate_suite",
]

"""
Suite model consumed by the runner.

Discovery of hooks and test methods is somebody else's job: the runner
receives already-resolved hook groups (one per class-hierarchy level,
overrides collapsed) and one invocable body per test unit.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional, Sequence, Tuple


class Phase(Enum):
    """Lifecycle phase of a hook."""
    BEFORE_ALL = "before_all"
    BEFORE_EACH = "before_each"
    AFTER_EACH = "after_each"
    AFTER_ALL = "after_all"

    @property
    def ancestors_first(self) -> bool:
        """Before-phases run superclass hooks first, after-phases last."""
        return self in (Phase.BEFORE_ALL, Phase.BEFORE_EACH)

    @property
    def per_instance(self) -> bool:
        return self in (Phase.BEFORE_EACH, Phase.AFTER_EACH)


@dataclass(frozen=True)
class HookMethod:
    """A named hook. Class-level hooks take no arguments, per-instance hooks take the instance."""
    name: str
    func: Callable[..., Any]

    def invoke(self, *args: Any) -> Any:
        return self.func(*args)


@dataclass(frozen=True)
class HookGroup:
    """
    Hooks declared at one level of a class hierarchy.

    Fields:
        owner: Name of the declaring class
        before_all, before_each, after_each, after_all: Hooks per phase
    """
    owner: str
    before_all: Tuple[HookMethod, ...] = ()
    before_each: Tuple[HookMethod, ...] = ()
    after_each: Tuple[HookMethod, ...] = ()
    after_all: Tuple[HookMethod, ...] = ()

    def hooks(self, phase: Phase) -> Tuple[HookMethod, ...]:
        return getattr(self, phase.value)


@dataclass(frozen=True)
class Repeat:
    """Repetition metadata: iteration count and whether iterations share one seed."""
    iterations: int = 1
    use_constant_seed: bool = False


@dataclass(frozen=True)
class UnitMetadata:
    """
    Per-unit metadata.

    Fields:
        seed: Declared seed chain string, exactly one component (e.g. "[DEADBEEF]")
        repeat: Repetition metadata
        ignore: Never execute this unit
        nightly: Execute only in nightly mode
    """
    seed: Optional[str] = None
    repeat: Optional[Repeat] = None
    ignore: bool = False
    nightly: bool = False


@dataclass(frozen=True)
class TestUnit:
    """A named test body. invoke() ignores the body's return value."""
    __test__ = False

    name: str
    body: Callable[[Any], Any]
    metadata: UnitMetadata = field(default_factory=UnitMetadata)

    def invoke(self, instance: Any) -> None:
        self.body(instance)


@dataclass(frozen=True)
class SuiteMetadata:
    """
    Per-suite metadata.

    Fields:
        seed: Declared seed chain, one or two components ("[MASTER]" or "[MASTER:UNIT]")
        repeat: Default repetition for units without their own
        nightly: Every unit in the suite is nightly-only
        listeners: Zero-argument factories of RunListeners subscribed for each run
    """
    seed: Optional[str] = None
    repeat: Optional[Repeat] = None
    nightly: bool = False
    listeners: Tuple[Callable[[], Any], ...] = ()


# rule(statement, unit, instance) -> statement
Statement = Callable[[], None]
Rule = Callable[[Statement, TestUnit, Any], Statement]


@dataclass(frozen=True)
class SuiteDefinition:
    """
    Everything the runner needs to execute one test class.

    Fields:
        name: Fully qualified suite (class) name
        factory: Builds a fresh test instance for each executed candidate
        units: Test units in declaration order
        levels: Hook groups, most-derived class first
        metadata: Suite-level metadata
        rules: Wrappers applied around each test body, in order
    """
    name: str
    factory: Callable[[], Any]
    units: Sequence[TestUnit] = ()
    levels: Sequence[HookGroup] = ()
    metadata: SuiteMetadata = field(default_factory=SuiteMetadata)
    rules: Sequence[Rule] = ()

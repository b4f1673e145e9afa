"""
Builders for suite definitions used across tests.
"""

from typing import List, Optional, Sequence

from seedrunner.suite import (
    HookGroup,
    HookMethod,
    SuiteDefinition,
    SuiteMetadata,
    TestUnit,
    UnitMetadata,
)

SUITE_NAME = "pkg.SampleTest"


class Trace:
    """Records calls made by hooks and unit bodies, and counts instances."""

    def __init__(self) -> None:
        self.calls: List[str] = []
        self.instances = 0

    def factory(self):
        self.instances += 1
        return object()

    def hook(self, name: str, error: Optional[BaseException] = None) -> HookMethod:
        def fn(*args):
            self.calls.append(name)
            if error is not None:
                raise error
        return HookMethod(name, fn)

    def unit(
        self,
        name: str,
        metadata: Optional[UnitMetadata] = None,
        error: Optional[BaseException] = None,
    ) -> TestUnit:
        def body(instance):
            self.calls.append(name)
            if error is not None:
                raise error
        return TestUnit(name=name, body=body, metadata=metadata or UnitMetadata())


def make_suite(
    trace: Trace,
    units: Sequence[TestUnit],
    levels: Sequence[HookGroup] = (),
    metadata: Optional[SuiteMetadata] = None,
    rules=(),
    name: str = SUITE_NAME,
) -> SuiteDefinition:
    return SuiteDefinition(
        name=name,
        factory=trace.factory,
        units=list(units),
        levels=list(levels),
        metadata=metadata or SuiteMetadata(),
        rules=list(rules),
    )


def three_level_before_each(trace: Trace) -> List[HookGroup]:
    """Leaf -> Mid -> Base hierarchy, one hook per phase per level, most-derived first."""
    levels = []
    for owner in ("Leaf", "Mid", "Base"):
        levels.append(
            HookGroup(
                owner=owner,
                before_all=(trace.hook(f"{owner}.before_all"),),
                before_each=(trace.hook(f"{owner}.before_each"),),
                after_each=(trace.hook(f"{owner}.after_each"),),
                after_all=(trace.hook(f"{owner}.after_all"),),
            )
        )
    return levels

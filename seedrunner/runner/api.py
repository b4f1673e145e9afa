"""
One-call entry point: run a suite and collect its notifications.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional

from ..config import RunnerConfig
from ..suite.model import SuiteDefinition
from .candidates import Description
from .notifier import Notification, NotificationKind, RecordingListener, RunNotifier
from .scheduler import RandomizedRunner


@dataclass(frozen=True)
class RunResult:
    """
    Result of run_suite().

    Fields:
        runner_seed: Formatted master seed chain of the run
        description: Suite description tree (all candidates, before filtering)
        notifications: Everything reported, in order
    """
    runner_seed: str
    description: Description
    notifications: List[Notification]

    def of_kind(self, kind: NotificationKind) -> List[Notification]:
        return [n for n in self.notifications if n.kind is kind]

    @property
    def started(self) -> List[str]:
        return [n.name for n in self.of_kind(NotificationKind.STARTED)]

    @property
    def ignored(self) -> List[str]:
        return [n.name for n in self.of_kind(NotificationKind.IGNORED)]

    @property
    def failures(self) -> List[Notification]:
        return self.of_kind(NotificationKind.FAILED)

    @property
    def assumption_failures(self) -> List[Notification]:
        return self.of_kind(NotificationKind.ASSUMPTION_FAILED)

    @property
    def ok(self) -> bool:
        return not self.failures


def run_suite(
    suite: SuiteDefinition,
    config: Optional[RunnerConfig] = None,
    predicate: Optional[Callable[[Description], bool]] = None,
) -> RunResult:
    """
    Run suite with a recording listener.

    Same suite and same seed configuration always produce the same
    candidates and seeds; only the test bodies decide the outcomes.
    """
    runner = RandomizedRunner(suite, config)
    if predicate is not None:
        runner.filter(predicate)

    recorder = RecordingListener()
    notifier = RunNotifier()
    notifier.add_listener(recorder)
    runner.run(notifier)

    return RunResult(
        runner_seed=runner.seed,
        description=runner.description,
        notifications=list(recorder.notifications),
    )

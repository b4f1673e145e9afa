"""
Execution scheduler: runs one suite with reproducible randomness.

Lifecycle of RandomizedRunner.run():

    CREATED -> FILTERING -> IDLE                                     (nothing to run)
                         -> CLASS_SETUP -> RUNNING_UNITS -> CLASS_TEARDOWN
                         -> DONE

Ordering contracts:
- before-all/before-each hooks of superclasses run before those of subclasses
- after-each/after-all hooks of subclasses run before those of superclasses
- hooks declared at the same level run in an order shuffled by the active seed
- test units run in declaration order, iterations in index order

Every error raised by a hook or test body is augmented with its seed chain
and reported on its own; none is chained into or suppressed by another.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, List, Optional

from ..config import RunnerConfig
from ..core.context import RunContext
from ..core.errors import AssumptionViolatedError, ConfigurationError
from ..core.randomness import Randomness
from ..core.seeds import format_seed_chain
from ..logging_config import get_logger
from ..suite.model import HookMethod, Phase, SuiteDefinition
from ..suite.validation import validate_suite
from .augment import augment, extract_seed
from .candidates import Description, TestCandidate, expand_candidates
from .derivation import SeedDeriver
from .hooks import phase_random, resolve_hooks
from .notifier import Failure, RunListener, RunNotifier


class RunState(Enum):
    CREATED = "created"
    FILTERING = "filtering"
    IDLE = "idle"
    CLASS_SETUP = "class_setup"
    RUNNING_UNITS = "running_units"
    CLASS_TEARDOWN = "class_teardown"
    DONE = "done"


@dataclass(frozen=True)
class HookOutcome:
    """Result of invoking one hook; error is None on success."""
    hook: HookMethod
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def invoke_all(hooks: List[HookMethod], *args: Any) -> List[HookOutcome]:
    """Invoke every hook, collecting one outcome each; a failure never stops the rest."""
    outcomes: List[HookOutcome] = []
    for hook in hooks:
        try:
            hook.invoke(*args)
        except Exception as e:
            outcomes.append(HookOutcome(hook, e))
        else:
            outcomes.append(HookOutcome(hook))
    return outcomes


class RandomizedRunner:
    """
    Runner for one suite definition.

    Seeds and candidates are fixed at construction. Every run() starts
    fresh generators from those seeds, so repeated runs replay the same
    hook orders and the same random streams.

    Usage:
        runner = RandomizedRunner(suite, RunnerConfig(seed="[1]"))
        notifier = RunNotifier()
        notifier.add_listener(RecordingListener())
        runner.run(notifier)

    Raises:
        ConfigurationError: On an invalid suite or configuration
    """

    def __init__(
        self,
        suite: SuiteDefinition,
        config: Optional[RunnerConfig] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        validate_suite(suite)
        self.suite = suite
        self.config = config if config is not None else RunnerConfig.from_env()
        self.deriver = SeedDeriver(suite.metadata, self.config, clock=clock)
        self.runner_randomness = Randomness(self.deriver.master_seed)
        self.description = Description(suite.name)
        self.candidates = expand_candidates(
            suite, self.deriver, self.runner_randomness, self.config, self.description
        )
        self.state = RunState.CREATED
        self._predicate: Optional[Callable[[Description], bool]] = None
        self._auto_listeners: List[RunListener] = []
        self.log = get_logger(__name__, trace_id=format_seed_chain(self.runner_randomness))

    @property
    def seed(self) -> str:
        return format_seed_chain(self.runner_randomness)

    def filter(self, predicate: Callable[[Description], bool]) -> None:
        """Install an external filter; candidates it rejects are not run."""
        self._predicate = predicate

    def run(self, notifier: RunNotifier) -> None:
        """
        Run all hooks and candidates, reporting to notifier.

        Raises:
            ConfigurationError: If a declared listener cannot be created
        """
        runner_randomness = Randomness(self.runner_randomness.seed)
        context = RunContext(runner_randomness, self.suite.name, self.config.nightly)
        with context.activate():
            context.stack.push(runner_randomness)
            try:
                self._subscribe_listeners(notifier)
                self._transition(RunState.FILTERING)
                filtered = self._apply_filters()
                self.log.info(
                    "Running suite",
                    extra={"suite": self.suite.name, "candidates": len(filtered)},
                )
                if not filtered:
                    self._transition(RunState.IDLE)
                else:
                    self._transition(RunState.CLASS_SETUP)
                    if self._run_before_class(context, notifier):
                        self._transition(RunState.RUNNING_UNITS)
                        for candidate in filtered:
                            self._run_candidate(context, notifier, candidate)
                        self._transition(RunState.CLASS_TEARDOWN)
                        self._run_after_class(context, notifier)
            finally:
                self._unsubscribe_listeners(notifier)
                context.stack.pop()
                self._transition(RunState.DONE)
                self.log.info("Suite finished", extra={"suite": self.suite.name})

    def _transition(self, state: RunState) -> None:
        self.log.debug(f"{self.state.value} -> {state.value}")
        self.state = state

    def _subscribe_listeners(self, notifier: RunNotifier) -> None:
        for factory in self.suite.metadata.listeners:
            try:
                listener = factory()
            except Exception as e:
                raise ConfigurationError(
                    f"Could not initialize suite {self.suite.name} because its listener "
                    f"is not instantiable: {factory!r}"
                ) from e
            self._auto_listeners.append(listener)
            notifier.add_listener(listener)

    def _unsubscribe_listeners(self, notifier: RunNotifier) -> None:
        for listener in self._auto_listeners:
            notifier.remove_listener(listener)
        self._auto_listeners = []

    def _apply_filters(self) -> List[TestCandidate]:
        # Class filter is the most restrictive: a mismatch means nothing runs.
        target_class = self.config.target_class
        if target_class is not None and target_class != self.suite.name:
            return []

        method = self.config.target_method
        filtered: List[TestCandidate] = []
        for c in self.candidates:
            if method is not None and method != c.unit.name:
                continue
            if self._predicate is not None and not self._predicate(c.description):
                continue
            filtered.append(c)
        return filtered

    def _hooks(self, context: RunContext, phase: Phase) -> List[HookMethod]:
        return resolve_hooks(self.suite.levels, phase, phase_random(context.randomness.seed, phase))

    def _run_before_class(self, context: RunContext, notifier: RunNotifier) -> bool:
        """Run before-all hooks; the first error aborts the run. Returns success."""
        try:
            for hook in self._hooks(context, Phase.BEFORE_ALL):
                hook.invoke()
        except Exception as e:
            self._report_failure(notifier, self.description, augment(e, self.runner_randomness))
            return False
        return True

    def _run_after_class(self, context: RunContext, notifier: RunNotifier) -> None:
        for outcome in invoke_all(self._hooks(context, Phase.AFTER_ALL)):
            if not outcome.ok:
                self._report_failure(notifier, self.description, augment(outcome.error, self.runner_randomness))

    def _run_candidate(self, context: RunContext, notifier: RunNotifier, c: TestCandidate) -> None:
        with context.stack.scope(Randomness(c.randomness.seed)):
            notifier.fire_test_started(c.description)
            try:
                if self._is_ignored(context, c):
                    notifier.fire_test_ignored(c.description)
                else:
                    self._execute(context, notifier, c)
            finally:
                notifier.fire_test_finished(c.description)

    def _is_ignored(self, context: RunContext, c: TestCandidate) -> bool:
        if c.unit.metadata.ignore:
            return True
        if not context.is_nightly and (c.unit.metadata.nightly or self.suite.metadata.nightly):
            return True
        return False

    def _execute(self, context: RunContext, notifier: RunNotifier, c: TestCandidate) -> None:
        instance = None
        try:
            instance = self.suite.factory()
            for hook in self._hooks(context, Phase.BEFORE_EACH):
                hook.invoke(instance)
            self._run_with_rules(c, instance)
        except AssumptionViolatedError as e:
            augment(e, self.runner_randomness, c.randomness)
            notifier.fire_test_assumption_failed(Failure(c.description, e))
        except Exception as e:
            self._report_failure(notifier, c.description, augment(e, self.runner_randomness, c.randomness))

        # After-each hooks run whenever an instance exists, whatever happened above.
        if instance is not None:
            for outcome in invoke_all(self._hooks(context, Phase.AFTER_EACH), instance):
                if not outcome.ok:
                    err = augment(outcome.error, self.runner_randomness, c.randomness)
                    self._report_failure(notifier, c.description, err)

    def _run_with_rules(self, c: TestCandidate, instance: Any) -> None:
        def statement() -> None:
            c.unit.invoke(instance)

        for rule in self.suite.rules:
            statement = rule(statement, c.unit, instance)
        statement()

    def _report_failure(self, notifier: RunNotifier, description: Description, error: BaseException) -> None:
        self.log.warning(
            f"Failure in {description.display_name}: {type(error).__name__}: {error}",
            extra={"seed_chain": extract_seed(error)},
        )
        notifier.fire_test_failure(Failure(description, error))

"""
Tests for the execution scheduler.

Critical: failures stay isolated, the randomness stack stays balanced and
every reported failure carries its reproduction seed.
"""

import pytest

from seedrunner.config import RunnerConfig
from seedrunner.core.context import current_context, current_random, current_randomness
from seedrunner.core.errors import AssumptionViolatedError, ConfigurationError, ContextError, assume
from seedrunner.runner import (
    NotificationKind,
    RandomizedRunner,
    RecordingListener,
    RunListener,
    RunNotifier,
    RunState,
    run_suite,
)
from seedrunner.runner.augment import extract_seed
from seedrunner.suite import HookGroup, HookMethod, SuiteMetadata, TestUnit, UnitMetadata

from .helpers import SUITE_NAME, Trace, make_suite, three_level_before_each

SEED = RunnerConfig(seed="[1]")


def _kinds(result):
    return [(n.kind, n.name.split(" ")[0]) for n in result.notifications]


def test_full_lifecycle_order():
    trace = Trace()
    suite = make_suite(trace, [trace.unit("testA"), trace.unit("testB")], three_level_before_each(trace))
    result = run_suite(suite, SEED)

    per_unit = ["Base.before_each", "Mid.before_each", "Leaf.before_each"]
    after_unit = ["Leaf.after_each", "Mid.after_each", "Base.after_each"]
    assert trace.calls == (
        ["Base.before_all", "Mid.before_all", "Leaf.before_all"]
        + per_unit + ["testA"] + after_unit
        + per_unit + ["testB"] + after_unit
        + ["Leaf.after_all", "Mid.after_all", "Base.after_all"]
    )
    assert trace.instances == 2
    assert result.ok
    assert _kinds(result) == [
        (NotificationKind.STARTED, "testA"),
        (NotificationKind.FINISHED, "testA"),
        (NotificationKind.STARTED, "testB"),
        (NotificationKind.FINISHED, "testB"),
    ]


def test_hook_order_stable_for_same_seed_and_varies_across_seeds():
    def observed(seed):
        trace = Trace()
        hooks = tuple(trace.hook(f"h{i}") for i in range(6))
        suite = make_suite(trace, [trace.unit("testA")], [HookGroup(owner="T", before_each=hooks)])
        run_suite(suite, RunnerConfig(seed=seed))
        return tuple(trace.calls)

    assert observed("[1]") == observed("[1]")
    assert len({observed(f"[{s:X}]") for s in range(1, 21)}) > 1


def test_class_filter_mismatch_runs_nothing():
    trace = Trace()
    suite = make_suite(trace, [trace.unit("testA")], three_level_before_each(trace))
    result = run_suite(suite, RunnerConfig(seed="[1]", target_class="pkg.OtherTest"))
    assert trace.calls == []
    assert trace.instances == 0
    assert result.notifications == []


def test_method_filter():
    trace = Trace()
    suite = make_suite(trace, [trace.unit("testA"), trace.unit("testB")])
    result = run_suite(suite, RunnerConfig(seed="[1]", target_class=SUITE_NAME, target_method="testB"))
    assert trace.calls == ["testB"]
    assert [n.split(" ")[0] for n in result.started] == ["testB"]


def test_predicate_filter_and_empty_result_skips_class_hooks():
    trace = Trace()
    suite = make_suite(trace, [trace.unit("testA")], three_level_before_each(trace))
    runner = RandomizedRunner(suite, SEED)
    runner.filter(lambda d: "testZ" in d.display_name)
    runner.run(RunNotifier())
    assert trace.calls == []
    assert runner.state is RunState.DONE


def test_before_all_failure_aborts_run():
    trace = Trace()
    levels = [
        HookGroup(
            owner="T",
            before_all=(trace.hook("before_all", RuntimeError("setup")),),
            after_all=(trace.hook("after_all"),),
        )
    ]
    suite = make_suite(trace, [trace.unit("testA"), trace.unit("testB")], levels)
    result = run_suite(suite, SEED)

    assert trace.calls == ["before_all"]
    assert trace.instances == 0
    assert len(result.failures) == 1
    failure = result.failures[0]
    assert failure.name == SUITE_NAME
    assert str(failure.error) == "setup"
    assert result.started == []


def test_before_each_failure_still_runs_after_each_once():
    trace = Trace()
    depths = []
    levels = [
        HookGroup(
            owner="T",
            before_each=(trace.hook("before_each", ValueError("nope")),),
            after_each=(trace.hook("after_a"), trace.hook("after_b")),
            after_all=(HookMethod("depth_check", lambda: depths.append(current_context().stack.depth)),),
        )
    ]
    suite = make_suite(trace, [trace.unit("testA")], levels)
    result = run_suite(suite, SEED)

    assert "testA" not in trace.calls
    assert sorted(trace.calls) == ["after_a", "after_b", "before_each"]
    assert len(result.failures) == 1
    assert isinstance(result.failures[0].error, ValueError)
    assert [n.kind for n in result.notifications] == [
        NotificationKind.STARTED, NotificationKind.FAILED, NotificationKind.FINISHED,
    ]
    # Only the runner's own randomness is left once the unit scope ended.
    assert depths == [1]


def test_after_each_failures_reported_independently():
    trace = Trace()
    levels = [
        HookGroup(
            owner="T",
            after_each=(
                trace.hook("after_a", RuntimeError("a")),
                trace.hook("after_b", RuntimeError("b")),
                trace.hook("after_c"),
            ),
        )
    ]
    suite = make_suite(trace, [trace.unit("testA", error=AssertionError("body"))], levels)
    result = run_suite(suite, SEED)

    assert sorted(trace.calls) == ["after_a", "after_b", "after_c", "testA"]
    assert sorted(str(f.error) for f in result.failures) == ["a", "b", "body"]


def test_after_all_failures_do_not_stop_siblings():
    trace = Trace()
    levels = [
        HookGroup(owner="Leaf", after_all=(trace.hook("leaf_after", RuntimeError("leaf")),)),
        HookGroup(owner="Base", after_all=(trace.hook("base_after", RuntimeError("base")),)),
    ]
    suite = make_suite(trace, [trace.unit("testA")], levels)
    result = run_suite(suite, SEED)

    assert trace.calls == ["testA", "leaf_after", "base_after"]
    assert [str(f.error) for f in result.failures] == ["leaf", "base"]
    assert all(f.name == SUITE_NAME for f in result.failures)
    assert all(f.error.__seed_chains__ == ["[1]"] for f in result.failures)


def test_unit_failure_does_not_affect_siblings():
    trace = Trace()
    suite = make_suite(trace, [trace.unit("testA", error=AssertionError("boom")), trace.unit("testB")])
    result = run_suite(suite, SEED)

    assert trace.calls == ["testA", "testB"]
    assert len(result.failures) == 1
    assert result.failures[0].name.startswith("testA ")
    assert not result.ok


def test_failure_carries_candidate_seed_chain():
    trace = Trace()
    suite = make_suite(trace, [trace.unit("testA", error=AssertionError("boom"))])
    runner = RandomizedRunner(suite, SEED)
    recorder = RecordingListener()
    notifier = RunNotifier()
    notifier.add_listener(recorder)
    runner.run(notifier)

    candidate = runner.candidates[0]
    failure = recorder.of_kind(NotificationKind.FAILED)[0]
    chain = f"[1:{candidate.randomness.seed:X}]"
    assert extract_seed(failure.error) == chain
    assert chain in candidate.description.display_name


def test_assumption_is_not_a_failure():
    trace = Trace()

    def body(instance):
        assume(False, "needs a fast disk")

    suite = make_suite(trace, [TestUnit("testA", body)])
    result = run_suite(suite, SEED)

    assert result.ok
    assert len(result.assumption_failures) == 1
    assert isinstance(result.assumption_failures[0].error, AssumptionViolatedError)
    assert extract_seed(result.assumption_failures[0].error) is not None


def test_ignored_unit_creates_no_instance():
    trace = Trace()
    levels = [HookGroup(owner="T", before_each=(trace.hook("before_each"),))]
    suite = make_suite(trace, [trace.unit("testA", UnitMetadata(ignore=True))], levels)
    result = run_suite(suite, SEED)

    assert trace.calls == []
    assert trace.instances == 0
    assert _kinds(result) == [
        (NotificationKind.STARTED, "testA"),
        (NotificationKind.IGNORED, "testA"),
        (NotificationKind.FINISHED, "testA"),
    ]


def test_nightly_suite_outside_nightly_mode():
    """Units are ignored but class-level hooks still run."""
    trace = Trace()
    levels = [HookGroup(owner="T", before_all=(trace.hook("before_all"),), after_all=(trace.hook("after_all"),))]
    suite = make_suite(trace, [trace.unit("testA"), trace.unit("testB")], levels, SuiteMetadata(nightly=True))
    result = run_suite(suite, SEED)

    assert trace.calls == ["before_all", "after_all"]
    assert trace.instances == 0
    assert len(result.ignored) == 2


def test_nightly_units_run_in_nightly_mode():
    trace = Trace()
    suite = make_suite(trace, [trace.unit("testA", UnitMetadata(nightly=True))])
    result = run_suite(suite, RunnerConfig(seed="[1]", nightly=True))
    assert trace.calls == ["testA"]
    assert result.ignored == []


def test_active_randomness_per_scope():
    trace = Trace()
    seen = {}

    def body(instance):
        seen["unit"] = current_randomness().seed
        seen["depth"] = current_context().stack.depth

    levels = [HookGroup(owner="T", before_all=(HookMethod("ba", lambda: seen.setdefault("class", current_randomness().seed)),))]
    suite = make_suite(trace, [TestUnit("testA", body)], levels)
    runner = RandomizedRunner(suite, SEED)
    runner.run(RunNotifier())

    assert seen["class"] == 1
    assert seen["unit"] == runner.candidates[0].randomness.seed
    assert seen["depth"] == 2
    with pytest.raises(ContextError):
        current_context()


def test_suite_listeners_are_subscribed_for_the_run_only():
    instances = []

    class Counting(RunListener):
        def __init__(self):
            self.started = 0
            instances.append(self)

        def test_started(self, description):
            self.started += 1

    trace = Trace()
    suite = make_suite(trace, [trace.unit("testA"), trace.unit("testB")], metadata=SuiteMetadata(listeners=(Counting,)))
    notifier = RunNotifier()
    RandomizedRunner(suite, SEED).run(notifier)

    assert len(instances) == 1
    assert instances[0].started == 2
    assert notifier.listeners == []


def test_listener_initialization_failure_is_fatal():
    def broken():
        raise RuntimeError("cannot build")

    trace = Trace()
    suite = make_suite(trace, [trace.unit("testA")], metadata=SuiteMetadata(listeners=(broken,)))
    runner = RandomizedRunner(suite, SEED)
    with pytest.raises(ConfigurationError, match="not instantiable"):
        runner.run(RunNotifier())
    assert trace.calls == []
    assert runner.state is RunState.DONE
    with pytest.raises(ContextError):
        current_context()


def test_rules_wrap_test_body_in_order():
    trace = Trace()

    def rule(tag):
        def apply(statement, unit, instance):
            def wrapped():
                trace.calls.append(f"{tag}:enter:{unit.name}")
                statement()
                trace.calls.append(f"{tag}:exit")
            return wrapped
        return apply

    suite = make_suite(trace, [trace.unit("testA")], rules=[rule("inner"), rule("outer")])
    run_suite(suite, SEED)
    assert trace.calls == ["outer:enter:testA", "inner:enter:testA", "testA", "inner:exit", "outer:exit"]


def test_repeated_runs_are_identical():
    trace = Trace()
    suite = make_suite(trace, [trace.unit("testA", UnitMetadata()), trace.unit("testB")], three_level_before_each(trace))
    run_suite(suite, SEED)
    first = list(trace.calls)
    trace.calls.clear()
    run_suite(suite, SEED)
    assert trace.calls == first


def test_same_runner_replays_identically():
    """Running one runner twice gives the same hook order and the same body draws."""
    trace = Trace()
    draws = []

    def body(instance):
        draws.append(current_random().random())

    hooks = tuple(trace.hook(f"h{i}") for i in range(6))
    suite = make_suite(trace, [TestUnit("testA", body)], [HookGroup(owner="T", before_each=hooks)])
    runner = RandomizedRunner(suite, SEED)

    runner.run(RunNotifier())
    first_calls, first_draws = list(trace.calls), list(draws)
    trace.calls.clear()
    draws.clear()
    runner.run(RunNotifier())

    assert trace.calls == first_calls
    assert draws == first_draws


def test_before_each_hooks_do_not_shift_body_random_stream():
    """Adding a hook leaves the body's first draw unchanged."""
    def first_draw(hook_count):
        trace = Trace()
        draws = []

        def body(instance):
            draws.append(current_random().random())

        hooks = tuple(trace.hook(f"h{i}") for i in range(hook_count))
        suite = make_suite(trace, [TestUnit("testA", body)], [HookGroup(owner="T", before_each=hooks)])
        run_suite(suite, SEED)
        return draws[0]

    assert first_draw(0) == first_draw(1) == first_draw(4)


def test_after_each_order_independent_of_body_draws():
    def after_order(body_draws):
        trace = Trace()

        def body(instance):
            for _ in range(body_draws):
                current_random().random()

        hooks = tuple(trace.hook(f"a{i}") for i in range(6))
        suite = make_suite(trace, [TestUnit("testA", body)], [HookGroup(owner="T", after_each=hooks)])
        run_suite(suite, SEED)
        return trace.calls

    assert after_order(0) == after_order(1) == after_order(25)

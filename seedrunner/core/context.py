"""
Run-scoped randomness context.

A RunContext is created once per run invocation and made ambient through a
ContextVar, so concurrent runs in one process never see each other's stack.
Code executing inside a hook or test body queries current_randomness() to
obtain the seed of the innermost active scope.
"""

import random
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator, List, Optional

from .errors import ContextError
from .randomness import Randomness


class ContextStack:
    """
    Strictly nested stack of active Randomness values.

    Not thread-safe; one run executes on one thread.
    """

    def __init__(self) -> None:
        self._items: List[Randomness] = []

    def push(self, randomness: Randomness) -> None:
        self._items.append(randomness)

    def pop(self) -> Randomness:
        if not self._items:
            raise ContextError("pop() on an empty randomness stack")
        return self._items.pop()

    def current(self) -> Randomness:
        """
        Return the innermost Randomness.

        Raises:
            ContextError: If the stack is empty (caller contract violation)
        """
        if not self._items:
            raise ContextError("No randomness is active on the context stack")
        return self._items[-1]

    @property
    def depth(self) -> int:
        return len(self._items)

    def clear(self) -> None:
        self._items.clear()

    @contextmanager
    def scope(self, randomness: Randomness) -> Iterator[Randomness]:
        """Push randomness for the duration of the block; always pops."""
        self.push(randomness)
        try:
            yield randomness
        finally:
            self.pop()


_current_run: ContextVar[Optional["RunContext"]] = ContextVar(
    "seedrunner_run_context", default=None
)


class RunContext:
    """
    State of one run invocation.

    Fields:
        runner_randomness: Master Randomness of the run
        target: Name of the suite being executed
        nightly: Whether nightly-only units are executed
        stack: Active randomness values for the current call chain
    """

    def __init__(self, runner_randomness: Randomness, target: str, nightly: bool = False) -> None:
        self.runner_randomness = runner_randomness
        self.target = target
        self.nightly = nightly
        self.stack = ContextStack()

    @property
    def is_nightly(self) -> bool:
        return self.nightly

    @property
    def randomness(self) -> Randomness:
        return self.stack.current()

    @property
    def random(self) -> random.Random:
        return self.stack.current().random

    @contextmanager
    def activate(self) -> Iterator["RunContext"]:
        """
        Make this context ambient for the block.

        On exit, including abnormal exit, the stack is emptied and the
        previously active context (if any) is restored.
        """
        token = _current_run.set(self)
        try:
            yield self
        finally:
            self.stack.clear()
            _current_run.reset(token)


def current_context() -> RunContext:
    """
    Return the RunContext of the run executing on this call chain.

    Raises:
        ContextError: If called outside of a run
    """
    ctx = _current_run.get()
    if ctx is None:
        raise ContextError("No run context is active; this code must execute inside a runner")
    return ctx


def current_randomness() -> Randomness:
    return current_context().randomness


def current_random() -> random.Random:
    return current_context().random

"""
Run notifications.

A RunNotifier dispatches lifecycle notifications to subscribed listeners.
RecordingListener keeps them as immutable Notification records.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .augment import extract_seed
from .candidates import Description


@dataclass(frozen=True)
class Failure:
    """An error reported against a candidate or a whole suite."""
    description: Description
    error: BaseException

    @property
    def seed_chain(self) -> Optional[str]:
        return extract_seed(self.error)

    @property
    def message(self) -> str:
        return f"{type(self.error).__name__}: {self.error}"


class RunListener:
    """Listener base class; every hook is a no-op."""

    def test_started(self, description: Description) -> None:
        pass

    def test_ignored(self, description: Description) -> None:
        pass

    def test_assumption_failed(self, failure: Failure) -> None:
        pass

    def test_failure(self, failure: Failure) -> None:
        pass

    def test_finished(self, description: Description) -> None:
        pass


class RunNotifier:
    """
    Fan-out of notifications to listeners, in subscription order.

    Usage:
        notifier = RunNotifier()
        notifier.add_listener(RecordingListener())
        runner.run(notifier)
    """

    def __init__(self) -> None:
        self._listeners: List[RunListener] = []

    @property
    def listeners(self) -> List[RunListener]:
        return list(self._listeners)

    def add_listener(self, listener: RunListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: RunListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def fire_test_started(self, description: Description) -> None:
        for listener in list(self._listeners):
            listener.test_started(description)

    def fire_test_ignored(self, description: Description) -> None:
        for listener in list(self._listeners):
            listener.test_ignored(description)

    def fire_test_assumption_failed(self, failure: Failure) -> None:
        for listener in list(self._listeners):
            listener.test_assumption_failed(failure)

    def fire_test_failure(self, failure: Failure) -> None:
        for listener in list(self._listeners):
            listener.test_failure(failure)

    def fire_test_finished(self, description: Description) -> None:
        for listener in list(self._listeners):
            listener.test_finished(description)


class NotificationKind(Enum):
    STARTED = "started"
    IGNORED = "ignored"
    ASSUMPTION_FAILED = "assumption_failed"
    FAILED = "failed"
    FINISHED = "finished"


@dataclass(frozen=True)
class Notification:
    """
    Immutable notification record.

    Fields:
        kind: What happened
        description: Candidate (or suite, for class-level failures)
        error: Reported error, for failures and assumption failures
        seq: Position in the recording
    """
    kind: NotificationKind
    description: Description
    error: Optional[BaseException] = None
    seq: Optional[int] = None

    @property
    def name(self) -> str:
        return self.description.display_name


class RecordingListener(RunListener):
    """Records every notification in arrival order."""

    def __init__(self) -> None:
        self.notifications: List[Notification] = []

    def _record(self, kind: NotificationKind, description: Description, error=None) -> None:
        self.notifications.append(
            Notification(kind=kind, description=description, error=error, seq=len(self.notifications))
        )

    def test_started(self, description: Description) -> None:
        self._record(NotificationKind.STARTED, description)

    def test_ignored(self, description: Description) -> None:
        self._record(NotificationKind.IGNORED, description)

    def test_assumption_failed(self, failure: Failure) -> None:
        self._record(NotificationKind.ASSUMPTION_FAILED, failure.description, failure.error)

    def test_failure(self, failure: Failure) -> None:
        self._record(NotificationKind.FAILED, failure.description, failure.error)

    def test_finished(self, description: Description) -> None:
        self._record(NotificationKind.FINISHED, description)

    def of_kind(self, kind: NotificationKind) -> List[Notification]:
        return [n for n in self.notifications if n.kind is kind]

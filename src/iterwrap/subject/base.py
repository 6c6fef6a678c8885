"""Base subject type for fluent checks over a single value."""

from __future__ import annotations

from collections.abc import Container
from typing import Any, Generic, TypeVar

from typing_extensions import Self, final

from iterwrap.subject.failure import Failure, FailureStrategy


S = TypeVar("S", bound="Subject[Any, Any]")
T = TypeVar("T")


def _truncate(value: Any, max_len: int = 30) -> str:
    """Truncate a repr string if too long."""
    s = repr(value)
    if len(s) <= max_len:
        return s
    return s[: max_len - 3] + "..."


class Subject(Generic[S, T]):
    """Fluent checks over one ``actual`` value.

    Concrete subjects bind ``S`` to themselves and ``T`` to the type they
    check, and keep the ``(failure_strategy, actual)`` constructor::

        class BarSubject(Subject["BarSubject", Bar]):
            def has_label(self, label: str) -> None:
                ...

    Failed checks are reported through the failure strategy, never raised
    directly, so the strategy decides whether checking continues.
    """

    def __init__(self, failure_strategy: FailureStrategy, actual: T | None) -> None:
        self.failure_strategy = failure_strategy
        self._actual = actual
        self._name: str | None = None

    @final
    def actual(self) -> T | None:
        return self._actual

    def named(self, name: str) -> Self:
        """Use ``name`` instead of the actual value in failure messages."""
        self._name = name
        return self

    def is_equal_to(self, expected: object) -> None:
        if self._actual != expected:
            self._fail("is equal to", expected)

    def is_not_equal_to(self, unexpected: object) -> None:
        if self._actual == unexpected:
            self._fail("is not equal to", unexpected)

    def is_none(self) -> None:
        if self._actual is not None:
            self._fail("is None")

    def is_not_none(self) -> None:
        if self._actual is None:
            self._fail("is not None")

    def is_instance_of(self, cls: type) -> None:
        if not isinstance(self._actual, cls):
            self._fail("is an instance of", cls)

    def is_in(self, iterable: Container[Any]) -> None:
        if self._actual not in iterable:
            self._fail("is equal to any element in", iterable)

    def _fail(self, verb: str, *others: object) -> None:
        """Report 'Not true that <actual> <verb> <others>'."""
        subject = self._name if self._name is not None else _truncate(self._actual)
        message = f"Not true that <{subject}> {verb}"
        if others:
            message += " " + ", ".join(f"<{_truncate(other)}>" for other in others)
        self.failure_strategy.fail(Failure(message=message, subject_name=self._name))

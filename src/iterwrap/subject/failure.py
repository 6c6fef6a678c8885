"""Failure strategies invoked by subjects when a check does not hold."""

from __future__ import annotations

import threading
from typing import Protocol, runtime_checkable

from pydantic import BaseModel


class Failure(BaseModel):
    """A single failed check.

    Attributes:
    ----------
    message: str
        Description of the check that did not hold
    subject_name: str | None
        Name given to the subject through ``named()``, if any
    """

    message: str
    subject_name: str | None = None


class AssertionFailedError(AssertionError):
    """AssertionError with the attached Failure."""

    def __init__(self, failure: Failure):
        self.failure = failure
        super().__init__(failure.message)


@runtime_checkable
class FailureStrategy(Protocol):
    """All failure reporting used by subjects must conform to this protocol."""

    def fail(self, failure: Failure) -> None: ...


class RaisingFailureStrategy:
    """Raise AssertionFailedError on the first failed check."""

    def fail(self, failure: Failure) -> None:
        raise AssertionFailedError(failure)


class CollectingFailureStrategy:
    """Record failures instead of raising.

    Lets an iterating wrapper check every element before anything is reported.
    """

    def __init__(self) -> None:
        self._failures: list[Failure] = []
        self._lock = threading.Lock()

    def fail(self, failure: Failure) -> None:
        with self._lock:
            self._failures.append(failure)

    @property
    def failures(self) -> list[Failure]:
        with self._lock:
            return list(self._failures)

    def clear(self) -> None:
        with self._lock:
            self._failures.clear()

    def raise_if_failed(self) -> None:
        """Raise one AssertionFailedError summarizing every recorded failure."""
        failures = self.failures
        if not failures:
            return
        message = f"{len(failures)} check(s) failed:\n" + "\n".join(f.message for f in failures)
        raise AssertionFailedError(Failure(message=message))

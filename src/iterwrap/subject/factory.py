"""Factories that build a subject for one element."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from iterwrap.errors import DescriptorError
from iterwrap.generics import type_parameter
from iterwrap.subject.base import Subject
from iterwrap.subject.failure import FailureStrategy


S = TypeVar("S", bound=Subject[Any, Any])
T = TypeVar("T")

SUBJECT_TYPE_PARAMETER = 0


class SubjectFactory(ABC, Generic[S, T]):
    """Builds subjects of one concrete type.

    Subclasses bind the subject class as the first type argument::

        class BarSubjectFactory(SubjectFactory[BarSubject, Bar]):
            def get_subject(self, failure_strategy, actual):
                return BarSubject(failure_strategy, actual)
    """

    @abstractmethod
    def get_subject(self, failure_strategy: FailureStrategy, actual: T) -> S:
        """Return a subject checking ``actual``."""

    @property
    def subject_class(self) -> type[S]:
        subject_class = type_parameter(type(self), SubjectFactory, SUBJECT_TYPE_PARAMETER)
        if not isinstance(subject_class, type) or not issubclass(subject_class, Subject):
            msg = "does not bind the subject type parameter of SubjectFactory"
            raise DescriptorError(type(self).__qualname__, msg)
        return subject_class


class _ClassSubjectFactory(SubjectFactory[Any, Any]):
    def __init__(self, subject_class: type[Subject[Any, Any]]) -> None:
        self._subject_class = subject_class

    @property
    def subject_class(self) -> type[Subject[Any, Any]]:
        return self._subject_class

    def get_subject(self, failure_strategy: FailureStrategy, actual: Any) -> Subject[Any, Any]:
        return self._subject_class(failure_strategy, actual)

    def __repr__(self) -> str:
        return f"subject_factory({self._subject_class.__qualname__})"


def subject_factory(subject_class: type[S]) -> SubjectFactory[S, Any]:
    """Return a factory calling ``subject_class(failure_strategy, actual)``."""
    return _ClassSubjectFactory(subject_class)

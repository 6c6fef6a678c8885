"""Reference loader turning generated source into a live class."""

from __future__ import annotations

import types
from collections.abc import Iterable
from typing import Any, TypeVar

from iterwrap.codegen.builder import build_wrapper
from iterwrap.codegen.descriptors import GeneratedClass
from iterwrap.subject.base import Subject
from iterwrap.subject.factory import SubjectFactory
from iterwrap.subject.failure import FailureStrategy


S = TypeVar("S", bound=Subject[Any, Any])


def load_wrapper_class(generated: GeneratedClass) -> type[Subject[Any, Any]]:
    """Execute the generated source in a fresh module and return the class.

    The module is not registered in ``sys.modules``; every call yields a new class.
    """
    module = types.ModuleType(generated.qualified_name)
    code = compile(generated.source, f"<{generated.qualified_name}>", "exec")
    exec(code, module.__dict__)
    return getattr(module, generated.class_name)


def wrap_each(
    failure_strategy: FailureStrategy,
    subject_factory: SubjectFactory[S, Any],
    data: Iterable[Any],
) -> S:
    """Return a subject whose checks run once per element of ``data``.

    Example:
        >>> strategy = CollectingFailureStrategy()
        >>> wrap_each(strategy, subject_factory(BarSubject), bars).has_label("ok")
        >>> strategy.raise_if_failed()
    """
    wrapper_class = load_wrapper_class(build_wrapper(subject_factory.subject_class))
    return wrapper_class(failure_strategy, subject_factory, data)  # type: ignore[call-arg, return-value]

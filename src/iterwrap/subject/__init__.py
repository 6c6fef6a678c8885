"""Subject contracts consumed by generated wrappers."""

from .base import Subject
from .factory import SubjectFactory, subject_factory
from .failure import (
    AssertionFailedError,
    CollectingFailureStrategy,
    Failure,
    FailureStrategy,
    RaisingFailureStrategy,
)


__all__ = [
    "AssertionFailedError",
    "CollectingFailureStrategy",
    "Failure",
    "FailureStrategy",
    "RaisingFailureStrategy",
    "Subject",
    "SubjectFactory",
    "subject_factory",
]

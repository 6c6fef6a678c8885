"""iterwrap - iterating wrappers for fluent assertion subjects."""

from .codegen import (
    GeneratedClass,
    IteratingWrapperClassBuilder,
    SubjectDescriptor,
    build_wrapper,
    describe,
    emit,
    load_wrapper_class,
    wrap_each,
)
from .errors import DescriptorError, EmissionError, IterwrapError
from .subject import (
    AssertionFailedError,
    CollectingFailureStrategy,
    FailureStrategy,
    RaisingFailureStrategy,
    Subject,
    SubjectFactory,
    subject_factory,
)
from .version import __version__


__all__ = [
    # Subjects
    "Subject",
    "SubjectFactory",
    "subject_factory",
    "FailureStrategy",
    "RaisingFailureStrategy",
    "CollectingFailureStrategy",
    "AssertionFailedError",
    # Code generation
    "SubjectDescriptor",
    "GeneratedClass",
    "describe",
    "emit",
    "build_wrapper",
    "IteratingWrapperClassBuilder",
    "load_wrapper_class",
    "wrap_each",
    # Errors
    "IterwrapError",
    "DescriptorError",
    "EmissionError",
    "__version__",
]

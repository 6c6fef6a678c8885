"""Generation of iterating wrappers: introspect -> filter -> emit."""

from iterwrap.errors import DescriptorError, EmissionError

from .builder import IteratingWrapperClassBuilder, build_wrapper
from .descriptors import (
    WRAPPER_SUFFIX,
    GeneratedClass,
    MethodDescriptor,
    ParameterDescriptor,
    SubjectDescriptor,
)
from .emitter import emit
from .filters import eligible_methods, is_eligible
from .introspect import TARGET_TYPE_PARAMETER, describe, resolve_subject_type
from .loader import load_wrapper_class, wrap_each


__all__ = [
    "TARGET_TYPE_PARAMETER",
    "WRAPPER_SUFFIX",
    # Descriptors
    "GeneratedClass",
    "MethodDescriptor",
    "ParameterDescriptor",
    "SubjectDescriptor",
    # Pipeline
    "describe",
    "resolve_subject_type",
    "is_eligible",
    "eligible_methods",
    "emit",
    "build_wrapper",
    "IteratingWrapperClassBuilder",
    # Loading
    "load_wrapper_class",
    "wrap_each",
    # Errors
    "DescriptorError",
    "EmissionError",
]

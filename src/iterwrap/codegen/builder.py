"""Composes introspection and emission into one build."""

from __future__ import annotations

import logging
from typing import Any

from iterwrap.codegen.descriptors import WRAPPER_SUFFIX, GeneratedClass
from iterwrap.codegen.emitter import emit
from iterwrap.codegen.filters import eligible_methods
from iterwrap.codegen.introspect import describe
from iterwrap.codegen.naming import qualified_name
from iterwrap.subject.base import Subject
from iterwrap.subject.factory import SubjectFactory


logger = logging.getLogger(__name__)


def build_wrapper(subject_type: type[Subject[Any, Any]]) -> GeneratedClass:
    """Describe ``subject_type`` and emit its iterating wrapper."""
    descriptor = describe(subject_type)
    generated = emit(descriptor)
    logger.debug(
        "Built %s wrapping %d of %d method(s)",
        generated.qualified_name,
        len(eligible_methods(descriptor)),
        len(descriptor.methods),
    )
    return generated


class IteratingWrapperClassBuilder:
    """Builds the wrapper source for a factory's concrete subject class.

    The generated class directly subclasses the subject class. Each eligible
    method is overridden so that calling it runs the same check on a new
    subject built for every element of the wrapper's data, giving a
    type-checked, IDE-discoverable subject in a for-each style.
    """

    def __init__(self, subject_factory: SubjectFactory[Any, Any]) -> None:
        self.subject_factory = subject_factory
        self.class_name = qualified_name(subject_factory.subject_class) + WRAPPER_SUFFIX

    def build(self) -> str:
        return build_wrapper(self.subject_factory.subject_class).source

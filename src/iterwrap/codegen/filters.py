"""Eligibility policy deciding which subject methods get wrapped."""

from __future__ import annotations

from iterwrap.codegen.descriptors import MethodDescriptor, SubjectDescriptor
from iterwrap.codegen.naming import qualified_name
from iterwrap.subject.base import Subject


ROOT_TYPE = qualified_name(object)
BASE_TYPE = qualified_name(Subject)

_INHERITED_OWNERS = frozenset({ROOT_TYPE, f"builtins.{ROOT_TYPE}", BASE_TYPE, "iterwrap.subject.Subject"})


def is_eligible(method: MethodDescriptor) -> bool:
    """Return True if the method should be re-applied across elements.

    Methods of the root type and of ``Subject`` are already inherited by the
    wrapper. Final, private and static methods are not overridable entry points.
    Generator methods only run their checks when iterated, which a delegating
    call never does.
    """
    if method.declaring_type in _INHERITED_OWNERS:
        return False
    return not (method.final or method.private or method.static or method.generator)


def eligible_methods(descriptor: SubjectDescriptor) -> tuple[MethodDescriptor, ...]:
    return tuple(method for method in descriptor.methods if is_eligible(method))


__all__ = ["BASE_TYPE", "ROOT_TYPE", "eligible_methods", "is_eligible"]

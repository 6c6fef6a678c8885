"""Shared fixtures for unit tests."""

import pytest

from iterwrap.codegen import MethodDescriptor, ParameterDescriptor, SubjectDescriptor
from iterwrap.subject import CollectingFailureStrategy


@pytest.fixture
def collecting_strategy() -> CollectingFailureStrategy:
    """Provide a failure strategy that records instead of raising."""
    return CollectingFailureStrategy()


@pytest.fixture
def foo_descriptor() -> SubjectDescriptor:
    """Hand-written descriptor of FooSubject with a single check(str) method."""
    return SubjectDescriptor(
        package="sample_subjects",
        simple_name="FooSubject",
        target_type="sample_subjects.Bar",
        methods=(
            MethodDescriptor(
                name="check",
                declaring_type="sample_subjects.FooSubject",
                return_type="None",
                parameters=(ParameterDescriptor(type_name="str"),),
            ),
        ),
    )

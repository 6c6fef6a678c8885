"""Tests for iterwrap.codegen.introspect."""

import pytest

from sample_subjects import (
    BarSubject,
    Bar,
    EmptySubject,
    FooSubject,
    IntSubject,
    ItemsSubject,
    ModeSubject,
    OpenSubject,
    Outer,
    RawSubject,
    SentinelSubject,
    SpecialBarSubject,
    StreamSubject,
)

from iterwrap.codegen import DescriptorError, describe, resolve_subject_type
from iterwrap.codegen.naming import format_type, qualified_name
from iterwrap.subject import Subject
from iterwrap.types import ParameterKind, Visibility


def _method(descriptor, name):
    matches = [m for m in descriptor.methods if m.name == name]
    assert len(matches) == 1, f"{name} not described exactly once"
    return matches[0]


class TestDescribeSubject:
    """Subject-level metadata."""

    def test_foo_subject(self):
        descriptor = describe(FooSubject)

        assert descriptor.package == "sample_subjects"
        assert descriptor.simple_name == "FooSubject"
        assert descriptor.target_type == "sample_subjects.Bar"
        assert [m.name for m in descriptor.methods] == ["check"]

        check = descriptor.methods[0]
        assert check.declaring_type == "sample_subjects.FooSubject"
        assert check.visibility is Visibility.PUBLIC
        assert check.return_type == "None"
        assert len(check.parameters) == 1
        assert check.parameters[0].type_name == "str"
        assert check.parameters[0].annotations == ()

    def test_subject_without_own_methods(self):
        descriptor = describe(EmptySubject)
        assert descriptor.methods == ()

    def test_target_resolved_through_intermediate_generic(self):
        descriptor = describe(IntSubject)

        assert descriptor.target_type == "int"
        assert [m.name for m in descriptor.methods] == ["is_even", "is_at_least"]
        assert _method(descriptor, "is_at_least").declaring_type == "sample_subjects.ComparableSubject"
        assert _method(descriptor, "is_at_least").parameters[0].type_name == "T"

    def test_target_inherited_from_concrete_parent(self):
        descriptor = describe(SpecialBarSubject)

        assert descriptor.target_type == "sample_subjects.Bar"
        assert descriptor.methods[0].name == "has_special_label"
        assert _method(descriptor, "has_label").declaring_type == "sample_subjects.BarSubject"

    def test_forward_reference_target_kept_verbatim(self):
        assert describe(ItemsSubject).target_type == "list[Bar]"

    def test_describe_is_deterministic(self):
        assert describe(BarSubject) == describe(BarSubject)


class TestDescribeMethods:
    """Method enumeration and modifiers."""

    def test_declaration_order_and_exclusions(self):
        names = [m.name for m in describe(BarSubject).methods]

        assert names == [
            "has_label",
            "has_size_between",
            "has_any_label",
            "label_length",
            "eventually_has_label",
            "is_equal_to",
            "_check_not_blank",
            "_BarSubject__check_secret",
            "describe_label",
            "parse",
            "of",
        ]
        # Properties, special methods and Subject's own checks are not collected.
        assert "label" not in names
        assert "__repr__" not in names
        assert "is_not_none" not in names
        assert "actual" not in names

    def test_override_of_base_method_is_declared_on_subject(self):
        is_equal_to = _method(describe(BarSubject), "is_equal_to")
        assert is_equal_to.declaring_type == "sample_subjects.BarSubject"

    def test_modifier_flags(self):
        descriptor = describe(BarSubject)

        assert _method(descriptor, "describe_label").final is True
        assert _method(descriptor, "_BarSubject__check_secret").private is True
        assert _method(descriptor, "parse").static is True
        assert _method(descriptor, "of").static is True
        assert _method(descriptor, "eventually_has_label").is_async is True
        assert _method(descriptor, "has_label").final is False
        assert _method(descriptor, "has_label").private is False
        assert _method(descriptor, "has_label").static is False

    def test_generator_methods_are_flagged(self):
        descriptor = describe(StreamSubject)

        assert _method(descriptor, "labels").generator is True
        assert _method(descriptor, "eventually_labels").generator is True
        assert _method(descriptor, "eventually_labels").is_async is False
        assert _method(descriptor, "has_label").generator is False

    def test_visibility_from_name(self):
        descriptor = describe(BarSubject)

        assert _method(descriptor, "has_label").visibility is Visibility.PUBLIC
        assert _method(descriptor, "_check_not_blank").visibility is Visibility.PROTECTED

    def test_bound_first_parameter_is_dropped(self):
        descriptor = describe(BarSubject)

        assert _method(descriptor, "label_length").parameters == ()
        assert [p.type_name for p in _method(descriptor, "of").parameters] == [
            "iterwrap.subject.failure.FailureStrategy",
            "str",
        ]
        assert [p.type_name for p in _method(descriptor, "parse").parameters] == ["str"]

    def test_return_types(self):
        descriptor = describe(BarSubject)

        assert _method(descriptor, "label_length").return_type == "int"
        assert _method(descriptor, "has_size_between").return_type == "typing.Self"
        assert _method(descriptor, "parse").return_type == "sample_subjects.Bar"


class TestDescribeParameters:
    """Per-parameter types, annotations, kinds and defaults."""

    def test_annotations_in_declared_order(self):
        label, strict = _method(describe(BarSubject), "has_label").parameters

        assert label.type_name == "str"
        assert label.annotations == ("sample_subjects.NotBlank", "sample_subjects.Trimmed")
        assert label.default is None
        assert strict.type_name == "bool"
        assert strict.annotations == ()
        assert strict.default == "True"

    def test_variadic_and_keyword_only(self):
        labels, ignore_case = _method(describe(BarSubject), "has_any_label").parameters

        assert labels.kind is ParameterKind.VAR_POSITIONAL
        assert labels.type_name == "str"
        assert ignore_case.kind is ParameterKind.KEYWORD_ONLY
        assert ignore_case.keyword == "ignore_case"
        assert ignore_case.default == "False"

    def test_non_literal_defaults_are_read_back_from_the_method(self):
        limit, mode, slack = _method(describe(ModeSubject), "has_size_at_most").parameters

        assert limit.default == "ModeSubject.has_size_at_most.__defaults__[0]"
        assert mode.type_name == "sample_subjects.Mode"
        assert mode.default == "ModeSubject.has_size_at_most.__defaults__[1]"
        assert slack.kind is ParameterKind.KEYWORD_ONLY
        assert slack.default == "ModeSubject.has_size_at_most.__kwdefaults__['slack']"

    def test_sentinel_default(self):
        (label,) = describe(SentinelSubject).methods[0].parameters
        assert label.default == "SentinelSubject.has_label.__defaults__[0]"


class TestDescribeErrors:
    """Types that cannot be described."""

    def test_raw_subject_has_no_target_slot(self):
        with pytest.raises(DescriptorError, match="type parameter 1"):
            describe(RawSubject)

    def test_unbound_target_slot(self):
        with pytest.raises(DescriptorError, match="type parameter 1"):
            describe(OpenSubject)

    def test_base_subject_itself(self):
        with pytest.raises(DescriptorError):
            describe(Subject)

    def test_not_a_subject(self):
        with pytest.raises(DescriptorError, match="not a Subject subclass"):
            describe(Bar)

    def test_nested_class(self):
        with pytest.raises(DescriptorError, match="top-level"):
            describe(Outer.NestedSubject)

    def test_class_defined_in_function(self):
        class LocalSubject(Subject["LocalSubject", Bar]):
            def check(self) -> None:
                pass

        with pytest.raises(DescriptorError, match="function body"):
            describe(LocalSubject)

    def test_error_carries_subject_and_reason(self):
        with pytest.raises(DescriptorError) as excinfo:
            describe(RawSubject)

        assert excinfo.value.subject == "sample_subjects.RawSubject"
        assert "target element type" in excinfo.value.reason


class TestResolveSubjectType:
    def test_colon_form(self):
        assert resolve_subject_type("sample_subjects:FooSubject") is FooSubject

    def test_dotted_form(self):
        assert resolve_subject_type("sample_subjects.BarSubject") is BarSubject

    def test_missing_module(self):
        with pytest.raises(DescriptorError, match="cannot import module"):
            resolve_subject_type("no_such_module_here:FooSubject")

    def test_not_a_subject(self):
        with pytest.raises(DescriptorError, match="not a Subject subclass"):
            resolve_subject_type("sample_subjects:Bar")

    def test_invalid_path(self):
        with pytest.raises(DescriptorError, match="expected"):
            resolve_subject_type("FooSubject")


class TestFormatType:
    def test_builtins_are_bare(self):
        assert format_type(int) == "int"
        assert format_type(None) == "None"
        assert format_type(type(None)) == "None"

    def test_classes_are_qualified(self):
        assert format_type(Bar) == "sample_subjects.Bar"
        assert qualified_name(Subject) == "iterwrap.subject.base.Subject"

    def test_generics_and_unions(self):
        assert format_type(list[Bar]) == "list[sample_subjects.Bar]"
        assert format_type(dict[str, int | None]) == "dict[str, int | None]"
        assert format_type(tuple[int, ...]) == "tuple[int, ...]"

"""Structural introspection of subject types."""

from __future__ import annotations

import ast
import importlib
import inspect
import logging
import typing
from collections.abc import Callable, Iterator
from typing import Annotated, Any, get_args, get_origin

from iterwrap.codegen.descriptors import MethodDescriptor, ParameterDescriptor, SubjectDescriptor
from iterwrap.codegen.naming import annotation_name, format_type, qualified_name
from iterwrap.errors import DescriptorError
from iterwrap.generics import type_parameter
from iterwrap.subject.base import Subject
from iterwrap.types import ParameterKind, Visibility


logger = logging.getLogger(__name__)

TARGET_TYPE_PARAMETER = 1

# Members declared here are inherited by the wrapper and never re-emitted.
_EXCLUDED_OWNERS: tuple[type, ...] = (object, Subject)

_KINDS = {
    inspect.Parameter.POSITIONAL_ONLY: ParameterKind.POSITIONAL,
    inspect.Parameter.POSITIONAL_OR_KEYWORD: ParameterKind.POSITIONAL,
    inspect.Parameter.VAR_POSITIONAL: ParameterKind.VAR_POSITIONAL,
    inspect.Parameter.KEYWORD_ONLY: ParameterKind.KEYWORD_ONLY,
    inspect.Parameter.VAR_KEYWORD: ParameterKind.VAR_KEYWORD,
}

_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def describe(subject_type: type) -> SubjectDescriptor:
    """Describe a subject type for wrapper emission.

    Args:
        subject_type: A top-level subclass of ``Subject`` binding the target
            element type.

    Returns:
        SubjectDescriptor with the subject's methods in declaration order,
        most derived class first.

    Raises:
        DescriptorError: If the type is not a subject, cannot be imported
            from its module, does not bind the target type parameter, or
            declares a method whose signature cannot be reproduced.
    """
    if not inspect.isclass(subject_type) or not issubclass(subject_type, Subject):
        raise DescriptorError(repr(subject_type), "is not a Subject subclass")

    subject_name = qualified_name(subject_type)
    if subject_type.__qualname__ != subject_type.__name__:
        raise DescriptorError(subject_name, "is not a top-level class of its module")

    target = type_parameter(subject_type, Subject, TARGET_TYPE_PARAMETER)
    if target is None:
        msg = f"does not bind type parameter {TARGET_TYPE_PARAMETER} (the target element type) of Subject"
        raise DescriptorError(subject_name, msg)
    try:
        target_type = format_type(target)
    except DescriptorError as exc:
        raise DescriptorError(subject_name, f"target element type {exc.subject} {exc.reason}") from exc

    methods = tuple(
        _describe_method(subject_type, owner, name, member)
        for owner, name, member in _iter_methods(subject_type)
    )
    logger.debug("Described %s: target %s, %d method(s)", subject_name, target_type, len(methods))

    return SubjectDescriptor(
        package=subject_type.__module__,
        simple_name=subject_type.__name__,
        target_type=target_type,
        methods=methods,
    )


def resolve_subject_type(import_path: str) -> type[Subject[Any, Any]]:
    """Import a subject type from an import string.

    Supports formats:
        - "module.path:ClassName"
        - "module.path.ClassName"
    """
    if ":" in import_path:
        module_path, class_name = import_path.rsplit(":", 1)
    elif "." in import_path:
        module_path, class_name = import_path.rsplit(".", 1)
    else:
        raise DescriptorError(import_path, "expected 'module:Class' or 'module.Class'")

    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        raise DescriptorError(import_path, f"cannot import module {module_path!r} ({exc})") from exc

    cls = getattr(module, class_name, None)
    if not isinstance(cls, type) or not issubclass(cls, Subject):
        raise DescriptorError(import_path, "is not a Subject subclass")
    return cls


def _iter_methods(subject_type: type) -> Iterator[tuple[type, str, Any]]:
    """Yield ``(owner, name, member)`` for every visible method, most derived first."""
    seen: set[str] = set()
    for owner in subject_type.__mro__:
        for name, member in vars(owner).items():
            if name in seen:
                continue
            seen.add(name)

            if owner in _EXCLUDED_OWNERS or _is_special(name):
                continue
            if inspect.isfunction(_unwrap_member(member)):
                yield owner, name, member


def _is_special(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _unwrap_member(member: Any) -> Any:
    if isinstance(member, (staticmethod, classmethod)):
        return member.__func__
    return member


def _is_mangled(owner: type, name: str) -> bool:
    return name.startswith(f"_{owner.__name__.lstrip('_')}__")


def _describe_method(subject_type: type, owner: type, name: str, member: Any) -> MethodDescriptor:
    subject_name = qualified_name(subject_type)
    func = _unwrap_member(member)
    # The generated module imports the subject class, so defaults can be read back from it.
    reference = f"{subject_type.__name__}.{name}"
    try:
        hints = _type_hints(func)
        signature = inspect.signature(func)
        parameters = list(signature.parameters.values())
        defaulted = [
            p.name
            for p in parameters
            if p.kind in _POSITIONAL and p.default is not inspect.Parameter.empty
        ]
        if not isinstance(member, staticmethod) and parameters and parameters[0].kind in _POSITIONAL:
            parameters = parameters[1:]

        return_type = None
        if "return" in hints:
            return_type = format_type(hints["return"])

        return MethodDescriptor(
            name=name,
            declaring_type=qualified_name(owner),
            visibility=Visibility.PROTECTED if name.startswith("_") else Visibility.PUBLIC,
            return_type=return_type,
            parameters=tuple(
                _describe_parameter(p, hints, _default_source(p, func, reference, defaulted)) for p in parameters
            ),
            final=bool(getattr(member, "__final__", False) or getattr(func, "__final__", False)),
            private=_is_mangled(owner, name),
            static=isinstance(member, (staticmethod, classmethod)),
            is_async=inspect.iscoroutinefunction(func),
            generator=inspect.isgeneratorfunction(func) or inspect.isasyncgenfunction(func),
        )
    except DescriptorError as exc:
        raise DescriptorError(subject_name, f"method {name!r}: {exc.subject} {exc.reason}") from exc
    except ValueError as exc:
        raise DescriptorError(subject_name, f"method {name!r} has no readable signature ({exc})") from exc


def _type_hints(func: Callable[..., Any]) -> dict[str, Any]:
    target = inspect.unwrap(func)
    try:
        return typing.get_type_hints(target, include_extras=True)
    except (NameError, TypeError, AttributeError, SyntaxError) as exc:
        # Names only importable under TYPE_CHECKING: keep the source text as written.
        logger.debug("Using raw annotations for %s: %s", target.__qualname__, exc)
        return dict(getattr(target, "__annotations__", {}))


def _describe_parameter(
    parameter: inspect.Parameter,
    hints: dict[str, Any],
    default: str | None,
) -> ParameterDescriptor:
    annotation = hints.get(parameter.name, parameter.annotation)
    type_name: str | None = None
    annotations: tuple[str, ...] = ()

    if annotation is not inspect.Parameter.empty:
        if get_origin(annotation) is Annotated:
            base, *metadata = get_args(annotation)
            type_name = format_type(base)
            annotations = tuple(annotation_name(m) for m in metadata)
        else:
            type_name = format_type(annotation)

    kind = _KINDS[parameter.kind]
    return ParameterDescriptor(
        type_name=type_name,
        annotations=annotations,
        kind=kind,
        keyword=parameter.name if kind is ParameterKind.KEYWORD_ONLY else None,
        default=default,
    )


def _default_source(
    parameter: inspect.Parameter,
    func: Callable[..., Any],
    reference: str,
    defaulted: list[str],
) -> str | None:
    """Return source text that evaluates to the parameter's default in the generated module.

    Literals are written out. Anything else (enum members, ``float("inf")``,
    sentinels) is read back from the subject method's ``__defaults__`` or
    ``__kwdefaults__``, so the wrapper forwards the very same object.
    """
    default = parameter.default
    if default is inspect.Parameter.empty:
        return None

    text = repr(default)
    if _is_literal(text, default):
        return text

    if parameter.kind is inspect.Parameter.KEYWORD_ONLY:
        kwdefaults = getattr(func, "__kwdefaults__", None) or {}
        if kwdefaults.get(parameter.name, inspect.Parameter.empty) is default:
            return f"{reference}.__kwdefaults__[{parameter.name!r}]"
    elif parameter.name in defaulted:
        index = defaulted.index(parameter.name)
        defaults = getattr(func, "__defaults__", None) or ()
        if index < len(defaults) and defaults[index] is default:
            return f"{reference}.__defaults__[{index}]"

    # Decorated methods whose wrapper does not hold the defaults.
    msg = f"has a default that is neither a literal nor stored on the method ({text})"
    raise DescriptorError(f"parameter {parameter.name!r}", msg)


def _is_literal(text: str, value: Any) -> bool:
    try:
        parsed = ast.literal_eval(text)
    except (ValueError, TypeError, SyntaxError, MemoryError, RecursionError):
        return False
    return type(parsed) is type(value) and parsed == value

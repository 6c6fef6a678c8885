"""Builds the wrapper node tree from a descriptor and prints it."""

from __future__ import annotations

import ast
import keyword

from iterwrap.codegen.descriptors import GeneratedClass, MethodDescriptor, ParameterDescriptor, SubjectDescriptor
from iterwrap.codegen.filters import eligible_methods
from iterwrap.codegen.nodes import ClassNode, MethodNode, ParameterNode
from iterwrap.codegen.printer import render_class
from iterwrap.errors import EmissionError
from iterwrap.types import ParameterKind


# Bound by every generated method; a parameter of this name cannot be renamed away.
RESERVED_NAMES = frozenset({"self"})

_KIND_ORDER = {
    ParameterKind.POSITIONAL: 0,
    ParameterKind.VAR_POSITIONAL: 1,
    ParameterKind.KEYWORD_ONLY: 2,
    ParameterKind.VAR_KEYWORD: 3,
}


def emit(descriptor: SubjectDescriptor) -> GeneratedClass:
    """Render the iterating wrapper for a described subject.

    Only methods passing the eligibility policy are emitted. Emission is pure:
    the same descriptor always yields the same text.

    Raises:
        EmissionError: If the descriptor is structurally incomplete or the
            rendered text does not parse.
    """
    subject = descriptor.qualified_name
    if not all(_is_identifier(part) for part in descriptor.package.split(".")):
        raise EmissionError(subject, f"package {descriptor.package!r} is not a dotted module path")
    if not _is_identifier(descriptor.simple_name):
        raise EmissionError(subject, f"simple name {descriptor.simple_name!r} is not an identifier")

    node = ClassNode(
        package=descriptor.package,
        subject_name=descriptor.simple_name,
        target_type=descriptor.target_type,
        methods=tuple(_method_node(descriptor, method) for method in eligible_methods(descriptor)),
    )
    source = render_class(node)

    try:
        ast.parse(source)
    except SyntaxError as exc:
        msg = f"generated source does not parse: {exc.msg} (line {exc.lineno}: {(exc.text or '').strip()!r})"
        raise EmissionError(subject, msg) from exc

    return GeneratedClass(class_name=node.class_name, package=descriptor.package, source=source)


def _is_identifier(name: str) -> bool:
    return name.isidentifier() and not keyword.iskeyword(name)


def _method_node(descriptor: SubjectDescriptor, method: MethodDescriptor) -> MethodNode:
    subject = descriptor.qualified_name
    if not _is_identifier(method.name):
        raise EmissionError(subject, "method name is not an identifier", method=method.name)

    keywords = frozenset(
        p.keyword for p in method.parameters if p.kind is ParameterKind.KEYWORD_ONLY and p.keyword is not None
    )
    parameters = tuple(
        _parameter_node(subject, method, index, parameter, keywords)
        for index, parameter in enumerate(method.parameters)
    )
    _check_parameter_order(subject, method)

    names = [p.name for p in parameters]
    duplicates = sorted({n for n in names if names.count(n) > 1} | (set(names) & RESERVED_NAMES))
    if duplicates:
        raise EmissionError(subject, f"parameter names clash: {', '.join(duplicates)}", method=method.name)

    return MethodNode(
        name=method.name,
        subject_type=descriptor.simple_name,
        target_type=descriptor.target_type,
        visibility=method.visibility,
        return_type=method.return_type,
        parameters=parameters,
        is_async=method.is_async,
        item_local=_free_name("item", names),
        subject_local=_free_name("subject", names),
    )


def _free_name(base: str, taken: list[str]) -> str:
    name = base
    suffix = 1
    while name in taken:
        name = f"{base}_{suffix}"
        suffix += 1
    return name


def _parameter_node(
    subject: str,
    method: MethodDescriptor,
    index: int,
    parameter: ParameterDescriptor,
    keywords: frozenset[str],
) -> ParameterNode:
    if parameter.annotations and parameter.type_name is None:
        raise EmissionError(subject, f"parameter {index} has annotations but no type", method=method.name)

    if parameter.kind is ParameterKind.KEYWORD_ONLY:
        if parameter.keyword is None or not _is_identifier(parameter.keyword):
            msg = f"keyword-only parameter {index} needs an identifier keyword, got {parameter.keyword!r}"
            raise EmissionError(subject, msg, method=method.name)
        name = parameter.keyword
    else:
        # argN keeps its index unless a keyword-only parameter already owns that name.
        name = f"arg{index}"
        while name in keywords:
            name += "_"

    if parameter.default is not None and parameter.kind in (
        ParameterKind.VAR_POSITIONAL,
        ParameterKind.VAR_KEYWORD,
    ):
        raise EmissionError(subject, f"variadic parameter {index} cannot have a default", method=method.name)

    return ParameterNode(
        name=name,
        type_name=parameter.type_name,
        annotations=parameter.annotations,
        kind=parameter.kind,
        default=parameter.default,
    )


def _check_parameter_order(subject: str, method: MethodDescriptor) -> None:
    last_rank = -1
    seen_default = False
    for index, parameter in enumerate(method.parameters):
        rank = _KIND_ORDER[parameter.kind]
        variadic = parameter.kind in (ParameterKind.VAR_POSITIONAL, ParameterKind.VAR_KEYWORD)
        if rank < last_rank or (variadic and rank == last_rank):
            msg = f"parameter {index} ({parameter.kind.value}) is out of order"
            raise EmissionError(subject, msg, method=method.name)
        last_rank = rank

        if parameter.kind is ParameterKind.POSITIONAL:
            if parameter.default is not None:
                seen_default = True
            elif seen_default:
                msg = f"parameter {index} has no default but follows a parameter with one"
                raise EmissionError(subject, msg, method=method.name)

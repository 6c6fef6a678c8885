"""Rendering of runtime types as source text."""

from __future__ import annotations

import types
import typing
from collections.abc import Sequence
from typing import Annotated, Any, ForwardRef, Literal, TypeVar, get_args, get_origin

from iterwrap.errors import DescriptorError


def qualified_name(obj: Any) -> str:
    """Return ``module.QualName`` for a class, bare for builtins.

    Raises DescriptorError for classes defined in a function body, which
    cannot be named from module scope.
    """
    name = getattr(obj, "__qualname__", None) or getattr(obj, "__name__", None)
    if name is None:
        raise DescriptorError(repr(obj), "has no name")
    if "<locals>" in name:
        raise DescriptorError(name, "is defined in a function body and cannot be named from module scope")

    module = getattr(obj, "__module__", None)
    if module in (None, "builtins"):
        return name
    return f"{module}.{name}"


def annotation_name(metadata: Any) -> str:
    """Name an ``Annotated`` metadata entry by its type."""
    return qualified_name(metadata if isinstance(metadata, type) else type(metadata))


def render_annotated(type_name: str, annotations: Sequence[str]) -> str:
    if not annotations:
        return type_name
    return f"Annotated[{type_name}, {', '.join(annotations)}]"


def format_type(annotation: Any) -> str:
    """Render a type annotation as source text.

    Strings and forward references are kept verbatim, type variables by name,
    unions with ``|`` and parameterized generics recursively.
    """
    if annotation is None or annotation is type(None):
        return "None"
    if annotation is Ellipsis:
        return "..."
    if isinstance(annotation, str):
        return annotation
    if isinstance(annotation, ForwardRef):
        return annotation.__forward_arg__
    if isinstance(annotation, (TypeVar, typing.ParamSpec)):
        return annotation.__name__
    if isinstance(annotation, (list, tuple)):
        return f"[{', '.join(format_type(arg) for arg in annotation)}]"

    origin = get_origin(annotation)
    if origin is Annotated:
        base, *metadata = get_args(annotation)
        return render_annotated(format_type(base), [annotation_name(m) for m in metadata])
    if origin is typing.Union or origin is types.UnionType:
        return " | ".join(format_type(arg) for arg in get_args(annotation))
    if origin is Literal:
        return f"typing.Literal[{', '.join(repr(arg) for arg in get_args(annotation))}]"
    if origin is not None:
        args = get_args(annotation)
        if not args:
            return qualified_name(origin)
        return f"{qualified_name(origin)}[{', '.join(format_type(arg) for arg in args)}]"

    if isinstance(annotation, type):
        return qualified_name(annotation)
    return repr(annotation)

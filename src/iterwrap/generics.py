"""Resolution of generic type arguments through a class hierarchy."""

from __future__ import annotations

from typing import Any, TypeVar, get_args, get_origin


def resolve_type_arguments(cls: type, origin: type) -> tuple[Any, ...] | None:
    """Return the arguments ``cls`` binds for the generic class ``origin``.

    Intermediate generic subclasses are followed and their type variables are
    substituted, so for::

        class ComparableSubject(Subject[S, T]): ...
        class IntSubject(ComparableSubject["IntSubject", int]): ...

    ``resolve_type_arguments(IntSubject, Subject)`` is ``(ForwardRef("IntSubject"), int)``.
    Returns None when ``cls`` never parameterizes ``origin``.
    """
    for base in cls.__dict__.get("__orig_bases__", cls.__bases__):
        base_origin = get_origin(base) or base
        if not isinstance(base_origin, type) or not issubclass(base_origin, origin):
            continue

        base_args = get_args(base)
        if base_origin is origin:
            if base_args:
                return base_args
            continue

        inner = resolve_type_arguments(base_origin, origin)
        if inner is None:
            continue
        bindings = dict(zip(getattr(base_origin, "__parameters__", ()), base_args))
        return tuple(bindings.get(arg, arg) if isinstance(arg, TypeVar) else arg for arg in inner)

    return None


def type_parameter(cls: type, origin: type, index: int) -> Any | None:
    """Return the concrete argument bound at ``index`` of ``origin``, if any."""
    args = resolve_type_arguments(cls, origin)
    if args is None or index >= len(args):
        return None

    arg = args[index]
    if isinstance(arg, TypeVar):
        return None
    return arg

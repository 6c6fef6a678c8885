"""Intermediate tree rendered by the printer: class -> methods -> parameters."""

from __future__ import annotations

from dataclasses import dataclass, field

from iterwrap.codegen.descriptors import WRAPPER_SUFFIX
from iterwrap.types import ParameterKind, Visibility


@dataclass(frozen=True, slots=True)
class ParameterNode:
    """A parameter of a wrapper method, under its synthetic name."""

    name: str
    type_name: str | None = None
    annotations: tuple[str, ...] = ()
    kind: ParameterKind = ParameterKind.POSITIONAL
    default: str | None = None


@dataclass(frozen=True, slots=True)
class MethodNode:
    """One overriding method delegating to a fresh subject per element."""

    name: str
    subject_type: str
    target_type: str
    visibility: Visibility = Visibility.PUBLIC
    return_type: str | None = None
    parameters: tuple[ParameterNode, ...] = ()
    is_async: bool = False
    item_local: str = "item"
    subject_local: str = "subject"


@dataclass(frozen=True, slots=True)
class ClassNode:
    """The generated wrapper class and the module around it."""

    package: str
    subject_name: str
    target_type: str
    methods: tuple[MethodNode, ...] = field(default_factory=tuple)

    @property
    def class_name(self) -> str:
        return f"{self.subject_name}{WRAPPER_SUFFIX}"

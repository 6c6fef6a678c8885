"""Immutable descriptions of a subject type and of the generated wrapper."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from iterwrap.types import ParameterKind, Visibility


WRAPPER_SUFFIX = "IteratingWrapper"


class ParameterDescriptor(BaseModel):
    """One parameter of a subject method.

    Attributes:
    ----------
    type_name: str | None
        Rendered type of the parameter, None when unannotated
    annotations: tuple[str, ...]
        Qualified names of the ``Annotated`` metadata, in declared order
    kind: ParameterKind
        How the parameter binds its argument
    keyword: str | None
        Binding name, required for keyword-only parameters
    default: str | None
        Source text of a literal default value
    """

    model_config = ConfigDict(frozen=True)

    type_name: str | None = None
    annotations: tuple[str, ...] = ()
    kind: ParameterKind = ParameterKind.POSITIONAL
    keyword: str | None = None
    default: str | None = None


class MethodDescriptor(BaseModel):
    """Shape of one subject method, enough to emit an overriding delegator."""

    model_config = ConfigDict(frozen=True)

    name: str
    declaring_type: str = Field(description="Qualified name of the class defining the method")
    visibility: Visibility = Visibility.PUBLIC
    return_type: str | None = None
    parameters: tuple[ParameterDescriptor, ...] = ()
    final: bool = False
    private: bool = False
    static: bool = False
    is_async: bool = False
    generator: bool = Field(default=False, description="Generator or async generator; calling it does not run the body")


class SubjectDescriptor(BaseModel):
    """Everything the emitter needs to know about one subject type."""

    model_config = ConfigDict(frozen=True)

    package: str = Field(description="Module the subject class is importable from")
    simple_name: str
    target_type: str = Field(description="Rendered name of the target element type")
    methods: tuple[MethodDescriptor, ...] = ()

    @property
    def qualified_name(self) -> str:
        return f"{self.package}.{self.simple_name}"


class GeneratedClass(BaseModel):
    """Source of one generated wrapper class."""

    model_config = ConfigDict(frozen=True)

    class_name: str
    package: str
    source: str

    @property
    def qualified_name(self) -> str:
        return f"{self.package}.{self.class_name}"

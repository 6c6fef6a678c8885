"""Renders the wrapper node tree as Python source text."""

from __future__ import annotations

from collections.abc import Sequence

from iterwrap.codegen.naming import render_annotated
from iterwrap.codegen.nodes import ClassNode, MethodNode, ParameterNode
from iterwrap.types import ParameterKind, Visibility


# Format fields:
#   package        module the subject class is imported from
#   subject_name   simple name of the concrete subject class
#   target_type    rendered target element type
#   methods        rendered wrapper methods, empty when none are eligible
MODULE_TEMPLATE = """\
from __future__ import annotations

from collections.abc import Iterable
from typing import Annotated

from typing_extensions import override

from iterwrap.subject import FailureStrategy, SubjectFactory
from {package} import {subject_name}


class {subject_name}IteratingWrapper({subject_name}):

    def __init__(
        self,
        failure_strategy: FailureStrategy,
        subject_factory: SubjectFactory,
        data: Iterable[{target_type}],
    ) -> None:
        super().__init__(failure_strategy, None)
        self._subject_factory = subject_factory
        self._data = data
{methods}"""

# Format fields:
#   visibility     marker comment for the visibility token, empty for package
#   def_keyword    "def" or "async def"
#   name           method name
#   parameters     parameter declarations, with a leading ", " when non-empty
#   returns        " -> <return type>" or empty when unannotated
#   target_type    annotation of the loop variable
#   subject_type   annotation of the per-element subject (the cast)
#   item_local     loop variable name, clear of every parameter name
#   subject_local  per-element subject variable name, clear of every parameter name
#   call           "" or "await "
#   arguments      forwarded arguments
METHOD_TEMPLATE = """
    @override{visibility}
    {def_keyword} {name}(self{parameters}){returns}:
        {item_local}: {target_type}
        for {item_local} in self._data:
            {subject_local}: {subject_type} = self._subject_factory.get_subject(self.failure_strategy, {item_local})
            {call}{subject_local}.{name}({arguments})
"""

_PREFIXES = {
    ParameterKind.VAR_POSITIONAL: "*",
    ParameterKind.VAR_KEYWORD: "**",
}


def render_visibility(visibility: Visibility) -> str:
    """Return the visibility token; package visibility renders as the empty string.

    Package visibility is only meaningful when the wrapper lives beside the
    subject, which is assumed and not verified.
    """
    if visibility is Visibility.PACKAGE:
        return ""
    return visibility.value


def render_parameter(node: ParameterNode) -> str:
    text = _PREFIXES.get(node.kind, "") + node.name
    if node.type_name is not None:
        text += f": {render_annotated(node.type_name, node.annotations)}"
        if node.default is not None:
            text += f" = {node.default}"
    elif node.default is not None:
        text += f"={node.default}"
    return text


def render_parameters(nodes: Sequence[ParameterNode]) -> str:
    """Render the declaration list, e.g. ``arg0: Annotated[str, a.Ann1], arg1: int``."""
    parts: list[str] = []
    star_open = False
    for node in nodes:
        if node.kind is ParameterKind.VAR_POSITIONAL:
            star_open = True
        elif node.kind is ParameterKind.KEYWORD_ONLY and not star_open:
            parts.append("*")
            star_open = True
        parts.append(render_parameter(node))
    return ", ".join(parts)


def render_arguments(nodes: Sequence[ParameterNode]) -> str:
    """Render the forwarding list, e.g. ``arg0, *arg1, strict=strict``."""
    parts: list[str] = []
    for node in nodes:
        if node.kind is ParameterKind.KEYWORD_ONLY:
            parts.append(f"{node.name}={node.name}")
        else:
            parts.append(_PREFIXES.get(node.kind, "") + node.name)
    return ", ".join(parts)


def render_method(node: MethodNode) -> str:
    visibility = render_visibility(node.visibility)
    parameters = render_parameters(node.parameters)
    return METHOD_TEMPLATE.format(
        visibility=f"  # {visibility}" if visibility else "",
        def_keyword="async def" if node.is_async else "def",
        name=node.name,
        parameters=f", {parameters}" if parameters else "",
        returns=f" -> {node.return_type}" if node.return_type is not None else "",
        target_type=node.target_type,
        subject_type=node.subject_type,
        item_local=node.item_local,
        subject_local=node.subject_local,
        call="await " if node.is_async else "",
        arguments=render_arguments(node.parameters),
    )


def render_class(node: ClassNode) -> str:
    return MODULE_TEMPLATE.format(
        package=node.package,
        subject_name=node.subject_name,
        target_type=node.target_type,
        methods="".join(render_method(method) for method in node.methods),
    )

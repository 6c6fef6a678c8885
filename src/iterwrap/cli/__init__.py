"""CLI module for building iterating wrappers."""

from __future__ import annotations

import argparse
import logging
import re
import sys
from collections.abc import Sequence
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from iterwrap.codegen import (
    GeneratedClass,
    MethodDescriptor,
    SubjectDescriptor,
    build_wrapper,
    describe,
    emit,
    is_eligible,
    resolve_subject_type,
)
from iterwrap.config import ConfigError, IterwrapConfig, load_config
from iterwrap.errors import IterwrapError
from iterwrap.types import ParameterKind


logger = logging.getLogger(__name__)


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for the iterwrap CLI."""
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config()
    except ConfigError as exc:
        Console(stderr=True).print(f"[red]{escape(str(exc))}[/red]")
        raise SystemExit(2) from exc

    _configure_logging(_resolve_verbosity(args, config))
    console = Console()

    if args.command == "describe":
        raise SystemExit(_run_describe(console, args.subjects))

    if args.command == "generate":
        subjects = _resolve_subjects(args, config)
        raise SystemExit(_run_generate(console, subjects, _resolve_output_dir(args, config)))

    if args.command == "emit":
        output_dir = _resolve_output_dir(args, config)
        raise SystemExit(_run_emit(console, Path(args.descriptor), output_dir))

    parser.print_help()
    raise SystemExit(0)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="iterwrap", description="Iterating wrappers for assertion subjects")
    parser.add_argument("-q", "--quiet", action="count", default=0, help="Reduce log output")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log output")
    subparsers = parser.add_subparsers(dest="command")

    describe_parser = subparsers.add_parser("describe", help="Show the methods a wrapper would override")
    describe_parser.add_argument("subjects", nargs="+", help="Subject import strings (module:Class)")

    generate_parser = subparsers.add_parser("generate", help="Generate wrappers for subject classes")
    generate_parser.add_argument(
        "subjects",
        nargs="*",
        help="Subject import strings (module:Class); defaults to [tool.iterwrap] subjects",
    )
    generate_parser.add_argument("-o", "--output-dir", help="Write modules here instead of stdout")

    emit_parser = subparsers.add_parser("emit", help="Generate a wrapper from a JSON subject descriptor")
    emit_parser.add_argument("descriptor", help="Path to a JSON SubjectDescriptor")
    emit_parser.add_argument("-o", "--output-dir", help="Write the module here instead of stdout")

    return parser


def _resolve_verbosity(args: argparse.Namespace, config: IterwrapConfig) -> int:
    return config.verbosity + args.verbose - args.quiet


def _resolve_subjects(args: argparse.Namespace, config: IterwrapConfig) -> list[str]:
    if args.subjects:
        return list(args.subjects)
    return list(config.subjects)


def _resolve_output_dir(args: argparse.Namespace, config: IterwrapConfig) -> Path | None:
    if args.output_dir:
        return Path(args.output_dir)
    if config.output_dir:
        return Path(config.output_dir)
    return None


def _configure_logging(verbosity: int) -> None:
    if verbosity < 0:
        level = logging.ERROR
    elif verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def module_file_name(class_name: str) -> str:
    """``FooSubjectIteratingWrapper`` -> ``foo_subject_iterating_wrapper.py``."""
    snake = re.sub(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])", "_", class_name).lower()
    return f"{snake}.py"


def _write(console: Console, generated: GeneratedClass, output_dir: Path | None) -> None:
    if output_dir is None:
        sys.stdout.write(generated.source)
        return

    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / module_file_name(generated.class_name)
    path.write_text(generated.source, encoding="utf-8")
    logger.info("Wrote %s", path)
    console.print(f"[green]{generated.qualified_name}[/green] -> {escape(str(path))}")


def _run_describe(console: Console, subjects: Sequence[str]) -> int:
    for import_path in subjects:
        try:
            descriptor = describe(resolve_subject_type(import_path))
        except IterwrapError as exc:
            console.print(f"[red]{escape(str(exc))}[/red]")
            return 1
        console.print(_describe_table(descriptor))
    return 0


def _describe_table(descriptor: SubjectDescriptor) -> Table:
    table = Table(title=escape(f"{descriptor.qualified_name} (target {descriptor.target_type})"))
    table.add_column("Method")
    table.add_column("Visibility")
    table.add_column("Signature")
    table.add_column("Declared in")
    table.add_column("Wrapped", justify="center")

    for method in descriptor.methods:
        table.add_row(
            method.name,
            method.visibility.value,
            escape(_signature(method)),
            method.declaring_type,
            "[green]yes[/green]" if is_eligible(method) else "[dim]no[/dim]",
        )
    return table


def _signature(method: MethodDescriptor) -> str:
    prefixes = {ParameterKind.VAR_POSITIONAL: "*", ParameterKind.VAR_KEYWORD: "**"}
    parts = []
    for parameter in method.parameters:
        text = prefixes.get(parameter.kind, "") + (parameter.keyword or parameter.type_name or "?")
        if parameter.kind is ParameterKind.KEYWORD_ONLY and parameter.type_name:
            text += f": {parameter.type_name}"
        parts.append(text)
    returns = f" -> {method.return_type}" if method.return_type else ""
    prefix = "async " if method.is_async else ""
    return f"{prefix}({', '.join(parts)}){returns}"


def _run_generate(console: Console, subjects: Sequence[str], output_dir: Path | None) -> int:
    if not subjects:
        console.print("[yellow]No subjects given and none configured in \\[tool.iterwrap].[/yellow]")
        return 1

    for import_path in subjects:
        try:
            generated = build_wrapper(resolve_subject_type(import_path))
        except IterwrapError as exc:
            console.print(f"[red]{escape(str(exc))}[/red]")
            return 1
        _write(console, generated, output_dir)
    return 0


def _run_emit(console: Console, descriptor_path: Path, output_dir: Path | None) -> int:
    if not descriptor_path.is_file():
        console.print(f"[red]Descriptor not found: {escape(str(descriptor_path))}[/red]")
        return 1

    try:
        descriptor = SubjectDescriptor.model_validate_json(descriptor_path.read_text(encoding="utf-8"))
        generated = emit(descriptor)
    except ValidationError as exc:
        console.print(f"[red]Invalid descriptor {escape(str(descriptor_path))}:[/red]\n{escape(str(exc))}")
        return 1
    except IterwrapError as exc:
        console.print(f"[red]{escape(str(exc))}[/red]")
        return 1

    _write(console, generated, output_dir)
    return 0


__all__ = ["main", "module_file_name"]

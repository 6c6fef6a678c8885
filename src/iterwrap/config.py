"""Configuration from ``[tool.iterwrap]`` in pyproject.toml and ITERWRAP_* variables."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

from iterwrap.errors import IterwrapError


ENV_PREFIX = "ITERWRAP_"


class ConfigError(IterwrapError):
    """Raised when the configuration is invalid (user error)."""


@dataclass
class IterwrapConfig:
    """Settings for the iterwrap CLI.

    Attributes
    ----------
    subjects
        Import strings of subjects built when ``generate`` gets no arguments.
    output_dir
        Directory generated modules are written to; stdout when unset.
    verbosity
        Base log verbosity, adjusted by ``-v`` and ``-q``.
    """

    subjects: list[str] = field(default_factory=list)
    output_dir: str | None = None
    verbosity: int = 0


DEFAULT_CONFIG = IterwrapConfig()


def find_pyproject(start: Path | None = None) -> Path | None:
    """Return the nearest pyproject.toml at or above ``start``."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def load_config(start: Path | None = None, env: Mapping[str, str] | None = None) -> IterwrapConfig:
    """Load configuration; environment variables override pyproject.toml."""
    config = replace(DEFAULT_CONFIG, subjects=list(DEFAULT_CONFIG.subjects))

    pyproject = find_pyproject(start)
    if pyproject is not None:
        config = _apply_table(config, _read_table(pyproject), source=str(pyproject))

    return _apply_env(config, os.environ if env is None else env)


def _read_table(path: Path) -> dict[str, Any]:
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        msg = f"{path}: {exc}"
        raise ConfigError(msg) from exc
    return data.get("tool", {}).get("iterwrap", {})


def _apply_table(config: IterwrapConfig, table: Mapping[str, Any], *, source: str) -> IterwrapConfig:
    unknown = sorted(set(table) - {"subjects", "output_dir", "verbosity"})
    if unknown:
        msg = f"{source}: unknown [tool.iterwrap] key(s): {', '.join(unknown)}"
        raise ConfigError(msg)

    if "subjects" in table:
        subjects = table["subjects"]
        if not isinstance(subjects, list) or not all(isinstance(s, str) for s in subjects):
            msg = f"{source}: 'subjects' must be a list of import strings"
            raise ConfigError(msg)
        config = replace(config, subjects=list(subjects))

    if "output_dir" in table:
        if not isinstance(table["output_dir"], str):
            msg = f"{source}: 'output_dir' must be a string"
            raise ConfigError(msg)
        config = replace(config, output_dir=table["output_dir"])

    if "verbosity" in table:
        # bool is an int subclass
        if not isinstance(table["verbosity"], int) or isinstance(table["verbosity"], bool):
            msg = f"{source}: 'verbosity' must be an integer"
            raise ConfigError(msg)
        config = replace(config, verbosity=table["verbosity"])

    return config


def _apply_env(config: IterwrapConfig, env: Mapping[str, str]) -> IterwrapConfig:
    subjects = env.get(f"{ENV_PREFIX}SUBJECTS")
    if subjects is not None:
        config = replace(config, subjects=[s.strip() for s in subjects.split(",") if s.strip()])

    output_dir = env.get(f"{ENV_PREFIX}OUTPUT_DIR")
    if output_dir:
        config = replace(config, output_dir=output_dir)

    verbosity = env.get(f"{ENV_PREFIX}VERBOSITY")
    if verbosity is not None:
        try:
            config = replace(config, verbosity=int(verbosity))
        except ValueError as exc:
            msg = f"{ENV_PREFIX}VERBOSITY={verbosity!r} is not a valid integer"
            raise ConfigError(msg) from exc

    return config


__all__ = ["DEFAULT_CONFIG", "ConfigError", "IterwrapConfig", "find_pyproject", "load_config"]

"""Shared types for iterwrap."""

from enum import Enum


class Visibility(str, Enum):
    """Access level of a subject method."""

    PUBLIC = "public"  # no leading underscore
    PROTECTED = "protected"  # single leading underscore
    PACKAGE = "package"  # only from explicit descriptors


class ParameterKind(str, Enum):
    """How a parameter binds its argument."""

    POSITIONAL = "positional"
    VAR_POSITIONAL = "var_positional"
    KEYWORD_ONLY = "keyword_only"
    VAR_KEYWORD = "var_keyword"

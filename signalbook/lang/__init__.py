"""
The notebook DSL evaluator.

- Workspace: per-session environment; executes statement lines
- literals: recursive-descent parser for numeric grids and option bags
- values: the tagged value union and its output formatting
- methods: per-kind `receiver.method(...)` dispatch tables
"""

from .workspace import Workspace, split_top_level, strip_comment
from .literals import LiteralSyntaxError, parse_literal, parse_grid, parse_options, parse_number
from .values import (
    ArgumentStyle,
    Builtin,
    Modes,
    Metrics,
    ValueKind,
    WorkspaceValue,
    format_value,
    kind_of,
)
from .methods import MethodTable, default_methods


__all__ = [
    # evaluator
    "Workspace",
    "split_top_level",
    "strip_comment",

    # literals
    "LiteralSyntaxError",
    "parse_literal",
    "parse_grid",
    "parse_options",
    "parse_number",

    # values
    "ArgumentStyle",
    "Builtin",
    "Modes",
    "Metrics",
    "ValueKind",
    "WorkspaceValue",
    "format_value",
    "kind_of",

    # methods
    "MethodTable",
    "default_methods",
]

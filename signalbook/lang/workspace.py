# signalbook/lang/workspace.py
from __future__ import annotations

import inspect
import logging
import re
from typing import Any

import numpy as np

from ..config import WorkspaceConfig
from ..core.exceptions import (
    AllocationFailure,
    ComputationError,
    EvaluationError,
    InvalidInput,
    UndefinedName,
)
from ..core.matrix import Matrix
from ..core.signal import ChirpOptions, Signal
from .literals import parse_grid, parse_literal, parse_number, parse_options
from .methods import MethodTable, default_methods
from .values import ArgumentStyle, Builtin, WorkspaceValue, format_value


logger = logging.getLogger(__name__)

_IDENTIFIER = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")
_OPENERS = {"(": ")", "[": "]", "{": "}"}
_QUOTES = ("'", '"')

# errors a failing statement may raise; anything else is a bug and propagates
_LINE_ERRORS = (ComputationError, ValueError, TypeError, ZeroDivisionError, OverflowError, FloatingPointError)


def _unmatched(opener: str) -> InvalidInput:
    if opener in "()":
        return InvalidInput("Unmatched parentheses")
    return InvalidInput(f"Unmatched '{opener}'")


def split_top_level(text: str, sep: str = ",") -> list[str]:
    """
    Split `text` on `sep` occurrences that are outside quotes and brackets.

    Returns the raw (untrimmed) pieces; an empty `text` gives one empty piece.
    """
    pieces: list[str] = []
    stack: list[str] = []
    quote: str | None = None
    start = 0
    for i, ch in enumerate(text):
        if quote:
            if ch == quote:
                quote = None
            continue
        if ch in _QUOTES:
            quote = ch
        elif ch in _OPENERS:
            stack.append(_OPENERS[ch])
        elif ch in _OPENERS.values():
            if not stack or stack.pop() != ch:
                raise _unmatched(ch)
        elif ch == sep and not stack:
            pieces.append(text[start:i])
            start = i + 1
    if quote:
        raise InvalidInput("Unterminated string literal")
    if stack:
        closer = stack[-1]
        raise _unmatched(next(o for o, c in _OPENERS.items() if c == closer))
    pieces.append(text[start:])
    return pieces


def strip_comment(line: str, marker: str = "//") -> str:
    """Drop everything from the first comment marker outside a string literal."""
    quote: str | None = None
    for i, ch in enumerate(line):
        if quote:
            if ch == quote:
                quote = None
        elif ch in _QUOTES:
            quote = ch
        elif line.startswith(marker, i):
            return line[:i].strip()
    return line.strip()


def find_matching_paren(expr: str, open_index: int) -> int:
    depth = 0
    quote: str | None = None
    for i in range(open_index, len(expr)):
        ch = expr[i]
        if quote:
            if ch == quote:
                quote = None
        elif ch in _QUOTES:
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i
    raise InvalidInput("Unmatched parentheses")


class Workspace:
    """
    Evaluator for one notebook session.

    Owns the variable environment; `execute()` runs one or more statements
    against it. Built-ins live in their own table and are shadowed, never
    replaced, by user variables of the same name.
    """

    def __init__(self, config: WorkspaceConfig | None = None, *, methods: MethodTable | None = None) -> None:
        self.config = config if config is not None else WorkspaceConfig()
        self._variables: dict[str, WorkspaceValue] = {}
        self._builtins: dict[str, Builtin] = {}
        self._methods = methods if methods is not None else default_methods()
        self._history: list[str] = []
        self._register_builtins()

    # ---- built-ins ----
    def _register_builtins(self) -> None:
        default_rate = self.config.default_sample_rate

        def sine(freq: float, duration: float, sample_rate: float = default_rate) -> Signal:
            return Signal.generate_sine(freq, duration, sample_rate).data

        def square(freq: float, duration: float, sample_rate: float = default_rate) -> Signal:
            return Signal.generate_square(freq, duration, sample_rate).data

        def chirp(options: dict[str, Any]) -> Signal:
            opts = ChirpOptions.from_mapping(options, default_sample_rate=default_rate)
            return Signal.generate_chirp(opts).data

        def matrix(grid: list[list[float]]) -> Matrix:
            return Matrix(grid)

        for builtin in (
            Builtin("sine", sine),
            Builtin("square", square),
            Builtin("chirp", chirp, ArgumentStyle.OPTIONS),
            Builtin("matrix", matrix, ArgumentStyle.GRID),
        ):
            self._builtins[builtin.name] = builtin

    # ---- public API ----
    def execute(self, code: str) -> str:
        """
        Run every statement in `code` and return their formatted results.

        The first failing line aborts the call with an EvaluationError; values
        assigned by earlier lines stay bound but no output is returned.
        """
        marker = self.config.comment_marker
        outputs: list[str] = []

        for number, raw in enumerate(code.split("\n"), start=1):
            line = raw.strip()
            if not line or line.startswith(marker):
                continue

            logger.debug("executing line %d: %s", number, line)
            try:
                result = self._execute_line(strip_comment(line, marker))
            except _LINE_ERRORS as e:
                logger.debug("line %d failed: %s", number, e)
                raise EvaluationError(
                    f'Execution error on line {number} "{line}": {e}', cause=e
                ) from e
            except MemoryError as e:
                failure = AllocationFailure(f"Out of memory: {e}", cause=e)
                raise EvaluationError(
                    f'Execution error on line {number} "{line}": {failure}', cause=failure
                ) from e

            if result:
                outputs.append(result)
                self._history.append(line)

        return "\n".join(outputs).rstrip()

    def evaluate(self, expr: str) -> WorkspaceValue:
        """Evaluate a single expression without binding it."""
        expr = expr.strip()
        if not expr:
            raise InvalidInput("Empty expression")

        if "(" in expr:
            return self._evaluate_call(expr)

        number = parse_number(expr)
        if number is not None:
            return number

        value = self._resolve(expr)
        if value is not None:
            return value

        raise InvalidInput(f"Cannot evaluate expression: '{expr}'")

    def get_value(self, name: str) -> WorkspaceValue | None:
        return self._resolve(name)

    def names(self) -> list[str]:
        """User-assigned variable names, in assignment order."""
        return list(self._variables)

    @property
    def history(self) -> list[str]:
        return list(self._history)

    def plot_series(self, name: str) -> tuple[np.ndarray, np.ndarray] | None:
        """(time, samples) for a Signal variable, or None if `name` is not plottable."""
        value = self.get_value(name)
        if isinstance(value, Signal):
            return value.to_numpy(copy=True)
        return None

    # ---- statements ----
    def _execute_line(self, line: str) -> str:
        if not line:
            return ""

        assignment = split_top_level(line, "=")
        if len(assignment) > 1:
            name = assignment[0].strip()
            expression = "=".join(assignment[1:]).strip()
            if not name or not expression:
                raise InvalidInput("Invalid assignment")
            if not _IDENTIFIER.fullmatch(name):
                raise InvalidInput(f"Invalid assignment target '{name}'")
            value = self.evaluate(expression)
            self._variables[name] = value
            return f"{name} = {self._format(value)}"

        return self._format(self.evaluate(line))

    def _format(self, value: WorkspaceValue) -> str:
        return format_value(value, preview=self.config.preview_samples)

    def _resolve(self, name: str) -> WorkspaceValue | None:
        if name in self._variables:
            return self._variables[name]
        return self._builtins.get(name)

    # ---- calls ----
    def _evaluate_call(self, expr: str) -> WorkspaceValue:
        open_index = expr.index("(")
        close_index = find_matching_paren(expr, open_index)
        trailing = expr[close_index + 1:].strip()
        if trailing:
            raise InvalidInput(f"Unexpected input after call: '{trailing}'")

        callee = expr[:open_index].strip()
        args_text = expr[open_index + 1:close_index].strip()
        if not callee:
            raise InvalidInput(f"Cannot evaluate expression: '{expr}'")

        if "." in callee:
            receiver_name, method_name = (part.strip() for part in callee.rsplit(".", 1))
            return self._call_method(receiver_name, method_name, args_text)

        func = self._resolve(callee)
        if not isinstance(func, Builtin):
            raise UndefinedName(f"Function '{callee}' is not defined")
        return self._call_builtin(func, args_text)

    def _call_method(self, receiver_name: str, method_name: str, args_text: str) -> WorkspaceValue:
        receiver = self._resolve(receiver_name)
        if receiver is None:
            raise UndefinedName(f"Variable '{receiver_name}' is not defined")
        method = self._methods.lookup(receiver, method_name)
        args = [self._method_argument(a) for a in self._split_arguments(args_text)]
        return method(receiver, args, self.config)

    def _call_builtin(self, func: Builtin, args_text: str) -> WorkspaceValue:
        if func.arguments is ArgumentStyle.GRID:
            args: list[Any] = [parse_grid(args_text)]
        elif func.arguments is ArgumentStyle.OPTIONS:
            if not args_text.startswith("{"):
                raise InvalidInput("Invalid options object format")
            args = [parse_options(args_text)]
        else:
            args = [self._positional_argument(a) for a in self._split_arguments(args_text)]

        try:
            inspect.signature(func.func).bind(*args)
        except TypeError as e:
            raise InvalidInput(f"{func.name}(): {e}") from e
        return func(*args)

    @staticmethod
    def _split_arguments(args_text: str) -> list[str]:
        if not args_text:
            return []
        pieces = [p.strip() for p in split_top_level(args_text, ",")]
        if any(not p for p in pieces):
            raise InvalidInput("Empty argument in call")
        return pieces

    def _positional_argument(self, text: str) -> WorkspaceValue:
        number = parse_number(text)
        if number is not None:
            return number
        return self.evaluate(text)

    def _method_argument(self, text: str) -> Any:
        if text[0] in "[{" or text[0] in _QUOTES:
            return parse_literal(text)
        return self._positional_argument(text)

# signalbook/lang/values.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Mapping, Union

from ..core.exceptions import InvalidInput, UndefinedName
from ..core.matrix import Matrix
from ..core.numbers import format_number, is_number
from ..core.signal import Signal


class ArgumentStyle(str, Enum):
    """How a built-in's raw argument text is parsed."""

    POSITIONAL = "positional"  # comma-split, number or nested expression
    GRID = "grid"  # one nested numeric array literal
    OPTIONS = "options"  # one flat object literal


@dataclass(frozen=True, slots=True)
class Builtin:
    """A pre-registered callable available without prior assignment."""

    name: str
    func: Callable[..., "WorkspaceValue"] = field(repr=False)
    arguments: ArgumentStyle = ArgumentStyle.POSITIONAL

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise InvalidInput("Builtin.name must be a non-empty string.")
        if not callable(self.func):
            raise InvalidInput(f"Builtin '{self.name}' must wrap a callable.")

    def __call__(self, *args: object) -> "WorkspaceValue":
        return self.func(*args)


@dataclass(frozen=True, slots=True)
class Modes:
    """Intrinsic mode functions produced by `decompose`."""

    signals: tuple[Signal, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "signals", tuple(self.signals))
        if not all(isinstance(s, Signal) for s in self.signals):
            raise InvalidInput("Modes must contain Signal instances only.")

    def __len__(self) -> int:
        return len(self.signals)

    def __getitem__(self, index: int) -> Signal:
        return self.signals[index]


@dataclass(frozen=True, slots=True)
class Metrics:
    """Named scalar statistics produced by `analyze`."""

    values: Mapping[str, float]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", dict(self.values))

    def __getitem__(self, name: str) -> float:
        try:
            return self.values[name]
        except KeyError as e:
            raise UndefinedName(f"Metric '{name}' was not computed") from e


WorkspaceValue = Union[float, Signal, Matrix, Builtin, Modes, Metrics]


class ValueKind(str, Enum):
    NUMBER = "number"
    SIGNAL = "Signal"
    MATRIX = "Matrix"
    FUNCTION = "function"
    MODES = "Modes"
    METRICS = "Metrics"


def kind_of(value: object) -> ValueKind:
    """Classify a workspace value; anything outside the union is a TypeError."""
    if isinstance(value, Signal):
        return ValueKind.SIGNAL
    if isinstance(value, Matrix):
        return ValueKind.MATRIX
    if isinstance(value, Builtin):
        return ValueKind.FUNCTION
    if isinstance(value, Modes):
        return ValueKind.MODES
    if isinstance(value, Metrics):
        return ValueKind.METRICS
    if is_number(value):
        return ValueKind.NUMBER
    raise TypeError(f"Not a workspace value: {type(value).__name__}")


def format_value(value: WorkspaceValue, *, preview: int = 5) -> str:
    """Render a workspace value as notebook output text."""
    kind = kind_of(value)
    if kind is ValueKind.SIGNAL:
        head = ", ".join(format_number(x) for x in value.samples[:preview])
        return f"Signal[{value.n} samples] = [{head}...]"
    if kind is ValueKind.MATRIX:
        return str(value)
    if kind is ValueKind.FUNCTION:
        return "[Function]"
    if kind is ValueKind.MODES:
        return f"Modes[{len(value)} modes]"
    if kind is ValueKind.METRICS:
        body = ", ".join(f"{k}: {format_number(v)}" for k, v in value.values.items())
        return "{" + body + "}"
    return format_number(value)

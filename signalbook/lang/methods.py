# signalbook/lang/methods.py
"""
Per-kind method dispatch for `receiver.method(args)` calls.

Each value kind owns an explicit table of DSL method name -> handler. Handlers
receive the receiver, the already-evaluated argument list and the workspace
configuration, and return a workspace value.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping, Sequence

import numpy as np

from ..config import WorkspaceConfig
from ..core.exceptions import InvalidInput, UndefinedName
from ..core.matrix import Matrix
from ..core.numbers import is_number
from ..core.signal import Signal
from .values import Metrics, Modes, ValueKind, WorkspaceValue, kind_of


Handler = Callable[[Any, Sequence[Any], WorkspaceConfig], WorkspaceValue]


@dataclass(frozen=True, slots=True)
class Method:
    name: str
    handler: Handler
    min_args: int = 0
    max_args: int = 0

    def __call__(self, receiver: Any, args: Sequence[Any], config: WorkspaceConfig) -> WorkspaceValue:
        if not (self.min_args <= len(args) <= self.max_args):
            expected = (
                str(self.min_args)
                if self.min_args == self.max_args
                else f"{self.min_args}-{self.max_args}"
            )
            raise InvalidInput(f"{self.name}() expects {expected} argument(s), got {len(args)}")
        return self.handler(receiver, args, config)


class MethodTable:
    """Method name -> Method, per value kind."""

    # kinds that can act as receivers
    RECEIVER_KINDS = frozenset({ValueKind.SIGNAL, ValueKind.MATRIX, ValueKind.MODES, ValueKind.METRICS})

    def __init__(self) -> None:
        self._tables: dict[ValueKind, dict[str, Method]] = {k: {} for k in self.RECEIVER_KINDS}

    def register(
        self,
        kind: ValueKind,
        name: str,
        handler: Handler,
        *,
        min_args: int = 0,
        max_args: int | None = None,
    ) -> None:
        if kind not in self.RECEIVER_KINDS:
            raise InvalidInput(f"Values of kind '{kind.value}' cannot have methods.")
        if not isinstance(name, str) or not name.isidentifier():
            raise InvalidInput(f"Invalid method name {name!r}.")
        if not callable(handler):
            raise InvalidInput(f"Handler for {kind.value}.{name} must be callable.")
        table = self._tables[kind]
        if name in table:
            raise InvalidInput(f"Method '{name}' is already registered for {kind.value}.")
        max_args = min_args if max_args is None else max_args
        if max_args < min_args:
            raise InvalidInput(f"{kind.value}.{name}: max_args < min_args.")
        table[name] = Method(name=name, handler=handler, min_args=min_args, max_args=max_args)

    def names(self, kind: ValueKind) -> list[str]:
        return sorted(self._tables.get(kind, {}))

    def lookup(self, receiver: WorkspaceValue, name: str) -> Method:
        kind = kind_of(receiver)
        method = self._tables.get(kind, {}).get(name)
        if method is None:
            raise UndefinedName(f"Method '{name}' not found on {kind.value}")
        return method


# ---- argument helpers ----
def _number(method: str, value: Any) -> float:
    if not is_number(value):
        raise InvalidInput(f"{method}() expects a number, got {_describe(value)}")
    return float(value)


def _index(method: str, value: Any) -> int:
    x = _number(method, value)
    if not x.is_integer():
        raise InvalidInput(f"{method}() expects an integer index, got {x}")
    return int(x)


def _describe(value: Any) -> str:
    try:
        return kind_of(value).value
    except TypeError:
        return type(value).__name__


def _options(method: str, args: Sequence[Any], keys: Mapping[str, str]) -> dict[str, Any]:
    """Translate a DSL option bag (camelCase keys) into keyword arguments."""
    if not args:
        return {}
    bag = args[0]
    if not isinstance(bag, dict):
        raise InvalidInput(f"{method}() expects an options object, got {_describe(bag)}")
    kwargs: dict[str, Any] = {}
    for key, value in bag.items():
        if key not in keys:
            raise InvalidInput(
                f"Unknown option '{key}' for {method}(), expected one of: {', '.join(keys)}"
            )
        kwargs[keys[key]] = value
    return kwargs


def _as_int(method: str, option: str, value: Any) -> int:
    if not is_number(value) or not float(value).is_integer():
        raise InvalidInput(f"{method}(): option '{option}' must be an integer, got {value!r}")
    return int(value)


# ---- Signal ----
def _signal_fft(sig: Signal, args: Sequence[Any], config: WorkspaceConfig) -> Matrix:
    spectrum = sig.fft().data
    return Matrix(np.vstack([spectrum.real, spectrum.imag]))


def _signal_spectrum(sig: Signal, args: Sequence[Any], config: WorkspaceConfig) -> Signal:
    magnitudes = sig.get_spectrum().data
    return Signal(samples=magnitudes, sample_rate=sig.sample_rate, attrs={"spectrum_of": sig.attrs.copy()})


def _signal_window(sig: Signal, args: Sequence[Any], config: WorkspaceConfig) -> Signal:
    if args and isinstance(args[0], str):
        return sig.apply_window(args[0]).data
    kwargs = _options("applyWindow", args, {"type": "window_type", "length": "length"})
    if "window_type" not in kwargs:
        raise InvalidInput("applyWindow() requires a window 'type'")
    if "length" in kwargs:
        kwargs["length"] = _as_int("applyWindow", "length", kwargs["length"])
    return sig.apply_window(**kwargs).data


def _signal_wavelet(sig: Signal, args: Sequence[Any], config: WorkspaceConfig) -> Matrix:
    kwargs = _options("waveletTransform", args, {"wavelet": "wavelet", "scales": "scales"})
    if "scales" in kwargs:
        kwargs["scales"] = _as_int("waveletTransform", "scales", kwargs["scales"])
    return sig.wavelet_transform(**kwargs).data


def _signal_decompose(sig: Signal, args: Sequence[Any], config: WorkspaceConfig) -> Modes:
    kwargs = _options("decompose", args, {"method": "method", "numModes": "num_modes"})
    if "num_modes" in kwargs:
        kwargs["num_modes"] = _as_int("decompose", "numModes", kwargs["num_modes"])
    return Modes(tuple(sig.decompose(max_sifts=config.max_sifts, **kwargs).data))


def _signal_analyze(sig: Signal, args: Sequence[Any], config: WorkspaceConfig) -> Metrics:
    kwargs = _options("analyze", args, {"metrics": "metrics", "windowSize": "window_size"})
    metrics = kwargs.get("metrics")
    if metrics is None:
        raise InvalidInput("analyze() requires a 'metrics' list")
    if isinstance(metrics, str):
        metrics = [metrics]
    if not isinstance(metrics, list) or not all(isinstance(m, str) for m in metrics):
        raise InvalidInput("analyze(): 'metrics' must be a list of metric names")
    window_size = kwargs.get("window_size")
    if window_size is not None:
        window_size = _as_int("analyze", "windowSize", window_size)
    return Metrics(sig.analyze(metrics, window_size).data)


def _signal_multiply(sig: Signal, args: Sequence[Any], config: WorkspaceConfig) -> Signal:
    return sig.multiply(_number("multiply", args[0])).data


def _signal_add(sig: Signal, args: Sequence[Any], config: WorkspaceConfig) -> Signal:
    other = args[0]
    if not isinstance(other, Signal):
        raise InvalidInput(f"add() expects a Signal, got {_describe(other)}")
    return sig.add(other).data


# ---- Matrix ----
def _matrix_add(m: Matrix, args: Sequence[Any], config: WorkspaceConfig) -> Matrix:
    other = args[0]
    if not isinstance(other, Matrix):
        raise InvalidInput(f"add() expects a Matrix, got {_describe(other)}")
    return m.add(other).data


def _matrix_multiply(m: Matrix, args: Sequence[Any], config: WorkspaceConfig) -> Matrix:
    other = args[0]
    if not (is_number(other) or isinstance(other, Matrix)):
        raise InvalidInput(f"multiply() expects a number or a Matrix, got {_describe(other)}")
    return m.multiply(other).data


def _matrix_transpose(m: Matrix, args: Sequence[Any], config: WorkspaceConfig) -> Matrix:
    return m.transpose().data


def _matrix_get(m: Matrix, args: Sequence[Any], config: WorkspaceConfig) -> float:
    return m.get(_index("get", args[0]), _index("get", args[1]))


def _matrix_set(m: Matrix, args: Sequence[Any], config: WorkspaceConfig) -> Matrix:
    return m.set(_index("set", args[0]), _index("set", args[1]), _number("set", args[2]))


# ---- Modes / Metrics ----
def _modes_get(modes: Modes, args: Sequence[Any], config: WorkspaceConfig) -> Signal:
    i = _index("get", args[0])
    if not 0 <= i < len(modes):
        raise InvalidInput(f"Mode index {i} out of range for {len(modes)} modes")
    return modes[i]


def _modes_count(modes: Modes, args: Sequence[Any], config: WorkspaceConfig) -> float:
    return float(len(modes))


def _metrics_get(metrics: Metrics, args: Sequence[Any], config: WorkspaceConfig) -> float:
    name = args[0]
    if not isinstance(name, str):
        raise InvalidInput(f"get() expects a metric name, got {_describe(name)}")
    return metrics[name]


def default_methods() -> MethodTable:
    """The method table every Workspace starts with."""
    table = MethodTable()

    table.register(ValueKind.SIGNAL, "fft", _signal_fft)
    table.register(ValueKind.SIGNAL, "getSpectrum", _signal_spectrum)
    table.register(ValueKind.SIGNAL, "applyWindow", _signal_window, min_args=1)
    table.register(ValueKind.SIGNAL, "waveletTransform", _signal_wavelet, max_args=1)
    table.register(ValueKind.SIGNAL, "decompose", _signal_decompose, max_args=1)
    table.register(ValueKind.SIGNAL, "analyze", _signal_analyze, min_args=1)
    table.register(ValueKind.SIGNAL, "multiply", _signal_multiply, min_args=1)
    table.register(ValueKind.SIGNAL, "add", _signal_add, min_args=1)

    table.register(ValueKind.MATRIX, "add", _matrix_add, min_args=1)
    table.register(ValueKind.MATRIX, "multiply", _matrix_multiply, min_args=1)
    table.register(ValueKind.MATRIX, "transpose", _matrix_transpose)
    table.register(ValueKind.MATRIX, "get", _matrix_get, min_args=2)
    table.register(ValueKind.MATRIX, "set", _matrix_set, min_args=3)

    table.register(ValueKind.MODES, "get", _modes_get, min_args=1)
    table.register(ValueKind.MODES, "count", _modes_count)

    table.register(ValueKind.METRICS, "get", _metrics_get, min_args=1)
    return table

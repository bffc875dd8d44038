# core/matrix.py
from __future__ import annotations

import time
from typing import Sequence

import numpy as np

from .exceptions import AlgorithmFailure, AllocationFailure, InvalidInput
from .numbers import format_number, is_number
from .result import ComputationResult


class Matrix:
    """
    Rectangular float64 grid (rows x cols >= 1x1).

    Operations return new matrices; `set()` is the only in-place edit.
    """

    __slots__ = ("_data",)

    def __init__(self, data: Sequence[Sequence[float]] | np.ndarray) -> None:
        self._data = self._validate(data)

    @staticmethod
    def _validate(data: Sequence[Sequence[float]] | np.ndarray) -> np.ndarray:
        if isinstance(data, np.ndarray):
            if data.ndim != 2:
                raise InvalidInput(f"Invalid matrix data: expected 2D array, got shape {data.shape}")
            rows = data
        else:
            if not isinstance(data, Sequence) or isinstance(data, str) or not data:
                raise InvalidInput("Invalid matrix data: expected a non-empty 2D array")
            if not all(isinstance(row, (Sequence, np.ndarray)) and not isinstance(row, str) for row in data):
                raise InvalidInput("Invalid matrix data: expected 2D array")
            width = len(data[0])
            if any(len(row) != width for row in data):
                raise InvalidInput("Invalid matrix data: rows must have equal length")
            rows = data

        try:
            arr = np.array(rows, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidInput("Invalid matrix data: entries must be numbers", cause=e) from e

        if arr.ndim != 2 or arr.shape[0] < 1 or arr.shape[1] < 1:
            raise InvalidInput(f"Invalid matrix data: expected at least 1x1, got shape {arr.shape}")
        if not np.isfinite(arr).all():
            raise InvalidInput("Invalid matrix data: contains non-finite values (NaN/Inf).")
        return arr

    @classmethod
    def from_array(cls, data: Sequence[Sequence[float]]) -> "Matrix":
        return cls(data)

    # ---- accessors ----
    @property
    def shape(self) -> tuple[int, int]:
        return int(self._data.shape[0]), int(self._data.shape[1])

    @property
    def rows(self) -> int:
        return self.shape[0]

    @property
    def cols(self) -> int:
        return self.shape[1]

    def to_array(self) -> list[list[float]]:
        return self._data.tolist()

    def to_numpy(self, *, copy: bool = True) -> np.ndarray:
        return self._data.copy() if copy else self._data

    def _check_index(self, row: int, col: int) -> tuple[int, int]:
        r, c = int(row), int(col)
        if r != row or c != col:
            raise InvalidInput(f"Matrix indices must be integers, got ({row}, {col})")
        if not (0 <= r < self.rows and 0 <= c < self.cols):
            raise InvalidInput(
                f"Matrix index ({r}, {c}) out of range for shape {self.rows}x{self.cols}"
            )
        return r, c

    def get(self, row: int, col: int) -> float:
        r, c = self._check_index(row, col)
        return float(self._data[r, c])

    def set(self, row: int, col: int, value: float) -> "Matrix":
        """Overwrite one entry in place and return self."""
        r, c = self._check_index(row, col)
        if not is_number(value) or not np.isfinite(value):
            raise InvalidInput("Matrix entries must be finite numbers.")
        self._data[r, c] = float(value)
        return self

    # ---- algebra ----
    @staticmethod
    def _finite(result: np.ndarray, operation: str) -> "Matrix":
        if not np.isfinite(result).all():
            raise AlgorithmFailure(f"Matrix {operation} overflowed: result contains non-finite values")
        return Matrix(result)

    def add(self, other: "Matrix") -> ComputationResult["Matrix"]:
        started = time.perf_counter()
        if not isinstance(other, Matrix):
            raise InvalidInput("add() expects a Matrix instance.")
        if self.shape != other.shape:
            raise InvalidInput(
                "Invalid matrix dimensions for addition: "
                f"expected {self.rows}x{self.cols}, got {other.rows}x{other.cols}"
            )
        with np.errstate(over="ignore", invalid="ignore"):
            total = self._data + other._data
        out = self._finite(total, "addition")
        return ComputationResult.timed(started, out, out._data.nbytes)

    def multiply(self, other: "Matrix | float") -> ComputationResult["Matrix"]:
        """Scalar broadcast, or the standard matrix product."""
        started = time.perf_counter()
        if is_number(other):
            if not np.isfinite(other):
                raise InvalidInput(f"Scale factor must be finite, got {other!r}")
            with np.errstate(over="ignore", invalid="ignore"):
                scaled = self._data * float(other)
            out = self._finite(scaled, "scaling")
            return ComputationResult.timed(started, out, out._data.nbytes)

        if not isinstance(other, Matrix):
            raise InvalidInput("multiply() expects a number or a Matrix instance.")
        if self.cols != other.rows:
            raise InvalidInput(
                "Invalid matrix dimensions for multiplication: "
                f"left is {self.rows}x{self.cols}, right is {other.rows}x{other.cols} "
                f"(expected right to have {self.cols} rows)"
            )
        try:
            with np.errstate(over="ignore", invalid="ignore"):
                product = self._data @ other._data
        except MemoryError as e:
            raise AllocationFailure("Matrix multiplication failed: out of memory", cause=e) from e
        out = self._finite(product, "multiplication")
        return ComputationResult.timed(started, out, out._data.nbytes)

    def transpose(self) -> ComputationResult["Matrix"]:
        started = time.perf_counter()
        out = Matrix(self._data.T.copy())
        return ComputationResult.timed(started, out, out._data.nbytes)

    # ---- dunder ----
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Matrix):
            return NotImplemented
        return self.shape == other.shape and bool(np.array_equal(self._data, other._data))

    __hash__ = None  # mutable via set()

    def __repr__(self) -> str:
        return f"Matrix(shape={self.rows}x{self.cols})"

    def __str__(self) -> str:
        lines = [f"Matrix[{self.rows}x{self.cols}]"]
        lines.extend("\t".join(format_number(x) for x in row) for row in self._data)
        return "\n".join(lines)

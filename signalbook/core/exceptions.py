# signalbook/core/exceptions.py
from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    COMPUTATION = "computation"
    RUNTIME = "runtime"
    MEMORY = "memory"


class ComputationError(Exception):
    """
    Base error for everything raised by signalbook.

    Carries a classification (`kind`) and, optionally, the lower-level error
    that caused it (`cause`).
    """

    default_kind: ErrorKind = ErrorKind.COMPUTATION

    def __init__(
        self,
        message: str,
        *,
        kind: ErrorKind | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.kind = kind if kind is not None else self.default_kind
        self.cause = cause

    def __str__(self) -> str:
        # KeyError subclasses would otherwise quote the message
        return self.message


# ---- Validation errors ----
class InvalidInput(ComputationError, ValueError):
    """Raised when inputs are malformed (shape, dimensions, syntax, options)."""

    default_kind = ErrorKind.VALIDATION


class UndefinedName(ComputationError, KeyError):
    """Raised when a variable, function or method name cannot be resolved."""

    default_kind = ErrorKind.VALIDATION


# ---- Algorithm / evaluator errors ----
class AlgorithmFailure(ComputationError):
    """Raised when a numeric algorithm cannot produce a well-defined result."""

    default_kind = ErrorKind.COMPUTATION


class EvaluationError(ComputationError):
    """Raised by the Workspace when a statement fails."""

    default_kind = ErrorKind.RUNTIME


class AllocationFailure(ComputationError, MemoryError):
    """Raised when buffers for a computation cannot be allocated."""

    default_kind = ErrorKind.MEMORY

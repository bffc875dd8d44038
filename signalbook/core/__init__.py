"""
Core numeric value types for signalbook.

This module defines the evaluator-agnostic data model:
- Signal: validated 1D sampled waveform + sample rate
- Matrix: rectangular float64 grid
- ComputationResult / ResultMetadata: payload + timing/size envelope
- ComputationError and its classified subclasses

The core layer is independent from the DSL evaluator.
"""

from .exceptions import (
    ErrorKind,
    ComputationError,
    InvalidInput,
    UndefinedName,
    AlgorithmFailure,
    EvaluationError,
    AllocationFailure,
)
from .metadata import ResultMetadata
from .result import ComputationResult
from .matrix import Matrix
from .signal import Signal, ChirpOptions


__all__ = [
    # value types
    "Signal",
    "ChirpOptions",
    "Matrix",

    # result envelope
    "ComputationResult",
    "ResultMetadata",

    # exceptions
    "ErrorKind",
    "ComputationError",
    "InvalidInput",
    "UndefinedName",
    "AlgorithmFailure",
    "EvaluationError",
    "AllocationFailure",
]

# signalbook/core/metadata.py
from __future__ import annotations

from dataclasses import dataclass

from .exceptions import InvalidInput


FLOAT64_PRECISION = 64


@dataclass(frozen=True, slots=True)
class ResultMetadata:
    """
    Metadata attached to a ComputationResult.

    Informational only, never used for control flow:
    - computation_time: wall-clock seconds spent producing the payload
    - memory_used: approximate payload footprint in bytes
    - precision: numeric precision in bits (always float64)
    - success / error: outcome flag and optional error text
    """
    computation_time: float = 0.0
    memory_used: int = 0
    precision: int = FLOAT64_PRECISION
    success: bool = True
    error: str | None = None

    def __post_init__(self) -> None:
        if self.computation_time < 0:
            raise InvalidInput("ResultMetadata.computation_time must be >= 0.")
        if self.memory_used < 0:
            raise InvalidInput("ResultMetadata.memory_used must be >= 0.")
        if self.precision != FLOAT64_PRECISION:
            raise InvalidInput(f"ResultMetadata.precision is fixed at {FLOAT64_PRECISION}.")

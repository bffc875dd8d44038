# signalbook/core/result.py
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Generic, TypeVar

from .metadata import ResultMetadata


T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ComputationResult(Generic[T]):
    """Payload of a numeric operation plus timing/size metadata."""

    data: T
    metadata: ResultMetadata = field(default_factory=ResultMetadata)

    @classmethod
    def timed(cls, started: float, data: T, memory_used: int) -> "ComputationResult[T]":
        """Build a successful result; `started` is a `time.perf_counter()` reading."""
        elapsed = max(0.0, time.perf_counter() - started)
        return cls(
            data=data,
            metadata=ResultMetadata(computation_time=elapsed, memory_used=int(memory_used)),
        )

    @property
    def success(self) -> bool:
        return self.metadata.success

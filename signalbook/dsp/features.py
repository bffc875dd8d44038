"""Scalar statistics over a whole signal."""

from __future__ import annotations

from typing import Callable

import numpy as np

from ..core.exceptions import AlgorithmFailure, InvalidInput


def _to_1d_array(signal: np.ndarray) -> np.ndarray:
    """Convert input to a non-empty 1-D float64 numpy array."""
    arr = np.asarray(signal, dtype=float)
    if arr.size == 0:
        raise InvalidInput("signal must contain at least one sample")
    if arr.ndim != 1:
        raise InvalidInput(f"signal must be 1-D, got shape {arr.shape}")
    return arr


def rms(signal: np.ndarray) -> float:
    arr = _to_1d_array(signal)
    return float(np.sqrt(np.mean(np.square(arr))))


def peak(signal: np.ndarray) -> float:
    arr = _to_1d_array(signal)
    return float(np.max(np.abs(arr)))


def crest_factor(signal: np.ndarray) -> float:
    """Peak absolute amplitude divided by RMS."""
    r = rms(signal)
    if r == 0.0:
        raise AlgorithmFailure("crest factor is undefined for a zero-RMS signal")
    return peak(signal) / r


def kurtosis(signal: np.ndarray) -> float:
    """Fourth central moment normalised by the squared (population) variance."""
    arr = _to_1d_array(signal)
    centered = arr - np.mean(arr)
    variance = float(np.mean(centered ** 2))
    if variance == 0.0:
        raise AlgorithmFailure("kurtosis is undefined for a constant signal")
    return float(np.mean(centered ** 4)) / variance ** 2


METRICS: dict[str, Callable[[np.ndarray], float]] = {
    "rms": rms,
    "peak": peak,
    "crest": crest_factor,
    "kurtosis": kurtosis,
}

"""Empirical mode decomposition by iterative sifting."""

from __future__ import annotations

import logging

import numpy as np

from ..core.exceptions import AlgorithmFailure, AllocationFailure, InvalidInput


logger = logging.getLogger(__name__)

SIFT_THRESHOLD = 0.05


def local_extrema(data: np.ndarray, kind: str) -> np.ndarray:
    """Indices of strict interior maxima (`kind="max"`) or minima (`kind="min"`)."""
    if data.size < 3:
        return np.zeros(0, dtype=int)
    mid = data[1:-1]
    if kind == "max":
        mask = (mid > data[:-2]) & (mid > data[2:])
    elif kind == "min":
        mask = (mid < data[:-2]) & (mid < data[2:])
    else:
        raise ValueError("kind must be one of: max, min")
    return np.flatnonzero(mask) + 1


def envelope(data: np.ndarray, kind: str) -> np.ndarray:
    """
    Envelope through the local extrema of `data`.

    Each position is the inverse-squared-distance weighted mean of the extrema
    values; positions that coincide with an extremum take its value exactly.
    Weights are accumulated one extremum at a time so memory stays O(N).
    """
    idx = local_extrema(data, kind)
    if idx.size < 2:
        raise AlgorithmFailure(
            f"EMD needs at least 2 local {kind}ima to build an envelope, found {idx.size}"
        )

    positions = np.arange(data.size, dtype=float)
    numerator = np.zeros(data.size)
    denominator = np.zeros(data.size)
    weights = np.empty(data.size)
    for i in idx:
        np.subtract(positions, float(i), out=weights)
        np.square(weights, out=weights)
        weights[i] = 1.0
        np.reciprocal(weights, out=weights)
        weights[i] = 0.0
        numerator += weights * data[i]
        denominator += weights

    env = numerator / denominator
    env[idx] = data[idx]
    return env


def sift(data: np.ndarray, *, max_sifts: int = 100) -> np.ndarray:
    """Extract one intrinsic mode function from `data`."""
    imf = np.asarray(data, dtype=float)
    for _ in range(max_sifts):
        previous = imf
        mean_env = (envelope(imf, "max") + envelope(imf, "min")) / 2.0
        imf = imf - mean_env
        if float(np.linalg.norm(imf - previous)) < SIFT_THRESHOLD:
            return imf

    logger.warning(
        "EMD sifting did not reach threshold %.3g after %d iterations; keeping last iterate",
        SIFT_THRESHOLD,
        max_sifts,
    )
    return imf


def emd(data: np.ndarray, num_modes: int, *, max_sifts: int = 100) -> list[np.ndarray]:
    """
    Decompose `data` into `num_modes` intrinsic mode functions.

    The residual left after removing each mode is the input for the next one.
    """
    if num_modes < 1:
        raise InvalidInput(f"num_modes must be >= 1, got {num_modes}")
    if max_sifts < 1:
        raise InvalidInput(f"max_sifts must be >= 1, got {max_sifts}")

    residual = np.asarray(data, dtype=float)
    modes: list[np.ndarray] = []
    for k in range(num_modes):
        try:
            imf = sift(residual, max_sifts=max_sifts)
        except AlgorithmFailure as e:
            raise AlgorithmFailure(f"EMD failed on mode {k + 1}: {e}", cause=e) from e
        except MemoryError as e:
            raise AllocationFailure(f"EMD ran out of memory on mode {k + 1}", cause=e) from e
        modes.append(imf)
        residual = residual - imf
    return modes

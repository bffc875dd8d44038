"""Window coefficient curves."""

from __future__ import annotations

import numpy as np

from ..core.exceptions import InvalidInput


def _cosine_window(n: int, a0: float, a1: float, a2: float = 0.0) -> np.ndarray:
    if n == 1:
        # N - 1 == 0: the single sample passes through unchanged
        return np.ones(1)
    phase = 2.0 * np.pi * np.arange(n) / (n - 1)
    return a0 - a1 * np.cos(phase) + a2 * np.cos(2.0 * phase)


def hamming(n: int) -> np.ndarray:
    return _cosine_window(n, 0.54, 0.46)


def hanning(n: int) -> np.ndarray:
    return _cosine_window(n, 0.5, 0.5)


def blackman(n: int) -> np.ndarray:
    return _cosine_window(n, 0.42, 0.5, 0.08)


def rectangular(n: int) -> np.ndarray:
    return np.ones(n)


WINDOWS = {
    "hamming": hamming,
    "hanning": hanning,
    "blackman": blackman,
    "rectangular": rectangular,
}


def window_coefficients(window_type: str, n: int) -> np.ndarray:
    """Return `n` coefficients of the named window."""
    try:
        fn = WINDOWS[window_type]
    except KeyError as e:
        raise InvalidInput(
            f"Unknown window type '{window_type}', expected one of: {', '.join(WINDOWS)}"
        ) from e
    if n < 0:
        raise InvalidInput(f"Window length must be >= 0, got {n}")
    if n == 0:
        return np.zeros(0)
    return fn(n)

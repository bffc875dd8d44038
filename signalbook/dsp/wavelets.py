"""Continuous wavelet kernels and a boundary-clamped correlation."""

from __future__ import annotations

import math

import numpy as np

from ..core.exceptions import InvalidInput


MORLET_CENTER = 5.0
KERNEL_WIDTH_FACTOR = 10


def morlet(width: int, scale: float) -> np.ndarray:
    t = (np.arange(width) - width / 2) / scale
    return np.exp(-t * t / 2.0) * np.cos(MORLET_CENTER * t)


def mexican_hat(width: int, scale: float) -> np.ndarray:
    t = (np.arange(width) - width / 2) / scale
    t2 = t * t
    return (1.0 - t2) * np.exp(-t2 / 2.0)


WAVELETS = {
    "morlet": morlet,
    "mexican": mexican_hat,
    "ricker": mexican_hat,
}


def dyadic_scales(levels: int) -> np.ndarray:
    return 2.0 ** np.arange(levels)


def wavelet_kernel(wavelet: str, scale: float) -> np.ndarray:
    """Kernel for `wavelet` sampled over `ceil(10 * scale)` points."""
    try:
        fn = WAVELETS[wavelet]
    except KeyError as e:
        raise InvalidInput(
            f"Unknown wavelet '{wavelet}', expected one of: {', '.join(WAVELETS)}"
        ) from e
    width = max(1, math.ceil(scale * KERNEL_WIDTH_FACTOR))
    return fn(width, scale)


def clamped_correlate(data: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """
    Correlate `kernel` (centred at `len(kernel) // 2`) against `data`.

    At each position t the window is symmetric with half-width
    min(t, N - 1 - t, kernel half-width), so nothing is read past either end
    of the signal.
    """
    n = data.size
    out = np.zeros(n)
    if n == 0:
        return out

    center = kernel.size // 2
    reach = min(center, kernel.size - 1 - center)

    # interior: full window
    if n > 2 * reach:
        taps = kernel[center - reach:center + reach + 1]
        out[reach:n - reach] = np.correlate(data, taps, mode="valid")

    # edges: window shrinks towards the boundary
    for t in list(range(min(reach, n))) + list(range(max(reach, n - reach), n)):
        h = min(t, n - 1 - t, reach)
        out[t] = float(np.dot(data[t - h:t + h + 1], kernel[center - h:center + h + 1]))
    return out

"""Radix-2 FFT helpers."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike

from ..core.exceptions import InvalidInput


def is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0


def _fft_recursive(x: np.ndarray) -> np.ndarray:
    n = x.size
    if n <= 1:
        return x.astype(np.complex128)

    even = _fft_recursive(x[0::2])
    odd = _fft_recursive(x[1::2])
    twiddled = np.exp(-2j * np.pi * np.arange(n // 2) / n) * odd
    return np.concatenate([even + twiddled, even - twiddled])


def radix2_fft(signal: ArrayLike) -> np.ndarray:
    """
    Recursive Cooley-Tukey transform of a real or complex 1-D signal.

    Parameters
    ----------
    signal:
        1-D array-like whose length is a power of two.

    Returns
    -------
    np.ndarray
        Complex spectrum with the same length as the input.
    """
    arr = np.asarray(signal)
    if arr.ndim != 1:
        raise InvalidInput(f"FFT input must be 1-D, got shape {arr.shape}")
    if not is_power_of_two(arr.size):
        raise InvalidInput(
            f"FFT length must be a power of two, got {arr.size} samples"
        )
    return _fft_recursive(arr)


def magnitude_spectrum(signal: ArrayLike) -> np.ndarray:
    """Per-bin Euclidean norm of the radix-2 FFT."""
    return np.abs(radix2_fft(signal))

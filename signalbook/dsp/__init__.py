"""
Numeric kernels behind Signal operations.

Plain numpy functions, independent from the Signal type:
- fft: recursive radix-2 transform and magnitude spectrum
- windows: Hamming/Hanning/Blackman/rectangular coefficient curves
- wavelets: Morlet / Mexican-hat kernels and boundary-clamped correlation
- emd: envelope estimation and sifting
- features: RMS, peak, crest factor, kurtosis
"""

from .fft import radix2_fft, magnitude_spectrum, is_power_of_two
from .windows import window_coefficients, WINDOWS
from .wavelets import wavelet_kernel, clamped_correlate, dyadic_scales, WAVELETS
from .emd import emd, envelope, local_extrema, SIFT_THRESHOLD
from .features import METRICS


__all__ = [
    "radix2_fft",
    "magnitude_spectrum",
    "is_power_of_two",
    "window_coefficients",
    "WINDOWS",
    "wavelet_kernel",
    "clamped_correlate",
    "dyadic_scales",
    "WAVELETS",
    "emd",
    "envelope",
    "local_extrema",
    "SIFT_THRESHOLD",
    "METRICS",
]

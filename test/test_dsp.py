# test/test_dsp.py
import importlib

import numpy as np
import pytest

from signalbook.core import AlgorithmFailure, AllocationFailure, ErrorKind, InvalidInput
from signalbook.dsp import (
    radix2_fft,
    is_power_of_two,
    window_coefficients,
    wavelet_kernel,
    clamped_correlate,
    dyadic_scales,
    local_extrema,
    envelope,
    emd,
)
from signalbook.dsp.features import rms, peak, crest_factor, kurtosis


def test_is_power_of_two():
    assert [n for n in range(0, 17) if is_power_of_two(n)] == [1, 2, 4, 8, 16]


def test_radix2_fft_complex_input_matches_numpy():
    rng = np.random.default_rng(1)
    x = rng.normal(size=8) + 1j * rng.normal(size=8)
    assert np.allclose(radix2_fft(x), np.fft.fft(x))


def test_radix2_fft_rejects_empty_and_2d():
    with pytest.raises(InvalidInput):
        radix2_fft([])
    with pytest.raises(InvalidInput):
        radix2_fft(np.zeros((2, 2)))


def test_window_coefficients_single_sample_and_empty():
    for name in ("hamming", "hanning", "blackman", "rectangular"):
        assert np.allclose(window_coefficients(name, 1), [1.0])
        assert window_coefficients(name, 0).size == 0


def test_blackman_endpoints_are_zero():
    w = window_coefficients("blackman", 9)
    assert w[0] == pytest.approx(0.0, abs=1e-12)
    assert w[4] == pytest.approx(1.0)


def test_dyadic_scales():
    assert np.allclose(dyadic_scales(4), [1.0, 2.0, 4.0, 8.0])


def test_wavelet_kernel_width_scales_with_scale():
    assert wavelet_kernel("morlet", 1.0).size == 10
    assert wavelet_kernel("ricker", 4.0).size == 40


def test_clamped_correlate_uses_shrinking_window_at_edges():
    kernel = np.array([1.0, 10.0, 100.0])  # centre index 1, reach 1
    data = np.array([1.0, 2.0, 3.0, 4.0])
    out = clamped_correlate(data, kernel)

    # edges only see the centre tap
    assert out[0] == pytest.approx(10.0)
    assert out[3] == pytest.approx(40.0)
    # interior: data[t-1]*1 + data[t]*10 + data[t+1]*100
    assert out[1] == pytest.approx(1.0 + 20.0 + 300.0)
    assert out[2] == pytest.approx(2.0 + 30.0 + 400.0)


def test_clamped_correlate_short_signal():
    out = clamped_correlate(np.array([2.0, 3.0]), np.ones(10))
    assert np.allclose(out, [2.0, 3.0])


def test_local_extrema():
    x = np.array([0.0, 2.0, 0.0, -1.0, 0.0, 3.0, 1.0])
    assert list(local_extrema(x, "max")) == [1, 5]
    assert list(local_extrema(x, "min")) == [3]


def test_envelope_passes_through_extrema():
    x = np.array([0.0, 2.0, 0.0, -1.0, 0.0, 3.0, 1.0])
    env = envelope(x, "max")
    assert env[1] == pytest.approx(2.0)
    assert env[5] == pytest.approx(3.0)
    assert 2.0 < env[3] < 3.0


def test_envelope_is_inverse_squared_distance_mean():
    x = np.array([0.0, 2.0, 0.0, -1.0, 0.0, 3.0, 1.0, 0.0, 1.5, 0.0])
    idx = local_extrema(x, "max")
    expected = []
    for pos in range(x.size):
        if pos in idx:
            expected.append(x[pos])
            continue
        w = 1.0 / (pos - idx) ** 2.0
        expected.append(np.sum(w * x[idx]) / np.sum(w))

    assert list(idx) == [1, 5, 8]
    assert np.allclose(envelope(x, "max"), expected)


def test_envelope_needs_two_extrema():
    x = np.array([0.0, 2.0, 0.0, -1.0, 0.0, 3.0, 1.0])
    with pytest.raises(AlgorithmFailure):
        envelope(x, "min")


def test_emd_validates_mode_count():
    with pytest.raises(InvalidInput):
        emd(np.sin(np.linspace(0, 20, 100)), 0)


def test_features():
    x = np.array([1.0, -1.0, 1.0, -1.0])
    assert rms(x) == pytest.approx(1.0)
    assert peak(x) == pytest.approx(1.0)
    assert crest_factor(x) == pytest.approx(1.0)
    assert kurtosis(x) == pytest.approx(1.0)
    with pytest.raises(AlgorithmFailure):
        kurtosis(np.ones(3))


def test_emd_reports_out_of_memory_as_allocation_failure(monkeypatch):
    emd_module = importlib.import_module("signalbook.dsp.emd")

    def exhausted(data, kind):
        raise MemoryError("Unable to allocate envelope")

    monkeypatch.setattr(emd_module, "envelope", exhausted)

    with pytest.raises(AllocationFailure) as exc:
        emd(np.sin(np.linspace(0, 20, 100)), 1)
    assert exc.value.kind is ErrorKind.MEMORY
    assert isinstance(exc.value.cause, MemoryError)

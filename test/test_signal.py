# test/test_signal.py
import logging

import numpy as np
import pytest

from signalbook.core import (
    Signal,
    ChirpOptions,
    Matrix,
    ErrorKind,
    InvalidInput,
    AlgorithmFailure,
)
from signalbook.dsp.emd import sift


def test_init_ok_basic():
    sig = Signal(samples=[1.0, 2.0, 3.0, 4.0], sample_rate=2.0)

    assert sig.n == 4
    assert sig.sample_rate == 2.0
    assert sig.duration == 2.0
    assert np.allclose(sig.data, [1.0, 2.0, 3.0, 4.0])


def test_init_rejects_nan():
    with pytest.raises(InvalidInput) as exc:
        Signal(samples=[0.0, np.nan, 1.0])
    assert exc.value.kind is ErrorKind.VALIDATION


def test_init_rejects_non_numeric_and_non_1d():
    with pytest.raises(InvalidInput):
        Signal(samples=["a", "b"])
    with pytest.raises(InvalidInput):
        Signal(samples=np.zeros((2, 2)))


def test_init_rejects_bad_sample_rate():
    with pytest.raises(InvalidInput):
        Signal(samples=[1.0], sample_rate=0)


def test_samples_are_fixed_after_construction():
    source = np.array([1.0, 2.0])
    sig = Signal(samples=source)
    source[0] = 99.0

    assert sig.samples[0] == 1.0
    with pytest.raises(ValueError):
        sig.samples[0] = 5.0


def test_time_and_frequency_axes_are_derived():
    sig = Signal(samples=[1.0, 2.0, 3.0, 4.0], sample_rate=2.0)

    assert np.allclose(sig.time, [0.0, 0.5, 1.0, 1.5])
    assert np.allclose(sig.frequencies, [0.0, 0.5, 1.0, 1.5])

    t, v = sig.to_numpy()
    assert t.size == v.size == 4


def test_generate_sine_count_amplitude_and_metadata():
    res = Signal.generate_sine(5.0, 0.5, sample_rate=1000.0, amplitude=2.0)
    sig = res.data

    assert sig.n == 500
    assert np.all(np.abs(sig.samples) <= 2.0 + 1e-12)
    assert sig.get_metadata("frequency") == 5.0
    assert sig.get_metadata("amplitude") == 2.0
    assert sig.get_metadata("missing", "x") == "x"
    assert res.metadata.memory_used == 500 * 8


def test_generate_sine_floors_sample_count():
    sig = Signal.generate_sine(1.0, 0.0105, sample_rate=1000.0).data
    assert sig.n == 10


def test_generate_sine_rejects_negative_duration():
    with pytest.raises(InvalidInput):
        Signal.generate_sine(1.0, -1.0)


def test_generate_square_is_sign_of_sine():
    sig = Signal.generate_square(2.0, 1.0, sample_rate=100.0).data

    assert sig.n == 100
    assert set(np.unique(sig.samples)).issubset({-1.0, 0.0, 1.0})
    assert sig.samples[10] == 1.0
    assert sig.samples[35] == -1.0


def test_linear_chirp_from_dsl_style_mapping():
    sig = Signal.generate_chirp(
        {"startFreq": 0, "endFreq": 100, "duration": 0.5, "sampleRate": 1000}
    ).data

    assert sig.n == 500
    assert sig.samples[0] == 0.0
    assert sig.get_metadata("method") == "linear"


def test_exponential_chirp_sweeps():
    opts = ChirpOptions(start_freq=10.0, end_freq=100.0, duration=1.0, method="exponential", sample_rate=1000.0)
    sig = Signal.generate_chirp(opts).data

    assert sig.n == 1000
    assert np.all(np.isfinite(sig.samples))


def test_exponential_chirp_with_zero_start_is_computation_error():
    opts = ChirpOptions(start_freq=0.0, end_freq=100.0, duration=1.0, method="exponential")
    with pytest.raises(AlgorithmFailure) as exc:
        Signal.generate_chirp(opts)
    assert exc.value.kind is ErrorKind.COMPUTATION


def test_chirp_options_validation():
    with pytest.raises(InvalidInput):
        ChirpOptions(start_freq=1.0, end_freq=2.0, duration=1.0, method="cubic")
    with pytest.raises(InvalidInput):
        ChirpOptions.from_mapping({"startFreq": 1.0, "endFreq": 2.0})
    with pytest.raises(InvalidInput):
        ChirpOptions.from_mapping({"startFreq": 1.0, "endFreq": 2.0, "duration": 1.0, "bogus": 1})


def test_chirp_options_default_sample_rate_override():
    opts = ChirpOptions.from_mapping(
        {"startFreq": 1.0, "endFreq": 2.0, "duration": 1.0}, default_sample_rate=8000.0
    )
    assert opts.sample_rate == 8000.0


def test_multiply_and_add_return_new_signals():
    a = Signal(samples=[1.0, -2.0], sample_rate=10.0, attrs={"k": 1})
    b = Signal(samples=[0.5, 0.5], sample_rate=10.0)

    scaled = a.multiply(3.0).data
    assert np.allclose(scaled.samples, [3.0, -6.0])
    assert scaled.attrs == {"k": 1}
    assert scaled.attrs is not a.attrs
    assert np.allclose(a.samples, [1.0, -2.0])

    total = a.add(b).data
    assert np.allclose(total.samples, [1.5, -1.5])


def test_add_rejects_length_or_rate_mismatch():
    a = Signal(samples=[1.0, 2.0], sample_rate=10.0)
    with pytest.raises(InvalidInput):
        a.add(Signal(samples=[1.0], sample_rate=10.0))
    with pytest.raises(InvalidInput):
        a.add(Signal(samples=[1.0, 2.0], sample_rate=20.0))


def test_hamming_window_on_single_sample_keeps_it():
    sig = Signal(samples=[3.0])
    out = sig.apply_window("hamming").data
    assert np.allclose(out.samples, [3.0])


def test_hamming_and_hanning_coefficients():
    ones = Signal(samples=np.ones(5))

    hamming = ones.apply_window("hamming").data.samples
    assert np.allclose(hamming, [0.08, 0.54, 1.0, 0.54, 0.08])

    hanning = ones.apply_window("hanning").data.samples
    assert np.allclose(hanning, [0.0, 0.5, 1.0, 0.5, 0.0])


def test_window_rejects_unknown_type_and_bad_length():
    sig = Signal(samples=np.ones(4))
    with pytest.raises(InvalidInput):
        sig.apply_window("kaiser")
    with pytest.raises(InvalidInput):
        sig.apply_window("hamming", length=8)


def test_fft_matches_numpy():
    rng = np.random.default_rng(0)
    x = rng.normal(size=16)
    spectrum = Signal(samples=x).fft().data
    assert np.allclose(spectrum, np.fft.fft(x))


def test_fft_requires_power_of_two():
    with pytest.raises(InvalidInput) as exc:
        Signal(samples=np.zeros(6)).fft()
    assert exc.value.kind is ErrorKind.VALIDATION


def test_fft_single_sample_is_identity():
    spectrum = Signal(samples=[2.5]).fft().data
    assert spectrum.dtype == np.complex128
    assert np.allclose(spectrum, [2.5 + 0j])


def test_spectrum_peak_at_tone_bin():
    # 8 Hz at 64 Hz over 1 s -> bin 8
    sig = Signal.generate_sine(8.0, 1.0, sample_rate=64.0).data
    mags = sig.get_spectrum().data

    assert mags.size == 64
    assert int(np.argmax(mags[: mags.size // 2])) == 8


def test_wavelet_transform_shape_and_impulse_response():
    x = np.zeros(64)
    x[32] = 1.0
    coeffs = Signal(samples=x).wavelet_transform(wavelet="mexican", scales=3).data

    assert isinstance(coeffs, Matrix)
    assert coeffs.shape == (3, 64)
    # kernel peak is 1 at the centre; scale 2**i normalised by sqrt(scale)
    assert coeffs.get(0, 32) == pytest.approx(1.0)
    assert coeffs.get(1, 32) == pytest.approx(1.0 / np.sqrt(2.0))


def test_wavelet_transform_validation():
    sig = Signal(samples=np.ones(8))
    with pytest.raises(InvalidInput):
        sig.wavelet_transform(wavelet="paul", scales=2)
    with pytest.raises(InvalidInput):
        sig.wavelet_transform(wavelet="morlet", scales=0)
    with pytest.raises(InvalidInput):
        Signal(samples=[]).wavelet_transform(scales=1)


def test_decompose_emd_returns_modes():
    t = np.arange(400) / 400.0
    x = np.sin(2 * np.pi * 5 * t) + 0.5 * np.sin(2 * np.pi * 40 * t)
    sig = Signal(samples=x, sample_rate=400.0)

    modes = sig.decompose("emd", 1, max_sifts=5).data
    assert len(modes) == 1
    assert modes[0].n == 400
    assert modes[0].sample_rate == 400.0


def test_decompose_two_modes_converges_and_carries_residual(caplog):
    t = np.arange(400) / 400.0
    x = np.sin(2 * np.pi * 5 * t) + 0.5 * np.sin(2 * np.pi * 40 * t)
    sig = Signal(samples=x, sample_rate=400.0)

    with caplog.at_level(logging.WARNING, logger="signalbook.dsp.emd"):
        imf1, imf2 = sig.decompose("emd", 2).data

    assert not caplog.records
    # the second mode is sifted from what the first one left behind
    assert np.allclose(imf2.samples, sift(x - imf1.samples))
    assert np.allclose(imf1.samples, sig.decompose("emd", 1).data[0].samples)


def test_decompose_monotonic_signal_fails_explicitly():
    ramp = Signal(samples=np.linspace(0.0, 1.0, 50))
    with pytest.raises(AlgorithmFailure) as exc:
        ramp.decompose("emd", 1)
    assert exc.value.kind is ErrorKind.COMPUTATION


def test_decompose_rejects_unknown_method():
    with pytest.raises(InvalidInput):
        Signal(samples=np.ones(8)).decompose("ssa", 1)


def test_analyze_sine_statistics():
    sig = Signal.generate_sine(5.0, 1.0, sample_rate=1000.0).data
    stats = sig.analyze(["rms", "peak", "crest", "kurtosis", "bogus"]).data

    assert set(stats) == {"rms", "peak", "crest", "kurtosis"}
    assert stats["rms"] == pytest.approx(1 / np.sqrt(2), rel=1e-3)
    assert stats["peak"] == pytest.approx(1.0, rel=1e-6)
    assert stats["crest"] == pytest.approx(np.sqrt(2), rel=1e-3)
    assert stats["kurtosis"] == pytest.approx(1.5, rel=1e-3)


def test_analyze_skips_metrics_undefined_for_signal():
    stats = Signal(samples=np.zeros(4)).analyze(["rms", "crest", "peak", "kurtosis"]).data

    assert stats == {"rms": 0.0, "peak": 0.0}


def test_analyze_degenerate_inputs():
    with pytest.raises(InvalidInput):
        Signal(samples=[]).analyze(["rms"])
    with pytest.raises(InvalidInput):
        Signal(samples=[1.0]).analyze(["rms"], window_size=0)

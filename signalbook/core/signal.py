# core/signal.py
from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

import numpy as np

from .. import dsp
from .exceptions import AlgorithmFailure, AllocationFailure, InvalidInput
from .matrix import Matrix
from .numbers import is_number
from .result import ComputationResult


logger = logging.getLogger(__name__)

CHIRP_METHODS = ("linear", "exponential")
DECOMPOSE_METHODS = ("emd",)


def _check_finite(name: str, value: Any) -> None:
    if not is_number(value) or not math.isfinite(value):
        raise InvalidInput(f"{name} must be a finite number, got {value!r}")


def _sample_count(duration: float, sample_rate: float) -> int:
    if not is_number(duration) or not math.isfinite(duration) or duration < 0:
        raise InvalidInput(f"duration must be a finite number >= 0, got {duration!r}")
    if not is_number(sample_rate) or not math.isfinite(sample_rate) or sample_rate <= 0:
        raise InvalidInput(f"sample_rate must be a finite number > 0, got {sample_rate!r}")
    return int(math.floor(duration * sample_rate))


def _allocate(n: int) -> np.ndarray:
    try:
        return np.arange(n, dtype=np.float64)
    except MemoryError as e:
        raise AllocationFailure(f"Cannot allocate {n} samples", cause=e) from e


@dataclass(frozen=True, slots=True)
class ChirpOptions:
    """Parameters of a frequency sweep."""

    start_freq: float
    end_freq: float
    duration: float
    method: str = "linear"
    sample_rate: float = 44100.0

    # DSL spelling -> field name
    _ALIASES = {
        "startFreq": "start_freq",
        "endFreq": "end_freq",
        "sampleRate": "sample_rate",
    }

    def __post_init__(self) -> None:
        for name in ("start_freq", "end_freq", "duration", "sample_rate"):
            value = getattr(self, name)
            if not is_number(value) or not math.isfinite(value):
                raise InvalidInput(f"chirp option '{name}' must be a finite number, got {value!r}")
        if self.method not in CHIRP_METHODS:
            raise InvalidInput(
                f"Unknown chirp method '{self.method}', expected one of: {', '.join(CHIRP_METHODS)}"
            )

    @classmethod
    def from_mapping(
        cls, options: Mapping[str, Any], *, default_sample_rate: float | None = None
    ) -> "ChirpOptions":
        kwargs: dict[str, Any] = {}
        for key, value in options.items():
            name = cls._ALIASES.get(key, key)
            if name not in {"start_freq", "end_freq", "duration", "method", "sample_rate"}:
                raise InvalidInput(f"Unknown chirp option '{key}'")
            kwargs[name] = value
        missing = [k for k in ("start_freq", "end_freq", "duration") if k not in kwargs]
        if missing:
            raise InvalidInput(f"Missing chirp option(s): {', '.join(missing)}")
        if "sample_rate" not in kwargs and default_sample_rate is not None:
            kwargs["sample_rate"] = default_sample_rate
        return cls(**kwargs)


@dataclass(frozen=True, slots=True, eq=False)
class Signal:
    """Immutable sampled waveform: 1D float64 samples + sample rate."""

    samples: np.ndarray = field(repr=False)
    sample_rate: float = 1000.0
    attrs: dict[str, Any] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        try:
            s = np.array(self.samples, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise InvalidInput("Invalid signal data: array must contain only numbers", cause=e) from e

        if s.ndim != 1:
            raise InvalidInput(f"Invalid signal data: expected 1D array, got shape {s.shape}")
        if not np.isfinite(s).all():
            raise InvalidInput("Invalid signal data: contains non-finite values (NaN/Inf).")
        if not is_number(self.sample_rate) or not math.isfinite(self.sample_rate) or self.sample_rate <= 0:
            raise InvalidInput(f"sample_rate must be a finite number > 0, got {self.sample_rate!r}")

        if self.attrs is None:
            object.__setattr__(self, "attrs", {})
        elif not isinstance(self.attrs, dict):
            raise InvalidInput("`attrs` must be a dict.")

        s.setflags(write=False)
        object.__setattr__(self, "samples", s)
        object.__setattr__(self, "sample_rate", float(self.sample_rate))

    # ---- derived arrays (recomputed on every access) ----
    @property
    def n(self) -> int:
        return int(self.samples.size)

    @property
    def duration(self) -> float:
        return self.n / self.sample_rate

    @property
    def data(self) -> np.ndarray:
        return self.samples.copy()

    @property
    def time(self) -> np.ndarray:
        return np.arange(self.n) / self.sample_rate

    @property
    def frequencies(self) -> np.ndarray:
        """DFT bin frequencies, `i * sample_rate / N`."""
        if self.n == 0:
            return np.zeros(0)
        return np.arange(self.n) * self.sample_rate / self.n

    def get_metadata(self, key: str, default: Any = None) -> Any:
        return self.attrs.get(key, default)

    def to_numpy(self, *, copy: bool = False) -> tuple[np.ndarray, np.ndarray]:
        if copy:
            return self.time, self.samples.copy()
        return self.time, self.samples

    def _derive(self, samples: np.ndarray) -> "Signal":
        return Signal(samples=samples, sample_rate=self.sample_rate, attrs=self.attrs.copy())

    # ---- generators ----
    @classmethod
    def generate_sine(
        cls,
        frequency: float,
        duration: float,
        sample_rate: float = 1000.0,
        amplitude: float = 1.0,
        phase: float = 0.0,
    ) -> ComputationResult["Signal"]:
        started = time.perf_counter()
        _check_finite("frequency", frequency)
        _check_finite("amplitude", amplitude)
        _check_finite("phase", phase)
        n = _sample_count(duration, sample_rate)
        omega = 2.0 * np.pi * frequency
        data = amplitude * np.sin(omega * _allocate(n) / sample_rate + phase)

        signal = cls(
            samples=data,
            sample_rate=sample_rate,
            attrs={
                "frequency": frequency,
                "duration": duration,
                "amplitude": amplitude,
                "phase": phase,
            },
        )
        return ComputationResult.timed(started, signal, data.nbytes)

    @classmethod
    def generate_square(
        cls,
        frequency: float,
        duration: float,
        sample_rate: float = 1000.0,
        amplitude: float = 1.0,
        phase: float = 0.0,
    ) -> ComputationResult["Signal"]:
        started = time.perf_counter()
        _check_finite("frequency", frequency)
        _check_finite("amplitude", amplitude)
        _check_finite("phase", phase)
        n = _sample_count(duration, sample_rate)
        omega = 2.0 * np.pi * frequency
        data = amplitude * np.sign(np.sin(omega * _allocate(n) / sample_rate + phase))

        signal = cls(
            samples=data,
            sample_rate=sample_rate,
            attrs={
                "frequency": frequency,
                "duration": duration,
                "amplitude": amplitude,
                "phase": phase,
            },
        )
        return ComputationResult.timed(started, signal, data.nbytes)

    @classmethod
    def generate_chirp(cls, options: ChirpOptions | Mapping[str, Any]) -> ComputationResult["Signal"]:
        """
        Frequency sweep from `start_freq` to `end_freq` over `duration`.

        linear:      phase = 2*pi*(f0*t + slope*t^2/2)
        exponential: phase = 2*pi*f0*(exp(k*t) - 1)/k, k = ln(f1/f0)/duration
        """
        started = time.perf_counter()
        if not isinstance(options, ChirpOptions):
            options = ChirpOptions.from_mapping(options)

        f0, f1 = options.start_freq, options.end_freq
        n = _sample_count(options.duration, options.sample_rate)
        t = _allocate(n) / options.sample_rate

        if options.method == "linear":
            slope = (f1 - f0) / options.duration if options.duration > 0 else 0.0
            data = np.sin(2.0 * np.pi * (f0 * t + slope * t * t / 2.0))
        else:
            if f0 == 0 or f1 == 0 or (f0 < 0) != (f1 < 0):
                raise AlgorithmFailure(
                    "Exponential chirp requires non-zero start/end frequencies of the same sign, "
                    f"got start={f0}, end={f1}"
                )
            if options.duration <= 0:
                raise AlgorithmFailure("Exponential chirp requires a positive duration")
            k = math.log(f1 / f0) / options.duration
            if k == 0:
                # f0 == f1 degenerates to a plain tone
                data = np.sin(2.0 * np.pi * f0 * t)
            else:
                with np.errstate(over="ignore", invalid="ignore"):
                    data = np.sin(2.0 * np.pi * f0 * np.expm1(k * t) / k)

        if not np.isfinite(data).all():
            raise AlgorithmFailure("Chirp synthesis produced non-finite samples")

        signal = cls(
            samples=data,
            sample_rate=options.sample_rate,
            attrs={
                "start_freq": f0,
                "end_freq": f1,
                "duration": options.duration,
                "method": options.method,
            },
        )
        return ComputationResult.timed(started, signal, data.nbytes)

    # ---- elementwise ----
    def multiply(self, factor: float) -> ComputationResult["Signal"]:
        started = time.perf_counter()
        if not is_number(factor) or not math.isfinite(factor):
            raise InvalidInput(f"multiply() expects a finite number, got {factor!r}")
        out = self._derive(self.samples * float(factor))
        return ComputationResult.timed(started, out, out.samples.nbytes)

    def add(self, other: "Signal") -> ComputationResult["Signal"]:
        started = time.perf_counter()
        if not isinstance(other, Signal):
            raise InvalidInput("add() expects a Signal instance.")
        if other.n != self.n:
            raise InvalidInput(f"Signal lengths differ: expected {self.n} samples, got {other.n}")
        if other.sample_rate != self.sample_rate:
            raise InvalidInput(
                f"Signal sample rates differ: expected {self.sample_rate}, got {other.sample_rate}"
            )
        out = self._derive(self.samples + other.samples)
        return ComputationResult.timed(started, out, out.samples.nbytes)

    def apply_window(self, window_type: str, length: int | None = None) -> ComputationResult["Signal"]:
        started = time.perf_counter()
        if length is not None and length != self.n:
            raise InvalidInput(f"Window length {length} does not match signal length {self.n}")
        coefficients = dsp.window_coefficients(window_type, self.n)
        out = self._derive(self.samples * coefficients)
        return ComputationResult.timed(started, out, out.samples.nbytes)

    # ---- spectral ----
    def fft(self) -> ComputationResult[np.ndarray]:
        started = time.perf_counter()
        spectrum = dsp.radix2_fft(self.samples)
        return ComputationResult.timed(started, spectrum, spectrum.nbytes)

    def get_spectrum(self) -> ComputationResult[np.ndarray]:
        started = time.perf_counter()
        magnitudes = dsp.magnitude_spectrum(self.samples)
        return ComputationResult.timed(started, magnitudes, magnitudes.nbytes)

    def wavelet_transform(self, wavelet: str = "morlet", scales: int = 8) -> ComputationResult[Matrix]:
        """Coefficients per dyadic scale, one Matrix row per scale."""
        started = time.perf_counter()
        if not is_number(scales) or int(scales) != scales or scales < 1:
            raise InvalidInput(f"scales must be a positive integer, got {scales!r}")
        if self.n == 0:
            raise InvalidInput("wavelet_transform() needs at least one sample")

        scale_values = dsp.dyadic_scales(int(scales))
        try:
            coefficients = np.zeros((scale_values.size, self.n))
        except MemoryError as e:
            raise AllocationFailure("Cannot allocate wavelet coefficient grid", cause=e) from e

        for i, scale in enumerate(scale_values):
            kernel = dsp.wavelet_kernel(wavelet, float(scale))
            coefficients[i] = dsp.clamped_correlate(self.samples, kernel) / math.sqrt(scale)

        return ComputationResult.timed(started, Matrix(coefficients), coefficients.nbytes)

    # ---- decomposition / statistics ----
    def decompose(
        self, method: str = "emd", num_modes: int = 1, *, max_sifts: int = 100
    ) -> ComputationResult[list["Signal"]]:
        started = time.perf_counter()
        if method not in DECOMPOSE_METHODS:
            raise InvalidInput(
                f"Unknown decomposition method '{method}', expected one of: {', '.join(DECOMPOSE_METHODS)}"
            )
        if not is_number(num_modes) or int(num_modes) != num_modes:
            raise InvalidInput(f"num_modes must be an integer, got {num_modes!r}")

        imfs = dsp.emd(self.samples, int(num_modes), max_sifts=max_sifts)
        modes = [self._derive(imf) for imf in imfs]
        return ComputationResult.timed(started, modes, sum(m.samples.nbytes for m in modes))

    def analyze(
        self, metrics: Iterable[str], window_size: int | None = None
    ) -> ComputationResult[dict[str, float]]:
        """
        Named statistics over the whole signal.

        Unknown metric names are skipped, as are metrics undefined for this
        signal (crest with zero RMS, kurtosis with zero variance). `window_size`
        is validated but the statistics always cover every sample.
        """
        started = time.perf_counter()
        if isinstance(metrics, str):
            metrics = [metrics]
        if window_size is not None and (
            not is_number(window_size) or int(window_size) != window_size or window_size < 1
        ):
            raise InvalidInput(f"window_size must be a positive integer, got {window_size!r}")
        if self.n == 0:
            raise InvalidInput("analyze() needs at least one sample")

        results: dict[str, float] = {}
        for name in metrics:
            fn = dsp.METRICS.get(name)
            if fn is None:
                logger.debug("analyze(): skipping unknown metric %r", name)
                continue
            try:
                results[name] = fn(self.samples)
            except AlgorithmFailure as e:
                logger.debug("analyze(): skipping metric %r: %s", name, e)

        return ComputationResult.timed(started, results, len(results) * 8)

"""
Windowed-sinc FIR bandpass design and causal FIR filtering.

The bandpass taps are the difference of two ideal lowpass responses,
shaped by a Hamming window. Filtering is a causal convolution that
assumes zero history before the first sample and returns as many
samples as it was given.
"""

import logging
import math
import numbers

import numpy as np
from scipy import signal

from .buffer import SampleBuffer
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

FIR_METHODS = ("direct", "fft")


def is_finite_number(value) -> bool:
    """True for finite real numbers, excluding bools."""
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)


def validate_band(low_freq_hz: float, high_freq_hz: float, sample_rate: float):
    """Raise ConfigurationError unless 0 < low < high < Nyquist."""
    nyquist = sample_rate / 2
    if not is_finite_number(low_freq_hz) or low_freq_hz <= 0:
        raise ConfigurationError("lowFreqHz", f"must be positive, got {low_freq_hz}")
    if not is_finite_number(high_freq_hz) or high_freq_hz >= nyquist:
        raise ConfigurationError(
            "highFreqHz", f"must be below the Nyquist frequency {nyquist} Hz, got {high_freq_hz}"
        )
    if low_freq_hz >= high_freq_hz:
        raise ConfigurationError(
            "lowFreqHz", f"must be below highFreqHz ({low_freq_hz} >= {high_freq_hz})"
        )


def design_bandpass(
    filter_length: int,
    low_freq_hz: float,
    high_freq_hz: float,
    sample_rate: float,
) -> np.ndarray:
    """
    Design Hamming-windowed sinc bandpass taps.

    For tap ``i`` with offset ``m = i - (L - 1) / 2``:
        m == 0: 2 * (f_high - f_low)
        else:   (sin(2 pi f_high m) - sin(2 pi f_low m)) / (pi m) * hamming(i)
    where frequencies are normalized to the Nyquist frequency. Because the
    normalized values are then used as cycles per sample, the effective band
    edges sit at twice the requested frequencies (aliased above Nyquist).
    Existing outputs depend on this, so the taps are kept as is.

    Args:
        filter_length: Number of taps, at least 2 (odd gives a centre tap)
        low_freq_hz: Lower passband edge in Hz
        high_freq_hz: Upper passband edge in Hz
        sample_rate: Sample rate in Hz

    Returns:
        1D float64 array of ``filter_length`` taps
    """
    if not is_finite_number(filter_length) or int(filter_length) != filter_length:
        raise ConfigurationError("filterLength", f"must be an integer, got {filter_length!r}")
    filter_length = int(filter_length)
    if filter_length < 2:
        raise ConfigurationError("filterLength", f"must be at least 2, got {filter_length}")
    validate_band(low_freq_hz, high_freq_hz, sample_rate)
    if filter_length % 2 == 0:
        logger.warning("Even filter length %d has no centre tap", filter_length)

    nyquist = sample_rate / 2
    f_low = low_freq_hz / nyquist
    f_high = high_freq_hz / nyquist

    i = np.arange(filter_length, dtype=np.float64)
    m = i - (filter_length - 1) / 2
    centre = m == 0
    # Placeholder offset keeps the division finite at the centre tap
    safe_m = np.where(centre, 1.0, m)

    sinc = (np.sin(2 * np.pi * f_high * safe_m) - np.sin(2 * np.pi * f_low * safe_m)) / (np.pi * safe_m)
    window = 0.54 - 0.46 * np.cos(2 * np.pi * i / (filter_length - 1))
    taps = np.where(centre, 2 * (f_high - f_low), sinc * window)

    logger.debug(
        "Designed %d-tap bandpass %.1f-%.1f Hz at %s Hz (dc gain %.4f)",
        filter_length, low_freq_hz, high_freq_hz, sample_rate, taps.sum(),
    )
    return taps


class FIRFilter:
    """
    Causal FIR filter: ``y[i] = sum_j h[j] * x[i - j]`` with ``x[k] = 0`` for ``k < 0``.

    ``method="direct"`` runs a direct-form convolution; ``method="fft"`` uses
    FFT convolution, which agrees with the direct form to floating-point
    tolerance and is faster for long filters.
    """

    def __init__(self, coefficients, method: str = "direct"):
        taps = np.array(coefficients, dtype=np.float64, copy=True)
        if taps.ndim != 1 or taps.size == 0:
            raise ConfigurationError("coefficients", "must be a non-empty 1D sequence")
        if method not in FIR_METHODS:
            raise ConfigurationError("method", f"must be one of {FIR_METHODS}, got {method!r}")
        taps.setflags(write=False)
        self.coefficients = taps
        self.method = method

    @classmethod
    def bandpass(
        cls,
        filter_length: int,
        low_freq_hz: float,
        high_freq_hz: float,
        sample_rate: float,
        method: str = "direct",
    ) -> "FIRFilter":
        """Filter using taps from :func:`design_bandpass`."""
        return cls(design_bandpass(filter_length, low_freq_hz, high_freq_hz, sample_rate), method=method)

    def _process_channel(self, channel: np.ndarray) -> np.ndarray:
        if channel.size == 0:
            return channel.copy()
        if self.method == "fft":
            return signal.fftconvolve(channel, self.coefficients)[: channel.size]
        return signal.lfilter(self.coefficients, 1.0, channel)

    def apply(self, buffer: SampleBuffer) -> SampleBuffer:
        """Filter every channel, returning a buffer of the same length."""
        filtered = [self._process_channel(channel) for channel in buffer.data]
        return buffer.with_data(np.array(filtered).reshape(buffer.data.shape))

"""
Synthetic noise injection at a target signal-to-noise ratio.

Noise power is derived from the mean signal power of each channel:

    P_noise = P_signal / 10 ** (snr_db / 10)

Two distributions are available:
- uniform: sqrt(P_noise) * U(-1, 1), the reference behaviour. Its realized
  power is P_noise / 3.
- gaussian: sqrt(P_noise) * N(0, 1), whose realized power matches P_noise.
"""

import logging
import math
from enum import Enum
from typing import Optional

import numpy as np

from .buffer import SampleBuffer
from .errors import ConfigurationError

logger = logging.getLogger(__name__)


def snr_ratio(snr_db: float) -> float:
    """
    Linear power ratio for ``snr_db``.

    Raises:
        ConfigurationError: If the ratio overflows or underflows to zero
    """
    try:
        ratio = 10.0 ** (snr_db / 10.0)
    except OverflowError:
        ratio = math.inf
    if not math.isfinite(ratio) or ratio == 0.0:
        raise ConfigurationError("snrDb", f"{snr_db} dB is outside the representable range")
    return ratio


class NoiseDistribution(Enum):
    """Distribution the noise samples are drawn from."""
    UNIFORM = "uniform"
    GAUSSIAN = "gaussian"


class NoiseInjector:
    """
    Adds white noise to every channel of a buffer.

    The random source is injectable so results can be reproduced: pass
    either a ``numpy.random.Generator`` or a seed.
    """

    def __init__(
        self,
        distribution: NoiseDistribution = NoiseDistribution.UNIFORM,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ):
        if rng is not None and seed is not None:
            raise ValueError("Pass either rng or seed, not both.")
        self.distribution = NoiseDistribution(distribution)
        self._rng = rng if rng is not None else np.random.default_rng(seed)

    @staticmethod
    def signal_power(channel: np.ndarray) -> float:
        """Mean squared amplitude; 0 for an empty channel."""
        if channel.size == 0:
            return 0.0
        return float(np.mean(np.square(channel)))

    @staticmethod
    def noise_power(channel: np.ndarray, snr_db: float) -> float:
        """Target noise power for ``channel`` at ``snr_db``."""
        signal_power = NoiseInjector.signal_power(channel)
        if signal_power == 0.0:
            return 0.0
        return signal_power / snr_ratio(snr_db)

    def _draw(self, size: int) -> np.ndarray:
        if self.distribution is NoiseDistribution.GAUSSIAN:
            return self._rng.standard_normal(size)
        return self._rng.uniform(-1.0, 1.0, size)

    def inject(self, buffer: SampleBuffer, snr_db: float) -> SampleBuffer:
        """
        Return a new buffer with noise added at ``snr_db``.

        Args:
            buffer: Clean input, left untouched
            snr_db: Target signal-to-noise ratio in decibels, may be negative

        Returns:
            Noisy buffer with the same shape and sample rate
        """
        noisy = np.empty_like(buffer.data)
        for index, channel in enumerate(buffer.data):
            noise_power = self.noise_power(channel, snr_db)
            if noise_power == 0.0:
                # Silence stays silent.
                noisy[index] = channel
                continue
            noise = np.sqrt(noise_power) * self._draw(channel.size)
            noisy[index] = channel + noise
            logger.debug(
                "Channel %d: signal power %.3e, noise power %.3e (%s, %.1f dB)",
                index, self.signal_power(channel), noise_power,
                self.distribution.value, snr_db,
            )
        return buffer.with_data(noisy)

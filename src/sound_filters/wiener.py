"""
Local-statistics Wiener filter.

Each sample is scaled by a gain estimated from its three-sample
neighbourhood. The noise floor is the mean power of the whole noisy
channel. The local variance keeps its historical weighting, where only
the right-neighbour deviation is divided by three. Output depends on
that exact formula, so it is not normalized into a true variance.
"""

import logging

import numpy as np

from .buffer import SampleBuffer

logger = logging.getLogger(__name__)


class WienerFilter:
    """Per-sample gain ``S / (S + P_noise)`` with ``S = max(local variance - P_noise, 0)``."""

    def _process_channel(self, x: np.ndarray) -> np.ndarray:
        if x.size == 0:
            return x.copy()

        noise_power = float(np.mean(np.square(x)))

        # Neighbours outside the channel count as zero
        padded = np.pad(x, 1, mode="constant")
        prev = padded[:-2]
        nxt = padded[2:]

        local_mean = (prev + x + nxt) / 3
        local_variance = (
            (prev - local_mean) ** 2
            + (x - local_mean) ** 2
            + (nxt - local_mean) ** 2 / 3
        )
        signal_power = np.maximum(local_variance - noise_power, 0.0)
        total = signal_power + noise_power

        gain = np.zeros_like(x)
        np.divide(signal_power, total, out=gain, where=total > 0)

        logger.debug(
            "Noise floor %.3e, mean gain %.3f over %d samples",
            noise_power, float(gain.mean()), x.size,
        )
        return gain * x

    def apply(self, buffer: SampleBuffer) -> SampleBuffer:
        filtered = [self._process_channel(channel) for channel in buffer.data]
        return buffer.with_data(np.array(filtered).reshape(buffer.data.shape))

"""
Least-mean-squares adaptive filter.

The noisy input serves as both the reference and the desired signal:
at step ``i`` the filter predicts ``input[i]`` from the window
``input[i:i + L]``, so it tracks the noisy signal rather than an
independent clean one. The last ``L`` output samples are never
reached by the update loop and stay zero.
"""

import logging

import numpy as np

from .buffer import SampleBuffer
from .errors import ConfigurationError
from .fir import is_finite_number

logger = logging.getLogger(__name__)


class AdaptiveFilter:
    """
    LMS filter with ``filter_length`` weights initialized to zero.

    No step-size normalization or clamping is applied. A step size too
    large for the input power makes the weights diverge and the output
    become non-finite.
    """

    def __init__(self, filter_length: int, step_size: float):
        """
        Args:
            filter_length: Number of adaptive weights (>= 1)
            step_size: LMS step size mu (> 0), e.g. 1e-4
        """
        if not is_finite_number(filter_length) or int(filter_length) != filter_length or filter_length < 1:
            raise ConfigurationError("filterLength", f"must be a positive integer, got {filter_length!r}")
        if not is_finite_number(step_size) or step_size <= 0:
            raise ConfigurationError("stepSize", f"must be positive, got {step_size!r}")
        self.filter_length = int(filter_length)
        self.step_size = float(step_size)

    def _process_channel(self, x: np.ndarray) -> np.ndarray:
        n = x.size
        L = self.filter_length
        mu = self.step_size
        output = np.zeros(n)
        weights = np.zeros(L)

        # Sequential by nature: each weight update depends on the previous one.
        with np.errstate(over="ignore", invalid="ignore"):
            for i in range(n - L):
                window = x[i:i + L]
                y = weights @ window
                error = x[i] - y
                weights += mu * error * window
                output[i] = y

        return output

    def apply(self, buffer: SampleBuffer) -> SampleBuffer:
        """Run the LMS recursion over each channel independently."""
        if buffer.length <= self.filter_length:
            logger.warning(
                "Buffer of %d samples is not longer than the filter (%d); output is silent",
                buffer.length, self.filter_length,
            )
        for channel in buffer.data:
            power = float(np.mean(np.square(channel))) if channel.size else 0.0
            # Classic LMS bound: mu < 2 / (L * input power)
            if power > 0 and self.step_size * self.filter_length * power >= 2.0:
                logger.warning(
                    "Step size %.3g is large for input power %.3g and %d taps; "
                    "the filter may diverge",
                    self.step_size, power, self.filter_length,
                )

        filtered = [self._process_channel(channel) for channel in buffer.data]
        return buffer.with_data(np.array(filtered).reshape(buffer.data.shape))

"""
Sample buffer shared by every pipeline stage.

Audio is held as a 2D ``[channels, frames]`` float64 array. Buffers behave
like values: the constructor copies its input and freezes the array, so a
stage can only produce a new buffer, never modify the one it was given.
"""

from typing import Union

import numpy as np

from .errors import ConfigurationError


class SampleBuffer:
    """
    Planar float audio with its sample rate.

    Samples are not clamped; filters may push them outside [-1, 1]
    and clamping happens only when encoding.
    """

    __slots__ = ("_data", "_sample_rate")

    def __init__(self, data, sample_rate: int):
        """
        Args:
            data: Samples, 1D for mono or 2D with shape (channels, frames)
            sample_rate: Samples per second, must be positive
        """
        if isinstance(data, SampleBuffer):
            data = data.data

        arr = np.array(data, dtype=np.float64, copy=True)
        if arr.ndim == 1:
            arr = arr.reshape(1, -1)
        elif arr.ndim != 2:
            raise ValueError(f"SampleBuffer requires 1D or 2D data, got {arr.ndim}D")

        try:
            rate = int(sample_rate)
        except (TypeError, ValueError, OverflowError):
            rate = 0
        if isinstance(sample_rate, bool) or rate != sample_rate or rate <= 0:
            raise ConfigurationError("sample_rate", f"must be a positive integer, got {sample_rate!r}")

        arr.setflags(write=False)
        self._data = arr
        self._sample_rate = rate

    @classmethod
    def from_channels(cls, channels, sample_rate: int) -> "SampleBuffer":
        """Build a buffer from a sequence of equal-length channel arrays."""
        arrays = [np.asarray(ch, dtype=np.float64) for ch in channels]
        if not arrays:
            raise ValueError("At least one channel is required.")
        lengths = {len(a) for a in arrays}
        if len(lengths) != 1:
            raise ValueError(f"All channels must have the same length, got {sorted(lengths)}")
        return cls(np.vstack(arrays), sample_rate)

    @classmethod
    def silence(cls, length: int, sample_rate: int, channels: int = 1) -> "SampleBuffer":
        return cls(np.zeros((channels, length)), sample_rate)

    @property
    def data(self) -> np.ndarray:
        """Read-only ``[channels, frames]`` array."""
        return self._data

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def channels(self) -> int:
        return self._data.shape[0]

    @property
    def length(self) -> int:
        return self._data.shape[1]

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return self.length / self._sample_rate

    def channel(self, index: int) -> np.ndarray:
        return self._data[index]

    def with_data(self, data: Union[np.ndarray, list]) -> "SampleBuffer":
        """New buffer holding ``data`` at this buffer's sample rate."""
        return SampleBuffer(data, self._sample_rate)

    def is_finite(self) -> bool:
        return bool(np.all(np.isfinite(self._data)))

    def __len__(self) -> int:
        return self.length

    def __eq__(self, other) -> bool:
        if not isinstance(other, SampleBuffer):
            return NotImplemented
        return (
            self._sample_rate == other._sample_rate
            and self._data.shape == other._data.shape
            and bool(np.array_equal(self._data, other._data))
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"SampleBuffer(channels={self.channels}, length={self.length}, "
            f"sample_rate={self._sample_rate})"
        )

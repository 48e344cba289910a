"""
Exception types raised by the filtering pipeline.

- ConfigurationError: invalid parameters, raised before any processing starts
- ComputationError: a stage produced NaN or infinite samples
- AudioLoadError: an input file could not be decoded
"""

from typing import Optional


class FilterError(Exception):
    """Base class for all sound_filters errors."""


class ConfigurationError(FilterError, ValueError):
    """Invalid filter or pipeline parameter."""

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(f"{field}: {message}")


class ComputationError(FilterError, ArithmeticError):
    """A processing stage produced non-finite output."""

    def __init__(self, stage: str, message: Optional[str] = None):
        self.stage = stage
        self.message = message or "produced NaN or infinite samples"
        super().__init__(f"{stage}: {self.message}")


class AudioLoadError(FilterError, OSError):
    """An input audio file could not be read or decoded."""

    def __init__(self, path, message: str):
        self.path = str(path)
        self.message = message
        super().__init__(f"{self.path}: {message}")

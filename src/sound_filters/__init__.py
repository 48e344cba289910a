"""
Sound Filters - noise injection and classic denoising filters for mono audio.

This package corrupts an audio buffer with synthetic noise at a chosen
signal-to-noise ratio and recovers it with one of several filters:
- windowed-sinc FIR bandpass (Hamming window)
- LMS adaptive filter
- local-statistics Wiener filter
Both the noisy and the filtered result are encoded as 16-bit PCM WAV bytes.
"""

__version__ = "0.1.0"

from .errors import FilterError, ConfigurationError, ComputationError, AudioLoadError
from .buffer import SampleBuffer
from .noise import NoiseInjector, NoiseDistribution
from .fir import FIRFilter, design_bandpass
from .adaptive import AdaptiveFilter
from .wiener import WienerFilter
from .wav import encode_wave, decode_wave
from .config import (
	FilterKind,
	BandpassConfig,
	AdaptiveConfig,
	WienerConfig,
	PipelineConfig,
	load_config,
	save_config,
)
from .pipeline import Pipeline, PipelineResult

__all__ = [
	"FilterError",
	"ConfigurationError",
	"ComputationError",
	"AudioLoadError",
	"SampleBuffer",
	"NoiseInjector",
	"NoiseDistribution",
	"FIRFilter",
	"design_bandpass",
	"AdaptiveFilter",
	"WienerFilter",
	"encode_wave",
	"decode_wave",
	"FilterKind",
	"BandpassConfig",
	"AdaptiveConfig",
	"WienerConfig",
	"PipelineConfig",
	"load_config",
	"save_config",
	"Pipeline",
	"PipelineResult",
	"__version__",
]

"""
Noise-and-filter pipeline.

Pipeline:
1. Validate the configuration against the input sample rate
2. Inject noise at the configured SNR
3. Apply the configured filter to the noisy buffer
4. Encode the noisy and filtered buffers as PCM-16 WAV bytes

Runs are independent: the pipeline holds no state between calls beyond an
optional injected noise source.
"""

import logging
import time
from dataclasses import dataclass
from typing import Optional

from .buffer import SampleBuffer
from .config import PipelineConfig
from .errors import ComputationError
from .noise import NoiseInjector
from .wav import encode_wave

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineResult:
    """Buffers and encoded WAV files produced by one run."""
    noisy: SampleBuffer
    filtered: SampleBuffer
    noisy_wav: bytes
    filtered_wav: bytes


class Pipeline:
    """
    Corrupts a clean buffer with noise and denoises it with one filter.

    Args:
        injector: Noise source to use for every run. When omitted, each
            run builds one from the configuration's distribution and seed.
    """

    def __init__(self, injector: Optional[NoiseInjector] = None):
        self.injector = injector

    def _injector_for(self, config: PipelineConfig) -> NoiseInjector:
        if self.injector is not None:
            return self.injector
        return NoiseInjector(distribution=config.noise, seed=config.seed)

    @staticmethod
    def _check_finite(stage: str, buffer: SampleBuffer):
        if not buffer.is_finite():
            raise ComputationError(stage)

    def run(self, buffer: SampleBuffer, config: Optional[PipelineConfig] = None) -> PipelineResult:
        """
        Process ``buffer`` according to ``config``.

        Raises:
            ConfigurationError: Before any processing, for invalid parameters
            ComputationError: If a stage produces NaN or infinite samples
        """
        if config is None:
            config = PipelineConfig()
        config.validate(buffer.sample_rate)

        logger.info(
            "Running %s filter on %d channel(s), %d samples at %d Hz, SNR %.1f dB",
            config.kind.value, buffer.channels, buffer.length, buffer.sample_rate, config.snr_db,
        )

        start = time.perf_counter()
        noisy = self._injector_for(config).inject(buffer, config.snr_db)
        self._check_finite("noise", noisy)
        logger.debug("Noise injection took %.3fs", time.perf_counter() - start)

        start = time.perf_counter()
        denoiser = config.filter.create_filter(buffer.sample_rate)
        filtered = denoiser.apply(noisy)
        self._check_finite(config.kind.value, filtered)
        logger.debug("%s filter took %.3fs", config.kind.value, time.perf_counter() - start)

        return PipelineResult(
            noisy=noisy,
            filtered=filtered,
            noisy_wav=encode_wave(noisy),
            filtered_wav=encode_wave(filtered),
        )

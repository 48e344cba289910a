"""
Pipeline configuration.

A filter is chosen by its configuration type: each variant validates its
own parameters and builds the matching filter object, so the pipeline
never branches on a filter-kind string. Configurations can be read from
plain mappings or JSON files using either camelCase keys
(``snrDb``, ``filterKind``, ``filterLength``, ``lowFreqHz``,
``highFreqHz``, ``stepSize``) or their snake_case equivalents.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

from .adaptive import AdaptiveFilter
from .errors import ConfigurationError
from .fir import FIRFilter, design_bandpass, is_finite_number, validate_band
from .noise import NoiseDistribution, snr_ratio
from .wiener import WienerFilter


class FilterKind(Enum):
    """Available denoising filters."""
    BANDPASS = "bandpass"
    ADAPTIVE = "adaptive"
    WIENER = "wiener"


def _require_int(name: str, value) -> int:
    if not is_finite_number(value) or int(value) != value:
        raise ConfigurationError(name, f"must be an integer, got {value!r}")
    return int(value)


def _require_float(name: str, value) -> float:
    if not is_finite_number(value):
        raise ConfigurationError(name, f"must be a finite number, got {value!r}")
    return float(value)


def _require_seed(value) -> int:
    seed = _require_int("seed", value)
    if seed < 0:
        raise ConfigurationError("seed", f"must be non-negative, got {seed}")
    return seed


@dataclass(frozen=True)
class BandpassConfig:
    """Windowed-sinc FIR bandpass parameters."""
    filter_length: int = 127
    low_freq_hz: float = 300.0
    high_freq_hz: float = 3400.0

    kind = FilterKind.BANDPASS

    def validate(self, sample_rate: int):
        length = _require_int("filterLength", self.filter_length)
        if length < 3 or length % 2 == 0:
            raise ConfigurationError("filterLength", f"must be an odd integer >= 3, got {length}")
        low = _require_float("lowFreqHz", self.low_freq_hz)
        high = _require_float("highFreqHz", self.high_freq_hz)
        validate_band(low, high, sample_rate)

    def create_filter(self, sample_rate: int) -> FIRFilter:
        return FIRFilter(design_bandpass(self.filter_length, self.low_freq_hz, self.high_freq_hz, sample_rate))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filterKind": self.kind.value,
            "filterLength": self.filter_length,
            "lowFreqHz": self.low_freq_hz,
            "highFreqHz": self.high_freq_hz,
        }


@dataclass(frozen=True)
class AdaptiveConfig:
    """LMS adaptive filter parameters."""
    filter_length: int = 127
    step_size: float = 1e-4

    kind = FilterKind.ADAPTIVE

    def validate(self, sample_rate: int):
        length = _require_int("filterLength", self.filter_length)
        if length < 1:
            raise ConfigurationError("filterLength", f"must be positive, got {length}")
        step = _require_float("stepSize", self.step_size)
        if step <= 0:
            raise ConfigurationError("stepSize", f"must be positive, got {step}")

    def create_filter(self, sample_rate: int) -> AdaptiveFilter:
        return AdaptiveFilter(self.filter_length, self.step_size)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "filterKind": self.kind.value,
            "filterLength": self.filter_length,
            "stepSize": self.step_size,
        }


@dataclass(frozen=True)
class WienerConfig:
    """Local Wiener filter; estimates everything from the signal."""

    kind = FilterKind.WIENER

    def validate(self, sample_rate: int):
        pass

    def create_filter(self, sample_rate: int) -> WienerFilter:
        return WienerFilter()

    def to_dict(self) -> Dict[str, Any]:
        return {"filterKind": self.kind.value}


FilterConfig = Union[BandpassConfig, AdaptiveConfig, WienerConfig]

_FILTER_CONFIGS = {
    FilterKind.BANDPASS: BandpassConfig,
    FilterKind.ADAPTIVE: AdaptiveConfig,
    FilterKind.WIENER: WienerConfig,
}

# Accepted spellings -> dataclass field
_KEY_ALIASES = {
    "snrDb": "snr_db",
    "filterKind": "filter_kind",
    "filterType": "filter_kind",
    "filterLength": "filter_length",
    "lowFreqHz": "low_freq_hz",
    "highFreqHz": "high_freq_hz",
    "stepSize": "step_size",
    "noiseDistribution": "noise",
}


@dataclass(frozen=True)
class PipelineConfig:
    """
    Everything one pipeline run needs besides the input buffer.

    Attributes:
        snr_db: Target signal-to-noise ratio for noise injection (may be negative)
        filter: One of BandpassConfig, AdaptiveConfig, WienerConfig
        noise: Noise distribution for the injector
        seed: Seed for the noise generator (None = nondeterministic)
    """
    snr_db: float = 20.0
    filter: FilterConfig = field(default_factory=BandpassConfig)
    noise: NoiseDistribution = NoiseDistribution.UNIFORM
    seed: Optional[int] = None

    @property
    def kind(self) -> FilterKind:
        return self.filter.kind

    def validate(self, sample_rate: int):
        """Raise ConfigurationError for the first invalid parameter."""
        snr_ratio(_require_float("snrDb", self.snr_db))
        if not isinstance(self.filter, tuple(_FILTER_CONFIGS.values())):
            raise ConfigurationError("filterKind", f"unsupported filter configuration {self.filter!r}")
        if not isinstance(self.noise, NoiseDistribution):
            raise ConfigurationError("noiseDistribution", f"unsupported distribution {self.noise!r}")
        if self.seed is not None:
            _require_seed(self.seed)
        self.filter.validate(sample_rate)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PipelineConfig":
        """
        Build a configuration from the external configuration surface.

        Missing keys take the defaults of the selected filter. Parameters
        that do not belong to the selected filter are ignored.
        """
        values = {_KEY_ALIASES.get(key, key): value for key, value in data.items()}

        kind_value = values.get("filter_kind", FilterKind.BANDPASS.value)
        try:
            kind = FilterKind(kind_value)
        except ValueError:
            choices = ", ".join(k.value for k in FilterKind)
            raise ConfigurationError("filterKind", f"must be one of {choices}, got {kind_value!r}") from None

        filter_cls = _FILTER_CONFIGS[kind]
        filter_fields = {
            name: values[name]
            for name in filter_cls.__dataclass_fields__
            if name in values
        }
        if "filter_length" in filter_fields:
            filter_fields["filter_length"] = _require_int("filterLength", filter_fields["filter_length"])
        for name, label in (("low_freq_hz", "lowFreqHz"), ("high_freq_hz", "highFreqHz"), ("step_size", "stepSize")):
            if name in filter_fields:
                filter_fields[name] = _require_float(label, filter_fields[name])

        noise_value = values.get("noise", NoiseDistribution.UNIFORM.value)
        try:
            noise = NoiseDistribution(noise_value)
        except ValueError:
            raise ConfigurationError("noiseDistribution", f"unknown distribution {noise_value!r}") from None

        snr_db = _require_float("snrDb", values.get("snr_db", 20.0))
        snr_ratio(snr_db)

        seed = values.get("seed")
        return cls(
            snr_db=snr_db,
            filter=filter_cls(**filter_fields),
            noise=noise,
            seed=None if seed is None else _require_seed(seed),
        )

    def to_dict(self) -> Dict[str, Any]:
        data = {"snrDb": self.snr_db, "noiseDistribution": self.noise.value}
        data.update(self.filter.to_dict())
        if self.seed is not None:
            data["seed"] = self.seed
        return data


def load_config(path: Union[str, Path]) -> PipelineConfig:
    """Read a PipelineConfig from a JSON file."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError("config", f"{path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError("config", f"{path} must contain a JSON object")
    return PipelineConfig.from_dict(data)


def save_config(config: PipelineConfig, path: Union[str, Path]) -> Path:
    """Write ``config`` as JSON, readable by :func:`load_config`."""
    path = Path(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(config.to_dict(), f, indent=2)
    return path

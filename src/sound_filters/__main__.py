"""
Command-line entry point.

    python -m sound_filters input.wav --filter bandpass --snr 10 -o out/

Writes ``<stem>_noisy.wav`` and ``<stem>_filtered.wav`` to the output directory.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from . import __version__
from .config import FilterKind, PipelineConfig, load_config
from .errors import AudioLoadError, ComputationError, ConfigurationError
from .io import load_audio, save_bytes
from .noise import NoiseDistribution
from .pipeline import Pipeline

logger = logging.getLogger("sound_filters")

# CLI option -> configuration surface key
_OVERRIDES = {
    "snr": "snrDb",
    "filter": "filterKind",
    "filter_length": "filterLength",
    "low": "lowFreqHz",
    "high": "highFreqHz",
    "step_size": "stepSize",
    "noise": "noiseDistribution",
    "seed": "seed",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sound_filters",
        description="Add noise to an audio file and denoise it with a FIR, LMS or Wiener filter.",
    )
    parser.add_argument("input", type=Path, help="Audio file to process")
    parser.add_argument("-c", "--config", type=Path, help="JSON configuration file")
    parser.add_argument("--snr", type=float, help="Target SNR in dB (default: 20)")
    parser.add_argument("--filter", choices=[k.value for k in FilterKind], help="Filter kind (default: bandpass)")
    parser.add_argument("--filter-length", type=int, help="Number of taps / adaptive weights (default: 127)")
    parser.add_argument("--low", type=float, help="Bandpass lower edge in Hz (default: 300)")
    parser.add_argument("--high", type=float, help="Bandpass upper edge in Hz (default: 3400)")
    parser.add_argument("--step-size", type=float, help="LMS step size (default: 1e-4)")
    parser.add_argument("--noise", choices=[d.value for d in NoiseDistribution], help="Noise distribution (default: uniform)")
    parser.add_argument("--seed", type=int, help="Seed for reproducible noise")
    parser.add_argument("-o", "--output-dir", type=Path, help="Output directory (default: next to the input)")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def resolve_config(args: argparse.Namespace) -> PipelineConfig:
    """Merge the optional config file with command-line overrides."""
    base = load_config(args.config) if args.config else PipelineConfig()
    data = base.to_dict()
    overrides = {
        key: getattr(args, option)
        for option, key in _OVERRIDES.items()
        if getattr(args, option) is not None
    }
    if "filterKind" in overrides and overrides["filterKind"] != data["filterKind"]:
        # Parameters of a different filter do not carry over.
        data = {k: v for k, v in data.items() if k in ("snrDb", "noiseDistribution", "seed")}
    data.update(overrides)
    return PipelineConfig.from_dict(data)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")

    try:
        config = resolve_config(args)
        buffer = load_audio(args.input)
        result = Pipeline().run(buffer, config)
    except ConfigurationError as e:
        logger.error("Invalid configuration: %s", e)
        return 2
    except ComputationError as e:
        logger.error("Processing failed: %s", e)
        return 1
    except AudioLoadError as e:
        logger.error("Could not read input: %s", e)
        return 1
    except OSError as e:
        logger.error("Could not read %s: %s", e.filename or "file", e.strerror or e)
        return 1

    output_dir = args.output_dir or args.input.parent
    stem = args.input.stem
    try:
        noisy_path = save_bytes(output_dir / f"{stem}_noisy.wav", result.noisy_wav)
        filtered_path = save_bytes(output_dir / f"{stem}_filtered.wav", result.filtered_wav)
    except OSError as e:
        logger.error("Could not write output: %s", e)
        return 1
    logger.info("Wrote %s and %s", noisy_path, filtered_path)
    return 0


if __name__ == "__main__":
    sys.exit(main())

import sys
from pathlib import Path

import numpy as np
import pytest

# Ensure local src/ is importable when running tests directly from the repo
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from sound_filters import SampleBuffer


def _sine(freq=440.0, duration=0.5, sr=16000, amplitude=0.5):
    t = np.arange(int(sr * duration)) / sr
    return amplitude * np.sin(2 * np.pi * freq * t)


@pytest.fixture
def sine_buffer():
    """Half a second of a 440 Hz tone at 16 kHz."""
    return SampleBuffer(_sine(), 16000)


@pytest.fixture
def make_sine():
    return _sine

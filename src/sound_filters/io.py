"""
File helpers around the in-memory pipeline: decoding audio files into
buffers and storing encoded WAV bytes.
"""

from pathlib import Path
from typing import Union

import librosa

from .buffer import SampleBuffer
from .errors import AudioLoadError


def load_audio(file_path: Union[str, Path], mono: bool = True) -> SampleBuffer:
    """
    Decode an audio file at its native sample rate using librosa.

    Raises:
        AudioLoadError: If the file is missing or cannot be decoded
    """
    path = Path(file_path)
    if not path.is_file():
        raise AudioLoadError(path, "no such file")
    try:
        audio, sr = librosa.load(str(path), sr=None, mono=mono)
    except Exception as e:
        # soundfile and audioread raise unrelated exception types
        raise AudioLoadError(path, f"could not decode audio ({e})") from e

    if audio.ndim == 1:
        audio = audio.reshape(1, -1)

    return SampleBuffer(audio, int(sr))


def save_bytes(output_path: Union[str, Path], data: bytes) -> Path:
    """Write encoded audio to ``output_path``, creating parent directories."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(data)
    return output_path

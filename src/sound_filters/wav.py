"""
Canonical RIFF/WAVE PCM-16 encoding.

Layout of the 44-byte header (all integers little-endian):

    0   "RIFF"          4   chunk size (file length - 8)
    8   "WAVE"          12  "fmt "
    16  16 (fmt size)   20  1 (PCM)      22  channels
    24  sample rate     28  byte rate    32  block align   34  16 (bits)
    36  "data"          40  data length

Samples are clamped to [-1, 1]. Negative values are scaled by 32768 and
non-negative ones by 32767, then truncated toward zero and interleaved
per frame.
"""

import struct
from typing import Optional

import numpy as np

from .buffer import SampleBuffer

HEADER_SIZE = 44
BITS_PER_SAMPLE = 16
BYTES_PER_SAMPLE = BITS_PER_SAMPLE // 8
PCM_FORMAT = 1

_HEADER = struct.Struct("<4sI4s4sIHHIIHH4sI")


def _to_pcm16(samples: np.ndarray) -> np.ndarray:
    clipped = np.clip(samples, -1.0, 1.0)
    scaled = np.where(clipped < 0, clipped * 32768.0, clipped * 32767.0)
    # float -> int conversion truncates toward zero
    return scaled.astype(np.int16)


def _from_pcm16(pcm: np.ndarray) -> np.ndarray:
    values = pcm.astype(np.float64)
    return np.where(values < 0, values / 32768.0, values / 32767.0)


def encode_wave(buffer: SampleBuffer, num_frames: Optional[int] = None) -> bytes:
    """
    Encode the first ``num_frames`` frames of ``buffer`` as a PCM-16 WAV file.

    Args:
        buffer: Audio to encode
        num_frames: Frames to write (default: the whole buffer)

    Returns:
        Complete WAV file contents
    """
    if num_frames is None:
        num_frames = buffer.length
    if num_frames < 0 or num_frames > buffer.length:
        raise ValueError(f"num_frames must be within [0, {buffer.length}], got {num_frames}")

    n_channels = buffer.channels
    data_size = num_frames * n_channels * BYTES_PER_SAMPLE
    header = _HEADER.pack(
        b"RIFF",
        HEADER_SIZE + data_size - 8,
        b"WAVE",
        b"fmt ",
        16,
        PCM_FORMAT,
        n_channels,
        buffer.sample_rate,
        buffer.sample_rate * BYTES_PER_SAMPLE * n_channels,
        n_channels * BYTES_PER_SAMPLE,
        BITS_PER_SAMPLE,
        b"data",
        data_size,
    )

    # [channels, frames] -> [frames, channels] gives frame-interleaved order
    pcm = _to_pcm16(buffer.data[:, :num_frames]).T
    return header + pcm.astype("<i2").tobytes()


def decode_wave(data: bytes) -> SampleBuffer:
    """
    Decode a canonical PCM-16 WAV file produced by :func:`encode_wave`.

    Raises:
        ValueError: If the bytes are not a canonical 16-bit PCM WAV file
    """
    if len(data) < HEADER_SIZE:
        raise ValueError(f"WAV data too short: {len(data)} bytes")

    (riff, chunk_size, wave_tag, fmt_tag, fmt_size, audio_format, n_channels,
     sample_rate, byte_rate, block_align, bits, data_tag, data_size) = _HEADER.unpack_from(data)

    if riff != b"RIFF" or wave_tag != b"WAVE" or fmt_tag != b"fmt " or data_tag != b"data":
        raise ValueError("Not a canonical RIFF/WAVE file.")
    if fmt_size != 16 or audio_format != PCM_FORMAT or bits != BITS_PER_SAMPLE:
        raise ValueError(
            f"Only 16-bit PCM is supported (format={audio_format}, bits={bits})"
        )
    if n_channels < 1 or block_align != n_channels * BYTES_PER_SAMPLE:
        raise ValueError(f"Inconsistent channel layout: {n_channels} channels, block align {block_align}")
    if byte_rate != sample_rate * block_align:
        raise ValueError(f"Byte rate {byte_rate} does not match {sample_rate} Hz x {block_align} bytes")
    if chunk_size != len(data) - 8 or data_size != len(data) - HEADER_SIZE:
        raise ValueError("Chunk sizes do not match the data length.")
    if data_size % block_align:
        raise ValueError("Data length is not a whole number of frames.")

    pcm = np.frombuffer(data[HEADER_SIZE:], dtype="<i2") if data_size else np.zeros(0, dtype="<i2")
    frames = pcm.reshape(-1, n_channels).T
    return SampleBuffer(_from_pcm16(frames), sample_rate)

"""
WAV Encoder - Canonical 16-bit PCM RIFF/WAVE serialization.

The cloning upload endpoint consumes exactly this layout, so the output is
byte-for-byte deterministic for identical input:

    offset  size  field
    0       4     "RIFF"
    4       4     36 + data_size
    8       4     "WAVE"
    12      4     "fmt "
    16      4     16 (fmt chunk size)
    20      2     1 (PCM)
    22      2     channels
    24      4     sample_rate
    28      4     byte_rate = sample_rate * channels * 2
    32      2     block_align = channels * 2
    34      2     16 (bits per sample)
    36      4     "data"
    40      4     data_size
    44      ...   little-endian int16 samples, frame-interleaved

Usage:
    from dubstudio.audio import encode_wav, read_wav_header

    blob = encode_wav(buffer)
    header = read_wav_header(blob)
    assert header.sample_rate == buffer.sample_rate
"""

from __future__ import annotations

import io
import struct
from dataclasses import dataclass

import numpy as np

from dubstudio.audio.buffer import SampleBuffer
from dubstudio.errors import UnsupportedFormatError

WAV_HEADER_SIZE = 44
PCM_FORMAT = 1
BIT_DEPTH = 16
SUPPORTED_CHANNELS = (1, 2)


@dataclass(frozen=True)
class WavHeader:
    """Parsed fields of a PCM WAV header."""
    audio_format: int
    channels: int
    sample_rate: int
    byte_rate: int
    block_align: int
    bits_per_sample: int
    data_offset: int
    data_size: int

    @property
    def num_frames(self) -> int:
        if self.block_align == 0:
            return 0
        return self.data_size // self.block_align

    @property
    def duration_seconds(self) -> float:
        return self.num_frames / self.sample_rate if self.sample_rate else 0.0


def interleave(buffer: SampleBuffer) -> np.ndarray:
    """Flatten a buffer into one frame-interleaved sample sequence."""
    if buffer.num_channels not in SUPPORTED_CHANNELS:
        raise UnsupportedFormatError(
            f"Unsupported channel count: {buffer.num_channels}. "
            "Only mono and stereo can be encoded.",
            {"channels": buffer.num_channels},
        )
    if buffer.num_channels == 1:
        return buffer.channels[0]
    # (2, frames) -> (frames, 2) -> L0 R0 L1 R1 ...
    return buffer.channels.T.reshape(-1)


def quantize(samples: np.ndarray) -> np.ndarray:
    """Convert float samples to int16 PCM.

    Samples are clamped to [-1, 1]. Negative values scale by 32768 and
    non-negative values by 32767, so both ends of the range stay in int16.
    """
    clamped = np.clip(np.asarray(samples, dtype=np.float64), -1.0, 1.0)
    scaled = np.where(clamped < 0, clamped * 32768.0, clamped * 32767.0)
    return np.rint(scaled).astype("<i2")


def encode_wav(buffer: SampleBuffer) -> bytes:
    """Encode a mono or stereo buffer as a 16-bit PCM WAV blob.

    Args:
        buffer: Audio to encode (1 or 2 channels)

    Returns:
        Complete WAV file bytes

    Raises:
        UnsupportedFormatError: If the buffer has more than two channels
    """
    samples = interleave(buffer)
    pcm = quantize(samples)

    channels = buffer.num_channels
    sample_rate = buffer.sample_rate
    bytes_per_sample = BIT_DEPTH // 8
    block_align = channels * bytes_per_sample
    byte_rate = sample_rate * block_align
    data_size = len(pcm) * bytes_per_sample

    out = io.BytesIO()

    # RIFF chunk
    out.write(b"RIFF")
    out.write(struct.pack("<I", 36 + data_size))
    out.write(b"WAVE")

    # fmt chunk
    out.write(b"fmt ")
    out.write(struct.pack("<I", 16))
    out.write(struct.pack("<H", PCM_FORMAT))
    out.write(struct.pack("<H", channels))
    out.write(struct.pack("<I", sample_rate))
    out.write(struct.pack("<I", byte_rate))
    out.write(struct.pack("<H", block_align))
    out.write(struct.pack("<H", BIT_DEPTH))

    # data chunk
    out.write(b"data")
    out.write(struct.pack("<I", data_size))
    out.write(pcm.tobytes())

    return out.getvalue()


def read_wav_header(data: bytes) -> WavHeader:
    """Parse the header of a PCM WAV blob.

    Walks the RIFF chunk list, so files with extra chunks before "data"
    (LIST, fact, ...) are accepted.

    Raises:
        UnsupportedFormatError: If the data is not a RIFF/WAVE file or has
            no fmt/data chunk
    """
    if len(data) < 12 or data[:4] != b"RIFF" or data[8:12] != b"WAVE":
        raise UnsupportedFormatError("Not a RIFF/WAVE file")

    fmt: tuple | None = None
    offset = 12
    while offset + 8 <= len(data):
        chunk_id = data[offset:offset + 4]
        (chunk_size,) = struct.unpack_from("<I", data, offset + 4)
        body = offset + 8

        if chunk_id == b"fmt ":
            if chunk_size < 16 or body + 16 > len(data):
                raise UnsupportedFormatError("Truncated fmt chunk")
            fmt = struct.unpack_from("<HHIIHH", data, body)
        elif chunk_id == b"data":
            if fmt is None:
                raise UnsupportedFormatError("data chunk precedes fmt chunk")
            audio_format, channels, sample_rate, byte_rate, block_align, bits = fmt
            return WavHeader(
                audio_format=audio_format,
                channels=channels,
                sample_rate=sample_rate,
                byte_rate=byte_rate,
                block_align=block_align,
                bits_per_sample=bits,
                data_offset=body,
                data_size=min(chunk_size, len(data) - body),
            )

        # Chunks are word-aligned
        offset = body + chunk_size + (chunk_size & 1)

    raise UnsupportedFormatError("No data chunk found")


def decode_wav_samples(data: bytes) -> SampleBuffer:
    """Read a 16-bit PCM WAV blob back into a float buffer."""
    header = read_wav_header(data)
    if header.audio_format != PCM_FORMAT or header.bits_per_sample != BIT_DEPTH:
        raise UnsupportedFormatError(
            f"Only 16-bit PCM is supported, got format={header.audio_format} "
            f"bits={header.bits_per_sample}"
        )
    raw = np.frombuffer(
        data,
        dtype="<i2",
        count=header.data_size // 2,
        offset=header.data_offset,
    )
    samples = np.where(raw < 0, raw / 32768.0, raw / 32767.0)
    return SampleBuffer.from_interleaved(samples, header.channels, header.sample_rate)

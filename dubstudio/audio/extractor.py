"""
Clip Extractor - Decode media and cut a time window out of it.

The whole stream is decoded on every call at its native sample rate (no
resampling). That keeps the extractor stateless; it is fine for uploads in
the tens of megabytes and not meant for multi-hour media.

Decoding tries soundfile (libsndfile: WAV, FLAC, OGG) first and falls back
to pydub, which shells out to ffmpeg for video containers (MP4, MOV, WebM)
and MP3.

Usage:
    from dubstudio.audio import extract_clip, encode_wav

    clip = extract_clip(video_bytes, 12.5, 17.0)
    blob = encode_wav(clip)
"""

from __future__ import annotations

import asyncio
import io
import logging
import math
from pathlib import Path
from typing import Union

import numpy as np
import soundfile as sf

from dubstudio.audio.buffer import SampleBuffer
from dubstudio.audio.wav import encode_wav
from dubstudio.errors import DecodeError, RangeError

logger = logging.getLogger(__name__)

MediaSource = Union[bytes, bytearray, memoryview, str, Path]


def read_media(source: MediaSource) -> bytes:
    """Resolve a media source (raw bytes or a file path) to bytes."""
    if isinstance(source, (bytes, bytearray, memoryview)):
        return bytes(source)
    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(f"Media file not found: {path}")
    return path.read_bytes()


def decode_media(source: MediaSource) -> SampleBuffer:
    """Decode a media byte stream into channel-separated float samples.

    Raises:
        DecodeError: If neither decoder can read the stream
    """
    data = read_media(source)
    if not data:
        raise DecodeError("Empty media stream")

    try:
        return _decode_soundfile(data)
    except (RuntimeError, TypeError) as e:
        logger.debug(f"soundfile could not decode stream ({e}), trying ffmpeg")

    return _decode_pydub(data)


def _decode_soundfile(data: bytes) -> SampleBuffer:
    audio, sr = sf.read(io.BytesIO(data), dtype="float32", always_2d=True)
    # soundfile returns (frames, channels)
    return SampleBuffer(channels=np.ascontiguousarray(audio.T), sample_rate=sr)


def _decode_pydub(data: bytes) -> SampleBuffer:
    from pydub import AudioSegment
    from pydub.exceptions import CouldntDecodeError

    try:
        segment = AudioSegment.from_file(io.BytesIO(data))
    except (CouldntDecodeError, OSError, KeyError, IndexError, ValueError) as e:
        raise DecodeError(
            "Audio extraction failed. Ensure the file is a valid video/audio file.",
            {"reason": str(e)},
        ) from e

    samples = np.array(segment.get_array_of_samples(), dtype=np.float32)
    # Normalize integer PCM of any width to [-1, 1]
    samples /= float(1 << (8 * segment.sample_width - 1))

    return SampleBuffer.from_interleaved(samples, segment.channels, segment.frame_rate)


def slice_buffer(buffer: SampleBuffer, start_time: float, end_time: float) -> SampleBuffer:
    """Cut [start_time, end_time) out of a decoded buffer.

    The result always holds floor(end * rate) - floor(start * rate) frames
    per channel. Frames past the end of the source are silence.

    Raises:
        RangeError: If the window is empty or inverted
    """
    if end_time <= start_time:
        raise RangeError(start_time, end_time)

    rate = buffer.sample_rate
    start_sample = math.floor(start_time * rate)
    end_sample = math.floor(end_time * rate)
    frame_count = end_sample - start_sample

    if frame_count <= 0:
        raise RangeError(
            start_time,
            end_time,
            f"Time range {start_time} -> {end_time} is shorter than one sample at {rate} Hz",
        )

    out = np.zeros((buffer.num_channels, frame_count), dtype=np.float32)

    lo = max(start_sample, 0)
    hi = min(end_sample, buffer.num_frames)
    if hi > lo:
        out[:, lo - start_sample:hi - start_sample] = buffer.channels[:, lo:hi]

    return SampleBuffer(channels=out, sample_rate=rate)


class ClipExtractor:
    """Extracts time-bounded clips from a media source.

    Example:
        extractor = ClipExtractor()
        clip = extractor.extract("interview.mp4", 3.0, 9.5)
        blob = await extractor.extract_wav_async(video_bytes, 3.0, 9.5)
    """

    def extract(
        self,
        source: MediaSource,
        start_time: float,
        end_time: float,
    ) -> SampleBuffer:
        """Decode the source and return the requested window.

        Raises:
            RangeError: If end_time <= start_time
            DecodeError: If the source is not decodable audio
        """
        if end_time <= start_time:
            raise RangeError(start_time, end_time)

        decoded = decode_media(source)
        clip = slice_buffer(decoded, start_time, end_time)

        logger.debug(
            f"Extracted {clip.num_frames} frames x {clip.num_channels} ch "
            f"@ {clip.sample_rate} Hz ({start_time:.2f}s - {end_time:.2f}s)"
        )
        return clip

    def extract_wav(
        self,
        source: MediaSource,
        start_time: float,
        end_time: float,
    ) -> bytes:
        """Extract a window and encode it as a WAV blob."""
        return encode_wav(self.extract(source, start_time, end_time))

    async def extract_async(
        self,
        source: MediaSource,
        start_time: float,
        end_time: float,
    ) -> SampleBuffer:
        """Run extract() off the event loop."""
        return await asyncio.to_thread(self.extract, source, start_time, end_time)

    async def extract_wav_async(
        self,
        source: MediaSource,
        start_time: float,
        end_time: float,
    ) -> bytes:
        return await asyncio.to_thread(self.extract_wav, source, start_time, end_time)


def extract_clip(
    source: MediaSource,
    start_time: float,
    end_time: float,
) -> SampleBuffer:
    """Extract a clip from media.

    Convenience function for one-off extraction.

    Example:
        clip = extract_clip("talk.mp4", 1.0, 4.0)
    """
    return ClipExtractor().extract(source, start_time, end_time)
